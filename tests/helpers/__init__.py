"""Test helpers module for shared test utilities.

- constants: Account addresses and common amounts
- factories: Funding and pool-seeding helpers
"""

from tests.helpers.constants import ALICE, BOB, CAROL, E18, MALLORY, OWNER
from tests.helpers.factories import fund, seed_pool

__all__ = [
    # Constants
    "OWNER",
    "ALICE",
    "BOB",
    "CAROL",
    "MALLORY",
    "E18",
    # Factories
    "fund",
    "seed_pool",
]
