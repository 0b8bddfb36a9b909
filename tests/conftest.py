"""Pytest configuration and fixtures."""

import pytest

from cpamm.environment import Environment
from cpamm.ledger.asset import Token
from cpamm.pools.pool import Pool
from tests.helpers import ALICE, E18, OWNER, seed_pool


@pytest.fixture
def env() -> Environment:
    """A fresh execution environment."""
    return Environment()


@pytest.fixture
def token(env: Environment) -> Token:
    """An asset ledger owned by OWNER with no supply."""
    return env.deploy_asset("TKN", owner=OWNER)


@pytest.fixture
def pool(env: Environment, token: Token) -> Pool:
    """An empty pool for `token`."""
    return env.create_pool(token.address)


@pytest.fixture
def seeded_pool(env: Environment, token: Token, pool: Pool) -> Pool:
    """Pool bootstrapped by ALICE with 10 base / 1000 asset (18 decimals).

    Mints isqrt(10e18 * 1000e18) = 1e20 shares.
    """
    seed_pool(env, token, pool, ALICE, asset=1000 * E18, base=10 * E18)
    return pool
