"""Base currency balances of the execution environment."""

from __future__ import annotations

from cpamm.constants import ZERO_ADDRESS
from cpamm.journal import Journal
from cpamm.ledger.base import BalanceBook
from cpamm.models.types import normalize_address, require_uint256


class NativeLedger(BalanceBook):
    """The "attach value to a call" / "pay out value" primitive.

    A pool collects base currency attached to a call by moving it from the
    caller to itself, and pays out with transfer(). A receive hook that
    raises makes the payment, and with it the whole operation, fail.

    The ledger also carries the environment's Journal: every pool sharing
    this base currency runs its operations in frames of the same journal.
    """

    def __init__(self, symbol: str = "BASE") -> None:
        super().__init__(ZERO_ADDRESS, symbol)
        self.journal = Journal()

    def deposit(self, account: str, amount: int) -> None:
        """Credit new base currency to an account (simulation faucet)."""
        self._mint(account, amount)

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        require_uint256("amount", amount)
        self._move(normalize_address(sender), normalize_address(to), amount)
        return True
