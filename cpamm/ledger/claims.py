"""Claim token ledger: liquidity shares of one pool."""

from __future__ import annotations

import structlog

from cpamm.errors import InsufficientShares, Unauthorized
from cpamm.models.types import normalize_address, require_uint256
from cpamm.safe_int import S

logger = structlog.get_logger()


class ClaimLedger:
    """Per-pool share ledger.

    Only the owning pool may mint or burn. total_supply is always the sum
    of all balances and equals the pool's total_shares. Shares are not
    transferable between accounts.
    """

    def __init__(self, owner: str) -> None:
        self.owner = normalize_address(owner)
        self._balances: dict[str, int] = {}
        self._total_supply = 0

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def holders(self) -> dict[str, int]:
        """Copy of all non-zero balances."""
        return dict(self._balances)

    def mint(self, caller: str, to: str, amount: int) -> None:
        self._authorize(caller, "mint")
        require_uint256("amount", amount)
        to = normalize_address(to)
        self._total_supply = (S(self._total_supply) + S(amount)).value
        self._balances[to] = self._balances.get(to, 0) + amount
        logger.debug("shares_minted", pool=self.owner[-8:], to=to[-8:], amount=amount)

    def burn(self, caller: str, holder: str, amount: int) -> None:
        self._authorize(caller, "burn")
        require_uint256("amount", amount)
        holder = normalize_address(holder)
        balance = self._balances.get(holder, 0)
        if balance < amount:
            raise InsufficientShares(
                f"{holder} holds {balance} shares, cannot burn {amount}",
                holder=holder,
                balance=balance,
                required=amount,
            )
        remaining = balance - amount
        if remaining:
            self._balances[holder] = remaining
        else:
            self._balances.pop(holder, None)
        self._total_supply -= amount
        logger.debug("shares_burned", pool=self.owner[-8:], holder=holder[-8:], amount=amount)

    def snapshot(self) -> tuple[dict[str, int], int]:
        return dict(self._balances), self._total_supply

    def restore(self, state: tuple[dict[str, int], int]) -> None:
        balances, total_supply = state
        self._balances = dict(balances)
        self._total_supply = total_supply

    def _authorize(self, caller: str, operation: str) -> None:
        if normalize_address(caller) != self.owner:
            raise Unauthorized(
                f"Only the owning pool may {operation} shares",
                caller=caller,
                owner=self.owner,
            )
