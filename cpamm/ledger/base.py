"""Shared pieces of the in-memory ledgers.

A ledger here is a mapping of account -> balance plus the two hooks the
execution environment needs:
- receive hooks, called after an account is credited (the Python stand-in
  for a contract's receive/fallback code, which may call back into a pool)
- snapshot/restore, used by pools to revert a failed operation
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import structlog

from cpamm.errors import InsufficientBalance, ZeroAmount
from cpamm.models.types import normalize_address, require_uint256
from cpamm.safe_int import S

logger = structlog.get_logger()

# hook(sender, amount) called on the receiving account
ReceiveHook = Callable[[str, int], None]


@runtime_checkable
class Journaled(Protocol):
    """State holder that a pool can snapshot and roll back."""

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...


class BalanceBook:
    """Account balances with checked arithmetic and receive hooks."""

    def __init__(self, address: str, symbol: str) -> None:
        self.address = normalize_address(address)
        self.symbol = symbol
        self._balances: dict[str, int] = {}
        self._total_supply = 0
        self._hooks: dict[str, ReceiveHook] = {}

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def on_receive(self, account: str, hook: ReceiveHook | None) -> None:
        """Install (or with None, remove) the receive hook of an account."""
        account = normalize_address(account)
        if hook is None:
            self._hooks.pop(account, None)
        else:
            self._hooks[account] = hook

    def snapshot(self) -> tuple[dict[str, int], int]:
        return dict(self._balances), self._total_supply

    def restore(self, state: tuple[dict[str, int], int]) -> None:
        balances, total_supply = state
        self._balances = dict(balances)
        self._total_supply = total_supply

    # --- Internal primitives ---

    def _credit(self, account: str, amount: int) -> None:
        self._balances[account] = (S(self._balances.get(account, 0)) + S(amount)).value

    def _debit(self, account: str, amount: int) -> None:
        balance = self._balances.get(account, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"{account} holds {balance} {self.symbol}, needs {amount}",
                account=account,
                balance=balance,
                required=amount,
            )
        remaining = balance - amount
        if remaining:
            self._balances[account] = remaining
        else:
            self._balances.pop(account, None)

    def _mint(self, to: str, amount: int) -> None:
        to = normalize_address(to)
        require_uint256("amount", amount)
        if amount == 0:
            raise ZeroAmount("amount")
        self._total_supply = (S(self._total_supply) + S(amount)).value
        self._credit(to, amount)

    def _burn(self, holder: str, amount: int) -> None:
        holder = normalize_address(holder)
        require_uint256("amount", amount)
        self._debit(holder, amount)
        self._total_supply -= amount

    def _move(self, sender: str, to: str, amount: int) -> None:
        """Debit sender, credit receiver, then run the receiver's hook."""
        self._debit(sender, amount)
        self._credit(to, amount)
        logger.debug(
            "ledger_transfer",
            ledger=self.symbol,
            sender=sender[-8:],
            to=to[-8:],
            amount=amount,
        )
        hook = self._hooks.get(to)
        if hook is not None:
            hook(sender, amount)
