"""Fungible asset ledger consumed by the pools.

AssetLedger is the interface a pool needs from the non-base asset.
Token is an in-memory implementation with ERC20-style mint, burn,
transfer and allowance semantics.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import structlog

from cpamm.errors import InsufficientAllowance, Unauthorized
from cpamm.ledger.base import BalanceBook
from cpamm.models.types import normalize_address, require_uint256

logger = structlog.get_logger()


@runtime_checkable
class AssetLedger(Protocol):
    """Balance/allowance/transfer primitive for the non-base asset.

    Failures raise InsufficientFunds errors; implementations may also
    signal failure by returning False, which pools treat the same way.
    """

    address: str

    def balance_of(self, account: str) -> int: ...

    def transfer(self, sender: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool: ...

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...


class Token(BalanceBook):
    """Single-owner fungible token.

    Only the owner may mint. Any holder may burn its own balance.
    """

    def __init__(self, address: str, symbol: str, owner: str, decimals: int = 18) -> None:
        super().__init__(address, symbol)
        self.owner = normalize_address(owner)
        self.decimals = decimals
        self._allowances: dict[tuple[str, str], int] = {}

    def mint(self, caller: str, to: str, amount: int) -> None:
        if normalize_address(caller) != self.owner:
            raise Unauthorized(f"Only the owner can mint {self.symbol}", caller=caller)
        self._mint(to, amount)

    def burn(self, holder: str, amount: int) -> None:
        self._burn(holder, amount)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        require_uint256("amount", amount)
        key = (normalize_address(owner), normalize_address(spender))
        if amount:
            self._allowances[key] = amount
        else:
            self._allowances.pop(key, None)
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        require_uint256("amount", amount)
        self._move(normalize_address(sender), normalize_address(to), amount)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        """Move owner's funds on behalf of spender, consuming allowance."""
        require_uint256("amount", amount)
        owner = normalize_address(owner)
        spender = normalize_address(spender)
        allowed = self._allowances.get((owner, spender), 0)
        if allowed < amount:
            raise InsufficientAllowance(
                f"{spender} may move {allowed} {self.symbol} of {owner}, needs {amount}",
                owner=owner,
                spender=spender,
                allowance=allowed,
                required=amount,
            )
        remaining = allowed - amount
        if remaining:
            self._allowances[(owner, spender)] = remaining
        else:
            self._allowances.pop((owner, spender), None)
        self._move(owner, normalize_address(to), amount)
        return True

    def snapshot(self) -> tuple[Any, dict[tuple[str, str], int]]:
        return super().snapshot(), dict(self._allowances)

    def restore(self, state: tuple[Any, dict[tuple[str, str], int]]) -> None:
        balances, allowances = state
        super().restore(balances)
        self._allowances = dict(allowances)

    def __repr__(self) -> str:
        return f"Token({self.symbol}, {self.address})"
