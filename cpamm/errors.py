"""Exchange error classes.

Every failure raised by the registry, the pools and the ledgers derives
from ExchangeError. Each error carries the taxonomy ``kind`` it belongs to
and a ``context`` dict with the values that caused it, so clients can
report e.g. the required vs. offered token amount precisely.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Error taxonomy shared by all exchange failures."""

    INVALID_INPUT = "InvalidInput"
    ALREADY_EXISTS = "AlreadyExists"
    NOT_FOUND = "NotFound"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    SLIPPAGE_EXCEEDED = "SlippageExceeded"
    EMPTY_POOL = "EmptyPool"
    UNAUTHORIZED = "Unauthorized"
    REENTRANT_CALL = "ReentrantCall"


class ExchangeError(Exception):
    """Base error for exchange operations."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str = "", **context: Any) -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation (amounts rendered as strings)."""
        return {
            "error": self.__class__.__name__,
            "kind": self.kind.value,
            "message": self.message,
            "context": {k: str(v) if isinstance(v, int) else v for k, v in self.context.items()},
        }


# --- InvalidInput ---


class InvalidInput(ExchangeError):
    """Malformed request: zero amounts, null identifiers, bad quotes."""

    kind = ErrorKind.INVALID_INPUT


class ZeroAmount(InvalidInput):
    """An amount that must be positive was zero."""

    def __init__(self, name: str, **context: Any) -> None:
        super().__init__(f"{name} must be greater than zero", name=name, **context)


class InvalidAmount(InvalidInput):
    """Amount is not an integer in the uint256 range."""

    def __init__(self, name: str, value: Any) -> None:
        super().__init__(f"{name} is not a uint256: {value!r}", name=name, value=repr(value))


class InvalidAddress(InvalidInput):
    """String is not a 0x-prefixed 20-byte hex address."""

    def __init__(self, address: Any) -> None:
        super().__init__(f"Invalid address: {address!r}", address=repr(address))


class InvalidAsset(InvalidInput):
    """Asset is missing or is the null identifier."""


class InvalidQuote(InvalidInput):
    """Pricing inputs cannot produce a quote (zero amount or reserve)."""


class AmountOverflow(InvalidInput):
    """Amounts are valid uint256 values but the arithmetic on them is not."""


# --- AlreadyExists / NotFound ---


class AlreadyExists(ExchangeError):
    """A pool for this asset was already created."""

    kind = ErrorKind.ALREADY_EXISTS


class NotFound(ExchangeError):
    kind = ErrorKind.NOT_FOUND


class UnknownAsset(NotFound):
    """No asset ledger is deployed at this address."""


class UnknownPool(NotFound):
    """No pool exists for this asset."""


# --- InsufficientFunds ---


class InsufficientFunds(ExchangeError):
    """Caller lacks balance, allowance or shares."""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class InsufficientBalance(InsufficientFunds):
    pass


class InsufficientAllowance(InsufficientFunds):
    pass


class InsufficientShares(InsufficientBalance):
    pass


class InsufficientTokenOffered(InsufficientFunds):
    """Offered asset amount is below what the current price ratio requires."""

    def __init__(self, required: int, offered: int) -> None:
        super().__init__(
            f"Deposit requires {required} asset units, only {offered} offered",
            required=required,
            offered=offered,
        )
        self.required = required
        self.offered = offered


class TransferFailed(InsufficientFunds):
    """Asset ledger reported a failed transfer."""


# --- Remaining kinds ---


class SlippageExceeded(ExchangeError):
    """Realized amount is below the caller's minimum."""

    kind = ErrorKind.SLIPPAGE_EXCEEDED

    def __init__(self, name: str, actual: int, minimum: int) -> None:
        super().__init__(
            f"{name} {actual} is below the minimum {minimum}",
            name=name,
            actual=actual,
            minimum=minimum,
        )
        self.actual = actual
        self.minimum = minimum


class EmptyPool(ExchangeError):
    """Operation needs liquidity but the pool has none."""

    kind = ErrorKind.EMPTY_POOL


class Unauthorized(ExchangeError):
    """Caller is not allowed to invoke this ledger primitive."""

    kind = ErrorKind.UNAUTHORIZED


class ReentrantCall(ExchangeError):
    """Nested call into a pool while an outer call is in flight."""

    kind = ErrorKind.REENTRANT_CALL
