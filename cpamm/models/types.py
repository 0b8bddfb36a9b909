"""Shared type definitions for exchange models.

Amounts travel over the wire as decimal strings (JSON numbers cannot hold
a uint256) and are plain ints everywhere else.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer

from cpamm.constants import UINT256_MAX, ZERO_ADDRESS
from cpamm.errors import InvalidAddress, InvalidAmount


def validate_uint256(value: Any) -> int:
    """Validate that a value is a uint256 given as int or decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        The value as an int

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if isinstance(value, str):
        if not value.isdigit():
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'")
        value = int(value)

    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


# Account or asset address (40 hex chars after 0x prefix)
ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
_ADDRESS_RE = re.compile(ADDRESS_PATTERN)

Address = Annotated[
    str,
    Field(pattern=ADDRESS_PATTERN),
    BeforeValidator(lambda v: v.lower() if isinstance(v, str) else v),
]

# 256-bit unsigned integer, int in Python, decimal string in JSON
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    PlainSerializer(str, return_type=str, when_used="json"),
    Field(description="256-bit unsigned integer as decimal string"),
]


def normalize_address(address: str) -> str:
    """Normalize an address to lowercase with 0x prefix.

    Raises:
        InvalidAddress: If the result is not a valid 20-byte hex address
    """
    if not isinstance(address, str):
        raise InvalidAddress(address)
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr
    if not is_valid_address(addr):
        raise InvalidAddress(address)
    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a 0x-prefixed 20-byte hex address."""
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def is_zero_address(address: str) -> bool:
    return normalize_address(address) == ZERO_ADDRESS


def require_uint256(name: str, value: Any) -> int:
    """Return value if it is an int in the uint256 range.

    Raises:
        InvalidAmount: Otherwise
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(name, value)
    if value < 0 or value > UINT256_MAX:
        raise InvalidAmount(name, value)
    return value
