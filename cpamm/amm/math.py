"""Constant product pricing and liquidity math.

The pool prices trades with the constant product formula x * y = k,
charging a 0.3% fee on the input leg:

    amount_out = (in * 997 * res_out) / (res_in * 1000 + in * 997)

All functions work on checked uint256 integers and round down, except
quote_input which rounds up. Truncation therefore keeps the rounding dust
inside the pool, which protects existing liquidity providers.
"""

from __future__ import annotations

from cpamm.constants import FEE_DENOMINATOR, FEE_NUMERATOR
from cpamm.errors import InvalidQuote
from cpamm.safe_int import S


def quote_output(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Calculate output amount for an exact input.

    Args:
        amount_in: Input amount
        reserve_in: Pool reserve of the input side (before the trade)
        reserve_out: Pool reserve of the output side (before the trade)

    Returns:
        Output amount, rounded down

    Raises:
        InvalidQuote: If any argument is zero
    """
    if amount_in == 0 or reserve_in == 0 or reserve_out == 0:
        raise InvalidQuote(
            "Quote needs a positive input and positive reserves",
            amount_in=amount_in,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
        )

    amount_in_after_fee = S(amount_in) * FEE_NUMERATOR
    numerator = amount_in_after_fee * S(reserve_out)
    denominator = S(reserve_in) * FEE_DENOMINATOR + amount_in_after_fee

    return (numerator // denominator).value


def quote_input(amount_out: int, reserve_in: int, reserve_out: int) -> int:
    """Calculate the input needed to receive an exact output.

    Formula: amount_in = (res_in * out * 1000) / ((res_out - out) * 997) + 1

    Raises:
        InvalidQuote: If any argument is zero or amount_out >= reserve_out
    """
    if amount_out == 0 or reserve_in == 0 or reserve_out == 0:
        raise InvalidQuote(
            "Quote needs a positive output and positive reserves",
            amount_out=amount_out,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
        )
    if amount_out >= reserve_out:
        raise InvalidQuote(
            "Cannot buy the whole output reserve",
            amount_out=amount_out,
            reserve_out=reserve_out,
        )

    numerator = S(reserve_in) * S(amount_out) * FEE_DENOMINATOR
    denominator = (S(reserve_out) - S(amount_out)) * FEE_NUMERATOR

    return (numerator // denominator + 1).value


def initial_shares(base_amount: int, asset_amount: int) -> int:
    """Shares minted to the first depositor: floor(sqrt(base * asset))."""
    return (S(base_amount) * S(asset_amount)).isqrt().value


def proportional(amount: int, numerator: int, denominator: int) -> int:
    """floor(amount * numerator / denominator) on checked integers."""
    return (S(amount) * S(numerator) // S(denominator)).value


def reserve_product(reserve_a: int, reserve_b: int) -> int:
    """The constant product k for a pair of reserves."""
    return reserve_a * reserve_b


__all__ = [
    "quote_output",
    "quote_input",
    "initial_shares",
    "proportional",
    "reserve_product",
]
