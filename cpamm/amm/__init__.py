"""Constant product AMM math."""

from cpamm.amm.math import (
    initial_shares,
    proportional,
    quote_input,
    quote_output,
    reserve_product,
)

__all__ = [
    "quote_output",
    "quote_input",
    "initial_shares",
    "proportional",
    "reserve_product",
]
