"""Ledgers: the consumed asset interface, base currency and pool shares."""

from cpamm.ledger.asset import AssetLedger, Token
from cpamm.ledger.base import BalanceBook, Journaled, ReceiveHook
from cpamm.ledger.claims import ClaimLedger
from cpamm.ledger.native import NativeLedger

__all__ = [
    "AssetLedger",
    "Token",
    "BalanceBook",
    "Journaled",
    "ReceiveHook",
    "ClaimLedger",
    "NativeLedger",
]
