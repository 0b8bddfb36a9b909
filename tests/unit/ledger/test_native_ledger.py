"""Tests for the base currency ledger."""

import pytest

from cpamm.constants import ZERO_ADDRESS
from cpamm.errors import InsufficientBalance, ZeroAmount
from cpamm.journal import Journal
from cpamm.ledger import NativeLedger
from tests.helpers import ALICE, BOB


class TestNativeLedger:
    def test_defaults(self):
        native = NativeLedger()
        assert native.symbol == "BASE"
        assert native.address == ZERO_ADDRESS
        assert isinstance(native.journal, Journal)

    def test_deposit(self):
        native = NativeLedger()
        native.deposit(ALICE, 50)
        native.deposit(ALICE, 25)
        assert native.balance_of(ALICE) == 75
        assert native.total_supply == 75

    def test_deposit_zero_rejected(self):
        with pytest.raises(ZeroAmount):
            NativeLedger().deposit(ALICE, 0)

    def test_transfer(self):
        native = NativeLedger()
        native.deposit(ALICE, 50)
        assert native.transfer(ALICE, BOB, 20) is True
        assert native.balance_of(ALICE) == 30
        assert native.balance_of(BOB) == 20

    def test_transfer_insufficient(self):
        native = NativeLedger()
        native.deposit(ALICE, 5)
        with pytest.raises(InsufficientBalance):
            native.transfer(ALICE, BOB, 6)
        assert native.balance_of(ALICE) == 5

    def test_failing_hook_propagates(self):
        """A receiver that rejects the payment makes the transfer raise."""
        native = NativeLedger()
        native.deposit(ALICE, 5)

        def reject(sender: str, amount: int) -> None:
            raise RuntimeError("rejected")

        native.on_receive(BOB, reject)
        with pytest.raises(RuntimeError, match="rejected"):
            native.transfer(ALICE, BOB, 5)
