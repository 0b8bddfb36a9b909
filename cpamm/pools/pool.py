"""Constant product pool for one asset against the base currency.

A Pool custodies two reserves, issues claim shares to liquidity providers
and prices swaps with the constant product formula (see cpamm.amm.math).

Every mutating operation follows the same discipline:
1. validate inputs and quote against reserves snapshotted on entry
2. update reserves and shares
3. move funds (pull inputs, pay outputs)

and runs inside _transaction(), which rejects nested calls into the same
pool and restores every participant's state if anything raises. Payouts
can run untrusted receive hooks, so a hook that calls back into the pool
gets ReentrantCall, and a hook that raises reverts the whole operation.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from cpamm.amm.math import initial_shares, proportional, quote_input, quote_output
from cpamm.errors import (
    AmountOverflow,
    EmptyPool,
    InsufficientTokenOffered,
    ReentrantCall,
    SlippageExceeded,
    TransferFailed,
    ZeroAmount,
)
from cpamm.events import EventLog
from cpamm.ledger.asset import AssetLedger
from cpamm.ledger.claims import ClaimLedger
from cpamm.ledger.native import NativeLedger
from cpamm.models.events import (
    AssetSoldForBase,
    BaseSoldForAsset,
    Event,
    LiquidityAdded,
    LiquidityRemoved,
)
from cpamm.models.pool import PoolState
from cpamm.models.types import normalize_address, require_uint256
from cpamm.safe_int import S, Uint256Overflow

logger = structlog.get_logger()


@contextmanager
def _checked_math(operation: str) -> Iterator[None]:
    """Report uint256 overflow on valid inputs as a typed exchange error."""
    try:
        yield
    except Uint256Overflow as exc:
        raise AmountOverflow(str(exc), operation=operation) from exc


class Pool:
    """Liquidity pool pairing one asset with the base currency.

    Attributes:
        address: The pool's own account on both ledgers
        asset: Ledger of the pooled asset
        native: Base currency ledger of the environment
        claims: Share ledger owned by this pool
    """

    quote_output = staticmethod(quote_output)
    quote_input = staticmethod(quote_input)

    def __init__(
        self,
        address: str,
        asset: AssetLedger,
        native: NativeLedger,
        events: EventLog | None = None,
    ) -> None:
        self.address = normalize_address(address)
        self.asset = asset
        self.native = native
        self.events = events if events is not None else EventLog()
        self.claims = ClaimLedger(owner=self.address)
        self._asset_reserve = 0
        self._base_reserve = 0
        self._entered = False

    def __repr__(self) -> str:
        return (
            f"Pool({self.address}, asset={self.asset.address}, "
            f"reserves=({self._base_reserve}, {self._asset_reserve}), "
            f"shares={self.total_shares})"
        )

    # --- State ---

    @property
    def asset_reserve(self) -> int:
        return self._asset_reserve

    @property
    def base_reserve(self) -> int:
        return self._base_reserve

    @property
    def total_shares(self) -> int:
        return self.claims.total_supply

    def shares_of(self, account: str) -> int:
        return self.claims.balance_of(account)

    def state(self) -> PoolState:
        return PoolState(
            asset=self.asset.address,
            address=self.address,
            asset_reserve=self._asset_reserve,
            base_reserve=self._base_reserve,
            total_shares=self.total_shares,
        )

    def snapshot(self) -> tuple[int, int]:
        return self._asset_reserve, self._base_reserve

    def restore(self, state: tuple[int, int]) -> None:
        self._asset_reserve, self._base_reserve = state

    # --- Views ---

    def get_base_out(self, asset_in: int) -> int:
        """Base currency received for selling asset_in."""
        self._require_liquidity()
        with _checked_math("get_base_out"):
            return quote_output(asset_in, self._asset_reserve, self._base_reserve)

    def get_asset_out(self, base_in: int) -> int:
        """Asset received for selling base_in."""
        self._require_liquidity()
        with _checked_math("get_asset_out"):
            return quote_output(base_in, self._base_reserve, self._asset_reserve)

    def get_asset_in(self, base_out: int) -> int:
        """Asset that must be sold to receive exactly base_out."""
        self._require_liquidity()
        with _checked_math("get_asset_in"):
            return quote_input(base_out, self._asset_reserve, self._base_reserve)

    def get_base_in(self, asset_out: int) -> int:
        """Base currency that must be sold to receive exactly asset_out."""
        self._require_liquidity()
        with _checked_math("get_base_in"):
            return quote_input(asset_out, self._base_reserve, self._asset_reserve)

    # --- Liquidity ---

    def add_liquidity(
        self,
        provider: str,
        asset_amount_offered: int,
        base_amount: int,
        *,
        min_shares: int = 0,
    ) -> int:
        """Deposit base currency and asset in exchange for shares.

        The first deposit into an empty pool sets the price: all of
        asset_amount_offered is taken and floor(sqrt(base * asset)) shares
        are minted. Later deposits take only the asset amount matching the
        current reserve ratio and mint shares pro rata to the base deposit.

        Args:
            provider: Account supplying both assets and receiving shares
            asset_amount_offered: Maximum asset amount the provider allows
                the pool to pull (needs a matching allowance)
            base_amount: Base currency attached to the call
            min_shares: Fail unless at least this many shares are minted

        Returns:
            Number of shares minted to the provider

        Raises:
            ZeroAmount: If either amount is zero, or no shares would be minted
            InsufficientTokenOffered: If the offer is below the required asset
            SlippageExceeded: If fewer than min_shares would be minted
            AmountOverflow: If the share or reserve arithmetic exceeds uint256
            InsufficientFunds: If the provider lacks balance or allowance
        """
        provider = normalize_address(provider)
        require_uint256("asset_amount_offered", asset_amount_offered)
        require_uint256("base_amount", base_amount)
        require_uint256("min_shares", min_shares)
        if asset_amount_offered == 0:
            raise ZeroAmount("asset_amount_offered")
        if base_amount == 0:
            raise ZeroAmount("base_amount")

        with self._transaction("add_liquidity"):
            asset_reserve, base_reserve = self._asset_reserve, self._base_reserve
            total_shares = self.total_shares

            if total_shares == 0:
                asset_amount = asset_amount_offered
                shares = initial_shares(base_amount, asset_amount)
            else:
                asset_amount = proportional(base_amount, asset_reserve, base_reserve)
                if asset_amount_offered < asset_amount:
                    raise InsufficientTokenOffered(required=asset_amount, offered=asset_amount_offered)
                shares = proportional(base_amount, total_shares, base_reserve)

            if shares == 0:
                raise ZeroAmount("shares_minted", base_amount=base_amount)
            if shares < min_shares:
                raise SlippageExceeded("shares_minted", shares, min_shares)

            self._asset_reserve = (S(asset_reserve) + S(asset_amount)).value
            self._base_reserve = (S(base_reserve) + S(base_amount)).value
            self.claims.mint(self.address, provider, shares)

            self._collect_base(provider, base_amount)
            self._pull_asset(provider, asset_amount)

            self._emit(
                LiquidityAdded(
                    pool=self.address,
                    provider=provider,
                    base_amount=base_amount,
                    asset_amount=asset_amount,
                    shares_minted=shares,
                )
            )

        logger.info(
            "liquidity_added",
            pool=self.address[-8:],
            provider=provider[-8:],
            base_amount=base_amount,
            asset_amount=asset_amount,
            shares_minted=shares,
            bootstrap=total_shares == 0,
        )
        return shares

    def remove_liquidity(
        self,
        provider: str,
        shares_to_burn: int,
        *,
        min_base: int = 0,
        min_asset: int = 0,
    ) -> tuple[int, int]:
        """Burn shares for a proportional slice of both reserves.

        Both amounts are rounded down, so dust stays with the remaining
        holders. Burning every outstanding share drains the pool exactly.

        Returns:
            Tuple of (base_returned, asset_returned)

        Raises:
            ZeroAmount: If shares_to_burn is zero
            EmptyPool: If the pool has no shares outstanding
            InsufficientShares: If the provider holds fewer shares
            SlippageExceeded: If either payout is below its minimum
        """
        provider = normalize_address(provider)
        require_uint256("shares_to_burn", shares_to_burn)
        require_uint256("min_base", min_base)
        require_uint256("min_asset", min_asset)
        if shares_to_burn == 0:
            raise ZeroAmount("shares_to_burn")

        with self._transaction("remove_liquidity"):
            self._require_liquidity()
            asset_reserve, base_reserve = self._asset_reserve, self._base_reserve
            total_shares = self.total_shares

            base_amount = proportional(shares_to_burn, base_reserve, total_shares)
            asset_amount = proportional(shares_to_burn, asset_reserve, total_shares)
            if base_amount < min_base:
                raise SlippageExceeded("base_returned", base_amount, min_base)
            if asset_amount < min_asset:
                raise SlippageExceeded("asset_returned", asset_amount, min_asset)

            self.claims.burn(self.address, provider, shares_to_burn)
            self._asset_reserve = (S(asset_reserve) - S(asset_amount)).value
            self._base_reserve = (S(base_reserve) - S(base_amount)).value

            self._pay_base(provider, base_amount)
            self._pay_asset(provider, asset_amount)

            self._emit(
                LiquidityRemoved(
                    pool=self.address,
                    provider=provider,
                    base_amount=base_amount,
                    asset_amount=asset_amount,
                    shares_burned=shares_to_burn,
                )
            )

        logger.info(
            "liquidity_removed",
            pool=self.address[-8:],
            provider=provider[-8:],
            base_amount=base_amount,
            asset_amount=asset_amount,
            shares_burned=shares_to_burn,
        )
        return base_amount, asset_amount

    # --- Swaps ---

    def swap_asset_for_base(
        self,
        trader: str,
        asset_amount_in: int,
        min_base_out: int,
        *,
        recipient: str | None = None,
    ) -> int:
        """Sell an exact amount of asset for base currency.

        Args:
            trader: Account selling the asset (needs a matching allowance)
            asset_amount_in: Asset amount to sell
            min_base_out: Minimum acceptable base currency output
            recipient: Account receiving the base currency (default: trader)

        Returns:
            Base currency paid out

        Raises:
            ZeroAmount: If asset_amount_in is zero
            EmptyPool: If the pool has no liquidity
            SlippageExceeded: If the output is zero or below min_base_out
        """
        trader = normalize_address(trader)
        recipient = normalize_address(recipient) if recipient is not None else trader
        require_uint256("asset_amount_in", asset_amount_in)
        require_uint256("min_base_out", min_base_out)
        if asset_amount_in == 0:
            raise ZeroAmount("asset_amount_in")

        with self._transaction("swap_asset_for_base"):
            self._require_liquidity()
            asset_reserve, base_reserve = self._asset_reserve, self._base_reserve

            base_out = quote_output(asset_amount_in, asset_reserve, base_reserve)
            if base_out == 0 or base_out < min_base_out:
                raise SlippageExceeded("base_out", base_out, max(min_base_out, 1))

            self._asset_reserve = (S(asset_reserve) + S(asset_amount_in)).value
            self._base_reserve = (S(base_reserve) - S(base_out)).value

            self._pull_asset(trader, asset_amount_in)
            self._pay_base(recipient, base_out)

            self._emit(
                AssetSoldForBase(
                    pool=self.address,
                    trader=trader,
                    asset_in=asset_amount_in,
                    base_out=base_out,
                )
            )

        logger.info(
            "asset_sold_for_base",
            pool=self.address[-8:],
            trader=trader[-8:],
            asset_in=asset_amount_in,
            base_out=base_out,
        )
        return base_out

    def swap_base_for_asset(
        self,
        trader: str,
        base_amount_in: int,
        min_asset_out: int,
        *,
        recipient: str | None = None,
    ) -> int:
        """Sell base currency attached to the call for the asset.

        Args:
            trader: Account attaching the base currency
            base_amount_in: Base currency attached to the call
            min_asset_out: Minimum acceptable asset output
            recipient: Account receiving the asset (default: trader)

        Returns:
            Asset amount paid out
        """
        trader = normalize_address(trader)
        recipient = normalize_address(recipient) if recipient is not None else trader
        require_uint256("base_amount_in", base_amount_in)
        require_uint256("min_asset_out", min_asset_out)
        if base_amount_in == 0:
            raise ZeroAmount("base_amount_in")

        with self._transaction("swap_base_for_asset"):
            self._require_liquidity()
            asset_reserve, base_reserve = self._asset_reserve, self._base_reserve

            asset_out = quote_output(base_amount_in, base_reserve, asset_reserve)
            if asset_out == 0 or asset_out < min_asset_out:
                raise SlippageExceeded("asset_out", asset_out, max(min_asset_out, 1))

            self._base_reserve = (S(base_reserve) + S(base_amount_in)).value
            self._asset_reserve = (S(asset_reserve) - S(asset_out)).value

            self._collect_base(trader, base_amount_in)
            self._pay_asset(recipient, asset_out)

            self._emit(
                BaseSoldForAsset(
                    pool=self.address,
                    trader=trader,
                    base_in=base_amount_in,
                    asset_out=asset_out,
                )
            )

        logger.info(
            "base_sold_for_asset",
            pool=self.address[-8:],
            trader=trader[-8:],
            base_in=base_amount_in,
            asset_out=asset_out,
        )
        return asset_out

    # --- Internals ---

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Run one operation atomically with a reentrancy guard.

        Raises:
            ReentrantCall: If another operation on this pool is in flight
        """
        if self._entered:
            logger.warning("reentrant_call_rejected", pool=self.address[-8:], operation=operation)
            raise ReentrantCall(
                f"{operation} called while another operation on this pool is in flight",
                pool=self.address,
                operation=operation,
            )

        self._entered = True
        try:
            participants = [self, self.claims, self.asset, self.native]
            with self.native.journal.atomic(participants), _checked_math(operation):
                yield
        except BaseException as exc:
            logger.debug(
                "pool_operation_reverted",
                pool=self.address[-8:],
                operation=operation,
                error=type(exc).__name__,
            )
            raise
        finally:
            self._entered = False

    def _require_liquidity(self) -> None:
        if self.total_shares == 0:
            raise EmptyPool("Pool has no liquidity", pool=self.address)

    def _emit(self, event: Event) -> None:
        self.native.journal.emit(self.events, event)

    def _collect_base(self, sender: str, amount: int) -> None:
        if not self.native.transfer(sender, self.address, amount):
            raise TransferFailed("Base currency was not attached", sender=sender, amount=amount)

    def _pay_base(self, to: str, amount: int) -> None:
        if amount and not self.native.transfer(self.address, to, amount):
            raise TransferFailed("Base currency payout failed", to=to, amount=amount)

    def _pull_asset(self, owner: str, amount: int) -> None:
        if not self.asset.transfer_from(self.address, owner, self.address, amount):
            raise TransferFailed("Asset transfer in failed", owner=owner, amount=amount)

    def _pay_asset(self, to: str, amount: int) -> None:
        if amount and not self.asset.transfer(self.address, to, amount):
            raise TransferFailed("Asset payout failed", to=to, amount=amount)
