"""Tests for adding and removing pool liquidity."""

import pytest

from cpamm.errors import (
    AmountOverflow,
    EmptyPool,
    InsufficientAllowance,
    InsufficientBalance,
    InsufficientShares,
    InsufficientTokenOffered,
    InvalidAmount,
    InvalidInput,
    SlippageExceeded,
    ZeroAmount,
)
from tests.helpers import ALICE, BOB, E18, fund, seed_pool


@pytest.fixture
def small_pool(env, token, pool):
    """Pool bootstrapped by ALICE with 10 base / 1000 asset: 100 shares."""
    seed_pool(env, token, pool, ALICE, asset=1000, base=10)
    return pool


class TestBootstrap:
    """Tests for the first deposit into an empty pool."""

    def test_shares_are_geometric_mean(self, env, token, pool):
        shares = seed_pool(env, token, pool, ALICE, asset=1000, base=10)

        assert shares == 100
        assert pool.total_shares == 100
        assert pool.shares_of(ALICE) == 100
        assert pool.asset_reserve == 1000
        assert pool.base_reserve == 10

    def test_funds_move_to_pool(self, env, token, pool):
        seed_pool(env, token, pool, ALICE, asset=1000, base=10)

        assert env.native.balance_of(pool.address) == 10
        assert token.balance_of(pool.address) == 1000
        assert env.native.balance_of(ALICE) == 0
        assert token.balance_of(ALICE) == 0
        assert token.allowance(ALICE, pool.address) == 0

    def test_whole_offer_taken(self, env, token, pool):
        """The first depositor sets the price with the full offered amount."""
        fund(env, token, ALICE, base=10, asset=1500, spender=pool.address)
        pool.add_liquidity(ALICE, 1500, 10)
        assert pool.asset_reserve == 1500

    def test_realistic_amounts(self, seeded_pool):
        assert seeded_pool.total_shares == 100 * E18
        assert seeded_pool.base_reserve == 10 * E18
        assert seeded_pool.asset_reserve == 1000 * E18

    def test_event(self, env, token, pool):
        seed_pool(env, token, pool, ALICE, asset=1000, base=10)

        (event,) = env.events.records("LiquidityAdded")
        assert event.pool == pool.address
        assert event.provider == ALICE
        assert (event.base_amount, event.asset_amount, event.shares_minted) == (10, 1000, 100)


class TestSubsequentDeposit:
    """Tests for deposits into a pool that already has liquidity."""

    def test_takes_proportional_asset(self, env, token, small_pool):
        """base=5 against (10, 1000) requires 500 asset and mints 50 shares."""
        fund(env, token, BOB, base=5, asset=600, spender=small_pool.address)

        shares = small_pool.add_liquidity(BOB, 600, 5)

        assert shares == 50
        assert small_pool.total_shares == 150
        assert small_pool.base_reserve == 15
        assert small_pool.asset_reserve == 1500
        # Only the required amount is pulled; the rest of the offer is untouched
        assert token.balance_of(BOB) == 100
        assert token.allowance(BOB, small_pool.address) == 100

    def test_offer_below_required(self, env, token, small_pool):
        fund(env, token, BOB, base=5, asset=499, spender=small_pool.address)

        with pytest.raises(InsufficientTokenOffered) as exc_info:
            small_pool.add_liquidity(BOB, 499, 5)

        assert exc_info.value.required == 500
        assert exc_info.value.offered == 499
        assert exc_info.value.context == {"required": 500, "offered": 499}
        assert env.native.balance_of(BOB) == 5
        assert small_pool.total_shares == 100

    def test_min_shares(self, env, token, small_pool):
        fund(env, token, BOB, base=5, asset=500, spender=small_pool.address)

        with pytest.raises(SlippageExceeded):
            small_pool.add_liquidity(BOB, 500, 5, min_shares=51)

        assert small_pool.add_liquidity(BOB, 500, 5, min_shares=50) == 50

    def test_zero_share_deposit_rejected(self, env, token, pool):
        """With base reserve 1000 and 100 shares, 1 base mints nothing."""
        seed_pool(env, token, pool, ALICE, asset=10, base=1000)
        fund(env, token, BOB, base=10, asset=1, spender=pool.address)

        with pytest.raises(ZeroAmount):
            pool.add_liquidity(BOB, 1, 1)

        # 10 base mints one share; the required asset rounds down to zero
        assert pool.add_liquidity(BOB, 1, 10) == 1
        assert pool.base_reserve == 1010
        assert pool.asset_reserve == 10
        assert token.balance_of(BOB) == 1

    def test_missing_base_reverts(self, env, token, small_pool):
        fund(env, token, BOB, base=4, asset=500, spender=small_pool.address)

        with pytest.raises(InsufficientBalance):
            small_pool.add_liquidity(BOB, 500, 5)

        assert small_pool.shares_of(BOB) == 0
        assert small_pool.base_reserve == 10
        assert small_pool.asset_reserve == 1000

    def test_missing_allowance_reverts_base_collection(self, env, token, small_pool):
        """Base is collected before the asset pull fails; both are undone."""
        fund(env, token, BOB, base=5, asset=500, spender=small_pool.address, allowance=499)

        with pytest.raises(InsufficientAllowance):
            small_pool.add_liquidity(BOB, 500, 5)

        assert env.native.balance_of(BOB) == 5
        assert env.native.balance_of(small_pool.address) == 10
        assert token.allowance(BOB, small_pool.address) == 499
        assert small_pool.total_shares == 100
        assert len(env.events.records("LiquidityAdded")) == 1


class TestAddLiquidityValidation:
    def test_zero_base(self, small_pool):
        with pytest.raises(ZeroAmount):
            small_pool.add_liquidity(BOB, 500, 0)

    def test_zero_asset(self, small_pool):
        with pytest.raises(ZeroAmount):
            small_pool.add_liquidity(BOB, 0, 5)

    def test_negative_amount(self, small_pool):
        with pytest.raises(InvalidAmount):
            small_pool.add_liquidity(BOB, -1, 5)


class TestRemoveLiquidity:
    """Tests for burning shares."""

    def test_proportional_payout(self, env, token, small_pool):
        """Burning 50 of 150 shares of (15, 1500) pays (5, 500)."""
        fund(env, token, BOB, base=5, asset=500, spender=small_pool.address)
        small_pool.add_liquidity(BOB, 500, 5)

        assert small_pool.remove_liquidity(BOB, 50) == (5, 500)

        assert env.native.balance_of(BOB) == 5
        assert token.balance_of(BOB) == 500
        assert small_pool.total_shares == 100
        assert small_pool.base_reserve == 10
        assert small_pool.asset_reserve == 1000

    def test_full_withdrawal_drains(self, env, token, small_pool):
        assert small_pool.remove_liquidity(ALICE, 100) == (10, 1000)

        assert small_pool.total_shares == 0
        assert small_pool.base_reserve == 0
        assert small_pool.asset_reserve == 0
        assert small_pool.state().is_empty

    def test_pool_can_be_bootstrapped_again(self, env, token, small_pool):
        small_pool.remove_liquidity(ALICE, 100)
        assert seed_pool(env, token, small_pool, BOB, asset=400, base=100) == 200

    def test_rounding_dust_stays_in_pool(self, env, token, pool):
        """Bootstrap (7, 1000) mints 83 shares; 10 shares pay (0, 120)."""
        seed_pool(env, token, pool, ALICE, asset=1000, base=7)
        assert pool.total_shares == 83

        assert pool.remove_liquidity(ALICE, 10) == (0, 120)
        assert (pool.base_reserve, pool.asset_reserve) == (7, 880)

        assert pool.remove_liquidity(ALICE, 73) == (7, 880)
        assert (pool.base_reserve, pool.asset_reserve, pool.total_shares) == (0, 0, 0)

    def test_more_than_held(self, env, token, small_pool):
        with pytest.raises(InsufficientShares):
            small_pool.remove_liquidity(BOB, 1)
        with pytest.raises(InsufficientShares):
            small_pool.remove_liquidity(ALICE, 101)
        assert small_pool.total_shares == 100

    def test_slippage(self, small_pool):
        with pytest.raises(SlippageExceeded):
            small_pool.remove_liquidity(ALICE, 50, min_base=6)
        with pytest.raises(SlippageExceeded):
            small_pool.remove_liquidity(ALICE, 50, min_asset=501)

        assert small_pool.remove_liquidity(ALICE, 50, min_base=5, min_asset=500) == (5, 500)

    def test_empty_pool(self, pool):
        with pytest.raises(EmptyPool):
            pool.remove_liquidity(ALICE, 1)

    def test_zero_shares(self, small_pool):
        with pytest.raises(ZeroAmount):
            small_pool.remove_liquidity(ALICE, 0)

    def test_event(self, env, small_pool):
        small_pool.remove_liquidity(ALICE, 30)

        (event,) = env.events.records("LiquidityRemoved")
        assert event.provider == ALICE
        assert (event.base_amount, event.asset_amount, event.shares_burned) == (3, 300, 30)


class TestOverflow:
    """uint256 inputs whose products or sums do not fit are rejected typed."""

    def test_bootstrap_product_overflow(self, env, pool):
        with pytest.raises(AmountOverflow) as exc_info:
            pool.add_liquidity(ALICE, 2**100, 2**200)

        assert isinstance(exc_info.value, InvalidInput)
        assert exc_info.value.context["operation"] == "add_liquidity"
        assert pool.total_shares == 0
        assert env.native.journal.depth == 0

    def test_share_product_overflow(self, env, token, pool):
        """base * total_shares of a later deposit does not fit; nothing moves."""
        seed_pool(env, token, pool, ALICE, asset=1, base=2**255)
        fund(env, token, BOB, base=2**254, asset=1, spender=pool.address)

        with pytest.raises(AmountOverflow):
            pool.add_liquidity(BOB, 1, 2**254)

        assert pool.base_reserve == 2**255
        assert env.native.balance_of(BOB) == 2**254
        assert token.balance_of(BOB) == 1
