"""Tests for pool.liquidity module."""
import unittest
from dataclasses import replace

from pool.liquidity import (
    compute_pool_apy,
    compute_position,
    create_pool,
    deposit_liquidity,
    pool_invariant_violations,
    record_bet_placed,
    record_bet_settled,
    shares_for_deposit,
    withdraw_liquidity,
)
from wagering.errors import ErrorKind
from wagering.models import LiquidityPool, LPShare


def _pool(liquidity=1500, shares=1500, **kwargs):
    kwargs.setdefault("house_balance", liquidity)
    return LiquidityPool(pool_id="p1", total_liquidity=liquidity, total_shares=shares, **kwargs)


def _share(shares, deposit=None, lp="0xlp", share_id="sh1", withdrawn=0):
    return LPShare(
        share_id=share_id, lp_address=lp, shares=shares,
        initial_deposit=shares if deposit is None else deposit,
        total_withdrawn=withdrawn,
    )


class TestDeposit(unittest.TestCase):

    def test_first_deposit_mints_one_to_one(self):
        result = deposit_liquidity(LiquidityPool(pool_id="p1"), 1000)
        self.assertTrue(result.ok)
        self.assertEqual(result.shares_to_mint, 1000)
        self.assertEqual(result.updated_pool.total_liquidity, 1000)
        self.assertEqual(result.updated_pool.total_shares, 1000)

    def test_second_deposit_at_share_price(self):
        first = deposit_liquidity(LiquidityPool(pool_id="p1"), 1000).updated_pool
        second = deposit_liquidity(first, 500)
        self.assertEqual(second.shares_to_mint, 500)
        self.assertEqual(second.updated_pool.total_liquidity, 1500)
        self.assertEqual(second.updated_pool.total_shares, 1500)
        self.assertEqual(second.updated_pool.house_balance, 1500)

    def test_deposit_after_profit_gets_fewer_shares(self):
        result = deposit_liquidity(_pool(liquidity=2000, shares=1000), 1000)
        self.assertEqual(result.shares_to_mint, 500)

    def test_invalid_amounts(self):
        self.assertEqual(deposit_liquidity(_pool(), 0).error, ErrorKind.INVALID_DEPOSIT)
        self.assertEqual(deposit_liquidity(_pool(), -10).error, ErrorKind.INVALID_DEPOSIT)

    def test_deposit_minting_zero_shares_rejected(self):
        result = deposit_liquidity(_pool(liquidity=3000, shares=1000), 2)
        self.assertEqual(result.error, ErrorKind.INVALID_DEPOSIT)

    def test_inactive_pool(self):
        result = deposit_liquidity(_pool(is_active=False), 1000)
        self.assertEqual(result.error, ErrorKind.POOL_INACTIVE)
        self.assertIsNone(result.updated_pool)

    def test_pure(self):
        pool = _pool()
        deposit_liquidity(pool, 1000)
        self.assertEqual(pool.total_liquidity, 1500)
        self.assertEqual(deposit_liquidity(pool, 700), deposit_liquidity(pool, 700))

    def test_empty_liquidity_with_shares_mints_nothing(self):
        self.assertEqual(shares_for_deposit(_pool(liquidity=0, shares=10), 100), 0)


class TestWithdraw(unittest.TestCase):

    def test_partial_withdrawal(self):
        result = withdraw_liquidity(_pool(), _share(1500), 500)
        self.assertTrue(result.ok)
        self.assertEqual(result.gross_amount, 500)
        self.assertEqual(result.fee, 2)
        self.assertEqual(result.net_amount, 498)
        self.assertEqual(result.updated_pool.total_liquidity, 1000)
        self.assertEqual(result.updated_pool.total_shares, 1000)
        self.assertEqual(result.updated_pool.protocol_revenue, 2)
        self.assertEqual(result.updated_share.shares, 1000)
        self.assertEqual(result.updated_share.total_withdrawn, 498)

    def test_full_exit_allowed(self):
        result = withdraw_liquidity(_pool(1000, 1000), _share(1000), 1000)
        self.assertTrue(result.ok)
        self.assertEqual(result.updated_share.shares, 0)
        self.assertEqual(result.updated_pool.total_shares, 0)
        self.assertEqual(result.updated_pool.total_liquidity, 0)

    def test_below_minimum_lock(self):
        result = withdraw_liquidity(_pool(), _share(1500), 1000)
        self.assertEqual(result.error, ErrorKind.BELOW_MINIMUM_LOCK)

    def test_insufficient_shares(self):
        self.assertEqual(
            withdraw_liquidity(_pool(), _share(1000), 1001).error, ErrorKind.INSUFFICIENT_SHARES
        )

    def test_zero_shares(self):
        self.assertEqual(
            withdraw_liquidity(_pool(), _share(1500), 0).error, ErrorKind.INVALID_WITHDRAWAL
        )

    def test_min_liquidity_floor(self):
        pool = _pool(min_liquidity=1000)
        result = withdraw_liquidity(pool, _share(1500), 1500)
        self.assertEqual(result.error, ErrorKind.INSUFFICIENT_LIQUIDITY)

    def test_withdrawal_ignores_house_balance(self):
        """Share value depends only on total liquidity and total shares."""
        pool = LiquidityPool(pool_id="p1", total_liquidity=1500, total_shares=1500)
        result = withdraw_liquidity(pool, _share(1500), 500)
        self.assertTrue(result.ok)
        self.assertEqual(result.gross_amount, 500)
        self.assertEqual(result.fee, 2)
        self.assertEqual(result.net_amount, 498)
        self.assertEqual(result.updated_pool.house_balance, 0)

    def test_minimum_lock_uses_address_total(self):
        # the record empties but the address keeps 500 shares elsewhere
        result = withdraw_liquidity(_pool(2000, 2000), _share(1500), 1500, address_shares=2000)
        self.assertEqual(result.error, ErrorKind.BELOW_MINIMUM_LOCK)

        # the record drops to 900 but the address keeps 2400
        result = withdraw_liquidity(_pool(3000, 3000), _share(1500), 600, address_shares=3000)
        self.assertTrue(result.ok)
        self.assertEqual(result.updated_share.shares, 900)

    def test_inactive_pool(self):
        result = withdraw_liquidity(_pool(is_active=False), _share(1500), 500)
        self.assertEqual(result.error, ErrorKind.POOL_INACTIVE)

    def test_round_trip_loses_only_fee(self):
        """Deposit then withdraw every minted share at an unchanged price."""
        pool = _pool(10000, 10000)
        deposit = deposit_liquidity(pool, 4000)
        share = _share(deposit.shares_to_mint, deposit=4000)
        result = withdraw_liquidity(deposit.updated_pool, share, share.shares)
        self.assertEqual(result.gross_amount, 4000)
        self.assertEqual(result.net_amount, 4000 - 4000 * 50 // 10000)
        self.assertEqual(result.updated_pool.total_liquidity, pool.total_liquidity)
        self.assertEqual(result.updated_pool.total_shares, pool.total_shares)


class TestPositionAndApy(unittest.TestCase):

    def test_position_in_profit(self):
        position = compute_position(_pool(2000, 1000), [_share(1000)])
        self.assertEqual(position.lp_address, "0xlp")
        self.assertEqual(position.current_value, 2000)
        self.assertEqual(position.unrealized_profit, 1000)
        self.assertEqual(position.realized_profit, 0)
        self.assertEqual(position.roi_bps, 10000)

    def test_position_after_withdrawal(self):
        record = _share(500, deposit=1000, withdrawn=600)
        position = compute_position(_pool(1500, 1000), [record])
        self.assertEqual(position.current_value, 750)
        self.assertEqual(position.unrealized_profit, 350)
        self.assertEqual(position.realized_profit, -400)
        self.assertEqual(position.roi_bps, 3500)

    def test_position_aggregates_by_address(self):
        records = [
            _share(1000, share_id="a"),
            _share(500, share_id="b"),
            _share(700, lp="0xother", share_id="c"),
        ]
        position = compute_position(_pool(2200, 2200), records, "0xlp")
        self.assertEqual(position.shares, 1500)
        self.assertEqual(position.share_ids, ("a", "b"))

    def test_empty_position(self):
        position = compute_position(_pool(), [], "0xnobody")
        self.assertEqual(position.shares, 0)
        self.assertEqual(position.roi_bps, 0)

    def test_apy(self):
        pool = _pool(100_000, 100_000, total_collected=10_000, total_paid_out=5_000)
        # 5000 * 365 * 10000 // (100000 * 270)
        self.assertEqual(compute_pool_apy(pool, 270), 675)

    def test_apy_negative_and_empty(self):
        losing = _pool(100_000, 100_000, total_paid_out=2_700)
        self.assertEqual(compute_pool_apy(losing, 270), -365)
        self.assertEqual(compute_pool_apy(LiquidityPool(pool_id="p1")), 0)


class TestBetAccounting(unittest.TestCase):

    def test_create_pool(self):
        result = create_pool("p1", 50_000, 100_000)
        self.assertTrue(result.ok)
        self.assertEqual(result.updated_pool.total_shares, 100_000)
        self.assertEqual(result.updated_pool.min_liquidity, 50_000)
        self.assertEqual(create_pool("p1", 50_000, 10_000).error, ErrorKind.INVALID_DEPOSIT)

    def test_bet_placed(self):
        update = record_bet_placed(_pool(), 1000)
        pool = update.updated_pool
        self.assertEqual(pool.total_collected, 1000)
        self.assertEqual(pool.total_bets_in_play, 1000)
        self.assertEqual(pool.total_liquidity, 2500)
        self.assertEqual(pool.house_balance, 2500)
        self.assertEqual(record_bet_placed(_pool(), 0).error, ErrorKind.ZERO_STAKE)
        self.assertEqual(
            record_bet_placed(_pool(is_active=False), 100).error, ErrorKind.POOL_INACTIVE
        )

    def test_bet_settled(self):
        pool = record_bet_placed(_pool(), 1000).updated_pool
        pool = record_bet_settled(pool, 1000, 1728, protocol_fee=1).updated_pool
        self.assertEqual(pool.total_bets_in_play, 0)
        self.assertEqual(pool.total_paid_out, 1728)
        self.assertEqual(pool.protocol_revenue, 1)
        self.assertEqual(pool.total_liquidity, 2500 - 1729)
        self.assertEqual(pool_invariant_violations(pool), [])

    def test_bet_settled_with_refund(self):
        pool = record_bet_placed(_pool(), 1001).updated_pool
        pool = record_bet_settled(pool, 1001, 0, refund=1).updated_pool
        self.assertEqual(pool.total_paid_out, 1)

    def test_payout_beyond_house_balance(self):
        update = record_bet_settled(_pool(), 1000, 5000)
        self.assertEqual(update.error, ErrorKind.INSUFFICIENT_LIQUIDITY)

    def test_negative_amount_raises(self):
        with self.assertRaises(ValueError):
            record_bet_settled(_pool(), 1000, -1)

    def test_invariant_violations(self):
        self.assertEqual(pool_invariant_violations(_pool()), [])
        broken = replace(_pool(), total_shares=0)
        self.assertEqual(len(pool_invariant_violations(broken)), 1)
        self.assertIn(
            "house balance exceeds total liquidity",
            pool_invariant_violations(_pool(house_balance=5000)),
        )


if __name__ == "__main__":
    unittest.main()
