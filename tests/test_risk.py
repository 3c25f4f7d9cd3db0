"""Tests for risk.caps and risk.risk_manager modules."""
import threading
import unittest

from config.settings import Settings
from risk.caps import check_badges, check_legs, check_stake, RiskLimits
from risk.risk_manager import RiskManager, RoundLedger, admit_payout, release_payout
from wagering.errors import ErrorKind, describe
from wagering.models import BetType, Leg, MatchResult


def _legs(n):
    return [Leg(f"m{i}", MatchResult.DRAW, 30000) for i in range(n)]


# ==================== Cap Checks ====================

class TestStakeChecks(unittest.TestCase):

    def test_bounds_inclusive(self):
        self.assertIsNone(check_stake(100))
        self.assertIsNone(check_stake(1_000_000))

    def test_out_of_range(self):
        self.assertEqual(check_stake(99), ErrorKind.STAKE_OUT_OF_RANGE)
        self.assertEqual(check_stake(1_000_001), ErrorKind.STAKE_OUT_OF_RANGE)

    def test_zero_and_negative(self):
        self.assertEqual(check_stake(0), ErrorKind.ZERO_STAKE)
        with self.assertRaises(ValueError):
            check_stake(-5)

    def test_custom_limits(self):
        limits = RiskLimits(min_bet=10, max_bet=50)
        self.assertIsNone(check_stake(10, limits))
        self.assertEqual(check_stake(51, limits), ErrorKind.STAKE_OUT_OF_RANGE)


class TestLegChecks(unittest.TestCase):

    def test_valid_counts(self):
        self.assertIsNone(check_legs(BetType.SINGLE, _legs(1)))
        self.assertIsNone(check_legs(BetType.PARLAY, _legs(2)))
        self.assertIsNone(check_legs(BetType.SYSTEM_BET, _legs(20)))

    def test_too_many(self):
        self.assertEqual(check_legs(BetType.PARLAY, _legs(21)), ErrorKind.TOO_MANY_LEGS)

    def test_duplicate_match(self):
        legs = _legs(2) + [Leg("m0", MatchResult.HOME_WIN, 15000)]
        self.assertEqual(check_legs(BetType.PARLAY, legs), ErrorKind.DUPLICATE_LEG)

    def test_empty(self):
        self.assertEqual(check_legs(BetType.SINGLE, []), ErrorKind.INVALID_BETSLIP)

    def test_badges(self):
        self.assertIsNone(check_badges({0, 19}))
        self.assertEqual(check_badges({20}), ErrorKind.INVALID_BADGE)
        self.assertEqual(check_badges({-1}), ErrorKind.INVALID_BADGE)


class TestDescribe(unittest.TestCase):

    def test_messages_use_limits(self):
        self.assertEqual(describe(ErrorKind.STAKE_OUT_OF_RANGE), "Stake must be between 100 and 1000000")
        self.assertEqual(
            describe(ErrorKind.STAKE_OUT_OF_RANGE, min_bet=5, max_bet=50),
            "Stake must be between 5 and 50",
        )
        self.assertIn("1000", describe(ErrorKind.BELOW_MINIMUM_LOCK))

    def test_every_kind_has_message(self):
        for kind in ErrorKind:
            self.assertTrue(describe(kind))


# ==================== Round Ledger ====================

class TestRoundLedger(unittest.TestCase):

    def test_admit_up_to_cap(self):
        ledger = RoundLedger(round_id="r1", cap=500_000)
        ledger, error = admit_payout(ledger, "s1", 400_000)
        self.assertIsNone(error)
        ledger, error = admit_payout(ledger, "s2", 100_000)
        self.assertIsNone(error)
        self.assertEqual(ledger.total_payouts, 500_000)
        self.assertEqual(ledger.headroom, 0)

    def test_rejection_leaves_ledger_unchanged(self):
        ledger, _ = admit_payout(RoundLedger(round_id="r1", cap=500_000), "s1", 400_000)
        after, error = admit_payout(ledger, "s2", 100_001)
        self.assertEqual(error, ErrorKind.ROUND_CAP_EXCEEDED)
        self.assertIs(after, ledger)

    def test_slip_admitted_once(self):
        ledger, _ = admit_payout(RoundLedger(round_id="r1"), "s1", 10)
        _, error = admit_payout(ledger, "s1", 10)
        self.assertEqual(error, ErrorKind.ALREADY_SETTLED)

    def test_negative_payout_raises(self):
        with self.assertRaises(ValueError):
            admit_payout(RoundLedger(round_id="r1"), "s1", -1)

    def test_release(self):
        ledger, _ = admit_payout(RoundLedger(round_id="r1", cap=1000), "s1", 600)
        ledger = release_payout(ledger, "s1", 600)
        self.assertEqual(ledger.total_payouts, 0)
        self.assertNotIn("s1", ledger.settled_slip_ids)
        self.assertIs(release_payout(ledger, "unknown", 5), ledger)


# ==================== Risk Manager ====================

class TestRiskManager(unittest.TestCase):

    def _make_manager(self, **overrides):
        return RiskManager(Settings(**overrides))

    def test_rounds_are_independent(self):
        rm = self._make_manager(max_round_payouts=1000)
        self.assertIsNone(rm.admit("r1", "s1", 600))
        self.assertEqual(rm.admit("r1", "s2", 600), ErrorKind.ROUND_CAP_EXCEEDED)
        self.assertIsNone(rm.admit("r2", "s2", 600))

        report = rm.get_risk_report()
        self.assertEqual(report["rejections"], 1)
        self.assertEqual(report["rounds"]["r1"]["headroom"], 400)
        self.assertEqual(report["limits"]["max_round_payouts"], 1000)

    def test_release_restores_headroom(self):
        rm = self._make_manager(max_round_payouts=1000)
        rm.admit("r1", "s1", 900)
        rm.release("r1", "s1", 900)
        self.assertEqual(rm.round_ledger("r1").headroom, 1000)

    def test_reset_round(self):
        rm = self._make_manager()
        rm.admit("r1", "s1", 5000)
        rm.reset_round("r1")
        self.assertEqual(rm.round_ledger("r1").total_payouts, 0)

    def test_concurrent_admissions_respect_cap(self):
        """Parallel settlements never push a round past its cap."""
        rm = self._make_manager(max_round_payouts=500)
        errors = []

        def settle(i):
            errors.append(rm.admit("r1", f"s{i}", 10))

        threads = [threading.Thread(target=settle, args=(i,)) for i in range(100)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(rm.round_ledger("r1").total_payouts, 500)
        self.assertEqual(errors.count(None), 50)


if __name__ == "__main__":
    unittest.main()
