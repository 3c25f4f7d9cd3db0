from risk.caps import (
    MAX_BET, MAX_BETS_PER_SLIP, MAX_PAYOUT_PER_BET, MAX_ROUND_PAYOUTS, MIN_BET,
    RiskLimits, check_badges, check_legs, check_stake,
)
from risk.risk_manager import RiskManager, RoundLedger, admit_payout, release_payout

__all__ = [
    "MIN_BET", "MAX_BET", "MAX_BETS_PER_SLIP", "MAX_PAYOUT_PER_BET", "MAX_ROUND_PAYOUTS",
    "RiskLimits", "check_stake", "check_legs", "check_badges",
    "RiskManager", "RoundLedger", "admit_payout", "release_payout",
]
