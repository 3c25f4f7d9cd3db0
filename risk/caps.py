"""Global risk ceilings checked before a betslip is accepted."""
from dataclasses import dataclass

from wagering.errors import ErrorKind
from wagering.models import BetType

MIN_BET = 100
MAX_BET = 1_000_000
MAX_BETS_PER_SLIP = 20
MAX_PAYOUT_PER_BET = 100_000      # hard per-betslip ceiling (Parlay path)
MAX_ROUND_PAYOUTS = 500_000       # aggregate ceiling per resolution round
BADGE_TEAM_COUNT = 20


@dataclass(frozen=True)
class RiskLimits:
    min_bet: int = MIN_BET
    max_bet: int = MAX_BET
    max_bets_per_slip: int = MAX_BETS_PER_SLIP
    max_payout_per_bet: int = MAX_PAYOUT_PER_BET
    max_round_payouts: int = MAX_ROUND_PAYOUTS

    @classmethod
    def from_settings(cls, settings):
        return cls(
            min_bet=settings.min_bet,
            max_bet=settings.max_bet,
            max_payout_per_bet=settings.max_payout_per_bet,
            max_round_payouts=settings.max_round_payouts,
        )


DEFAULT_LIMITS = RiskLimits()


def check_stake(stake, limits=DEFAULT_LIMITS):
    """Return an ErrorKind when the total stake is outside the bet limits."""
    if stake < 0:
        raise ValueError(f"Stake cannot be negative: {stake}")
    if stake == 0:
        return ErrorKind.ZERO_STAKE
    if stake < limits.min_bet or stake > limits.max_bet:
        return ErrorKind.STAKE_OUT_OF_RANGE
    return None


def check_legs(bet_type, legs, limits=DEFAULT_LIMITS):
    """Validate leg count, uniqueness and the leg count required by the bet type."""
    if not legs:
        return ErrorKind.INVALID_BETSLIP
    if len(legs) > limits.max_bets_per_slip:
        return ErrorKind.TOO_MANY_LEGS

    match_ids = [leg.match_id for leg in legs]
    if len(set(match_ids)) != len(match_ids):
        return ErrorKind.DUPLICATE_LEG

    if bet_type == BetType.SINGLE and len(legs) != 1:
        return ErrorKind.INVALID_BETSLIP
    if bet_type in (BetType.PARLAY, BetType.SYSTEM_BET) and len(legs) < 2:
        return ErrorKind.INVALID_BETSLIP
    return None


def check_badges(badges):
    """Badge ids index the 20 league teams."""
    for team_id in badges:
        if not 0 <= team_id < BADGE_TEAM_COUNT:
            return ErrorKind.INVALID_BADGE
    return None
