"""Parlay size multiplier and odds-weighted per-leg allocation."""
from wagering.models import Allocation
from wagering.odds import BPS, combine_odds

MAX_PARLAY_MULTIPLIER = 12500    # 1.25x, reached at 10 legs

# Fixed breakpoints, not a formula.
PARLAY_MULTIPLIER_TABLE = {
    1: 10000,
    2: 10500,
    3: 11000,
    4: 11300,
    5: 11600,
    6: 11900,
    7: 12100,
    8: 12300,
    9: 12400,
}


def calculate_parlay_multiplier(leg_count):
    """Return the capped parlay bonus multiplier in basis points."""
    if leg_count >= 10:
        return MAX_PARLAY_MULTIPLIER
    return PARLAY_MULTIPLIER_TABLE.get(leg_count, BPS)


def calculate_allocations(total_stake, legs, multiplier):
    """Split a parlay's target payout across legs, weighted by odds.

    The target payout uses the raw leg odds (no badge bonus, no house edge)
    and the multiplier, folding both basis-point scalings into one division.
    Each leg receives an equal share of that target, converted back into the
    stake the leg alone would need at its own odds. Lower odds therefore get
    a larger nominal allocation.

    The result is a risk bookkeeping view. It does not change the payout and
    must not be summed back into the stake.
    """
    if not legs:
        return []

    combined = combine_odds(leg.odds for leg in legs)
    target_payout = total_stake * combined * multiplier // (BPS * BPS)
    per_leg = target_payout // len(legs)

    return [
        Allocation(match_id=leg.match_id, allocation=per_leg * BPS // leg.odds)
        for leg in legs
    ]
