"""Payout computation for the three bet types.

Each BetType has exactly one payout function, looked up in
``_PAYOUT_FUNCTIONS``.
"""
from dataclasses import dataclass
from typing import Optional

from risk.caps import MAX_PAYOUT_PER_BET, check_legs
from wagering.allocation import calculate_parlay_multiplier
from wagering.errors import ErrorKind
from wagering.models import BetType
from wagering.odds import BPS, adjusted_odds, apply_badge_bonus, apply_house_edge, combine_odds


@dataclass(frozen=True)
class PayoutResult:
    payout: int = 0
    error: Optional[ErrorKind] = None
    capped: bool = False           # PayoutCapExceeded, informational only
    remainder: int = 0             # SystemBet stake not allocated to any leg
    stake_per_leg: int = 0
    multiplier: int = BPS
    uncapped_payout: int = 0
    gross_payout: int = 0          # same path without house edge or cap

    @property
    def ok(self):
        return self.error is None

    @property
    def house_edge_amount(self):
        return self.gross_payout - self.uncapped_payout

    @property
    def notice(self):
        """Informational condition attached to a successful payout."""
        return ErrorKind.PAYOUT_CAP_EXCEEDED if self.capped else None


def leg_payout(stake, odds, has_badge):
    """Payout of one leg settled on its own: (net, gross-before-edge)."""
    net = stake * adjusted_odds(odds, has_badge) // BPS
    gross = stake * apply_badge_bonus(odds, has_badge) // BPS
    return net, gross


def _single_payout(stake, legs, has_badge, max_payout):
    net, gross = leg_payout(stake, legs[0].odds, has_badge)
    return PayoutResult(
        payout=net,
        stake_per_leg=stake,
        uncapped_payout=net,
        gross_payout=gross,
    )


def _parlay_payout(stake, legs, has_badge, max_payout):
    combined = combine_odds(apply_badge_bonus(leg.odds, has_badge) for leg in legs)
    multiplier = calculate_parlay_multiplier(len(legs))

    raw = stake * apply_house_edge(combined) // BPS
    boosted = raw * multiplier // BPS
    gross = (stake * combined // BPS) * multiplier // BPS

    return PayoutResult(
        payout=min(boosted, max_payout),
        capped=boosted > max_payout,
        multiplier=multiplier,
        uncapped_payout=boosted,
        gross_payout=gross,
    )


def _system_payout(stake, legs, has_badge, max_payout):
    stake_per_leg = stake // len(legs)
    total = 0
    gross_total = 0
    for leg in legs:
        net, gross = leg_payout(stake_per_leg, leg.odds, has_badge)
        total += net
        gross_total += gross

    return PayoutResult(
        payout=total,
        remainder=stake - stake_per_leg * len(legs),
        stake_per_leg=stake_per_leg,
        uncapped_payout=total,
        gross_payout=gross_total,
    )


_PAYOUT_FUNCTIONS = {
    BetType.SINGLE: _single_payout,
    BetType.PARLAY: _parlay_payout,
    BetType.SYSTEM_BET: _system_payout,
}


def compute_payout(bet_type, legs, stake, badges=(), max_payout=MAX_PAYOUT_PER_BET):
    """Compute the payout a betslip receives if every counted leg wins.

    A non-empty ``badges`` collection applies the badge bonus to every leg;
    badge ownership per team is the caller's responsibility.
    """
    if stake < 0:
        raise ValueError(f"Stake cannot be negative: {stake}")
    if not legs:
        return PayoutResult(error=ErrorKind.INVALID_BETSLIP)
    if stake == 0:
        return PayoutResult(error=ErrorKind.ZERO_STAKE)

    error = check_legs(bet_type, legs)
    if error is not None:
        return PayoutResult(error=error)

    return _PAYOUT_FUNCTIONS[bet_type](stake, legs, bool(badges), max_payout)


def auto_bet_type(current, leg_count):
    """Bet type after the slip grows to, or shrinks to, ``leg_count`` legs."""
    if leg_count <= 1:
        return BetType.SINGLE
    if current == BetType.SINGLE:
        return BetType.PARLAY
    return current
