"""Betslip placement validation and settlement against match results."""
from dataclasses import dataclass, replace
from typing import Optional

from risk.caps import DEFAULT_LIMITS, check_badges, check_legs, check_stake
from wagering.allocation import calculate_allocations, calculate_parlay_multiplier
from wagering.errors import ErrorKind
from wagering.models import Betslip, BetType, Match, MatchResult
from wagering.odds import BPS, generate_match_result, validate_leg_odds
from wagering.payouts import PayoutResult, compute_payout, leg_payout

PROTOCOL_REVENUE_BPS = 200   # protocol share of the house edge on winning payouts


@dataclass(frozen=True)
class PlacementResult:
    betslip: Optional[Betslip] = None
    preview: Optional[PayoutResult] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self):
        return self.error is None


@dataclass(frozen=True)
class SettlementResult:
    payout: int = 0
    refund: int = 0               # SystemBet remainder returned to the bettor
    protocol_fee: int = 0
    won_legs: tuple = ()
    settled_betslip: Optional[Betslip] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self):
        return self.error is None

    @property
    def won(self):
        return self.payout > 0


def build_betslip(
    slip_id,
    bettor_address,
    bet_type,
    legs,
    total_stake,
    badges=(),
    matches=None,
    limits=DEFAULT_LIMITS,
    timestamp=0,
):
    """Validate a new betslip and attach its payout preview and allocations.

    ``matches`` maps match_id to a Match snapshot. When supplied, each leg is
    checked against the match's locked odds and the match must still be pending.
    """
    legs = tuple(legs)
    badges = frozenset(badges)

    error = (
        check_stake(total_stake, limits)
        or check_legs(bet_type, legs, limits)
        or check_badges(badges)
    )
    if error is not None:
        return PlacementResult(error=error)

    for leg in legs:
        match = matches.get(leg.match_id) if matches else None
        if match is not None and match.is_resolved:
            return PlacementResult(error=ErrorKind.INVALID_BETSLIP)
        if not validate_leg_odds(leg, match):
            return PlacementResult(error=ErrorKind.INVALID_ODDS)

    preview = compute_payout(
        bet_type, legs, total_stake, badges, max_payout=limits.max_payout_per_bet
    )
    if not preview.ok:
        return PlacementResult(preview=preview, error=preview.error)

    multiplier = BPS
    allocations = ()
    stake_per_leg = 0
    if bet_type == BetType.PARLAY:
        multiplier = calculate_parlay_multiplier(len(legs))
        allocations = tuple(calculate_allocations(total_stake, legs, multiplier))
    elif bet_type == BetType.SINGLE:
        stake_per_leg = total_stake
    else:
        stake_per_leg = preview.stake_per_leg

    betslip = Betslip(
        slip_id=slip_id,
        bettor_address=bettor_address,
        bet_type=bet_type,
        legs=legs,
        total_stake=total_stake,
        badges=badges,
        allocations=allocations,
        locked_multiplier=multiplier,
        stake_per_leg=stake_per_leg,
        potential_payout=preview.payout,
        timestamp=timestamp,
    )
    return PlacementResult(betslip=betslip, preview=preview)


def _settle_single(betslip, won_legs, max_payout):
    if not won_legs:
        return 0, 0, 0
    result = compute_payout(BetType.SINGLE, betslip.legs, betslip.total_stake, betslip.badges)
    return result.payout, result.house_edge_amount, 0


def _settle_parlay(betslip, won_legs, max_payout):
    if len(won_legs) != len(betslip.legs):
        return 0, 0, 0
    result = compute_payout(
        BetType.PARLAY, betslip.legs, betslip.total_stake, betslip.badges, max_payout
    )
    return result.payout, result.house_edge_amount, 0


def _settle_system(betslip, won_legs, max_payout):
    has_badge = bool(betslip.badges)
    stake_per_leg = betslip.total_stake // len(betslip.legs)
    payout = 0
    edge = 0
    for leg in won_legs:
        net, gross = leg_payout(stake_per_leg, leg.odds, has_badge)
        payout += net
        edge += gross - net
    refund = betslip.total_stake - stake_per_leg * len(betslip.legs)
    return payout, edge, refund


_SETTLE_FUNCTIONS = {
    BetType.SINGLE: _settle_single,
    BetType.PARLAY: _settle_parlay,
    BetType.SYSTEM_BET: _settle_system,
}


def settle_betslip(betslip, results, max_payout=DEFAULT_LIMITS.max_payout_per_bet):
    """Settle a betslip once every leg's match has a result.

    ``results`` maps match_id to MatchResult. The returned betslip is marked
    settled and its payout_amount is fixed.
    """
    if betslip.settled:
        return SettlementResult(error=ErrorKind.ALREADY_SETTLED)

    won_legs = []
    for leg in betslip.legs:
        outcome = results.get(leg.match_id, MatchResult.PENDING)
        if outcome == MatchResult.PENDING:
            return SettlementResult(error=ErrorKind.UNRESOLVED_LEG)
        if outcome == leg.prediction:
            won_legs.append(leg)

    payout, edge, refund = _SETTLE_FUNCTIONS[betslip.bet_type](betslip, won_legs, max_payout)

    return SettlementResult(
        payout=payout,
        refund=refund,
        protocol_fee=edge * PROTOCOL_REVENUE_BPS // BPS,
        won_legs=tuple(won_legs),
        settled_betslip=replace(betslip, settled=True, payout_amount=payout),
    )


def resolve_match(match: Match, random_seed: str, match_index: int) -> Match:
    """Resolve a pending match from its seed. Teams and odds never change."""
    if match.is_resolved:
        raise ValueError(f"Match {match.match_id} is already resolved")
    return replace(
        match,
        result=generate_match_result(random_seed, match_index),
        random_seed=random_seed,
    )


def results_by_match(matches):
    """Map match_id to result for every match snapshot."""
    return {m.match_id: m.result for m in matches}
