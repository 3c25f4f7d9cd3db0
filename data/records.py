"""Convert indexer JSON records to engine snapshots and back."""
import dataclasses
from enum import Enum

from wagering.models import (
    Allocation, Betslip, BetType, Leg, LiquidityPool, LockedOdds, LPShare, Match, MatchResult,
)


def leg_from_record(data: dict) -> Leg:
    return Leg(
        match_id=str(data["match_id"]),
        prediction=MatchResult(data["prediction"]),
        odds=int(data["odds"]),
    )


def locked_odds_from_record(data):
    if not data:
        return None
    return LockedOdds(
        home_odds=int(data["home_odds"]),
        away_odds=int(data["away_odds"]),
        draw_odds=int(data["draw_odds"]),
        locked=bool(data.get("locked", False)),
    )


def match_from_record(data: dict) -> Match:
    return Match(
        season_id=data["season_id"],
        turn=int(data["turn"]),
        match_id=str(data["match_id"]),
        home_team=data["home_team"],
        away_team=data["away_team"],
        home_odds=int(data["home_odds"]),
        away_odds=int(data["away_odds"]),
        draw_odds=int(data["draw_odds"]),
        result=MatchResult(data.get("result", "Pending")),
        random_seed=data.get("random_seed"),
        locked_odds=locked_odds_from_record(data.get("locked_odds")),
    )


def betslip_from_record(data: dict) -> Betslip:
    """Contract records name the legs ``bets`` and the owner ``bettor``."""
    legs = data.get("legs", data.get("bets", []))
    return Betslip(
        slip_id=data["slip_id"],
        bettor_address=data.get("bettor_address", data.get("bettor", "")),
        bet_type=BetType(data["bet_type"]),
        legs=tuple(leg_from_record(leg) for leg in legs),
        total_stake=int(data["total_stake"]),
        badges=frozenset(int(b) for b in data.get("badges", [])),
        settled=bool(data.get("settled", False)),
        payout_amount=int(data.get("payout_amount", 0)),
        allocations=tuple(
            Allocation(match_id=str(a["match_id"]), allocation=int(a["allocation"]))
            for a in data.get("allocations", [])
        ),
        locked_multiplier=int(data.get("locked_multiplier", 10000)),
        stake_per_leg=int(data.get("stake_per_leg", data.get("stake_per_bet", 0))),
        potential_payout=int(data.get("potential_payout", 0)),
        timestamp=int(data.get("timestamp", 0)),
    )


def pool_from_record(data: dict) -> LiquidityPool:
    return LiquidityPool(
        pool_id=data["pool_id"],
        total_liquidity=int(data.get("total_liquidity", 0)),
        total_bets_in_play=int(data.get("total_bets_in_play", 0)),
        total_paid_out=int(data.get("total_paid_out", 0)),
        total_collected=int(data.get("total_collected", 0)),
        protocol_revenue=int(data.get("protocol_revenue", 0)),
        house_balance=int(data.get("house_balance", 0)),
        is_active=bool(data.get("is_active", True)),
        min_liquidity=int(data.get("min_liquidity", 0)),
        total_shares=int(data.get("total_shares", 0)),
    )


def share_from_record(data: dict) -> LPShare:
    return LPShare(
        share_id=data["share_id"],
        lp_address=data["lp_address"],
        shares=int(data["shares"]),
        initial_deposit=int(data["initial_deposit"]),
        total_withdrawn=int(data.get("total_withdrawn", 0)),
        deposit_timestamp=int(data.get("deposit_timestamp", 0)),
    )


def to_record(obj):
    """JSON-ready dict for any engine dataclass (enums by value, sets sorted)."""
    if dataclasses.is_dataclass(obj):
        return {f.name: to_record(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, frozenset):
        return sorted(obj)
    if isinstance(obj, (list, tuple)):
        return [to_record(item) for item in obj]
    return obj
