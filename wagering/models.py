"""Immutable records shared by the payout, settlement and pool modules."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

TEAMS = (
    "Arsenal", "Aston Villa", "Bournemouth", "Brentford", "Brighton",
    "Chelsea", "Crystal Palace", "Everton", "Fulham", "Ipswich Town",
    "Leicester City", "Liverpool", "Manchester City", "Manchester United", "Newcastle",
    "Nottingham Forest", "Southampton", "Tottenham", "West Ham", "Wolves",
)


class BetType(Enum):
    SINGLE = "Single"
    PARLAY = "Parlay"          # every leg must win
    SYSTEM_BET = "SystemBet"   # stake split, legs settle independently


class MatchResult(Enum):
    PENDING = "Pending"
    HOME_WIN = "HomeWin"
    AWAY_WIN = "AwayWin"
    DRAW = "Draw"


@dataclass(frozen=True)
class Leg:
    """One prediction within a betslip."""
    match_id: str
    prediction: MatchResult
    odds: int                  # basis points, 10000 = 1.0x


@dataclass(frozen=True)
class LockedOdds:
    home_odds: int
    away_odds: int
    draw_odds: int
    locked: bool = True


@dataclass(frozen=True)
class Match:
    season_id: str
    turn: int
    match_id: str
    home_team: str
    away_team: str
    home_odds: int
    away_odds: int
    draw_odds: int
    result: MatchResult = MatchResult.PENDING
    random_seed: Optional[str] = None
    locked_odds: Optional[LockedOdds] = None

    @property
    def is_resolved(self):
        return self.result != MatchResult.PENDING


@dataclass(frozen=True)
class Allocation:
    match_id: str
    allocation: int


@dataclass(frozen=True)
class Betslip:
    slip_id: str
    bettor_address: str
    bet_type: BetType
    legs: tuple
    total_stake: int
    badges: frozenset = frozenset()
    settled: bool = False
    payout_amount: int = 0
    allocations: tuple = ()
    locked_multiplier: int = 10000
    stake_per_leg: int = 0
    potential_payout: int = 0
    timestamp: int = 0


@dataclass(frozen=True)
class LiquidityPool:
    pool_id: str
    total_liquidity: int = 0
    total_bets_in_play: int = 0
    total_paid_out: int = 0
    total_collected: int = 0
    protocol_revenue: int = 0
    house_balance: int = 0
    is_active: bool = True
    min_liquidity: int = 0
    total_shares: int = 0


@dataclass(frozen=True)
class LPShare:
    share_id: str
    lp_address: str
    shares: int
    initial_deposit: int
    total_withdrawn: int = 0
    deposit_timestamp: int = 0


@dataclass(frozen=True)
class LPPosition:
    """Aggregated view over every LPShare an address holds. Never persisted."""
    lp_address: str
    shares: int = 0
    initial_deposit: int = 0
    total_withdrawn: int = 0
    current_value: int = 0
    unrealized_profit: int = 0    # may be negative
    realized_profit: int = 0
    roi_bps: int = 0
    share_ids: tuple = field(default_factory=tuple)
