"""Fixed-point odds model shared by every payout path.

All odds are basis points (10000 = 1.0x) and every scaling step truncates
with integer floor division, so an off-chain preview reproduces the contract
exactly. Floats never enter these functions.
"""
import hashlib

from wagering.models import Leg, Match, MatchResult

BPS = 10000
BADGE_BONUS_BPS = 500        # 5% bonus for holding a team badge
HOUSE_EDGE_BPS = 400         # 4% house edge

MIN_MATCH_ODDS = 10000       # 1.0x
MAX_MATCH_ODDS = 100000      # 10.0x
MIN_LOCKED_ODDS = 12500      # 1.25x
MAX_LOCKED_ODDS = 19500      # 1.95x


def apply_badge_bonus(odds, has_badge):
    """Raise odds by BADGE_BONUS_BPS when the bettor holds a matching badge."""
    if not has_badge:
        return odds
    return odds + odds * BADGE_BONUS_BPS // BPS


def apply_house_edge(odds):
    """Deduct the house edge. Applied once per payout, after any badge bonus."""
    return odds - odds * HOUSE_EDGE_BPS // BPS


def adjusted_odds(odds, has_badge):
    """Badge bonus followed by house edge, the single-leg payout odds."""
    return apply_house_edge(apply_badge_bonus(odds, has_badge))


def combine_odds(odds_values):
    """Multiply odds together, truncating after every step."""
    combined = BPS
    for odds in odds_values:
        combined = combined * odds // BPS
    return combined


def odds_for_prediction(match: Match, prediction: MatchResult) -> int:
    """Odds a new leg must carry: locked odds if the match has them."""
    source = match
    if match.locked_odds is not None and match.locked_odds.locked:
        source = match.locked_odds

    if prediction == MatchResult.HOME_WIN:
        return source.home_odds
    if prediction == MatchResult.AWAY_WIN:
        return source.away_odds
    if prediction == MatchResult.DRAW:
        return source.draw_odds
    raise ValueError(f"Cannot price a {prediction.value} prediction")


def validate_leg_odds(leg: Leg, match: Match = None) -> bool:
    """Check a leg's odds against the contract range and the match's locked odds."""
    if leg.prediction == MatchResult.PENDING:
        return False
    if not MIN_MATCH_ODDS <= leg.odds <= MAX_MATCH_ODDS:
        return False

    if match is None or match.locked_odds is None or not match.locked_odds.locked:
        return True

    if not MIN_LOCKED_ODDS <= leg.odds <= MAX_LOCKED_ODDS:
        return False
    return leg.odds == odds_for_prediction(match, leg.prediction)


def generate_match_result(random_seed: str, match_index: int) -> MatchResult:
    """Derive a match outcome from a transaction hash seed.

    Weighted 45% home win, 30% draw, 25% away win.
    """
    hasher = hashlib.sha256()
    hasher.update(random_seed.encode("utf-8"))
    hasher.update(bytes([match_index & 0xFF]))
    digest = hasher.digest()

    value = int.from_bytes(digest[:4], "big") % 100
    if value < 45:
        return MatchResult.HOME_WIN
    if value < 75:
        return MatchResult.DRAW
    return MatchResult.AWAY_WIN
