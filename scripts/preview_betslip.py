"""Preview a betslip payout exactly as the contract will compute it.

Usage:
    python scripts/preview_betslip.py --stake 1000 --leg m1:HomeWin:18000 --leg m2:AwayWin:22000
    python scripts/preview_betslip.py --type SystemBet --stake 1001 --leg m1:HomeWin:18000 --leg m2:Draw:32000
    python scripts/preview_betslip.py --file slip.yaml

A YAML file holds ``bet_type``, ``stake``, optional ``badges`` and a ``legs``
list of ``{match_id, prediction, odds}`` mappings.
"""
import argparse
import json
import sys
import os

import yaml

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.records import leg_from_record, to_record
from wagering.allocation import calculate_allocations, calculate_parlay_multiplier
from wagering.errors import describe
from wagering.models import BetType
from wagering.payouts import auto_bet_type, compute_payout


def parse_leg(text):
    """Parse ``match_id:prediction:odds``."""
    try:
        match_id, prediction, odds = text.split(":")
        return leg_from_record({"match_id": match_id, "prediction": prediction, "odds": odds})
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid leg '{text}': {e}")


def load_slip(path):
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    legs = [leg_from_record(leg) for leg in data.get("legs", [])]
    bet_type = BetType(data["bet_type"]) if data.get("bet_type") else None
    return bet_type, int(data.get("stake", 0)), legs, data.get("badges", [])


def build_preview(bet_type, stake, legs, badges):
    bet_type = bet_type or auto_bet_type(BetType.SINGLE, len(legs))
    result = compute_payout(bet_type, legs, stake, badges)
    preview = {
        "bet_type": bet_type.value,
        "stake": stake,
        "legs": len(legs),
        "payout": result.payout,
        "error": result.error.value if result.error else None,
    }
    if result.error:
        preview["message"] = describe(result.error)
        return preview

    preview["capped"] = result.capped
    if bet_type == BetType.SYSTEM_BET:
        preview["stake_per_leg"] = result.stake_per_leg
        preview["remainder"] = result.remainder
    if bet_type == BetType.PARLAY:
        multiplier = calculate_parlay_multiplier(len(legs))
        preview["multiplier"] = multiplier
        preview["allocations"] = to_record(calculate_allocations(stake, legs, multiplier))
    return preview


def main():
    parser = argparse.ArgumentParser(description="Preview a betslip payout")
    parser.add_argument("--file", help="YAML betslip description")
    parser.add_argument("--type", choices=[t.value for t in BetType], help="Bet type")
    parser.add_argument("--stake", type=int, default=0, help="Total stake in token units")
    parser.add_argument("--leg", type=parse_leg, action="append", default=[],
                        help="match_id:prediction:odds (repeatable)")
    parser.add_argument("--badge", type=int, action="append", default=[],
                        help="Team id of a held badge (repeatable)")
    args = parser.parse_args()

    if args.file:
        bet_type, stake, legs, badges = load_slip(args.file)
    else:
        bet_type = BetType(args.type) if args.type else None
        stake, legs, badges = args.stake, args.leg, args.badge

    preview = build_preview(bet_type, stake, legs, badges)
    print(json.dumps(preview, indent=2))
    sys.exit(0 if preview["error"] is None else 1)


if __name__ == "__main__":
    main()
