"""Print the liquidity pool state and, optionally, one LP's position.

Usage:
    python scripts/pool_report.py
    python scripts/pool_report.py --address 0xabc... --pool season_2024_25

Snapshots come from the indexer at INDEXER_URL (see .env).
"""
import argparse
import json
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import load_settings
from data.indexer_client import IndexerClient
from data.records import to_record
from monitoring.logger import setup_from_settings
from pool.liquidity import compute_pool_apy, compute_position, pool_invariant_violations


def main():
    parser = argparse.ArgumentParser(description="Liquidity pool report")
    parser.add_argument("--pool", help="Pool id (defaults to POOL_ID)")
    parser.add_argument("--address", help="LP address to report a position for")
    args = parser.parse_args()

    settings = load_settings()
    setup_from_settings(settings)

    client = IndexerClient(settings)
    pool = client.fetch_pool(args.pool)
    if pool is None:
        print(f"Pool {args.pool or settings.pool_id} unavailable from {settings.indexer_url}")
        sys.exit(1)

    report = {
        "pool": to_record(pool),
        "apy_bps": compute_pool_apy(pool, settings.season_length_days),
        "problems": pool_invariant_violations(pool),
    }
    if args.address:
        shares = client.fetch_shares(args.address, pool.pool_id)
        report["position"] = to_record(compute_position(pool, shares, args.address))

    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
