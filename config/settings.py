"""Immutable engine configuration loaded from environment variables."""
import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    # Logging / monitoring
    log_level: str = "INFO"
    zmq_pub_port: int = 5555

    # Indexer (source of pool, share and match snapshots)
    indexer_url: str = "http://localhost:3000/api"
    indexer_timeout_seconds: float = 15.0
    indexer_cache_ttl_seconds: float = 30.0

    # Liquidity pool
    pool_id: str = "season_2024_25"
    pool_min_liquidity: int = 100_000
    season_length_days: int = 270

    # Risk caps (token units)
    min_bet: int = 100
    max_bet: int = 1_000_000
    max_payout_per_bet: int = 100_000
    max_round_payouts: int = 500_000


def load_settings() -> Settings:
    """Load settings from .env file and environment variables."""
    load_dotenv()

    min_bet = int(os.getenv("MIN_BET", "100"))
    max_bet = int(os.getenv("MAX_BET", "1000000"))
    if min_bet <= 0 or min_bet > max_bet:
        raise ValueError(f"Invalid bet limits: MIN_BET={min_bet} MAX_BET={max_bet}")

    season_length_days = int(os.getenv("SEASON_LENGTH_DAYS", "270"))
    if season_length_days <= 0:
        raise ValueError(f"SEASON_LENGTH_DAYS must be positive, got {season_length_days}")

    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        zmq_pub_port=int(os.getenv("ZMQ_PUB_PORT", "5555")),
        indexer_url=os.getenv("INDEXER_URL", "http://localhost:3000/api").rstrip("/"),
        indexer_timeout_seconds=float(os.getenv("INDEXER_TIMEOUT_SECONDS", "15")),
        indexer_cache_ttl_seconds=float(os.getenv("INDEXER_CACHE_TTL_SECONDS", "30")),
        pool_id=os.getenv("POOL_ID", "season_2024_25"),
        pool_min_liquidity=int(os.getenv("POOL_MIN_LIQUIDITY", "100000")),
        season_length_days=season_length_days,
        min_bet=min_bet,
        max_bet=max_bet,
        max_payout_per_bet=int(os.getenv("MAX_PAYOUT_PER_BET", "100000")),
        max_round_payouts=int(os.getenv("MAX_ROUND_PAYOUTS", "500000")),
    )
