"""Fetch pool, LP share and match snapshots from the indexer API."""
import time

import requests

from config.settings import Settings
from data.records import match_from_record, pool_from_record, share_from_record
from monitoring.logger import get_logger

logger = get_logger("indexer_client")


class IndexerClient:
    """Read-only snapshot source. Results are cached for a short TTL.

    On a failed request the last good snapshot is returned (or None / empty
    list when nothing was fetched yet); the engine never sees partial data.
    """

    def __init__(self, settings: Settings):
        self._base_url = settings.indexer_url.rstrip("/")
        self._timeout = settings.indexer_timeout_seconds
        self._cache_ttl = settings.indexer_cache_ttl_seconds
        self._pool_id = settings.pool_id
        self._session = requests.Session()
        self._cache = {}    # key -> (fetched_at, value)

    def _get(self, path, params):
        resp = self._session.get(
            f"{self._base_url}/{path}", params=params, timeout=self._timeout
        )
        resp.raise_for_status()
        return resp.json()

    def _cached(self, key, fetch, default):
        now = time.time()
        hit = self._cache.get(key)
        if hit and (now - hit[0]) < self._cache_ttl:
            return hit[1]

        try:
            value = fetch()
        except (requests.RequestException, ValueError, KeyError) as e:
            logger.warning(f"Indexer fetch {key[0]} failed: {e}")
            return hit[1] if hit else default

        self._cache[key] = (now, value)
        return value

    def fetch_pool(self, pool_id=None):
        """Current LiquidityPool snapshot, or None."""
        pool_id = pool_id or self._pool_id
        return self._cached(
            ("pool", pool_id),
            lambda: pool_from_record(self._get("liquidity-pool", {"id": pool_id})),
            None,
        )

    def fetch_shares(self, lp_address, pool_id=None):
        """All LPShare records the address holds in the pool."""
        pool_id = pool_id or self._pool_id
        if not lp_address:
            return []
        return self._cached(
            ("shares", pool_id, lp_address),
            lambda: [
                share_from_record(r)
                for r in self._get("lp-shares", {"address": lp_address, "pool": pool_id})
            ],
            [],
        )

    def fetch_matches(self, season_id, turn):
        """Match snapshots for one turn of a season."""
        return self._cached(
            ("matches", season_id, turn),
            lambda: [
                match_from_record(r)
                for r in self._get("matches", {"season": season_id, "turn": turn})
            ],
            [],
        )

    def invalidate(self):
        """Drop every cached snapshot."""
        self._cache.clear()
