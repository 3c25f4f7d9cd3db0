from data.indexer_client import IndexerClient
from data.records import (
    betslip_from_record, match_from_record, pool_from_record, share_from_record, to_record,
)

__all__ = [
    "IndexerClient",
    "betslip_from_record",
    "match_from_record",
    "pool_from_record",
    "share_from_record",
    "to_record",
]
