from pool.ledger import PoolLedger
from pool.liquidity import (
    compute_pool_apy, compute_position, create_pool, deposit_liquidity, withdraw_liquidity,
)

__all__ = [
    "PoolLedger", "create_pool", "deposit_liquidity", "withdraw_liquidity",
    "compute_position", "compute_pool_apy",
]
