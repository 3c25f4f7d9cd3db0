"""Stateful pool ledger: the single writer for one liquidity pool."""
import threading
import time
import uuid

from monitoring.logger import get_logger
from pool.liquidity import (
    compute_pool_apy,
    compute_position,
    deposit_liquidity,
    pool_invariant_violations,
    record_bet_placed,
    record_bet_settled,
    withdraw_liquidity,
    SEASON_LENGTH_DAYS,
    WithdrawalResult,
)
from wagering.errors import ErrorKind
from wagering.models import LiquidityPool, LPShare

logger = get_logger("pool_ledger")


class PoolLedger:
    """Holds the current pool snapshot and its LP share records.

    Every mutation reads the current totals, runs the pure pool function and
    writes the result back while holding one lock, so the share price can
    never be computed from stale totals.
    """

    def __init__(self, pool: LiquidityPool, share_records=(), season_days: int = SEASON_LENGTH_DAYS):
        self._pool = pool
        self._shares: dict[str, LPShare] = {r.share_id: r for r in share_records}
        self._season_days = season_days
        self._lock = threading.Lock()

    @property
    def pool(self) -> LiquidityPool:
        return self._pool

    @property
    def share_records(self) -> dict[str, LPShare]:
        return dict(self._shares)

    def shares_for(self, lp_address) -> list[LPShare]:
        return [r for r in self._shares.values() if r.lp_address == lp_address]

    def deposit(self, lp_address, amount, timestamp=None):
        """Deposit liquidity. Returns (DepositResult, new LPShare or None)."""
        with self._lock:
            result = deposit_liquidity(self._pool, amount)
            if not result.ok:
                logger.warning(f"[POOL] Deposit of {amount} by {lp_address} rejected: {result.error.value}")
                return result, None

            share = LPShare(
                share_id=f"share_{uuid.uuid4().hex[:8]}",
                lp_address=lp_address,
                shares=result.shares_to_mint,
                initial_deposit=amount,
                deposit_timestamp=int(timestamp if timestamp is not None else time.time()),
            )
            self._commit(result.updated_pool)
            self._shares[share.share_id] = share

        logger.info(
            f"[POOL] Deposit {amount} -> {result.shares_to_mint} shares ({share.share_id}) | "
            f"Liquidity: {self._pool.total_liquidity} Shares: {self._pool.total_shares}"
        )
        return result, share

    def withdraw(self, share_id, shares_to_burn) -> WithdrawalResult:
        """Burn shares from one share record.

        The minimum lock is checked against everything the record's address
        holds, and the payout must fit in the house balance.
        """
        with self._lock:
            record = self._shares.get(share_id)
            if record is None:
                return WithdrawalResult(error=ErrorKind.INSUFFICIENT_SHARES)

            address_shares = sum(r.shares for r in self.shares_for(record.lp_address))
            result = withdraw_liquidity(self._pool, record, shares_to_burn, address_shares)
            if result.ok and result.gross_amount > self._pool.house_balance:
                # Stakes in play are not withdrawable.
                result = WithdrawalResult(error=ErrorKind.INSUFFICIENT_LIQUIDITY)
            if not result.ok:
                logger.warning(
                    f"[POOL] Withdrawal of {shares_to_burn} shares from {share_id} rejected: "
                    f"{result.error.value}"
                )
                return result

            self._commit(result.updated_pool)
            self._shares[share_id] = result.updated_share

        logger.info(
            f"[POOL] Withdraw {shares_to_burn} shares from {share_id}: "
            f"net {result.net_amount} (fee {result.fee}) | Liquidity: {self._pool.total_liquidity}"
        )
        return result

    def book_stake(self, stake):
        """Add an accepted betslip stake to the pool."""
        with self._lock:
            update = record_bet_placed(self._pool, stake)
            if update.ok:
                self._commit(update.updated_pool)
            return update

    def book_settlement(self, stake, payout, protocol_fee=0, refund=0):
        """Pay a settled betslip out of the pool."""
        with self._lock:
            update = record_bet_settled(self._pool, stake, payout, protocol_fee, refund)
            if update.ok:
                self._commit(update.updated_pool)
            else:
                logger.error(
                    f"[POOL] Cannot pay {payout} (+{refund} refund, {protocol_fee} fee): "
                    f"{update.error.value} | House balance: {self._pool.house_balance}"
                )
            return update

    def position(self, lp_address):
        with self._lock:
            return compute_position(self._pool, self.shares_for(lp_address), lp_address)

    def apy_bps(self):
        return compute_pool_apy(self._pool, self._season_days)

    def _commit(self, pool):
        for problem in pool_invariant_violations(pool):
            logger.error(f"[POOL] Invariant violated after update: {problem}")
        self._pool = pool

    def get_summary(self):
        """Return pool state for heartbeat/monitoring."""
        pool = self._pool
        return {
            "pool_id": pool.pool_id,
            "total_liquidity": pool.total_liquidity,
            "total_shares": pool.total_shares,
            "house_balance": pool.house_balance,
            "total_bets_in_play": pool.total_bets_in_play,
            "total_collected": pool.total_collected,
            "total_paid_out": pool.total_paid_out,
            "protocol_revenue": pool.protocol_revenue,
            "is_active": pool.is_active,
            "apy_bps": self.apy_bps(),
            "share_records": len(self._shares),
        }
