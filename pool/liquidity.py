"""Liquidity pool share accounting.

Pure functions over LiquidityPool and LPShare snapshots. Every operation
returns an updated copy of the pool; nothing here holds state.
"""
from dataclasses import dataclass, replace
from typing import Optional

from wagering.errors import ErrorKind
from wagering.models import LiquidityPool, LPPosition, LPShare
from wagering.odds import BPS

WITHDRAWAL_FEE_BPS = 50           # 0.5%
MINIMUM_LIQUIDITY_LOCK = 1000     # shares
SEASON_LENGTH_DAYS = 270
DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class DepositResult:
    shares_to_mint: int = 0
    updated_pool: Optional[LiquidityPool] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self):
        return self.error is None


@dataclass(frozen=True)
class WithdrawalResult:
    net_amount: int = 0
    fee: int = 0
    gross_amount: int = 0
    updated_pool: Optional[LiquidityPool] = None
    updated_share: Optional[LPShare] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self):
        return self.error is None


@dataclass(frozen=True)
class PoolUpdate:
    updated_pool: Optional[LiquidityPool] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self):
        return self.error is None


def shares_for_deposit(pool, amount):
    """Shares minted for ``amount`` at the pool's current share price."""
    if pool.total_shares == 0:
        return amount    # first depositor sets the 1:1 ratio
    if pool.total_liquidity == 0:
        return 0
    return amount * pool.total_shares // pool.total_liquidity


def share_value(pool, shares):
    """Token value of ``shares`` at the current share price."""
    if pool.total_shares == 0:
        return 0
    return shares * pool.total_liquidity // pool.total_shares


def create_pool(pool_id, min_liquidity, seed_amount):
    """Genesis pool seeded by the house. The seed mints shares 1:1."""
    if seed_amount <= 0 or seed_amount < min_liquidity:
        return DepositResult(error=ErrorKind.INVALID_DEPOSIT)
    empty = LiquidityPool(pool_id=pool_id, min_liquidity=min_liquidity, is_active=True)
    return _apply_deposit(empty, seed_amount, seed_amount)


def deposit_liquidity(pool, amount):
    """Mint LP shares for a deposit."""
    if not pool.is_active:
        return DepositResult(error=ErrorKind.POOL_INACTIVE)
    if amount <= 0:
        return DepositResult(error=ErrorKind.INVALID_DEPOSIT)

    shares = shares_for_deposit(pool, amount)
    if shares <= 0:
        return DepositResult(error=ErrorKind.INVALID_DEPOSIT)
    return _apply_deposit(pool, amount, shares)


def _apply_deposit(pool, amount, shares):
    updated = replace(
        pool,
        total_liquidity=pool.total_liquidity + amount,
        house_balance=pool.house_balance + amount,
        total_shares=pool.total_shares + shares,
    )
    return DepositResult(shares_to_mint=shares, updated_pool=updated)


def withdraw_liquidity(pool, share_record, shares_to_burn, address_shares=None):
    """Burn shares from one LPShare record and pay out their value less the fee.

    ``address_shares`` is everything the record's address holds across all its
    share records (defaults to this record alone). The address may exit
    completely but cannot be left holding fewer than MINIMUM_LIQUIDITY_LOCK
    shares. The fee is booked as protocol revenue.
    """
    if not pool.is_active:
        return WithdrawalResult(error=ErrorKind.POOL_INACTIVE)
    if shares_to_burn <= 0:
        return WithdrawalResult(error=ErrorKind.INVALID_WITHDRAWAL)
    if shares_to_burn > share_record.shares or shares_to_burn > pool.total_shares:
        return WithdrawalResult(error=ErrorKind.INSUFFICIENT_SHARES)

    if address_shares is None:
        address_shares = share_record.shares
    remaining = address_shares - shares_to_burn
    if 0 < remaining < MINIMUM_LIQUIDITY_LOCK:
        return WithdrawalResult(error=ErrorKind.BELOW_MINIMUM_LOCK)

    gross = share_value(pool, shares_to_burn)
    fee = gross * WITHDRAWAL_FEE_BPS // BPS
    net = gross - fee

    liquidity_left = pool.total_liquidity - gross
    if liquidity_left < pool.min_liquidity:
        return WithdrawalResult(error=ErrorKind.INSUFFICIENT_LIQUIDITY)

    updated_pool = replace(
        pool,
        total_liquidity=liquidity_left,
        house_balance=max(pool.house_balance - gross, 0),
        total_shares=pool.total_shares - shares_to_burn,
        protocol_revenue=pool.protocol_revenue + fee,
    )
    updated_share = replace(
        share_record,
        shares=share_record.shares - shares_to_burn,
        total_withdrawn=share_record.total_withdrawn + net,
    )
    return WithdrawalResult(
        net_amount=net,
        fee=fee,
        gross_amount=gross,
        updated_pool=updated_pool,
        updated_share=updated_share,
    )


def compute_position(pool, share_records, lp_address=None):
    """Aggregate an address's share records into one LPPosition."""
    if lp_address is None:
        lp_address = share_records[0].lp_address if share_records else ""
    records = [r for r in share_records if r.lp_address == lp_address]

    shares = sum(r.shares for r in records)
    initial_deposit = sum(r.initial_deposit for r in records)
    total_withdrawn = sum(r.total_withdrawn for r in records)

    current_value = share_value(pool, shares)
    unrealized = current_value - (initial_deposit - total_withdrawn)
    realized = total_withdrawn - initial_deposit if total_withdrawn > 0 else 0
    roi_bps = unrealized * BPS // initial_deposit if initial_deposit > 0 else 0

    return LPPosition(
        lp_address=lp_address,
        shares=shares,
        initial_deposit=initial_deposit,
        total_withdrawn=total_withdrawn,
        current_value=current_value,
        unrealized_profit=unrealized,
        realized_profit=realized,
        roi_bps=roi_bps,
        share_ids=tuple(r.share_id for r in records),
    )


def compute_pool_apy(pool, season_days=SEASON_LENGTH_DAYS):
    """Annualized yield in basis points from one season's realized results.

    A trailing approximation of net profit (collected minus paid out) over the
    current liquidity, scaled from a season to a year. It is not a projection
    and promises nothing about future returns.
    """
    if pool.total_liquidity <= 0:
        return 0
    net_profit = pool.total_collected - pool.total_paid_out
    return net_profit * DAYS_PER_YEAR * BPS // (pool.total_liquidity * season_days)


def record_bet_placed(pool, stake):
    """Book an accepted stake into the pool."""
    if not pool.is_active:
        return PoolUpdate(error=ErrorKind.POOL_INACTIVE)
    if stake <= 0:
        return PoolUpdate(error=ErrorKind.ZERO_STAKE)

    updated = replace(
        pool,
        total_collected=pool.total_collected + stake,
        total_bets_in_play=pool.total_bets_in_play + stake,
        total_liquidity=pool.total_liquidity + stake,
        house_balance=pool.house_balance + stake,
    )
    return PoolUpdate(updated_pool=updated)


def record_bet_settled(pool, stake, payout, protocol_fee=0, refund=0):
    """Release a settled stake from play and pay the winner, refund and protocol.

    Liquidity moves by the collected-minus-paid-minus-revenue rule, so the pool
    stays in balance with its counters.
    """
    if min(stake, payout, protocol_fee, refund) < 0:
        raise ValueError("Settlement amounts cannot be negative")

    paid = payout + refund
    outflow = paid + protocol_fee
    if outflow > pool.house_balance:
        return PoolUpdate(error=ErrorKind.INSUFFICIENT_LIQUIDITY)
    if pool.is_active and pool.house_balance - outflow < pool.min_liquidity:
        return PoolUpdate(error=ErrorKind.INSUFFICIENT_LIQUIDITY)

    updated = replace(
        pool,
        total_bets_in_play=max(pool.total_bets_in_play - stake, 0),
        total_paid_out=pool.total_paid_out + paid,
        protocol_revenue=pool.protocol_revenue + protocol_fee,
        total_liquidity=pool.total_liquidity - outflow,
        house_balance=pool.house_balance - outflow,
    )
    return PoolUpdate(updated_pool=updated)


def pool_invariant_violations(pool):
    """List broken pool invariants; empty when the pool is consistent."""
    problems = []
    if (pool.total_shares == 0) != (pool.total_liquidity == 0):
        problems.append("shares and liquidity must be zero together")
    if pool.is_active and pool.total_liquidity < pool.min_liquidity:
        problems.append("active pool below minimum liquidity")
    if pool.house_balance > pool.total_liquidity:
        problems.append("house balance exceeds total liquidity")
    return problems
