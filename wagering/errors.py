"""Typed rejection reasons returned by the settlement engine."""
from enum import Enum


class ErrorKind(Enum):
    INVALID_BETSLIP = "InvalidBetslip"
    DUPLICATE_LEG = "DuplicateLeg"
    TOO_MANY_LEGS = "TooManyLegs"
    ZERO_STAKE = "ZeroStake"
    STAKE_OUT_OF_RANGE = "StakeOutOfRange"
    PAYOUT_CAP_EXCEEDED = "PayoutCapExceeded"   # informational, payout is capped
    ROUND_CAP_EXCEEDED = "RoundCapExceeded"
    INVALID_DEPOSIT = "InvalidDeposit"
    INVALID_WITHDRAWAL = "InvalidWithdrawal"
    INSUFFICIENT_SHARES = "InsufficientShares"
    INSUFFICIENT_LIQUIDITY = "InsufficientLiquidity"
    BELOW_MINIMUM_LOCK = "BelowMinimumLock"
    POOL_INACTIVE = "PoolInactive"
    INVALID_ODDS = "InvalidOdds"
    INVALID_BADGE = "InvalidBadge"
    UNRESOLVED_LEG = "UnresolvedLeg"
    ALREADY_SETTLED = "AlreadySettled"


_MESSAGES = {
    ErrorKind.INVALID_BETSLIP: "Betslip legs do not match the bet type",
    ErrorKind.DUPLICATE_LEG: "Each match may appear only once per betslip",
    ErrorKind.TOO_MANY_LEGS: "Maximum {max_legs} bets per betslip",
    ErrorKind.ZERO_STAKE: "Stake must be greater than zero",
    ErrorKind.STAKE_OUT_OF_RANGE: "Stake must be between {min_bet} and {max_bet}",
    ErrorKind.PAYOUT_CAP_EXCEEDED: "Payout capped at {max_payout}",
    ErrorKind.ROUND_CAP_EXCEEDED: "Round payouts would exceed {max_round_payouts}",
    ErrorKind.INVALID_DEPOSIT: "Deposit amount must mint at least one share",
    ErrorKind.INVALID_WITHDRAWAL: "Shares to burn must be positive",
    ErrorKind.INSUFFICIENT_SHARES: "Share record does not hold that many shares",
    ErrorKind.INSUFFICIENT_LIQUIDITY: "Pool liquidity cannot cover this operation",
    ErrorKind.BELOW_MINIMUM_LOCK: "Minimum {min_lock} shares must remain locked",
    ErrorKind.POOL_INACTIVE: "Liquidity pool is not active",
    ErrorKind.INVALID_ODDS: "Odds are outside the allowed range or differ from locked odds",
    ErrorKind.INVALID_BADGE: "Badge team ids must be between 0 and 19",
    ErrorKind.UNRESOLVED_LEG: "Not every match in the betslip has a result",
    ErrorKind.ALREADY_SETTLED: "Betslip is already settled",
}


def describe(kind, **limits):
    """Human readable message for an error kind.

    Placeholders are filled from ``limits``; missing values fall back to the
    contract constants.
    """
    from risk.caps import (
        MAX_BET, MAX_BETS_PER_SLIP, MAX_PAYOUT_PER_BET, MAX_ROUND_PAYOUTS, MIN_BET,
    )
    from pool.liquidity import MINIMUM_LIQUIDITY_LOCK

    values = {
        "min_bet": MIN_BET,
        "max_bet": MAX_BET,
        "max_legs": MAX_BETS_PER_SLIP,
        "max_payout": MAX_PAYOUT_PER_BET,
        "max_round_payouts": MAX_ROUND_PAYOUTS,
        "min_lock": MINIMUM_LIQUIDITY_LOCK,
    }
    values.update(limits)
    return _MESSAGES[kind].format(**values)
