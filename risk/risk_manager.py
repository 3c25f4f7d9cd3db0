"""Per-round payout ledger and the single writer that guards it."""
import threading
from dataclasses import dataclass, replace

from config.settings import Settings
from monitoring.logger import get_logger
from risk.caps import MAX_ROUND_PAYOUTS, RiskLimits
from wagering.errors import ErrorKind

logger = get_logger("risk_manager")


@dataclass(frozen=True)
class RoundLedger:
    """Cumulative payouts admitted for one resolution round."""
    round_id: str
    cap: int = MAX_ROUND_PAYOUTS
    total_payouts: int = 0
    settled_slip_ids: frozenset = frozenset()

    @property
    def headroom(self):
        return max(self.cap - self.total_payouts, 0)


def admit_payout(ledger, slip_id, payout):
    """Admit one settlement into the round.

    Returns ``(updated_ledger, error)``. On rejection the original ledger is
    returned unchanged.
    """
    if payout < 0:
        raise ValueError(f"Payout cannot be negative: {payout}")
    if slip_id in ledger.settled_slip_ids:
        return ledger, ErrorKind.ALREADY_SETTLED
    if ledger.total_payouts + payout > ledger.cap:
        return ledger, ErrorKind.ROUND_CAP_EXCEEDED

    updated = replace(
        ledger,
        total_payouts=ledger.total_payouts + payout,
        settled_slip_ids=ledger.settled_slip_ids | {slip_id},
    )
    return updated, None


def release_payout(ledger, slip_id, payout):
    """Undo an admission whose payout could not be paid out."""
    if slip_id not in ledger.settled_slip_ids:
        return ledger
    return replace(
        ledger,
        total_payouts=max(ledger.total_payouts - payout, 0),
        settled_slip_ids=ledger.settled_slip_ids - {slip_id},
    )


class RiskManager:
    """Owns one RoundLedger per round and applies admissions atomically."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._limits = RiskLimits.from_settings(settings)
        self._lock = threading.Lock()
        self._ledgers = {}       # round_id -> RoundLedger
        self._rejections = 0

    @property
    def limits(self):
        return self._limits

    def round_ledger(self, round_id):
        """Current snapshot of a round's ledger."""
        with self._lock:
            return self._ledger_for(round_id)

    def _ledger_for(self, round_id):
        ledger = self._ledgers.get(round_id)
        if ledger is None:
            ledger = RoundLedger(round_id=round_id, cap=self._limits.max_round_payouts)
            self._ledgers[round_id] = ledger
        return ledger

    def admit(self, round_id, slip_id, payout):
        """Read, admit and write back the round ledger in one step."""
        with self._lock:
            ledger, error = admit_payout(self._ledger_for(round_id), slip_id, payout)
            if error is not None:
                self._rejections += 1
                logger.warning(
                    f"Round {round_id}: rejected slip {slip_id} payout {payout} "
                    f"({error.value}, admitted {ledger.total_payouts}/{ledger.cap})"
                )
                return error
            self._ledgers[round_id] = ledger
            return None

    def release(self, round_id, slip_id, payout):
        """Return an admitted payout to the round headroom."""
        with self._lock:
            self._ledgers[round_id] = release_payout(self._ledger_for(round_id), slip_id, payout)

    def reset_round(self, round_id):
        """Drop a finished round's ledger. A new ledger starts at zero."""
        with self._lock:
            self._ledgers.pop(round_id, None)

    def get_risk_report(self):
        """Return current risk state as a dict."""
        with self._lock:
            return {
                "limits": {
                    "min_bet": self._limits.min_bet,
                    "max_bet": self._limits.max_bet,
                    "max_payout_per_bet": self._limits.max_payout_per_bet,
                    "max_round_payouts": self._limits.max_round_payouts,
                },
                "rounds": {
                    round_id: {
                        "total_payouts": ledger.total_payouts,
                        "headroom": ledger.headroom,
                        "settled_slips": len(ledger.settled_slip_ids),
                    }
                    for round_id, ledger in self._ledgers.items()
                },
                "rejections": self._rejections,
            }
