"""Settlement desk: ties placement, round admission and pool accounting together."""
import threading
import time
from dataclasses import dataclass, field

from config.settings import Settings
from data.records import to_record
from monitoring.logger import get_logger
from monitoring.zmq_publisher import ZMQPublisher
from pool.ledger import PoolLedger
from pool.liquidity import record_bet_settled
from risk.caps import RiskLimits
from risk.risk_manager import RiskManager
from wagering.errors import ErrorKind, describe
from wagering.settlement import PlacementResult, build_betslip, settle_betslip

logger = get_logger("settlement_desk")


@dataclass
class RoundSettlement:
    round_id: str
    settled: list = field(default_factory=list)      # SettlementResult
    rejected: dict = field(default_factory=dict)     # slip_id -> ErrorKind
    pending: list = field(default_factory=list)      # slip_ids still waiting on results

    @property
    def total_payout(self):
        return sum(r.payout for r in self.settled)


class SettlementDesk:
    """Accepts betslips, settles them per round and keeps the pool in step."""

    def __init__(self, settings: Settings, pool_ledger: PoolLedger,
                 risk_manager: RiskManager = None, publisher=None):
        self._settings = settings
        self._limits = RiskLimits.from_settings(settings)
        self._pool_ledger = pool_ledger
        self._risk_manager = risk_manager or RiskManager(settings)
        self._publisher = publisher or ZMQPublisher(settings.zmq_pub_port)

        self._lock = threading.Lock()
        self._open_slips = {}        # slip_id -> Betslip

    @property
    def open_slips(self):
        return dict(self._open_slips)

    def place(self, slip_id, bettor_address, bet_type, legs, total_stake,
              badges=(), matches=None, timestamp=None) -> PlacementResult:
        """Validate a betslip, book its stake into the pool and keep it open."""
        with self._lock:
            if slip_id in self._open_slips:
                return PlacementResult(error=ErrorKind.INVALID_BETSLIP)

            placement = build_betslip(
                slip_id, bettor_address, bet_type, legs, total_stake,
                badges=badges, matches=matches, limits=self._limits,
                timestamp=int(timestamp if timestamp is not None else time.time()),
            )
            if not placement.ok:
                logger.info(
                    f"Betslip {slip_id} rejected: {describe(placement.error, **self._limit_values())}",
                    extra={"extra_data": {"slip_id": slip_id, "error": placement.error.value}},
                )
                return placement

            booked = self._pool_ledger.book_stake(total_stake)
            if not booked.ok:
                logger.warning(f"Betslip {slip_id} rejected by pool: {booked.error.value}")
                return PlacementResult(preview=placement.preview, error=booked.error)

            self._open_slips[slip_id] = placement.betslip

        slip = placement.betslip
        if placement.preview.capped:
            logger.info(f"Betslip {slip_id} payout capped at {self._limits.max_payout_per_bet}")
        logger.info(
            f"Accepted {slip.bet_type.value} {slip_id}: stake {slip.total_stake}, "
            f"potential payout {slip.potential_payout}"
        )
        self._publisher.publish("bet", to_record(slip))
        return placement

    def settle_round(self, round_id, results) -> RoundSettlement:
        """Settle every open betslip whose matches all have results.

        Admission against the round cap happens before the pool pays out. A
        slip refused by the cap stays open for a later round.
        """
        outcome = RoundSettlement(round_id=round_id)

        with self._lock:
            for slip_id, slip in list(self._open_slips.items()):
                result = settle_betslip(slip, results, self._limits.max_payout_per_bet)
                if result.error == ErrorKind.UNRESOLVED_LEG:
                    outcome.pending.append(slip_id)
                    continue
                if not result.ok:
                    outcome.rejected[slip_id] = result.error
                    continue

                error = self._settle_one(round_id, slip, result)
                if error is not None:
                    outcome.rejected[slip_id] = error
                    continue

                del self._open_slips[slip_id]
                outcome.settled.append(result)

        logger.info(
            f"Round {round_id}: settled {len(outcome.settled)} slips, "
            f"paid {outcome.total_payout}, rejected {len(outcome.rejected)}, "
            f"pending {len(outcome.pending)}"
        )
        self._publisher.publish("pool", self._pool_ledger.get_summary())
        return outcome

    def _settle_one(self, round_id, slip, result):
        # Dry run against the current pool before touching the round ledger.
        check = record_bet_settled(
            self._pool_ledger.pool, slip.total_stake, result.payout,
            result.protocol_fee, result.refund,
        )
        if not check.ok:
            return check.error

        error = self._risk_manager.admit(round_id, slip.slip_id, result.payout)
        if error is not None:
            return error

        booked = self._pool_ledger.book_settlement(
            slip.total_stake, result.payout, result.protocol_fee, result.refund
        )
        if not booked.ok:
            self._risk_manager.release(round_id, slip.slip_id, result.payout)
            return booked.error

        self._publisher.publish("settlement", {
            "round_id": round_id,
            "slip_id": slip.slip_id,
            "bettor": slip.bettor_address,
            "bet_type": slip.bet_type.value,
            "payout": result.payout,
            "refund": result.refund,
            "protocol_fee": result.protocol_fee,
            "won_legs": [leg.match_id for leg in result.won_legs],
        })
        return None

    def deposit(self, lp_address, amount, timestamp=None):
        result, share = self._pool_ledger.deposit(lp_address, amount, timestamp)
        if result.ok:
            self._publisher.publish("pool", {"event": "deposit", "share": to_record(share)})
        return result, share

    def withdraw(self, share_id, shares_to_burn):
        result = self._pool_ledger.withdraw(share_id, shares_to_burn)
        if result.ok:
            self._publisher.publish("pool", {
                "event": "withdraw",
                "share_id": share_id,
                "net_amount": result.net_amount,
                "fee": result.fee,
            })
        return result

    def _limit_values(self):
        return {
            "min_bet": self._limits.min_bet,
            "max_bet": self._limits.max_bet,
            "max_payout": self._limits.max_payout_per_bet,
            "max_round_payouts": self._limits.max_round_payouts,
        }

    def heartbeat(self):
        """Publish and return the desk state."""
        state = {
            "timestamp": time.time(),
            "open_slips": len(self._open_slips),
            "risk": self._risk_manager.get_risk_report(),
            "pool": self._pool_ledger.get_summary(),
        }
        self._publisher.publish("heartbeat", state)
        return state

    def close(self):
        """Publish a final report and release the publisher."""
        logger.info(f"Final risk report: {self._risk_manager.get_risk_report()}")
        self._publisher.close()
