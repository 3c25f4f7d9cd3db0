from desk.settlement_desk import RoundSettlement, SettlementDesk

__all__ = ["SettlementDesk", "RoundSettlement"]
