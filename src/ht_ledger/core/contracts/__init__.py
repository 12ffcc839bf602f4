"""
Contract Validation Module

Модуль для валидации JSON контрактов на границах ht-ledger.
"""

from .validators import (
    ContractValidator,
    HistoryDataValidator,
    LedgerRecordsValidator,
    SchemaLoader,
    TodayPacketValidator,
    validate_history_data,
    validate_ledger_records,
    validate_today_packet,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "HistoryDataValidator",
    "TodayPacketValidator",
    "LedgerRecordsValidator",
    # Functions
    "validate_history_data",
    "validate_today_packet",
    "validate_ledger_records",
]
