"""Storage: ledger-файл «день → секунды» с ротацией резервной копии."""

from .ledger import (
    COLLECT_WINDOW_DAYS,
    NO_DATA_SENTINEL,
    Ledger,
    LedgerConsumedError,
    LedgerError,
    LedgerFormatError,
    LedgerIOError,
    decode_ledger,
    encode_ledger,
)

__all__ = [
    "COLLECT_WINDOW_DAYS",
    "NO_DATA_SENTINEL",
    "Ledger",
    "LedgerError",
    "LedgerIOError",
    "LedgerFormatError",
    "LedgerConsumedError",
    "encode_ledger",
    "decode_ledger",
]
