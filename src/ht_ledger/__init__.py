"""
ht-ledger: durable day-indexed ledger of seconds worked in Huskitopian time.

Public API:
  - calendar and LinearDay value types from `ht_ledger.core.domain`
  - the ledger store from `ht_ledger.storage`
"""

from ht_ledger.core.domain import HDate, LedgerRecord, LinearDay, format_date, parse_date
from ht_ledger.storage import Ledger, LedgerError

__version__ = "0.1.0"

__all__ = [
    "HDate",
    "LinearDay",
    "LedgerRecord",
    "Ledger",
    "LedgerError",
    "parse_date",
    "format_date",
]
