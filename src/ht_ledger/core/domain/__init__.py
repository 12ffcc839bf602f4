"""
Domain models and value objects.

Contains the Huskitopian calendar, the LinearDay ledger key and LedgerRecord.
"""

from ht_ledger.core.domain.calendar import (
    DAYS_PER_MONTH,
    DAYS_PER_YEAR,
    MONTHS_PER_YEAR,
    HDate,
    Month,
    MonthStatus,
    format_date,
    month_from_index,
    month_index,
    parse_date,
)
from ht_ledger.core.domain.linear_day import (
    LIMB_BITS,
    LIMB_MAX,
    ONE_DAY,
    LinearDay,
    from_calendar_date,
    to_calendar_date,
)
from ht_ledger.core.domain.record import (
    LedgerRecord,
    records_to_json,
    records_to_payload,
)

__all__ = [
    # Calendar
    "MONTHS_PER_YEAR",
    "DAYS_PER_MONTH",
    "DAYS_PER_YEAR",
    "HDate",
    "Month",
    "MonthStatus",
    "month_index",
    "month_from_index",
    "parse_date",
    "format_date",
    # LinearDay
    "LIMB_BITS",
    "LIMB_MAX",
    "ONE_DAY",
    "LinearDay",
    "from_calendar_date",
    "to_calendar_date",
    # LedgerRecord
    "LedgerRecord",
    "records_to_json",
    "records_to_payload",
]
