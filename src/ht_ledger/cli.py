"""ht-ledger: хаскитопианский ledger отработанных секунд.

Usage:
    ht-ledger -r                  # записать историю с time-серверов в ledger
    ht-ledger -p YYYY-[GL][ZNASF]-DD   # вывести 24 дня, заканчивая датой, в JSON
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from ht_ledger.config import LedgerConfig
from ht_ledger.core.contracts import validate_ledger_records
from ht_ledger.core.domain.calendar import HDate, parse_date
from ht_ledger.core.domain.linear_day import LinearDay
from ht_ledger.core.domain.record import records_to_json, records_to_payload
from ht_ledger.fetch import TimeServerError, capture
from ht_ledger.storage import Ledger, LedgerError


logger = logging.getLogger(__name__)


def date_argument(text: str) -> HDate:
    """argparse type: ошибка разбора или дата вне диапазона LinearDay → usage error"""
    try:
        date = parse_date(text)
        LinearDay.from_calendar_date(date)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    return date


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ht-ledger",
        description="huskitopian ledger program",
    )
    commands = parser.add_mutually_exclusive_group(required=True)
    commands.add_argument(
        "-r", "--record",
        action="store_true",
        help="records from time server into ledger",
    )
    commands.add_argument(
        "-p", "--print",
        dest="print_date",
        metavar="YYYY-[GL][ZNASF]-DD",
        type=date_argument,
        help="prints ledger",
    )
    parser.add_argument(
        "--ledger-dir",
        metavar="PATH",
        help="directory holding ledger.bin and ledger.bak (default: $HT_LEDGER_DIR or /opt/ht_ledger)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def record(config: LedgerConfig) -> int:
    """Загрузка ledger, захват истории, импорт, сохранение.

    Returns:
        Количество записанных дней
    """
    ledger = Ledger.load(config)
    history, today = capture(config)
    written = ledger.import_history(history.last_ten_seconds_per_day, today.to_hdate())
    ledger.save()
    return written


def print_ledger(config: LedgerConfig, day: HDate) -> str:
    """JSON-массив записей collect(day)"""
    ledger = Ledger.load(config)
    records = ledger.collect(day)
    validate_ledger_records(records_to_payload(records))
    return records_to_json(records)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = LedgerConfig.from_env()
    except ValueError as e:
        parser.error(str(e))
    if args.ledger_dir:
        config = config.with_data_dir(args.ledger_dir)

    try:
        if args.record:
            print("recording...")
            written = record(config)
            logger.info("recorded %d day(s)", written)
            print("done!")
        else:
            print(print_ledger(config, args.print_date))
    except (LedgerError, TimeServerError) as e:
        logger.debug("fatal error", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
