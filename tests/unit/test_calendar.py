"""
Тесты хаскитопианского календаря

Проверяет:
1. Биекцию (status, month) ↔ 0..9
2. Разбор и форматирование YYYY-[GL][ZNASF]-DD
3. Валидацию диапазонов HDate
"""

import pytest
from pydantic import ValidationError

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


class TestMonthBijection:
    """Тесты таблицы месяцев"""

    def test_calendar_constants(self) -> None:
        assert MONTHS_PER_YEAR == 10
        assert DAYS_PER_MONTH == 24
        assert DAYS_PER_YEAR == 240

    @pytest.mark.parametrize(
        "status,month,expected",
        [
            (MonthStatus.GREATER, Month.ZERO, 0),
            (MonthStatus.LESSER, Month.ZERO, 1),
            (MonthStatus.GREATER, Month.NIKTVIRIN, 2),
            (MonthStatus.LESSER, Month.NIKTVIRIN, 3),
            (MonthStatus.GREATER, Month.APRESS, 4),
            (MonthStatus.LESSER, Month.APRESS, 5),
            (MonthStatus.GREATER, Month.SMOSH, 6),
            (MonthStatus.LESSER, Month.SMOSH, 7),
            (MonthStatus.GREATER, Month.FUNNY, 8),
            (MonthStatus.LESSER, Month.FUNNY, 9),
        ],
    )
    def test_month_index_table(self, status, month, expected) -> None:
        """Таблица месяцев воспроизводится точно"""
        assert month_index(status, month) == expected
        assert month_from_index(expected) == (status, month)

    @pytest.mark.parametrize("index", [-1, 10, 255])
    def test_month_from_index_out_of_range(self, index) -> None:
        with pytest.raises(ValueError, match="invalid month index"):
            month_from_index(index)


class TestParseDate:
    """Тесты parse_date"""

    def test_parse_basic(self) -> None:
        date = parse_date("0012-LN-07")
        assert date == HDate(year=12, status=MonthStatus.LESSER, month=Month.NIKTVIRIN, day=7)

    def test_parse_lowercase_and_whitespace(self) -> None:
        date = parse_date("  3-gf-5\n")
        assert date.year == 3
        assert date.status is MonthStatus.GREATER
        assert date.month is Month.FUNNY
        assert date.day == 5

    def test_parse_long_year(self) -> None:
        assert parse_date("123456-GZ-00").year == 123456

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "0012-XN-07",  # неизвестная полярность
            "0012-GQ-07",  # неизвестный месяц
            "0012-G-07",
            "0012-GN-007",
            "12/GN/07",
            "-1-GN-07",
        ],
    )
    def test_parse_malformed(self, text) -> None:
        with pytest.raises(ValueError):
            parse_date(text)

    def test_parse_day_out_of_range(self) -> None:
        """День 24 не существует (дни 0..23)"""
        with pytest.raises(ValueError):
            parse_date("0001-GZ-24")


class TestFormatDate:
    """Тесты format_date"""

    def test_format_pads_year_and_day(self) -> None:
        date = HDate(year=5, status=MonthStatus.GREATER, month=Month.SMOSH, day=3)
        assert format_date(date) == "0005-GS-03"
        assert str(date) == "0005-GS-03"

    def test_format_parse_inverse(self) -> None:
        for text in ["0000-GZ-00", "0001-LF-23", "9999-GA-12"]:
            assert format_date(parse_date(text)) == text


class TestHDateModel:
    """Тесты валидации HDate"""

    def test_negative_year_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HDate(year=-1, status=MonthStatus.GREATER, month=Month.ZERO, day=0)

    def test_day_range(self) -> None:
        HDate(year=0, status=MonthStatus.GREATER, month=Month.ZERO, day=23)
        with pytest.raises(ValidationError):
            HDate(year=0, status=MonthStatus.GREATER, month=Month.ZERO, day=24)

    def test_immutable(self) -> None:
        date = parse_date("0001-GZ-01")
        with pytest.raises(ValidationError):
            date.day = 2

    def test_month_index_property(self) -> None:
        assert parse_date("0001-LS-01").month_index == 7
        assert HDate.from_month_index(1, 7, 1) == parse_date("0001-LS-01")
