"""
Calendar: Хаскитопианский гражданский календарь

Фиксированная схема:
- 5 базовых месяцев × 2 состояния (Greater/Lesser) = 10 месяцев в году
- 24 дня в каждом месяце (дни нумеруются с 0)
- без високосной логики и месяцев переменной длины

Текстовый формат даты: YYYY-[G|L][Z|N|A|S|F]-DD (например, 0012-LN-07).
"""

import re
from enum import Enum
from typing import Final

from pydantic import BaseModel, Field


# =============================================================================
# КОНСТАНТЫ КАЛЕНДАРЯ
# =============================================================================

MONTHS_PER_YEAR: Final[int] = 10
DAYS_PER_MONTH: Final[int] = 24
DAYS_PER_YEAR: Final[int] = MONTHS_PER_YEAR * DAYS_PER_MONTH


# =============================================================================
# ENUMS
# =============================================================================


class MonthStatus(str, Enum):
    """Полярность месяца"""

    GREATER = "G"
    LESSER = "L"


class Month(str, Enum):
    """Базовый месяц (порядок объявления = порядок в году)"""

    ZERO = "Z"
    NIKTVIRIN = "N"
    APRESS = "A"
    SMOSH = "S"
    FUNNY = "F"


# Биекция (status, month) ↔ 0..9, по возрастанию внутри года
_MONTH_ORDER: Final[tuple[tuple[MonthStatus, Month], ...]] = tuple(
    (status, month)
    for month in Month
    for status in (MonthStatus.GREATER, MonthStatus.LESSER)
)
_MONTH_INDEX: Final[dict[tuple[MonthStatus, Month], int]] = {
    pair: index for index, pair in enumerate(_MONTH_ORDER)
}


def month_index(status: MonthStatus, month: Month) -> int:
    """
    Порядковый номер месяца в году.

    (G, Zero)=0, (L, Zero)=1, (G, Niktvirin)=2, ... (L, Funny)=9

    Args:
        status: Полярность месяца
        month: Базовый месяц

    Returns:
        Индекс 0..9
    """
    return _MONTH_INDEX[(MonthStatus(status), Month(month))]


def month_from_index(index: int) -> tuple[MonthStatus, Month]:
    """
    Обратная биекция: индекс 0..9 → (status, month).

    Raises:
        ValueError: Если индекс вне диапазона 0..9
    """
    if not 0 <= index < MONTHS_PER_YEAR:
        raise ValueError(f"invalid month index {index}, expected 0..{MONTHS_PER_YEAR - 1}")
    return _MONTH_ORDER[index]


# =============================================================================
# HDATE MODEL
# =============================================================================


class HDate(BaseModel):
    """
    Гражданская дата хаскитопианского календаря.

    Immutable модель (frozen=True): любые вычисления над датами идут через
    LinearDay и возвращают новый экземпляр.
    """

    year: int = Field(..., ge=0, description="Год (от начала хаскитопианского времени)")
    status: MonthStatus = Field(..., description="Полярность месяца (G/L)")
    month: Month = Field(..., description="Базовый месяц")
    day: int = Field(..., ge=0, lt=DAYS_PER_MONTH, description="День месяца (0..23)")

    model_config = {"frozen": True}

    @property
    def month_index(self) -> int:
        """Индекс месяца в году (0..9)"""
        return month_index(self.status, self.month)

    @classmethod
    def from_month_index(cls, year: int, index: int, day: int) -> "HDate":
        status, month = month_from_index(index)
        return cls(year=year, status=status, month=month, day=day)

    def __str__(self) -> str:
        return format_date(self)


# =============================================================================
# PARSE / FORMAT
# =============================================================================

_DATE_RE: Final = re.compile(r"^(\d+)-([GL])([ZNASF])-(\d{1,2})$", re.IGNORECASE)


def parse_date(text: str) -> HDate:
    """
    Разбор строки формата YYYY-[G|L][Z|N|A|S|F]-DD.

    Args:
        text: Строка даты (регистр букв не важен)

    Returns:
        HDate

    Raises:
        ValueError: Если строка не соответствует формату или день вне 0..23
    """
    match = _DATE_RE.match(text.strip())
    if match is None:
        raise ValueError(f"invalid date {text!r}, expected YYYY-[GL][ZNASF]-DD")

    year, status, month, day = match.groups()
    return HDate(
        year=int(year),
        status=MonthStatus(status.upper()),
        month=Month(month.upper()),
        day=int(day),
    )


def format_date(date: HDate) -> str:
    """Каноническое представление: год 4 цифры, день 2 цифры (0012-LN-07)"""
    return f"{date.year:04d}-{date.status.value}{date.month.value}-{date.day:02d}"
