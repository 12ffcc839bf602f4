"""
LinearDay: Линейный счётчик дней для ключей ledger

Двухлимбовый беззнаковый счётчик (low, high), каждый лимб по LIMB_BITS бит,
арифметика по модулю 2^LIMB_BITS (wrap-around, без исключений при переполнении).

Инварианты:
- порядок лексикографический: сначала high, затем low
- перенос/заём распространяется ровно на один лимб
- переполнение high при сложении не обрабатывается
- to_calendar_date() использует только low, high игнорируется

Формат совместим с уже сохранёнными ledger-файлами: менять семантику нельзя.
"""

from typing import Final

from pydantic import BaseModel, Field

from .calendar import DAYS_PER_MONTH, DAYS_PER_YEAR, HDate


# =============================================================================
# ПАРАМЕТРЫ ЛИМБОВ
# =============================================================================

LIMB_BITS: Final[int] = 128
LIMB_MAX: Final[int] = (1 << LIMB_BITS) - 1


class LinearDay(BaseModel):
    """
    Количество дней от начала хаскитопианского времени.

    Immutable модель (frozen=True). Все операции возвращают новый экземпляр.
    """

    low: int = Field(0, ge=0, le=LIMB_MAX, description="Младший лимб")
    high: int = Field(0, ge=0, le=LIMB_MAX, description="Старший лимб")

    model_config = {"frozen": True}

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def add(self, other: "LinearDay") -> "LinearDay":
        """
        Сложение с переносом из low в high.

        Перенос определяется по факту wrap-around: low_sum < self.low.
        """
        low = (self.low + other.low) & LIMB_MAX
        high = self.high
        if low < self.low:
            high = (high + 1) & LIMB_MAX
        high = (high + other.high) & LIMB_MAX
        return LinearDay(low=low, high=high)

    def subtract(self, other: "LinearDay") -> "LinearDay":
        """
        Вычитание с заёмом из high.

        Если other.low > self.low, занимаем единицу из high (wrap),
        low вычисляется как (self.low - other.low) mod 2^LIMB_BITS.
        Для любых a, b: (a + b) - b == a и (a - b) + b == a.
        """
        high = self.high
        if other.low > self.low:
            high = (high - 1) & LIMB_MAX
        low = (self.low - other.low) & LIMB_MAX
        high = (high - other.high) & LIMB_MAX
        return LinearDay(low=low, high=high)

    def __add__(self, other: "LinearDay") -> "LinearDay":
        if not isinstance(other, LinearDay):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "LinearDay") -> "LinearDay":
        if not isinstance(other, LinearDay):
            return NotImplemented
        return self.subtract(other)

    # -------------------------------------------------------------------------
    # Порядок
    # -------------------------------------------------------------------------

    def as_tuple(self) -> tuple[int, int]:
        """Ключ сравнения (high, low)"""
        return (self.high, self.low)

    def __lt__(self, other: "LinearDay") -> bool:
        if not isinstance(other, LinearDay):
            return NotImplemented
        return self.as_tuple() < other.as_tuple()

    def __le__(self, other: "LinearDay") -> bool:
        if not isinstance(other, LinearDay):
            return NotImplemented
        return self.as_tuple() <= other.as_tuple()

    def __gt__(self, other: "LinearDay") -> bool:
        if not isinstance(other, LinearDay):
            return NotImplemented
        return self.as_tuple() > other.as_tuple()

    def __ge__(self, other: "LinearDay") -> bool:
        if not isinstance(other, LinearDay):
            return NotImplemented
        return self.as_tuple() >= other.as_tuple()

    # -------------------------------------------------------------------------
    # Календарь
    # -------------------------------------------------------------------------

    @classmethod
    def from_calendar_date(cls, date: HDate) -> "LinearDay":
        """
        Конверсия гражданской даты в линейный день.

        low = year * 240 + month_index * 24 + day, high = 0

        Raises:
            ValueError: Если счёт дней не помещается в low
        """
        days = date.year * DAYS_PER_YEAR + date.month_index * DAYS_PER_MONTH + date.day
        if days > LIMB_MAX:
            raise ValueError(f"date {date} is out of LinearDay range")
        return cls(low=days, high=0)

    def to_calendar_date(self) -> HDate:
        """
        Обратная конверсия в гражданскую дату.

        Используется только low; high игнорируется.
        """
        years, remainder = divmod(self.low, DAYS_PER_YEAR)
        months, day = divmod(remainder, DAYS_PER_MONTH)
        return HDate.from_month_index(years, months, day)


ONE_DAY: Final[LinearDay] = LinearDay(low=1, high=0)


def from_calendar_date(date: HDate) -> LinearDay:
    """Функциональный алиас LinearDay.from_calendar_date"""
    return LinearDay.from_calendar_date(date)


def to_calendar_date(day: LinearDay) -> HDate:
    """Функциональный алиас LinearDay.to_calendar_date"""
    return day.to_calendar_date()
