"""
Ledger: долговременное хранилище «день → отработанные секунды»

Операции:
1. load(): чтение ledger-файла (нет файла → пустой ledger)
2. import_history(): слияние истории, привязанной к «сегодня − 1»
3. collect(): окно из 24 последних дней, заканчивающееся на запрошенной дате
4. save(): резервная копия ledger.bak, затем запись ledger.bin (поглощающая операция)

Формат файла: MessagePack, совместим с прежними файлами:
- верхний уровень: массив из одного элемента [day_seconds]
- day_seconds: map, ключ = [low, high], значение = секунды
- каждое 128-битное беззнаковое число = bin из 16 байт big-endian

Ошибки:
- отсутствие файла при load и отсутствие исходника копии при save: норма (первый запуск)
- любые другие ошибки ввода-вывода → LedgerIOError
- повреждённый или несовместимый формат → LedgerFormatError
"""

import logging
import os
import shutil
from typing import Any, Dict, Final, Iterable, Iterator, Optional

import msgpack

from ht_ledger.config import LedgerConfig
from ht_ledger.core.domain.calendar import HDate, format_date
from ht_ledger.core.domain.linear_day import LIMB_MAX, ONE_DAY, LinearDay
from ht_ledger.core.domain.record import LedgerRecord


logger = logging.getLogger(__name__)


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Размер окна collect() (дней), не настраивается
COLLECT_WINDOW_DAYS: Final[int] = 24

# Значение истории «нет данных за день»
NO_DATA_SENTINEL: Final[int] = 0

_U128_BYTES: Final[int] = 16


# =============================================================================
# EXCEPTIONS
# =============================================================================


class LedgerError(Exception):
    """Базовая ошибка ledger. Для CLI любая LedgerError фатальна."""


class LedgerIOError(LedgerError):
    """Ошибка чтения/записи/копирования ledger-файла (кроме «файла нет»)."""


class LedgerFormatError(LedgerError):
    """Ledger-файл повреждён или записан в несовместимом формате."""


class LedgerConsumedError(LedgerError):
    """Операция над ledger после save(): экземпляр больше не используется."""


# =============================================================================
# CODEC
# =============================================================================


def _encode_u128(value: int) -> bytes:
    return value.to_bytes(_U128_BYTES, "big")


def _decode_u128(raw: Any, field: str) -> int:
    """bin(16) big-endian или обычное msgpack-целое → int"""
    if isinstance(raw, bool):
        raise LedgerFormatError(f"{field}: expected unsigned integer, got bool")
    if isinstance(raw, int):
        if not 0 <= raw <= LIMB_MAX:
            raise LedgerFormatError(f"{field}: value {raw} out of u128 range")
        return raw
    if isinstance(raw, (bytes, bytearray)):
        if len(raw) != _U128_BYTES:
            raise LedgerFormatError(
                f"{field}: expected {_U128_BYTES}-byte integer, got {len(raw)} bytes"
            )
        return int.from_bytes(raw, "big")
    raise LedgerFormatError(f"{field}: expected unsigned integer, got {type(raw).__name__}")


def _check_seconds(seconds: int) -> None:
    """Секунды хранятся как u128: 0..LIMB_MAX"""
    if seconds < 0:
        raise ValueError(f"seconds must be non-negative, got {seconds}")
    if seconds > LIMB_MAX:
        raise ValueError(f"seconds {seconds} exceeds u128 range")


def encode_ledger(day_seconds: Dict[LinearDay, int]) -> bytes:
    """
    Сериализация mapping в байты ledger-файла.

    Ключи пишутся по возрастанию LinearDay.
    """
    payload = {
        (_encode_u128(day.low), _encode_u128(day.high)): _encode_u128(seconds)
        for day, seconds in sorted(day_seconds.items())
    }
    return msgpack.packb([payload], use_bin_type=True)


def decode_ledger(data: bytes) -> Dict[LinearDay, int]:
    """
    Десериализация байтов ledger-файла.

    Raises:
        LedgerFormatError: Если данные не соответствуют формату
    """
    try:
        document = msgpack.unpackb(data, raw=False, use_list=False, strict_map_key=False)
    except (ValueError, TypeError, msgpack.UnpackException) as e:
        raise LedgerFormatError(f"ledger is not valid MessagePack: {e}") from e

    if isinstance(document, dict):
        if "day_seconds" not in document:
            raise LedgerFormatError("ledger map has no 'day_seconds' field")
        day_seconds = document["day_seconds"]
    elif isinstance(document, tuple) and len(document) == 1:
        day_seconds = document[0]
    else:
        raise LedgerFormatError("ledger must be a one-field record")

    if not isinstance(day_seconds, dict):
        raise LedgerFormatError(
            f"day_seconds: expected map, got {type(day_seconds).__name__}"
        )

    result: Dict[LinearDay, int] = {}
    for key, value in day_seconds.items():
        if not isinstance(key, tuple) or len(key) != 2:
            raise LedgerFormatError(f"day key must be a [low, high] pair, got {key!r}")
        day = LinearDay(
            low=_decode_u128(key[0], "day.low"),
            high=_decode_u128(key[1], "day.high"),
        )
        result[day] = _decode_u128(value, "seconds")
    return result


# =============================================================================
# LEDGER
# =============================================================================


class Ledger:
    """
    Упорядоченный mapping LinearDay → секунды.

    Жизненный цикл: load() один раз при старте, изменения в памяти
    через import_history(), затем либо отбрасывается, либо save().
    После save() экземпляр поглощён: любые операции → LedgerConsumedError.
    """

    def __init__(
        self,
        config: LedgerConfig,
        day_seconds: Optional[Dict[LinearDay, int]] = None,
    ):
        self.config = config
        self._day_seconds: Optional[Dict[LinearDay, int]] = dict(day_seconds or {})

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, config: LedgerConfig) -> "Ledger":
        """
        Загрузка ledger из config.ledger_path.

        Returns:
            Ledger (пустой, если файла нет)

        Raises:
            LedgerIOError: Ошибка чтения (кроме отсутствия файла)
            LedgerFormatError: Файл повреждён
        """
        path = config.ledger_path
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            logger.debug("ledger %s not found, starting empty", path)
            return cls(config)
        except OSError as e:
            raise LedgerIOError(f"error loading ledger {path}: {e}") from e

        day_seconds = decode_ledger(data)
        logger.info("loaded %d day(s) from %s", len(day_seconds), path)
        return cls(config, day_seconds)

    def save(self) -> None:
        """
        Сохранение ledger: ledger.bin → ledger.bak, затем запись ledger.bin.

        Новое содержимое пишется во временный файл рядом и атомарно
        подменяет ledger.bin (os.replace). ledger.bak всегда остаётся
        валидным предыдущим снимком.

        Поглощающая операция: после вызова экземпляр непригоден.

        Raises:
            LedgerIOError: Ошибка копирования или записи
            LedgerConsumedError: save() уже вызывался
        """
        day_seconds = self._require_open()
        path = self.config.ledger_path
        backup_path = self.config.backup_path

        try:
            shutil.copyfile(path, backup_path)
            logger.debug("backed up %s to %s", path, backup_path)
        except FileNotFoundError:
            logger.debug("no existing ledger at %s, skipping backup", path)
        except OSError as e:
            raise LedgerIOError(f"error backing up ledger {path}: {e}") from e

        data = encode_ledger(day_seconds)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            with open(tmp_path, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise LedgerIOError(f"error writing ledger {path}: {e}") from e

        self._day_seconds = None
        logger.info("saved %d day(s) to %s", len(day_seconds), path)

    # -------------------------------------------------------------------------
    # Import / query
    # -------------------------------------------------------------------------

    def import_history(self, history_seconds: Iterable[int], today: HDate) -> int:
        """
        Слияние истории секунд в ledger.

        history_seconds[0] соответствует вчерашнему дню относительно today,
        history_seconds[i] = today - (i + 1). NO_DATA_SENTINEL пропускается,
        но курсор всё равно сдвигается на день назад. Существующие значения
        перезаписываются, повторный импорт тех же данных ничего не меняет.

        Args:
            history_seconds: Секунды по дням, самый свежий день первым
            today: Текущая дата

        Returns:
            Количество записанных дней

        Raises:
            ValueError: Если значение вне диапазона 0..LIMB_MAX
        """
        day_seconds = self._require_open()
        cursor = LinearDay.from_calendar_date(today) - ONE_DAY
        written = 0

        for seconds in history_seconds:
            _check_seconds(seconds)
            if seconds != NO_DATA_SENTINEL:
                day_seconds[cursor] = seconds
                written += 1
            cursor = cursor - ONE_DAY

        logger.info("imported %d day(s) ending %s", written, format_date(today))
        return written

    def collect(self, query_date: HDate) -> list[LedgerRecord]:
        """
        Записи за COLLECT_WINDOW_DAYS дней, заканчивая query_date.

        Порядок: от query_date назад. Дни без данных пропускаются,
        поэтому длина результата от 0 до COLLECT_WINDOW_DAYS.
        """
        day_seconds = self._require_open()
        day = LinearDay.from_calendar_date(query_date)
        records: list[LedgerRecord] = []

        for _ in range(COLLECT_WINDOW_DAYS):
            seconds = day_seconds.get(day)
            if seconds is not None:
                records.append(
                    LedgerRecord(day=format_date(day.to_calendar_date()), seconds=seconds)
                )
            day = day - ONE_DAY

        return records

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    def set(self, day: LinearDay, seconds: int) -> None:
        """Явная запись значения (0 допустим, в отличие от import_history)"""
        _check_seconds(seconds)
        self._require_open()[day] = seconds

    def get(self, day: LinearDay) -> Optional[int]:
        return self._require_open().get(day)

    def days(self) -> Iterator[LinearDay]:
        """Дни по возрастанию"""
        return iter(sorted(self._require_open()))

    def items(self) -> Iterator[tuple[LinearDay, int]]:
        """Пары (день, секунды) по возрастанию дня"""
        return iter(sorted(self._require_open().items()))

    @property
    def consumed(self) -> bool:
        return self._day_seconds is None

    def _require_open(self) -> Dict[LinearDay, int]:
        if self._day_seconds is None:
            raise LedgerConsumedError("ledger was consumed by save()")
        return self._day_seconds

    def __contains__(self, day: object) -> bool:
        return day in self._require_open()

    def __len__(self) -> int:
        return len(self._require_open())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return self._require_open() == other._require_open()

    def __repr__(self) -> str:
        if self._day_seconds is None:
            return "Ledger(<consumed>)"
        return f"Ledger({len(self._day_seconds)} days, path={self.config.ledger_path})"
