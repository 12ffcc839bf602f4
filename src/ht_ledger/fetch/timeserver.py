"""
TimeServer client: история секунд и текущая дата

Протокол (фиксированный, два обмена):
1. TCP connect к (host, history_port), отправка одного байта 0x00,
   чтение до EOF → MessagePack HistoryData
2. TCP connect к (host, today_port), тот же обмен → MessagePack TodayPacket

Ответы нормализуются в dict и проверяются JSON Schema контрактами
(history_data / today_packet) до использования.
"""

import logging
import socket
from typing import Any, Callable, Final, Optional

import msgpack
from jsonschema import ValidationError
from pydantic import BaseModel, Field

from ht_ledger.config import LedgerConfig
from ht_ledger.core.contracts import validate_history_data, validate_today_packet
from ht_ledger.core.domain.calendar import HDate, Month, MonthStatus, month_from_index


logger = logging.getLogger(__name__)


REQUEST_BYTE: Final[bytes] = b"\x00"
RECV_CHUNK_BYTES: Final[int] = 4096

# Имена вариантов enum'ов на проводе (в порядке объявления)
_STATUS_NAMES: Final[dict[str, MonthStatus]] = {
    "greater": MonthStatus.GREATER,
    "g": MonthStatus.GREATER,
    "lesser": MonthStatus.LESSER,
    "l": MonthStatus.LESSER,
}
_MONTH_NAMES: Final[dict[str, Month]] = {
    "zero": Month.ZERO,
    "niktvirin": Month.NIKTVIRIN,
    "apress": Month.APRESS,
    "smosh": Month.SMOSH,
    "funny": Month.FUNNY,
    **{m.value.lower(): m for m in Month},
}


class TimeServerError(Exception):
    """Ошибка обмена с time-сервером или невалидный ответ."""


# =============================================================================
# MODELS
# =============================================================================


class HistoryData(BaseModel):
    """Секунды за последние дни, самый свежий день первым; 0 = нет данных"""

    last_ten_seconds_per_day: list[int] = Field(default_factory=list)

    model_config = {"frozen": True}


class TodayPacket(BaseModel):
    """Текущая дата по данным time-сервера"""

    year: int = Field(..., ge=0)
    status: MonthStatus
    month: Month
    day: int = Field(..., ge=0, le=23)

    model_config = {"frozen": True}

    def to_hdate(self) -> HDate:
        return HDate(year=self.year, status=self.status, month=self.month, day=self.day)


# =============================================================================
# WIRE DECODING
# =============================================================================


def _as_uint(raw: Any, field: str) -> int:
    """msgpack-целое или bin big-endian (u128 из rmp_serde) → int"""
    if isinstance(raw, bool):
        raise TimeServerError(f"{field}: expected unsigned integer, got bool")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, (bytes, bytearray)) and 0 < len(raw) <= 16:
        return int.from_bytes(raw, "big")
    raise TimeServerError(f"{field}: expected unsigned integer, got {raw!r}")


def _unpack(data: bytes, what: str) -> Any:
    try:
        return msgpack.unpackb(data, raw=False)
    except (ValueError, TypeError, msgpack.UnpackException) as e:
        raise TimeServerError(f"{what}: response is not valid MessagePack: {e}") from e


def _enum_variant(raw: Any, names: dict, variants: list, field: str):
    if isinstance(raw, dict) and len(raw) == 1:
        raw = next(iter(raw))
    if isinstance(raw, str) and raw.lower() in names:
        return names[raw.lower()]
    if isinstance(raw, int) and not isinstance(raw, bool) and 0 <= raw < len(variants):
        return variants[raw]
    raise TimeServerError(f"{field}: unknown variant {raw!r}")


def _decode_month(raw: Any) -> tuple[MonthStatus, Month]:
    """[status, month] пара или индекс месяца 0..9"""
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        status = _enum_variant(raw[0], _STATUS_NAMES, list(MonthStatus), "month.status")
        month = _enum_variant(raw[1], _MONTH_NAMES, list(Month), "month.month")
        return status, month
    if isinstance(raw, int) and not isinstance(raw, bool):
        try:
            return month_from_index(raw)
        except ValueError as e:
            raise TimeServerError(f"month: {e}") from e
    raise TimeServerError(f"month: unsupported encoding {raw!r}")


def decode_history(data: bytes) -> HistoryData:
    """
    Декодирование ответа сервера истории.

    Принимается struct-as-array ([values, ...]) или map с ключом
    last_ten_seconds_per_day.

    Raises:
        TimeServerError: Формат не распознан или нарушен контракт
    """
    document = _unpack(data, "history")
    if isinstance(document, dict):
        values = document.get("last_ten_seconds_per_day")
    elif isinstance(document, list) and document:
        values = document[0]
    else:
        values = None
    if not isinstance(values, list):
        raise TimeServerError("history: missing last_ten_seconds_per_day array")

    payload = {
        "last_ten_seconds_per_day": [
            _as_uint(v, f"history[{i}]") for i, v in enumerate(values)
        ]
    }
    try:
        validate_history_data(payload)
    except ValidationError as e:
        raise TimeServerError(f"history: contract violation: {e.message}") from e
    return HistoryData(**payload)


def decode_today(data: bytes) -> TodayPacket:
    """
    Декодирование ответа сервера текущей даты.

    Принимается map (year/month/day) или struct-as-array [year, month, day, ...].
    Лишние поля игнорируются.

    Raises:
        TimeServerError: Формат не распознан или нарушен контракт
    """
    document = _unpack(data, "today")
    if isinstance(document, dict):
        try:
            year, month, day = document["year"], document["month"], document["day"]
        except KeyError as e:
            raise TimeServerError(f"today: missing field {e}") from e
    elif isinstance(document, list) and len(document) >= 3:
        year, month, day = document[:3]
    else:
        raise TimeServerError("today: expected [year, month, day] record")

    status, base_month = _decode_month(month)
    payload = {
        "year": _as_uint(year, "today.year"),
        "status": status.value,
        "month": base_month.value,
        "day": _as_uint(day, "today.day"),
    }
    try:
        validate_today_packet(payload)
    except ValidationError as e:
        raise TimeServerError(f"today: contract violation: {e.message}") from e
    return TodayPacket(**payload)


# =============================================================================
# TRANSPORT
# =============================================================================

Connector = Callable[..., socket.socket]


def exchange(
    host: str,
    port: int,
    timeout: float,
    connect: Optional[Connector] = None,
) -> bytes:
    """
    Один обмен запрос/ответ: отправка REQUEST_BYTE, чтение до EOF.

    Raises:
        TimeServerError: Ошибка соединения или чтения
    """
    connect = connect or socket.create_connection
    chunks = []
    try:
        with connect((host, port), timeout=timeout) as sock:
            sock.sendall(REQUEST_BYTE)
            while True:
                chunk = sock.recv(RECV_CHUNK_BYTES)
                if not chunk:
                    break
                chunks.append(chunk)
    except OSError as e:
        raise TimeServerError(f"exchange with {host}:{port} failed: {e}") from e

    data = b"".join(chunks)
    logger.debug("received %d byte(s) from %s:%d", len(data), host, port)
    return data


def fetch_history(config: LedgerConfig, connect: Optional[Connector] = None) -> HistoryData:
    data = exchange(config.host, config.history_port, config.timeout_sec, connect)
    return decode_history(data)


def fetch_today(config: LedgerConfig, connect: Optional[Connector] = None) -> TodayPacket:
    data = exchange(config.host, config.today_port, config.timeout_sec, connect)
    return decode_today(data)


def capture(
    config: LedgerConfig, connect: Optional[Connector] = None
) -> tuple[HistoryData, TodayPacket]:
    """
    История и текущая дата (история запрашивается первой).

    Raises:
        TimeServerError: Любой сбой обмена или декодирования
    """
    history = fetch_history(config, connect)
    today = fetch_today(config, connect)
    logger.info(
        "captured %d history day(s), today is %s",
        len(history.last_ten_seconds_per_day),
        today.to_hdate(),
    )
    return history, today
