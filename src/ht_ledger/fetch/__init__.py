"""Fetch: клиент time-серверов (история секунд и текущая дата)."""

from .timeserver import (
    HistoryData,
    TimeServerError,
    TodayPacket,
    capture,
    decode_history,
    decode_today,
    exchange,
    fetch_history,
    fetch_today,
)

__all__ = [
    "HistoryData",
    "TodayPacket",
    "TimeServerError",
    "capture",
    "exchange",
    "fetch_history",
    "fetch_today",
    "decode_history",
    "decode_today",
]
