"""
LedgerRecord: запись результата collect()

Immutable DTO (день в текстовом формате, секунды). Никогда не сохраняется
на диск, используется только для вывода.
"""

import json
from typing import Iterable

from pydantic import BaseModel, Field


class LedgerRecord(BaseModel):
    """Пара (день, отработанные секунды)"""

    day: str = Field(..., min_length=1, description="Дата в формате YYYY-[GL][ZNASF]-DD")
    seconds: int = Field(..., ge=0, description="Отработанные секунды за день")

    model_config = {"frozen": True}


def records_to_payload(records: Iterable[LedgerRecord]) -> list[dict]:
    """Список записей → список dict для JSON (порядок сохраняется)"""
    return [record.model_dump() for record in records]


def records_to_json(records: Iterable[LedgerRecord]) -> str:
    """JSON-массив объектов {"day", "seconds"} (компактный, как вывод print)"""
    return json.dumps(records_to_payload(records), separators=(",", ":"))
