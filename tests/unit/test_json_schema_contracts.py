"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей и constraints
- Интеграция с Pydantic моделями (LedgerRecord)
"""

import pytest
from jsonschema import ValidationError

from ht_ledger.core.contracts import (
    HistoryDataValidator,
    LedgerRecordsValidator,
    SchemaLoader,
    TodayPacketValidator,
    validate_history_data,
    validate_ledger_records,
    validate_today_packet,
)
from ht_ledger.core.domain import LedgerRecord, records_to_payload


# =============================================================================
# SCHEMA LOADING
# =============================================================================


class TestSchemaLoader:
    """Загрузка и meta-валидация схем"""

    @pytest.mark.parametrize("name", ["history_data", "today_packet", "ledger_records"])
    def test_schemas_load(self, name) -> None:
        schema = SchemaLoader().load_schema(name)
        assert schema["title"] == name

    def test_missing_schema(self) -> None:
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_directory(self, tmp_path) -> None:
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "nope")

    def test_invalid_schema_rejected(self, tmp_path) -> None:
        (tmp_path / "broken.json").write_text('{"type": 12}', encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# HISTORY DATA
# =============================================================================


class TestHistoryData:
    def test_valid(self) -> None:
        validate_history_data({"last_ten_seconds_per_day": [0, 10, 2**100]})

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_history_data({"last_ten_seconds_per_day": [-1]})

    def test_required(self) -> None:
        assert not HistoryDataValidator().is_valid({})


# =============================================================================
# TODAY PACKET
# =============================================================================


class TestTodayPacket:
    def test_valid(self) -> None:
        validate_today_packet({"year": 12, "status": "L", "month": "N", "day": 7})

    @pytest.mark.parametrize(
        "patch",
        [
            {"day": 24},
            {"year": -1},
            {"status": "X"},
            {"month": "Q"},
        ],
    )
    def test_constraint_violations(self, patch) -> None:
        data = {"year": 12, "status": "L", "month": "N", "day": 7, **patch}
        with pytest.raises(ValidationError):
            validate_today_packet(data)

    def test_all_errors_reported(self) -> None:
        errors = list(TodayPacketValidator().iter_errors({"year": -1, "day": 99}))
        assert len(errors) >= 3


# =============================================================================
# LEDGER RECORDS
# =============================================================================


class TestLedgerRecords:
    def test_pydantic_records_conform(self) -> None:
        records = [
            LedgerRecord(day="0003-GZ-04", seconds=10),
            LedgerRecord(day="0003-GZ-02", seconds=30),
        ]
        validate_ledger_records(records_to_payload(records))

    def test_empty_array(self) -> None:
        validate_ledger_records([])

    def test_window_limit(self) -> None:
        records = [{"day": "0001-GZ-01", "seconds": 1}] * 25
        assert not LedgerRecordsValidator().is_valid(records)

    def test_bad_day_string(self) -> None:
        with pytest.raises(ValidationError):
            validate_ledger_records([{"day": "yesterday", "seconds": 1}])
