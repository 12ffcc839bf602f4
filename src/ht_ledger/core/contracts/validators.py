"""
JSON Schema Contract Validators

Модуль для валидации данных на границах системы согласно JSON Schema контрактам.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы:
- history_data.json (ответ сервера истории)
- today_packet.json (ответ сервера текущей даты)
- ledger_records.json (вывод команды print)
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы лежат в каталоге schema/ рядом с этим модулем (package data).
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'history_data')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-валидацию
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Any) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        """Проверка валидности данных без exception"""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Any):
        """Итератор по всем ошибкам валидации"""
        return self.validator.iter_errors(data)


class HistoryDataValidator(ContractValidator):
    """Валидатор ответа сервера истории"""

    def __init__(self):
        super().__init__("history_data")


class TodayPacketValidator(ContractValidator):
    """Валидатор ответа сервера текущей даты"""

    def __init__(self):
        super().__init__("today_packet")


class LedgerRecordsValidator(ContractValidator):
    """Валидатор вывода команды print"""

    def __init__(self):
        super().__init__("ledger_records")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_history_data(data: Dict[str, Any]) -> None:
    """
    Валидация history_data.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    HistoryDataValidator().validate(data)


def validate_today_packet(data: Dict[str, Any]) -> None:
    """
    Валидация today_packet.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    TodayPacketValidator().validate(data)


def validate_ledger_records(data: list) -> None:
    """
    Валидация списка записей перед выводом.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    LedgerRecordsValidator().validate(data)
