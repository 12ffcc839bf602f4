"""Конфигурация ht-ledger: пути к ledger-файлам и адреса time-серверов.

Путь к ledger передаётся в хранилище явно, глобальных констант пути нет.

Переменные окружения:
- HT_LEDGER_DIR: каталог ledger.bin / ledger.bak (default /opt/ht_ledger)
- HT_HOST: хост time-серверов (default localhost)
- HT_TIMEOUT: таймаут сокета в секундах (default 10)
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional


DEFAULT_DATA_DIR = "/opt/ht_ledger"
DEFAULT_HOST = "localhost"
HISTORY_PORT = 3926
TODAY_PORT = 3621


@dataclass(frozen=True)
class LedgerConfig:
    """Конфигурация хранилища и клиента time-серверов.

    Один путь, один владелец: ledger-файл принадлежит одному процессу
    на время запуска, блокировок нет.
    """
    data_dir: Path = Path(DEFAULT_DATA_DIR)
    ledger_filename: str = "ledger.bin"
    backup_filename: str = "ledger.bak"
    host: str = DEFAULT_HOST
    history_port: int = HISTORY_PORT
    today_port: int = TODAY_PORT
    timeout_sec: float = 10.0

    @property
    def ledger_path(self) -> Path:
        return Path(self.data_dir) / self.ledger_filename

    @property
    def backup_path(self) -> Path:
        return Path(self.data_dir) / self.backup_filename

    def with_data_dir(self, data_dir: os.PathLike | str) -> "LedgerConfig":
        """Копия конфигурации с другим каталогом данных"""
        return replace(self, data_dir=Path(data_dir))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LedgerConfig":
        """Конфигурация из переменных окружения (по умолчанию os.environ).

        Raises:
            ValueError: Если HT_TIMEOUT не число или не положительное
        """
        env = os.environ if environ is None else environ

        timeout_raw = env.get("HT_TIMEOUT")
        timeout_sec = cls.timeout_sec
        if timeout_raw:
            timeout_sec = float(timeout_raw)
            if timeout_sec <= 0:
                raise ValueError(f"HT_TIMEOUT must be positive, got {timeout_raw}")

        return cls(
            data_dir=Path(env.get("HT_LEDGER_DIR") or DEFAULT_DATA_DIR),
            host=env.get("HT_HOST") or DEFAULT_HOST,
            timeout_sec=timeout_sec,
        )
