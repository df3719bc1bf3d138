"""Настройки приложения.

Значения по умолчанию заданы в `AppConfig`; переменные окружения
`KAWAII_CAM_*` могут их переопределить.
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_PROCESSING_DELAY = 2.0
DEFAULT_LIBRARY_DIR = Path.home() / "Pictures" / "Kawaii Cam"


@dataclass(frozen=True)
class AppConfig:
    # Искусственная пауза перед обработкой, секунды
    processing_delay: float = DEFAULT_PROCESSING_DELAY
    # Куда «Сохранить фото» складывает результаты
    library_dir: Path = field(default_factory=lambda: DEFAULT_LIBRARY_DIR)
    log_level: str = "INFO"
    appearance_mode: str = "system"  # "system" | "light" | "dark"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Собирает конфигурацию из окружения.

        Некорректная задержка (не число, nan/inf или отрицательная) игнорируется.
        """
        env = os.environ if environ is None else environ
        delay = DEFAULT_PROCESSING_DELAY
        raw_delay = env.get("KAWAII_CAM_DELAY")
        if raw_delay:
            try:
                delay = float(raw_delay)
            except ValueError:
                delay = DEFAULT_PROCESSING_DELAY
            if not math.isfinite(delay) or delay < 0:
                delay = DEFAULT_PROCESSING_DELAY

        library = env.get("KAWAII_CAM_LIBRARY")
        return cls(
            processing_delay=delay,
            library_dir=Path(library).expanduser() if library else DEFAULT_LIBRARY_DIR,
            log_level=env.get("KAWAII_CAM_LOG_LEVEL", "INFO").upper(),
            appearance_mode=env.get("KAWAII_CAM_APPEARANCE", "system"),
        )
