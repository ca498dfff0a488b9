from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger


load_dotenv()

DEFAULT_DATA_PATH = Path("data") / "structure"
DEFAULT_LOAD_CONCURRENCY = 64


def _env_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring invalid int for {name}: {value}")
        return None


@dataclass(frozen=True)
class Settings:
    data_path: Path = DEFAULT_DATA_PATH
    log_level: str = "INFO"
    load_concurrency: int = DEFAULT_LOAD_CONCURRENCY


def get_settings() -> Settings:
    data_path = os.getenv("DATA_PATH")
    concurrency = _env_int("LOAD_CONCURRENCY")
    if concurrency is not None and concurrency < 1:
        logger.warning(f"Ignoring non-positive LOAD_CONCURRENCY: {concurrency}")
        concurrency = None
    return Settings(
        data_path=Path(data_path) if data_path else DEFAULT_DATA_PATH,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        load_concurrency=concurrency or DEFAULT_LOAD_CONCURRENCY,
    )
