"""
Runtime configuration for clickwheel.

Values come from environment variables only; nothing is persisted. Library
records are the sole on-disk state.
"""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_DATA_DIR = "CLICKWHEEL_DATA_DIR"
ENV_LOG_LEVEL = "CLICKWHEEL_LOG_LEVEL"
ENV_VOLUME = "CLICKWHEEL_VOLUME"
ENV_DEBUG_SCHEMA = "CLICKWHEEL_DEBUG_SCHEMA"


@dataclass
class AppConfig:
    data_dir: str = ""
    db_file_name: str = "library.sqlite3"
    log_level: str = "INFO"
    initial_volume: float = 0.8
    debug_schema: bool = False

    @property
    def db_path(self) -> str:
        return os.path.join(self.data_dir, self.db_file_name)


def load_config(environ: Optional[Mapping[str, str]] = None, default_data_dir: str = "") -> AppConfig:
    env = os.environ if environ is None else environ
    cfg = AppConfig(data_dir=env.get(ENV_DATA_DIR) or default_data_dir)

    level = (env.get(ENV_LOG_LEVEL) or cfg.log_level).upper()
    if level in LOG_LEVELS:
        cfg.log_level = level
    else:
        logger.warning("Invalid %s=%r, using %s", ENV_LOG_LEVEL, level, cfg.log_level)

    raw_volume = env.get(ENV_VOLUME)
    if raw_volume:
        try:
            volume = float(raw_volume)
            if not 0.0 <= volume <= 1.0:
                raise ValueError("volume must be within 0..1")
            cfg.initial_volume = volume
        except ValueError as e:
            logger.warning("Invalid %s=%r (%s), using %.2f", ENV_VOLUME, raw_volume, e, cfg.initial_volume)

    cfg.debug_schema = env.get(ENV_DEBUG_SCHEMA) == "1"
    return cfg


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    ))
    root.addHandler(handler)
