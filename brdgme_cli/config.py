"""Runtime configuration for brdgme-cli.

Values resolve in order: explicit argument, environment, `config.toml` in the
working directory, built-in default.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger("brdgme_cli.config")

DEFAULT_GAME = "tictactoe"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    game: str = DEFAULT_GAME
    log_level: str = DEFAULT_LOG_LEVEL


def _load_config_file(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        return {}

    try:
        return tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, exc)
        return {}


def _checked_level(level: Any) -> str:
    name = str(level).upper()
    if name not in logging.getLevelNamesMapping():
        logger.warning("Unknown log level %r, using %s", level, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return name


def load_settings(
    game: Optional[str] = None,
    log_level: Optional[str] = None,
    config_path: Optional[str] = None,
) -> Settings:
    config = _load_config_file(Path(config_path or "config.toml"))
    return Settings(
        game=(
            game
            or os.environ.get("BRDGME_GAME")
            or config.get("engine", {}).get("default")
            or DEFAULT_GAME
        ),
        log_level=_checked_level(
            log_level
            or os.environ.get("BRDGME_LOG_LEVEL")
            or config.get("logging", {}).get("level")
            or DEFAULT_LOG_LEVEL
        ),
    )
