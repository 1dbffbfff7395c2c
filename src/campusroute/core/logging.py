"""
Logging configuration.

Handlers and formats come from the packaged `src/campusroute/config/logging.yaml`. The
level is taken from, in order: the `level` argument (the CLI's `--log-level`),
`app.log_level` in settings (`CAMPUSROUTE_LOG_LEVEL`).
"""

from __future__ import annotations

import copy
import logging.config

from campusroute.config.settings import get_logging_config, get_settings


def configure_logging(level: str | None = None) -> str:
    """Apply the YAML logging config at the resolved level; returns that level."""
    level = (level or get_settings().app.log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {level!r}")

    config = copy.deepcopy(get_logging_config())
    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        handler["level"] = level

    logging.config.dictConfig(config)
    return level
