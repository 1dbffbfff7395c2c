# src/campusroute/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/campusroute/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `CAMPUSROUTE_CONFIG_PATH`
- environment variables (e.g., `CAMPUSROUTE_LOG_LEVEL`, `CAMPUSROUTE_ROADS_PATH`)

Design rule:
- Tuning knobs live in YAML, not hard-coded in routing logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from campusroute.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `campusroute.config`."""
    text = resources.files("campusroute.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "CampusRoute"
    log_level: str = "INFO"


class NetworkSettings(BaseModel):
    roads_path: str = "data/roads/campus_roads.geojson"
    coordinate_precision: int = Field(6, ge=0, le=12)


class RoutingSettings(BaseModel):
    locator: Literal["scan", "grid"] = "scan"
    grid_cell_size_m: float = Field(100.0, gt=0)
    timeout_seconds: float | None = Field(default=None, gt=0)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    network: NetworkSettings = Field(default_factory=NetworkSettings)
    routing: RoutingSettings = Field(default_factory=RoutingSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    data = dict(data)
    log_level = os.getenv("CAMPUSROUTE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    roads_path = os.getenv("CAMPUSROUTE_ROADS_PATH")
    if roads_path:
        data.setdefault("network", {})["roads_path"] = roads_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("CAMPUSROUTE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
