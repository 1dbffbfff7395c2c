"""
Environment + project-root helpers.

The CLI, the API server and the test suite start from different working directories,
but `network.roads_path` is usually relative (`data/roads/...`). Paths are therefore
resolved against the repository root rather than the CWD.

- `get_project_root()`: `CAMPUSROUTE_PROJECT_ROOT` if set, else the nearest parent
  holding `.env`, `.git` or both `src/` and `data/`
- `load_dotenv_if_present()`: load `<root>/.env` without overriding existing env vars
- `resolve_project_path()`: resolve a relative path against that root
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


def _is_project_root(path: Path) -> bool:
    if (path / ".env").is_file() or (path / ".git").exists():
        return True
    return (path / "src").is_dir() and (path / "data").is_dir()


@lru_cache
def get_project_root() -> Path:
    """Return the repository root used for relative paths (cached)."""
    override = os.getenv("CAMPUSROUTE_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()

    for start in (Path.cwd(), Path(__file__).resolve().parent):
        for candidate in (start.resolve(), *start.resolve().parents):
            if _is_project_root(candidate):
                return candidate
    return Path.cwd().resolve()


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `<root>/.env` once; returns its path, or None when there is no such file."""
    env_path = get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a possibly-relative path against the project root."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (get_project_root() / p).resolve()
