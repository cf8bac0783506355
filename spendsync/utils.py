"""Configuration and filesystem helpers for spendsync."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 5
DEFAULT_TIMEOUT = 5.0

# Durable key under which the pending queue is persisted
QUEUE_KEY = "pending_offline_actions"

# Durable key for the last fetched remote snapshot
SNAPSHOT_KEY = "expenses_cache"


def get_spendsync_home() -> Path:
    """Directory holding config and the local database.

    ``SPENDSYNC_HOME`` overrides the default ``~/.spendsync``.
    """
    override = os.environ.get("SPENDSYNC_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".spendsync"


def resolve_db_path(db_path: Optional[Path] = None) -> Path:
    """Resolve the database path, falling back to temp dir if home is not writable."""
    if db_path is not None:
        return Path(db_path)

    default_path = get_spendsync_home() / "spendsync.db"
    try:
        default_path.parent.mkdir(parents=True, exist_ok=True)
        return default_path
    except (OSError, PermissionError) as e:
        # Home dir not writable (sandboxed/container/CI environment)
        fallback_dir = Path(tempfile.gettempdir()) / ".spendsync"
        logger.warning(f"Cannot write to {default_path.parent} ({e}), falling back to {fallback_dir}")
        fallback_dir.mkdir(parents=True, exist_ok=True)
        return fallback_dir / "spendsync.db"


@dataclass
class Settings:
    """Runtime settings for a spendsync instance."""

    backend_url: Optional[str] = None
    auth_token: Optional[str] = None
    page_size: int = DEFAULT_PAGE_SIZE
    timeout: float = DEFAULT_TIMEOUT
    db_path: Optional[Path] = None

    @property
    def has_backend(self) -> bool:
        return bool(self.backend_url)


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.debug(f"Failed to load config file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.debug(f"Ignoring config file {path}: top level is not an object")
        return {}
    return data


def _coerce(value: Any, cast, default, name: str):
    if value is None or value == "":
        return default
    try:
        result = cast(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid {name} {value!r}, using default {default}")
        return default
    if result <= 0:
        logger.warning(f"{name} must be positive, using default {default}")
        return default
    return result


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings.

    Priority:
    1. Environment variables (SPENDSYNC_BACKEND_URL, SPENDSYNC_AUTH_TOKEN,
       SPENDSYNC_PAGE_SIZE, SPENDSYNC_TIMEOUT, SPENDSYNC_DB_PATH)
    2. <home>/config.json

    Returns:
        Settings with a validated backend URL (or None if rejected).
    """
    from spendsync.core.validation import validate_backend_url

    config = _read_config_file(config_path or get_spendsync_home() / "config.json")

    backend_url = os.environ.get("SPENDSYNC_BACKEND_URL") or config.get("backend_url")
    auth_token = os.environ.get("SPENDSYNC_AUTH_TOKEN") or config.get("auth_token")
    page_size = _coerce(
        os.environ.get("SPENDSYNC_PAGE_SIZE") or config.get("page_size"),
        int,
        DEFAULT_PAGE_SIZE,
        "page_size",
    )
    timeout = _coerce(
        os.environ.get("SPENDSYNC_TIMEOUT") or config.get("timeout"),
        float,
        DEFAULT_TIMEOUT,
        "timeout",
    )
    db_path = os.environ.get("SPENDSYNC_DB_PATH") or config.get("db_path")

    if backend_url:
        backend_url = validate_backend_url(backend_url)

    return Settings(
        backend_url=backend_url.rstrip("/") if backend_url else None,
        auth_token=auth_token,
        page_size=page_size,
        timeout=timeout,
        db_path=Path(db_path).expanduser() if db_path else None,
    )
