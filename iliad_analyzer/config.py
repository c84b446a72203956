"""Configuration helpers for the Iliad interaction-network analyzer."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_PATH = PROJECT_ROOT / ".env"

# Load environment variables early so downstream modules can rely on them.
load_dotenv(ENV_PATH, override=False)

DB_PATH_ENV = "ILIAD_DB_PATH"
ENTITY_COLLECTION_ENV = "ENTITY_COLLECTION"
API_LOG_LEVEL_ENV = "API_LOG_LEVEL"
LOG_DIR_ENV = "LOG_DIR"
PROFILE_METRICS_ENV = "PROFILE_METRICS"

DEFAULT_DB_PATH = PROJECT_ROOT / "data" / "iliad.db"
DEFAULT_ENTITY_COLLECTION = "Entities"
DEFAULT_API_LOG_LEVEL = "INFO"
DEFAULT_LOG_DIR = Path("logs")

# Inclusive book windows applied when a request omits fromBk/toBk.
DEFAULT_METRICS_BOOK_RANGE = (1, 24)
DEFAULT_SPEECH_BOOK_RANGE = (1, 12)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class StoreSettings:
    """Location and namespace of the corpus store."""

    path: Path
    entity_collection: str

    @property
    def url(self) -> str:
        return f"sqlite:///{self.path}"

    def qualify(self, key: str) -> str:
        """Expand a collection-local entity key into a full entity id."""
        return f"{self.entity_collection}/{key}"


@dataclass(frozen=True)
class ApiSettings:
    """Runtime configuration for the Flask API."""

    log_level: int
    log_dir: Path
    profile_metrics: bool


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise RuntimeError(f"{name} must be a boolean (true/false); received '{raw}'.")


def get_store_settings() -> StoreSettings:
    """Resolve store configuration from environment with sensible defaults."""

    raw_path = _get_env(DB_PATH_ENV, str(DEFAULT_DB_PATH))
    db_path = Path(raw_path).expanduser().resolve()
    collection = _get_env(ENTITY_COLLECTION_ENV, DEFAULT_ENTITY_COLLECTION).strip().strip("/")
    if not collection:
        raise RuntimeError(f"{ENTITY_COLLECTION_ENV} must not be blank.")
    return StoreSettings(path=db_path, entity_collection=collection)


def get_log_dir() -> Path:
    return Path(_get_env(LOG_DIR_ENV, str(DEFAULT_LOG_DIR))).expanduser()


def get_api_settings() -> ApiSettings:
    """Resolve API logging/profiling configuration."""

    level_name = _get_env(API_LOG_LEVEL_ENV, DEFAULT_API_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise RuntimeError(
            f"{API_LOG_LEVEL_ENV} must be a logging level name; received '{level_name}'."
        )
    profile_metrics = _parse_bool(PROFILE_METRICS_ENV, _get_env(PROFILE_METRICS_ENV, "true"))
    return ApiSettings(log_level=level, log_dir=get_log_dir(), profile_metrics=profile_metrics)
