"""
Study settings (the learner's persisted preferences).

Settings live in a small JSON file (SETTINGS_PATH, default logs/settings.json)
so they survive restarts. Environment variables come from .env via
python-dotenv. A missing or broken file falls back to defaults.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from core.srs.constants import (
    DEFAULT_FLUSH_BATCH_SIZE,
    DEFAULT_MAX_NEW_PER_DAY,
    DEFAULT_WRITE_RETRIES,
)

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(__file__).parent.parent / "logs" / "settings.json"


class StudySettings(BaseModel):
    """Configuration read by the queue builder and session controller."""
    max_new_per_day: int = Field(default=DEFAULT_MAX_NEW_PER_DAY, ge=0, description="Daily new-card cap")
    review_ahead: bool = Field(default=False, description="Also queue cards due tomorrow")
    flush_batch_size: int = Field(default=DEFAULT_FLUSH_BATCH_SIZE, ge=1, description="Grades buffered per write")
    write_retries: int = Field(default=DEFAULT_WRITE_RETRIES, ge=1, description="Attempts per storage write")


def get_settings_path() -> Path:
    return Path(os.getenv("SETTINGS_PATH", str(DEFAULT_SETTINGS_PATH)))


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def load_settings(path: Optional[Path] = None) -> StudySettings:
    """
    Load settings from disk.

    Invalid values are dropped one by one so a single bad entry does not
    reset everything else.
    """
    path = path or get_settings_path()
    if not path.exists():
        return StudySettings()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read settings from %s: %s", path, exc)
        return StudySettings()

    if not isinstance(raw, dict):
        logger.warning("Ignoring settings file %s: expected an object", path)
        return StudySettings()

    known = {key: value for key, value in raw.items() if key in StudySettings.model_fields}
    try:
        return StudySettings(**known)
    except ValidationError as exc:
        bad = {str(err["loc"][0]) for err in exc.errors() if err.get("loc")}
        logger.warning("Ignoring invalid settings %s in %s", sorted(bad), path)
        return StudySettings(**{k: v for k, v in known.items() if k not in bad})


def save_settings(settings: StudySettings, path: Optional[Path] = None) -> None:
    """Persist settings to disk."""
    path = path or get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.model_dump(), indent=2), encoding="utf-8")


def set_max_new_per_day(value: int, path: Optional[Path] = None) -> StudySettings:
    """Update the daily new-card cap and persist it."""
    settings = load_settings(path).model_copy(update={"max_new_per_day": value})
    settings = StudySettings.model_validate(settings.model_dump())
    save_settings(settings, path)
    return settings
