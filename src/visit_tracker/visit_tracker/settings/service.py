from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..common.validators import require_int_range, require_non_empty
from ..core.constants import (
    DEFAULT_DISTANCE_THRESHOLD_M,
    DEFAULT_REMINDER_MINUTES,
    LEGACY_HOURS_CUTOFF,
    LEGACY_SETTING_REMINDER_HOURS,
    MAX_DISTANCE_THRESHOLD_M,
    MAX_REMINDER_MINUTES,
    MIN_REMINDER_MINUTES,
    SETTING_DISTANCE_THRESHOLD,
    SETTING_REMINDER_MINUTES,
)
from .repository import SettingRepository

logger = logging.getLogger(__name__)

# key -> (minimum, maximum) for the settings the lifecycle reads as integers
KNOWN_INTEGER_SETTINGS = {
    SETTING_DISTANCE_THRESHOLD: (1, MAX_DISTANCE_THRESHOLD_M),
    SETTING_REMINDER_MINUTES: (MIN_REMINDER_MINUTES, MAX_REMINDER_MINUTES),
}


class SettingsService:
    """Settings provider.

    ``get``/``set`` are raw pass-through; typed readers are evaluated on every call
    so an admin change applies to the next check-out without a restart.
    """

    def __init__(self, settings: SettingRepository):
        self._settings = settings

    def get(self, key: str) -> Optional[str]:
        return self._settings.get(require_non_empty(key, "key"))

    def set(self, key: str, value: Any) -> None:
        self._settings.set(require_non_empty(key, "key"), "" if value is None else str(value))

    def update(self, key: str, value: Any) -> str:
        """Admin write: known integer keys are range-checked, others pass through."""
        key = require_non_empty(key, "key")
        if key in KNOWN_INTEGER_SETTINGS:
            minimum, maximum = KNOWN_INTEGER_SETTINGS[key]
            value = str(require_int_range(value, key, minimum=minimum, maximum=maximum))
        else:
            value = "" if value is None else str(value)
        self._settings.set(key, value)
        logger.info("setting %s=%s", key, value)
        return value

    def all(self) -> Dict[str, str]:
        return self._settings.all()

    def distance_threshold(self) -> int:
        return self._read_int(SETTING_DISTANCE_THRESHOLD, DEFAULT_DISTANCE_THRESHOLD_M)

    def reminder_minutes(self) -> int:
        return self._read_int(SETTING_REMINDER_MINUTES, DEFAULT_REMINDER_MINUTES)

    def migrate_legacy_reminder(self) -> Optional[int]:
        """Copy the old ``checkoutReminderHours`` value to the minutes key once.

        Older clients stored hours under that key and newer ones stored minutes, so
        values at or below 24 are read as hours. Returns the migrated minutes, or None
        when there was nothing to do.
        """
        if self._settings.get(SETTING_REMINDER_MINUTES) is not None:
            return None
        legacy = self._settings.get(LEGACY_SETTING_REMINDER_HOURS)
        if legacy is None:
            return None
        try:
            value = int(str(legacy).strip())
        except ValueError:
            logger.warning("ignoring unparsable legacy reminder value %r", legacy)
            return None

        minutes = value * 60 if value <= LEGACY_HOURS_CUTOFF else value
        minutes = max(MIN_REMINDER_MINUTES, min(MAX_REMINDER_MINUTES, minutes))
        self._settings.set(SETTING_REMINDER_MINUTES, str(minutes))
        logger.info("migrated %s=%r to %s=%s", LEGACY_SETTING_REMINDER_HOURS, legacy, SETTING_REMINDER_MINUTES, minutes)
        return minutes

    def _read_int(self, key: str, default: int) -> int:
        raw = self._settings.get(key)
        if raw is None or not str(raw).strip():
            return default
        minimum, maximum = KNOWN_INTEGER_SETTINGS[key]
        try:
            value = int(str(raw).strip())
        except ValueError:
            logger.warning("setting %s has non-integer value %r, using default %s", key, raw, default)
            return default
        if value < minimum or value > maximum:
            logger.warning("setting %s=%s out of range, using default %s", key, value, default)
            return default
        return value
