"""Environment-driven settings."""

from __future__ import annotations

import logging
import os
from typing import FrozenSet

DEFAULT_SILENT_UNITS = "p"


def _parse_csv(raw: str | None) -> FrozenSet[str]:
    if raw is None:
        return frozenset()
    return frozenset(item.strip() for item in raw.split(",") if item.strip())


def silent_units() -> FrozenSet[str]:
    """Unknown units that never raise an unrecognized-unit diagnostic.

    ``p`` (servings) is silent unless ``KITCHENUNITS_SILENT_UNITS`` overrides
    the list. The empty unit is always silent.
    """

    return _parse_csv(os.getenv("KITCHENUNITS_SILENT_UNITS", DEFAULT_SILENT_UNITS)) | {""}


def log_level() -> int:
    """Return the configured log level, falling back to ``WARNING``."""

    raw = os.getenv("KITCHENUNITS_LOG_LEVEL", "WARNING").strip().upper()
    level = logging.getLevelName(raw)
    if isinstance(level, int):
        return level
    return logging.WARNING


def api_title() -> str:
    return os.getenv("KITCHENUNITS_API_TITLE", "kitchenunits")


__all__ = ["DEFAULT_SILENT_UNITS", "silent_units", "log_level", "api_title"]
