"""Baseline loader — reads threshold files into a BaselineSet."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from uiperf.errors import BaselineNotFoundError, BaselineParseError
from uiperf.models.metrics import BaselineEntry, BaselineSet

logger = logging.getLogger(__name__)


def load_baseline(path: str | Path) -> BaselineSet:
    """Load a baseline file mapping metric/page keys to thresholds.

    Raises BaselineNotFoundError if the file is missing and
    BaselineParseError if it is not a JSON object of baseline entries.
    """
    path = Path(path)
    if not path.exists():
        raise BaselineNotFoundError(f"Baseline file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BaselineParseError(f"Baseline file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise BaselineParseError(
            f"Baseline file {path} must contain a JSON object, got {type(data).__name__}"
        )

    entries: dict[str, BaselineEntry] = {}
    for key, value in data.items():
        if not isinstance(value, dict):
            raise BaselineParseError(f"Baseline '{key}' in {path} must be an object")
        try:
            entries[key] = BaselineEntry(**value)
        except ValidationError as e:
            raise BaselineParseError(f"Invalid baseline '{key}' in {path}: {e}") from e

    logger.debug("Loaded %d baselines from %s", len(entries), path)
    return BaselineSet(source=str(path), entries=entries)
