"""
Class label table loading.
"""
from __future__ import annotations
from typing import Tuple
import json
import logging
import os

from facemood.errors import StartupError

logger = logging.getLogger(__name__)


def load_labels(path: str) -> Tuple[str, ...]:
    """Read a JSON list of label strings, ordered like the model outputs.

    Raises:
        StartupError: file missing, not JSON, not a non-empty list of strings.
    """
    if not os.path.exists(path):
        raise StartupError(f"Label table not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise StartupError(f"Could not read label table {path}: {e}") from e

    if not isinstance(data, list) or not data or not all(isinstance(x, str) for x in data):
        raise StartupError(f"Label table must be a non-empty JSON list of strings: {path}")
    logger.info(f"[labels] loaded {len(data)} labels from {path}")
    return tuple(data)
