"""
Primary-face selection.
"""
from __future__ import annotations
from typing import Optional, Sequence

from facemood.models import BoundingBox


def select_primary(candidates: Sequence[BoundingBox]) -> Optional[BoundingBox]:
    """Pick the candidate with the largest area.

    Exact ties keep the earliest candidate in detector order. Each call is
    independent of the previous frame, so the primary face can switch between
    people whose boxes are close in size.
    """
    best: Optional[BoundingBox] = None
    for box in candidates:
        if best is None or box.area > best.area:
            best = box
    return best
