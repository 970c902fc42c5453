"""
Haar-cascade face detector.
"""
from __future__ import annotations
from typing import List, Optional, Tuple
import logging
import os

import cv2
import numpy as np

from facemood.config import Settings
from facemood.errors import NotReady, PreconditionError, StartupError
from facemood.models import BoundingBox

logger = logging.getLogger(__name__)


class FaceDetector:
    """Wraps a loaded `cv2.CascadeClassifier` with fixed detection parameters.

    scale_factor:  pyramid step, smaller is more thorough but slower
    min_neighbors: minimum overlapping detections to accept a region,
                   higher reduces false positives
    min_size/max_size: square side bounds in pixels, 0 disables the bound
    """

    def __init__(self,
                 cascade,
                 scale_factor: float = 1.1,
                 min_neighbors: int = 3,
                 min_size: int = 0,
                 max_size: int = 0):
        self._cascade = cascade
        self.scale_factor = float(scale_factor)
        self.min_neighbors = int(min_neighbors)
        self.min_size: Optional[Tuple[int, int]] = (int(min_size), int(min_size)) if min_size else None
        self.max_size: Optional[Tuple[int, int]] = (int(max_size), int(max_size)) if max_size else None

    @classmethod
    def load(cls, cascade_path: str, **params) -> "FaceDetector":
        """Load a cascade definition from disk.

        Raises:
            StartupError: file missing or OpenCV could not parse it.
        """
        if not os.path.exists(cascade_path):
            raise StartupError(f"Cascade not found: {cascade_path}")
        cascade = cv2.CascadeClassifier(cascade_path)
        if cascade.empty():
            raise StartupError(f"Could not load cascade: {cascade_path}")
        logger.info(f"[detector] loaded cascade {cascade_path}")
        return cls(cascade, **params)

    @classmethod
    def from_settings(cls, settings: Settings) -> "FaceDetector":
        return cls.load(
            settings.CASCADE_PATH,
            scale_factor=settings.SCALE_FACTOR,
            min_neighbors=settings.MIN_NEIGHBORS,
            min_size=settings.MIN_FACE_SIZE,
            max_size=settings.MAX_FACE_SIZE,
        )

    @property
    def ready(self) -> bool:
        return self._cascade is not None and not self._cascade.empty()

    def detect(self, gray: np.ndarray) -> List[BoundingBox]:
        """Return face boxes in detector order, clamped to the image.

        An empty list means no face was found and is not an error.
        """
        if not self.ready:
            raise NotReady("Face detector is not initialised")
        if gray is None or gray.ndim != 2:
            raise PreconditionError("Face detector expects a single-channel image")

        kwargs = {"scaleFactor": self.scale_factor, "minNeighbors": self.min_neighbors}
        if self.min_size:
            kwargs["minSize"] = self.min_size
        if self.max_size:
            kwargs["maxSize"] = self.max_size
        rects = self._cascade.detectMultiScale(gray, **kwargs)
        H, W = gray.shape[:2]
        boxes: List[BoundingBox] = []
        for r in rects if len(rects) else []:
            box = _clamp(int(r[0]), int(r[1]), int(r[2]), int(r[3]), W, H)
            if box is not None:
                boxes.append(box)
        logger.debug(f"[detector] faces={len(boxes)}")
        return boxes


def _clamp(x: int, y: int, w: int, h: int, W: int, H: int) -> Optional[BoundingBox]:
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(W, x + w), min(H, y + h)
    if x1 <= x0 or y1 <= y0:
        return None
    return BoundingBox(x=x0, y=y0, width=x1 - x0, height=y1 - y0)
