"""
Frame wrapper handed through one pipeline tick.
"""
from __future__ import annotations
from typing import Optional
import time

import cv2
import numpy as np


class Frame:
    """Immutable BGR/BGRA (OpenCV order) or grayscale image for a single tick.

    The pixel buffer is flagged read-only so no stage can mutate what the
    next stage reads.
    """
    __slots__ = ("_pixels", "index", "timestamp")

    def __init__(self, pixels: np.ndarray, index: int = 0, timestamp: Optional[float] = None):
        if not isinstance(pixels, np.ndarray) or pixels.ndim not in (2, 3):
            raise ValueError("Frame pixels must be a 2-D or 3-D numpy array")
        if pixels.ndim == 3 and pixels.shape[2] not in (3, 4):
            raise ValueError(f"Unsupported channel count: {pixels.shape[2]}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"Frame pixels must be uint8, got {pixels.dtype}")
        pixels = np.ascontiguousarray(pixels).view()
        pixels.setflags(write=False)
        self._pixels = pixels
        self.index = int(index)
        self.timestamp = time.time() if timestamp is None else float(timestamp)

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def channels(self) -> int:
        return 1 if self._pixels.ndim == 2 else int(self._pixels.shape[2])

    def to_gray(self) -> np.ndarray:
        """Single-channel copy for the detector."""
        if self.channels == 1:
            return self._pixels.copy()
        code = cv2.COLOR_BGRA2GRAY if self.channels == 4 else cv2.COLOR_BGR2GRAY
        return cv2.cvtColor(self._pixels, code)

    def __repr__(self) -> str:
        return f"Frame(index={self.index}, {self.width}x{self.height}x{self.channels})"
