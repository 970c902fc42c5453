"""
Frame sources: camera / video file via OpenCV, or any iterable of images.
"""
from __future__ import annotations
from typing import Iterable, Iterator, Optional, Protocol, Union
import logging
import time

import cv2
import numpy as np

from facemood.errors import FrameUnavailable, StartupError
from facemood.frames import Frame

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    def next_frame(self) -> Optional[Frame]:
        """Block until a frame is ready. None once the source is stopped."""
        ...

    def stop(self) -> None:
        ...


class CameraSource:
    """OpenCV capture on a camera index or a video path.

    Read failures on a live camera are reported as FrameUnavailable up to
    `max_misses` in a row; after that, or at the end of a file, the source
    stops itself.
    """

    def __init__(self,
                 device: Union[int, str] = 0,
                 width: Optional[int] = None,
                 height: Optional[int] = None,
                 max_misses: int = 30):
        self.device = device
        self.max_misses = int(max_misses)
        self._is_file = isinstance(device, str)
        self._index = 0
        self._misses = 0
        self._stopped = False

        self._cap = cv2.VideoCapture(device)
        if not self._cap.isOpened():
            raise StartupError(f"Could not open video source: {device}")
        if not self._is_file:
            if width:
                self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
            if height:
                self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        logger.info(f"[source] opened {device}")

    @property
    def fps(self) -> float:
        return float(self._cap.get(cv2.CAP_PROP_FPS) or 25.0)

    def next_frame(self) -> Optional[Frame]:
        if self._stopped:
            return None
        ok, img = self._cap.read()
        if not ok or img is None:
            if self._is_file:
                self.stop()
                return None
            self._misses += 1
            if self._misses >= self.max_misses:
                logger.warning(f"[source] {self.max_misses} consecutive read failures; stopping")
                self.stop()
                return None
            raise FrameUnavailable(f"No frame from {self.device}")
        self._misses = 0
        frame = Frame(img, index=self._index, timestamp=time.time())
        self._index += 1
        return frame

    def stop(self) -> None:
        if not self._stopped:
            self._stopped = True
            self._cap.release()
            logger.info(f"[source] released {self.device}")

    def __enter__(self) -> "CameraSource":
        return self

    def __exit__(self, *exc) -> None:
        self.stop()


class IterableSource:
    """Yields frames from an iterable of BGR/gray arrays (stills, tests)."""

    def __init__(self, images: Iterable[np.ndarray]):
        self._it: Iterator[np.ndarray] = iter(images)
        self._index = 0
        self._stopped = False

    def next_frame(self) -> Optional[Frame]:
        if self._stopped:
            return None
        img = next(self._it, None)
        if img is None:
            self._stopped = True
            return None
        frame = Frame(img, index=self._index)
        self._index += 1
        return frame

    def stop(self) -> None:
        self._stopped = True
