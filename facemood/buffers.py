"""
Per-tick buffer arena.

Every intermediate array a tick produces (grayscale copy, tensor, scores) is
registered here and dropped when the tick's `with` block exits, whichever
path it exits by. Nothing registered in an arena survives past its tick.
"""
from __future__ import annotations
from typing import Dict, Optional
import logging

import numpy as np

logger = logging.getLogger(__name__)


class TickArena:
    """Scoped owner of one tick's native buffers."""

    def __init__(self, tick_index: int = 0):
        self.tick_index = tick_index
        self._buffers: Dict[str, np.ndarray] = {}
        self.acquired = 0
        self.released = 0
        self._closed = False

    def acquire(self, name: str, buf: np.ndarray) -> np.ndarray:
        """Register `buf` under `name` and hand it back."""
        if self._closed:
            raise RuntimeError(f"Arena for tick {self.tick_index} is already released")
        if name in self._buffers:
            self._drop(name)
        self._buffers[name] = buf
        self.acquired += 1
        return buf

    def get(self, name: str) -> Optional[np.ndarray]:
        return self._buffers.get(name)

    @property
    def live(self) -> int:
        return len(self._buffers)

    def _drop(self, name: str) -> None:
        self._buffers.pop(name, None)
        self.released += 1

    def release_all(self) -> None:
        for name in list(self._buffers):
            self._drop(name)
        self._closed = True

    def __enter__(self) -> "TickArena":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release_all()
        logger.debug(f"[arena] tick={self.tick_index} acquired={self.acquired} released={self.released}")
