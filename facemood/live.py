# facemood/live.py
"""
Live (real-time) analysis.

- LiveAnalyzer: runs the frame pipeline on one background worker and keeps
  the latest TickResult for polling (used by the HTTP API)
- run_live_overlay: camera -> pipeline -> OpenCV window; press 'q' to quit
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

import cv2

from facemood.config import Settings
from facemood.frames import Frame
from facemood.models import LiveStatus, TickResult
from facemood.pipeline import FramePipeline, build_pipeline
from facemood.source import CameraSource, FrameSource
from facemood.visual import draw_overlays

logger = logging.getLogger(__name__)

SourceFactory = Callable[[], FrameSource]


def camera_factory(settings: Settings, camera_index: Optional[int] = None) -> SourceFactory:
    cam_idx = settings.CAMERA_INDEX if camera_index is None else camera_index
    return lambda: CameraSource(cam_idx, width=settings.FRAME_WIDTH, height=settings.FRAME_HEIGHT)


class LiveAnalyzer:
    """Single-worker live loop with a pollable last result."""

    def __init__(self, pipeline: FramePipeline, source_factory: SourceFactory):
        self.pipeline = pipeline
        self._source_factory = source_factory
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._last_tick: Optional[TickResult] = None
        self._ticks = 0
        self._started_at: Optional[float] = None
        self.error: Optional[str] = None

    # ---- lifecycle ----
    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Open the source and start the worker. False if already running."""
        if self.running:
            return False
        source = self._source_factory()
        self._stop.clear()
        with self._lock:
            self.error = None
        self._started_at = time.time()
        self._thread = threading.Thread(target=self._loop, args=(source,), daemon=True)
        self._thread.start()
        return True

    def stop(self, timeout: float | None = 5.0) -> bool:
        """Ask the worker to stop after the in-flight tick. False if not running."""
        if not self.running:
            return False
        self._stop.set()
        self._thread.join(timeout)
        return True

    def status(self) -> LiveStatus:
        with self._lock:
            return LiveStatus(
                running=self.running,
                started_at=self._started_at,
                ticks=self._ticks,
                last_tick=self._last_tick,
                error=self.error,
            )

    # ---- worker ----
    def _on_tick(self, tick: TickResult, frame: Optional[Frame]) -> None:
        with self._lock:
            self._last_tick = tick
            if frame is not None:
                self._ticks += 1

    def _loop(self, source: FrameSource) -> None:
        try:
            self.pipeline.run(source, self._on_tick, self._stop)
        except Exception as e:
            with self._lock:
                self.error = str(e)
            logger.exception("[live] pipeline loop stopped on fatal error")
        finally:
            source.stop()


def run_live_overlay(settings: Settings,
                     pipeline: Optional[FramePipeline] = None,
                     camera_index: Optional[int] = None) -> int:
    """
    Open the webcam, classify the primary face every frame and show the
    annotated stream. Press 'q' to quit.

    Returns the number of frames processed.
    """
    pipeline = pipeline or build_pipeline(settings)
    source = camera_factory(settings, camera_index)()
    stop = threading.Event()

    def _show(tick: TickResult, frame: Optional[Frame]) -> None:
        if frame is not None:
            cv2.imshow(settings.LIVE_WINDOW_TITLE, draw_overlays(frame.pixels, tick))
        if (cv2.waitKey(1) & 0xFF) == ord("q"):
            stop.set()

    try:
        return pipeline.run(source, _show, stop)
    finally:
        source.stop()
        cv2.destroyAllWindows()
