# facemood/pipeline.py
"""
Per-frame orchestration: detect -> select -> preprocess -> infer -> classify.

One tick at a time. `FramePipeline.process` runs a single tick; `FramePipeline.run`
is the loop that asks the source for the next frame only after the previous
tick has reached a terminal state.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple
import logging
import threading
import time

from facemood.buffers import TickArena
from facemood.config import Settings
from facemood.detector import FaceDetector
from facemood.errors import ConfigurationError, FrameUnavailable, TransientInferenceError
from facemood.frames import Frame
from facemood.inference import InferenceEngine
from facemood.labels import load_labels
from facemood.models import BoundingBox, ClassificationResult, TickResult, TickStatus
from facemood.postprocess import classify
from facemood.preprocess import preprocess
from facemood.selector import select_primary
from facemood.source import FrameSource

logger = logging.getLogger(__name__)

TickSink = Callable[[TickResult, Optional[Frame]], None]


class PipelineState(str, Enum):
    AWAITING_FRAME = "AwaitingFrame"
    DETECTING = "Detecting"
    SELECTING = "Selecting"
    NO_FACE = "NoFace"
    PREPROCESSING = "Preprocessing"
    INFERRING = "Inferring"
    POSTPROCESSING = "Postprocessing"
    EMITTING = "Emitting"


@dataclass(frozen=True)
class PipelineComponents:
    """Long-lived, read-only capabilities shared by every tick."""
    detector: FaceDetector
    engine: InferenceEngine
    labels: Tuple[str, ...]


class FramePipeline:
    def __init__(self, components: PipelineComponents, no_frame_backoff: float = 0.01):
        labels = tuple(components.labels)
        if not labels:
            raise ConfigurationError("Label table is empty")
        width = components.engine.output_width
        if width is not None and width != len(labels):
            raise ConfigurationError(
                f"Model outputs {width} classes but label table has {len(labels)} entries"
            )
        self.detector = components.detector
        self.engine = components.engine
        self.labels = labels
        self.no_frame_backoff = float(no_frame_backoff)

        self.state = PipelineState.AWAITING_FRAME
        self.ticks = 0
        self.last_arena: Optional[TickArena] = None
        # held for a whole tick; callers on other threads wait their turn
        self._tick_lock = threading.Lock()

    # ---- single tick ----
    def process(self, frame: Frame) -> TickResult:
        """Run one tick on `frame`.

        Fatal errors (NotReady, PreconditionError, ConfigurationError) propagate.
        A failed inference call becomes an ERROR tick. Concurrent callers
        (live worker and an HTTP upload) are serialised.
        """
        with self._tick_lock:
            return self._tick(frame)

    def _tick(self, frame: Frame) -> TickResult:
        t0 = time.perf_counter()
        candidates: list[BoundingBox] = []
        primary: Optional[BoundingBox] = None
        arena = TickArena(frame.index)
        self.last_arena = arena
        try:
            with arena:
                self.state = PipelineState.DETECTING
                gray = arena.acquire("gray", frame.to_gray())
                candidates = self.detector.detect(gray)

                self.state = PipelineState.SELECTING
                primary = select_primary(candidates)
                if primary is None:
                    self.state = PipelineState.NO_FACE
                    return self._emit(frame, "NO_FACE", candidates, None, None, None, t0)

                self.state = PipelineState.PREPROCESSING
                tensor = arena.acquire("tensor", preprocess(frame, primary, self.engine.input_size))

                self.state = PipelineState.INFERRING
                scores = arena.acquire("scores", self.engine.run(tensor))

                self.state = PipelineState.POSTPROCESSING
                result = classify(scores, self.labels)
                return self._emit(frame, "OK", candidates, primary, result, None, t0)
        except TransientInferenceError as e:
            logger.warning(f"[pipeline] tick={frame.index} inference failed: {e}")
            return self._emit(frame, "ERROR", candidates, primary, None, str(e), t0)
        finally:
            self.ticks += 1
            self.state = PipelineState.AWAITING_FRAME

    def _emit(self,
              frame: Frame,
              status: TickStatus,
              candidates: Sequence[BoundingBox],
              primary: Optional[BoundingBox],
              result: Optional[ClassificationResult],
              error: Optional[str],
              t0: float) -> TickResult:
        self.state = PipelineState.EMITTING
        tick = TickResult(
            frame_index=frame.index,
            timestamp=frame.timestamp,
            status=status,
            candidates=list(candidates),
            primary=primary,
            result=result,
            error=error,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 3),
        )
        if result is not None:
            logger.debug(f"[pipeline] tick={frame.index} {result.label} {result.confidence:.3f} "
                         f"latency={tick.latency_ms}ms")
        else:
            logger.debug(f"[pipeline] tick={frame.index} status={status}")
        return tick

    # ---- loop ----
    def run(self,
            source: FrameSource,
            sink: TickSink,
            stop_event: Optional[threading.Event] = None) -> int:
        """
        Drive ticks until the source stops or `stop_event` is set.

        The next frame is requested only after the current tick has been
        handed to `sink`, so frames captured meanwhile are dropped and results
        leave in capture order. An in-flight tick always finishes.

        Returns:
            Number of frames processed.
        """
        processed = 0
        logger.info("[pipeline] loop started")
        while stop_event is None or not stop_event.is_set():
            try:
                frame = source.next_frame()
            except FrameUnavailable as e:
                logger.debug(f"[pipeline] no frame: {e}")
                sink(TickResult(frame_index=-1, timestamp=time.time(), status="NO_FRAME"), None)
                time.sleep(self.no_frame_backoff)
                continue
            if frame is None:
                break
            tick = self.process(frame)
            sink(tick, frame)
            processed += 1
        logger.info(f"[pipeline] loop finished; frames={processed}")
        return processed


def build_pipeline(settings: Settings) -> FramePipeline:
    """
    Load cascade, model and label table and wire them into a pipeline.

    Raises:
        StartupError / ConfigurationError before any tick can run.
    """
    logger.info("[pipeline] loading capabilities")
    detector = FaceDetector.from_settings(settings)
    engine = InferenceEngine.from_settings(settings)
    labels = load_labels(settings.LABELS_PATH)
    return FramePipeline(PipelineComponents(detector=detector, engine=engine, labels=labels))
