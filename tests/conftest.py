import threading
import time

import numpy as np
import pytest

from facemood.detector import FaceDetector
from facemood.inference import InferenceEngine
from facemood.pipeline import FramePipeline, PipelineComponents

LABELS = ("happy", "sad", "neutral")


class Node:
    def __init__(self, name, shape):
        self.name = name
        self.shape = shape


class DummyCascade:
    """Stands in for cv2.CascadeClassifier; returns fixed rects."""
    def __init__(self, rects=(), empty=False):
        self.rects = list(rects)
        self._empty = empty
        self.calls = 0
        self.kwargs = None
    def empty(self):
        return self._empty
    def detectMultiScale(self, gray, **kwargs):
        self.calls += 1
        self.kwargs = kwargs
        if not self.rects:
            return ()
        return np.array(self.rects, dtype=np.int32).reshape(-1, 4)


class DummySession:
    """Stands in for onnxruntime.InferenceSession."""
    def __init__(self, scores=(2.0, 2.0, 0.0), input_shape=(1, 3, 64, 64), fail=False):
        self.scores = np.asarray(scores, dtype=np.float32)
        self.fail = fail
        self.calls = []
        self._inputs = [Node("images", list(input_shape))]
        self._outputs = [Node("output0", [1, len(self.scores)])]
    def get_inputs(self):
        return self._inputs
    def get_outputs(self):
        return self._outputs
    def get_providers(self):
        return ["CPUExecutionProvider"]
    def run(self, names, feeds):
        self.calls.append((names, feeds))
        if self.fail:
            raise RuntimeError("out of memory")
        return [self.scores.reshape(1, -1)]


class SlowSession(DummySession):
    """DummySession that sleeps in run() and records peak overlap."""
    def __init__(self, *a, delay=0.01, **k):
        super().__init__(*a, **k)
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()
    def run(self, names, feeds):
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self.delay)
            return super().run(names, feeds)
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture
def labels():
    return LABELS


@pytest.fixture
def make_pipeline():
    """Factory: make_pipeline(rects, scores, fail) -> (pipeline, cascade, session)."""
    def _make(rects=(), scores=(2.0, 2.0, 0.0), fail=False, labels=LABELS):
        cascade = DummyCascade(rects)
        session = DummySession(scores, fail=fail)
        pipeline = FramePipeline(PipelineComponents(
            detector=FaceDetector(cascade),
            engine=InferenceEngine(session),
            labels=tuple(labels),
        ))
        return pipeline, cascade, session
    return _make


@pytest.fixture
def bgr_frame():
    rng = np.random.RandomState(7)
    return rng.randint(0, 256, size=(240, 320, 3), dtype=np.uint8)
