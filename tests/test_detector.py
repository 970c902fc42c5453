import cv2
import numpy as np
import pytest

from conftest import DummyCascade
from facemood.config import Settings
from facemood.detector import FaceDetector
from facemood.errors import NotReady, PreconditionError, StartupError
from facemood.models import BoundingBox

GRAY = np.zeros((100, 100), dtype=np.uint8)

def test_detect_preserves_order_and_clamps():
    cascade = DummyCascade([(50, 50, 20, 20), (-5, -5, 20, 20), (90, 95, 30, 30)])
    boxes = FaceDetector(cascade).detect(GRAY)
    assert boxes == [
        BoundingBox(x=50, y=50, width=20, height=20),
        BoundingBox(x=0, y=0, width=15, height=15),
        BoundingBox(x=90, y=95, width=10, height=5),
    ]

def test_box_fully_outside_is_dropped():
    boxes = FaceDetector(DummyCascade([(120, 10, 10, 10)])).detect(GRAY)
    assert boxes == []

def test_no_faces_is_not_an_error():
    assert FaceDetector(DummyCascade()).detect(GRAY) == []

def test_fixed_parameters_forwarded():
    cascade = DummyCascade()
    FaceDetector(cascade, scale_factor=1.2, min_neighbors=5, min_size=30).detect(GRAY)
    assert cascade.kwargs == {"scaleFactor": 1.2, "minNeighbors": 5, "minSize": (30, 30)}

def test_uninitialised_cascade_is_not_ready():
    with pytest.raises(NotReady):
        FaceDetector(cv2.CascadeClassifier()).detect(GRAY)
    with pytest.raises(NotReady):
        FaceDetector(None).detect(GRAY)

def test_color_input_rejected():
    with pytest.raises(PreconditionError):
        FaceDetector(DummyCascade()).detect(np.zeros((10, 10, 3), dtype=np.uint8))

def test_load_missing_cascade():
    with pytest.raises(StartupError):
        FaceDetector.load("does_not_exist.xml")

def test_load_bundled_cascade_on_blank_frame():
    det = FaceDetector.from_settings(Settings())
    assert det.ready
    assert det.detect(np.full((120, 160), 128, dtype=np.uint8)) == []
