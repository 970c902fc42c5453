import os
import cv2
import numpy as np

from facemood.models import BoundingBox, ClassificationResult, TickResult
from facemood.visual import annotate_video, draw_overlays, format_label

BOX = BoundingBox(x=10, y=10, width=15, height=12)
OTHER = BoundingBox(x=2, y=25, width=8, height=8)

def _tick(status, primary=None, result=None, candidates=()):
    return TickResult(frame_index=0, timestamp=0.0, status=status,
                      candidates=list(candidates), primary=primary, result=result)

def test_draw_overlays_cases():
    frame = np.zeros((40, 40, 3), dtype=np.uint8)
    out1 = draw_overlays(frame, _tick("NO_FACE"))
    assert out1.shape == frame.shape and out1.any()
    out2 = draw_overlays(frame, _tick("ERROR", primary=BOX, candidates=[BOX]))
    assert out2.shape == frame.shape
    res = ClassificationResult(label="happy", confidence=0.87, distribution=[0.87, 0.13])
    out3 = draw_overlays(frame, _tick("OK", primary=BOX, result=res, candidates=[OTHER, BOX]))
    assert out3.shape == frame.shape and out3.any()
    assert not frame.any()  # input untouched

def test_draw_overlays_gray_and_alpha_frames():
    gray = np.zeros((30, 30), dtype=np.uint8)
    assert draw_overlays(gray, _tick("NO_FACE")).shape == (30, 30, 3)
    bgra = np.zeros((30, 30, 4), dtype=np.uint8)
    assert draw_overlays(bgra, _tick("NO_FACE")).shape == (30, 30, 3)

def test_format_label():
    assert format_label("sad", 0.4624) == "sad 46.2%"

def test_annotate_video(make_pipeline, tmp_path):
    h, w = 32, 32
    in_path = str(tmp_path / 'in.avi')
    out_path = str(tmp_path / 'out.avi')
    fourcc = cv2.VideoWriter_fourcc(*'MJPG')
    writer = cv2.VideoWriter(in_path, fourcc, 5, (w, h))
    for _ in range(6):
        writer.write(np.zeros((h, w, 3), dtype=np.uint8))
    writer.release()

    pipeline, _, session = make_pipeline(rects=[(4, 4, 20, 20)])
    ticks = []
    res = annotate_video(in_path, out_path, pipeline, on_tick=lambda t, f: ticks.append(t))
    assert os.path.exists(res)
    assert len(ticks) >= 5 and all(t.status == "OK" for t in ticks)
    cap = cv2.VideoCapture(out_path)
    assert cap.isOpened()
    frames = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
    cap.release()
    assert frames >= 5
