"""Visualization & video annotation helpers.

- draw_overlays: draw every candidate box, the primary box with its label and
  confidence, or a NO_FACE / ERROR banner
- annotate_video: run the pipeline over a video file and write an annotated copy
"""
from __future__ import annotations
import logging
import os
from typing import Tuple

import cv2
import numpy as np

from facemood.frames import Frame
from facemood.models import TickResult
from facemood.source import CameraSource

logger = logging.getLogger(__name__)

ACCENT = (136, 255, 0)          # BGR
CANDIDATE = (200, 200, 200)
LABEL_TEXT = (18, 26, 0)
FLAG = (0, 0, 255)


def format_label(label: str, confidence: float) -> str:
    return f"{label} {confidence * 100:.1f}%"


def draw_overlays(frame: np.ndarray,
                  tick: TickResult,
                  color: Tuple[int, int, int] = ACCENT) -> np.ndarray:
    """Draw the tick's boxes and labels on a copy of `frame`.

    Args:
        frame: BGR image
        tick: result of FramePipeline.process for this frame
        color: BGR accent for the primary face

    Returns:
        Annotated copy of the frame
    """
    out = frame.copy()
    if out.ndim == 2:
        out = cv2.cvtColor(out, cv2.COLOR_GRAY2BGR)
    elif out.shape[2] == 4:
        out = cv2.cvtColor(out, cv2.COLOR_BGRA2BGR)

    for box in tick.candidates:
        if box == tick.primary:
            continue
        cv2.rectangle(out, (box.x, box.y), (box.x + box.width, box.y + box.height), CANDIDATE, 1)

    if tick.status == "NO_FACE":
        cv2.putText(out, "NO_FACE", (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 1.0, FLAG, 2, cv2.LINE_AA)
    elif tick.status == "ERROR":
        cv2.putText(out, "ERROR", (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 1.0, FLAG, 2, cv2.LINE_AA)

    p = tick.primary
    if p is None:
        return out
    cv2.rectangle(out, (p.x, p.y), (p.x + p.width, p.y + p.height), color, 3)

    if tick.result is not None:
        text = format_label(tick.result.label, tick.result.confidence)
        scale, thickness, pad_x, pad_y = 0.5, 1, 10, 6
        (tw, th), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, scale, thickness)
        box_w, box_h = tw + pad_x * 2, th + pad_y * 2
        bx, by = p.x, max(0, p.y - box_h - 8)
        cv2.rectangle(out, (bx, by), (bx + box_w, by + box_h), color, -1)
        cv2.putText(out, text, (bx + pad_x, by + pad_y + th), cv2.FONT_HERSHEY_SIMPLEX,
                    scale, LABEL_TEXT, thickness, cv2.LINE_AA)
    return out


def annotate_video(input_path: str, output_path: str, pipeline, on_tick=None) -> str:
    """Run `pipeline` over every frame of a video and write the annotated result.

    `on_tick(tick, frame)` additionally receives every TickResult.

    Returns the path to the annotated video.
    """
    if not os.path.exists(input_path):
        raise FileNotFoundError(f"Video not found: {input_path}")

    source = CameraSource(input_path)
    writer = None
    try:
        def _sink(tick: TickResult, frame: Frame | None) -> None:
            nonlocal writer
            if on_tick is not None:
                on_tick(tick, frame)
            if frame is None:
                return
            if writer is None:
                fourcc = cv2.VideoWriter_fourcc(*"MJPG")
                writer = cv2.VideoWriter(output_path, fourcc, source.fps, (frame.width, frame.height))
            writer.write(draw_overlays(frame.pixels, tick))

        n = pipeline.run(source, _sink)
        logger.debug(f"[visual] annotated {n} frames -> {output_path}")
    finally:
        source.stop()
        if writer is not None:
            writer.release()
    return output_path
