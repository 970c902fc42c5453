"""
Configuration for the emotion pipeline.
"""
from __future__ import annotations
from typing import List
from pydantic import BaseModel
import os

import cv2


def _default_cascade() -> str:
    return os.path.join(cv2.data.haarcascades, "haarcascade_frontalface_default.xml")


class Settings(BaseModel):
    """
    Runtime settings with environment-variable overrides.

    Detection parameters are fixed for the lifetime of a built pipeline:
      SCALE_FACTOR  pyramid step, smaller is more thorough but slower
      MIN_NEIGHBORS minimum overlapping detections to accept a region,
                    higher reduces false positives
    """
    CASCADE_PATH: str = os.getenv("CASCADE_PATH") or _default_cascade()
    MODEL_PATH: str = os.getenv("MODEL_PATH", "models/emotion_yolo11n_cls.onnx")
    LABELS_PATH: str = os.getenv("LABELS_PATH", "models/classes.json")
    PROVIDERS: List[str] = (os.getenv("PROVIDERS", "CPUExecutionProvider") or "CPUExecutionProvider").split(",")

    INPUT_SIZE: int = int(os.getenv("INPUT_SIZE", "64"))
    SCALE_FACTOR: float = float(os.getenv("SCALE_FACTOR", "1.1"))
    MIN_NEIGHBORS: int = int(os.getenv("MIN_NEIGHBORS", "3"))
    MIN_FACE_SIZE: int = int(os.getenv("MIN_FACE_SIZE", "30"))
    MAX_FACE_SIZE: int = int(os.getenv("MAX_FACE_SIZE", "0"))  # 0 -> unbounded

    CAMERA_INDEX: int = int(os.getenv("CAMERA_INDEX", "0"))
    FRAME_WIDTH: int = int(os.getenv("FRAME_WIDTH", "640"))
    FRAME_HEIGHT: int = int(os.getenv("FRAME_HEIGHT", "480"))
    LIVE_WINDOW_TITLE: str = os.getenv("LIVE_WINDOW_TITLE", "Emotion Recognition (q to quit)")

    def __init__(self, **data):
        super().__init__(**data)
        # Normalize PROVIDERS: accept "a, b" strings, drop blanks, keep CPU as last resort
        provs = self.PROVIDERS
        if isinstance(provs, str):
            provs = provs.split(",")
        provs = [p.strip() for p in provs if p and p.strip()]
        if "CPUExecutionProvider" not in provs:
            provs.append("CPUExecutionProvider")
        object.__setattr__(self, "PROVIDERS", provs)

        if self.SCALE_FACTOR <= 1.0:
            raise ValueError(f"SCALE_FACTOR must be > 1.0, got {self.SCALE_FACTOR}")
        if self.INPUT_SIZE <= 0:
            raise ValueError(f"INPUT_SIZE must be positive, got {self.INPUT_SIZE}")
