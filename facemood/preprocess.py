"""
Face crop -> model-ready tensor.
"""
from __future__ import annotations
import logging

import cv2
import numpy as np

from facemood.errors import PreconditionError
from facemood.frames import Frame
from facemood.models import BoundingBox

logger = logging.getLogger(__name__)

DEFAULT_INPUT_SIZE = 64

_TO_RGB = {
    1: cv2.COLOR_GRAY2RGB,
    3: cv2.COLOR_BGR2RGB,
    4: cv2.COLOR_BGRA2RGB,  # alpha discarded
}


def preprocess(frame: Frame, region: BoundingBox, size: int = DEFAULT_INPUT_SIZE) -> np.ndarray:
    """
    Crop `region` out of `frame` and turn it into a planar float tensor.

    Steps:
      1. crop (the region is already clamped by the detector; no re-clamp)
      2. bilinear resize to size x size
      3. reorder channels to R, G, B
      4. divide by 255 -> [0.0, 1.0]
      5. HWC -> [1, 3, size, size], row-major within each plane

    Raises:
        PreconditionError: region has no area or lies outside the frame.
    """
    if region.width <= 0 or region.height <= 0:
        raise PreconditionError(f"Region has no area: {region}")

    x, y, w, h = region.as_tuple()
    chip = frame.pixels[y:y + h, x:x + w]
    if chip.shape[0] != h or chip.shape[1] != w:
        raise PreconditionError(f"Region {region} exceeds frame {frame.width}x{frame.height}")

    resized = cv2.resize(chip, (size, size), interpolation=cv2.INTER_LINEAR)
    rgb = cv2.cvtColor(resized, _TO_RGB[frame.channels])

    planar = rgb.astype(np.float32) / np.float32(255.0)
    tensor = np.ascontiguousarray(planar.transpose(2, 0, 1)[np.newaxis, ...])
    return tensor


def normalize_pixel(value: int) -> float:
    """Scalar form of step 4."""
    return float(np.float32(value) / np.float32(255.0))
