"""
ONNX Runtime classification engine.
"""
from __future__ import annotations
from typing import List, Optional, Sequence
import logging
import os

import numpy as np
import onnxruntime as ort

from facemood.config import Settings
from facemood.errors import InferenceError, StartupError, TransientInferenceError

logger = logging.getLogger(__name__)


class InferenceEngine:
    """Single-input, single-output classifier over a [1, 3, S, S] tensor.

    Input and output names are read from the session once, at construction.
    """

    def __init__(self, session, input_size: Optional[int] = None):
        self.session = session
        inputs = session.get_inputs()
        outputs = session.get_outputs()
        if len(inputs) != 1 or len(outputs) != 1:
            raise StartupError(
                f"Expected a single-input single-output model, got {len(inputs)} inputs / {len(outputs)} outputs"
            )
        self.input_name: str = inputs[0].name
        self.output_name: str = outputs[0].name
        self._input_shape = list(inputs[0].shape or [])
        self._output_shape = list(outputs[0].shape or [])

        declared = _static_dim(self._input_shape, -1)
        self.input_size: int = int(input_size or declared or 64)
        if declared and input_size and declared != input_size:
            raise StartupError(f"Model expects {declared}x{declared} input, configured for {input_size}")

    @classmethod
    def load(cls, model_path: str,
             providers: Sequence[str] = ("CPUExecutionProvider",),
             input_size: Optional[int] = None) -> "InferenceEngine":
        """Create the ONNX Runtime session.

        Raises:
            StartupError: model missing or the runtime refused it.
        """
        if not os.path.exists(model_path):
            raise StartupError(f"Model not found: {model_path}")
        available = set(ort.get_available_providers())
        chosen = [p for p in providers if p in available] or ["CPUExecutionProvider"]

        session_options = ort.SessionOptions()
        session_options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        try:
            session = ort.InferenceSession(model_path, sess_options=session_options, providers=chosen)
        except Exception as e:
            raise StartupError(f"Could not load model {model_path}: {e}") from e

        logger.info(f"[inference] model={model_path} providers={session.get_providers()}")
        return cls(session, input_size=input_size)

    @classmethod
    def from_settings(cls, settings: Settings) -> "InferenceEngine":
        return cls.load(settings.MODEL_PATH, settings.PROVIDERS, input_size=settings.INPUT_SIZE)

    @property
    def expected_shape(self) -> tuple:
        return (1, 3, self.input_size, self.input_size)

    @property
    def output_width(self) -> Optional[int]:
        """Class count if the model declares it statically."""
        return _static_dim(self._output_shape, -1)

    def run(self, tensor: np.ndarray) -> np.ndarray:
        """
        Run one forward pass and return the flat score vector.

        Raises:
            InferenceError: tensor shape/dtype does not match the model input.
            TransientInferenceError: the runtime failed on this call.
        """
        if not isinstance(tensor, np.ndarray) or tuple(tensor.shape) != self.expected_shape:
            shape = getattr(tensor, "shape", None)
            raise InferenceError(f"Tensor shape {shape} != expected {self.expected_shape}")
        if tensor.dtype != np.float32:
            raise InferenceError(f"Tensor dtype {tensor.dtype} != float32")

        try:
            outputs = self.session.run([self.output_name], {self.input_name: tensor})
        except Exception as e:
            raise TransientInferenceError(f"Inference failed: {e}") from e
        scores = np.asarray(outputs[0], dtype=np.float32).reshape(-1)
        if not np.isfinite(scores).all():
            raise TransientInferenceError(f"Inference returned non-finite scores: {scores.tolist()}")
        return scores


def _static_dim(shape: List, index: int) -> Optional[int]:
    if not shape:
        return None
    try:
        dim = shape[index]
    except IndexError:
        return None
    return int(dim) if isinstance(dim, (int, np.integer)) and dim > 0 else None
