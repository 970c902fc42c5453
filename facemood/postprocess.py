"""
Logits -> probabilities -> label.
"""
from __future__ import annotations
from typing import Sequence

import numpy as np

from facemood.errors import ConfigurationError
from facemood.models import ClassificationResult


def softmax(scores) -> np.ndarray:
    """Numerically stable softmax over a 1-D score vector."""
    s = np.asarray(scores, dtype=np.float64).reshape(-1)
    exps = np.exp(s - np.max(s))
    return exps / exps.sum()


def classify(scores, labels: Sequence[str]) -> ClassificationResult:
    """
    Turn raw scores into a ClassificationResult.

    The label is the argmax of the distribution; the first index wins ties.

    Raises:
        ConfigurationError: score and label counts differ (model and label
        table were loaded from mismatched artifacts).
    """
    s = np.asarray(scores).reshape(-1)
    if s.shape[0] != len(labels):
        raise ConfigurationError(
            f"Model produced {s.shape[0]} scores but label table has {len(labels)} entries"
        )
    probs = softmax(s)
    idx = int(np.argmax(probs))
    return ClassificationResult(
        label=labels[idx],
        confidence=float(probs[idx]),
        distribution=[float(p) for p in probs],
    )
