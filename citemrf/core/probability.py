"""
Pure helpers for two-state probability vectors.

Every function returns a new value; nothing mutates its arguments, so a
fallback taken during normalization is always visible to the caller.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..utils.exceptions import InferenceError, ValidationError


log = logging.getLogger(__name__)

NO = 0
YES = 1


def uniform() -> np.ndarray:
    return np.array([0.5, 0.5])


def normalize(vector: Sequence[float], diagnostics: Optional[List[str]] = None) -> np.ndarray:
    """
    Scale a (not-ref, ref) vector so its components sum to 1.

    A zero sum falls back to (0.5, 0.5); the fallback is logged and, when a
    diagnostics list is given, recorded in it.

    Raises:
        ValidationError: If the vector does not have exactly two components
        InferenceError: If a component is NaN or infinite
    """
    values = np.asarray(vector, dtype=float)
    if values.shape != (2,):
        raise ValidationError("Probability vector must have exactly two components",
                              "vector", str(list(np.ravel(values))))
    if not np.all(np.isfinite(values)):
        raise InferenceError("Probability vector is not finite", original_error=str(values.tolist()))
    total = values[NO] + values[YES]
    if total == 0:
        message = "probability vector summed to zero, using (0.5, 0.5)"
        log.warning(message)
        if diagnostics is not None:
            diagnostics.append(message)
        return uniform()
    return values / total


def min_max_scale(values: Sequence[float], include: Optional[Sequence[bool]] = None,
                  fallback: float = 0.5) -> Tuple[List[float], bool]:
    """
    Min-max scale values into [0, 1].

    Args:
        values: Raw values
        include: Optional mask; only included values define min and max,
                 but every value is scaled
        fallback: Value given to every entry when min == max

    Returns:
        The scaled values and whether the range was degenerate
    """
    considered = [v for i, v in enumerate(values) if include is None or include[i]]
    if not considered:
        return [fallback] * len(values), True
    low, high = min(considered), max(considered)
    if not high > low:
        return [fallback] * len(values), True
    span = high - low
    return [(v - low) / span for v in values], False


def sigmoid(x: float) -> float:
    """Logistic function, stable for large negative inputs."""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def as_pair(vector: np.ndarray) -> Tuple[float, float]:
    return float(vector[NO]), float(vector[YES])
