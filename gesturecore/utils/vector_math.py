"""
Geometric primitives shared by every gesture recognizer.
"""

import numpy as np

# Returned for degenerate (zero-length) vectors instead of NaN
NOT_SIMILAR = 0.0


def subtract(a, b) -> np.ndarray:
    """Vector pointing FROM ``a`` TO ``b`` (``b - a``)."""
    return np.asarray(b, dtype=np.float64) - np.asarray(a, dtype=np.float64)


def cosine_similarity(v1, v2) -> float:
    """Cosine of the angle between two vectors.

    Returns NOT_SIMILAR when either vector has zero length, so coincident
    landmarks fail similarity thresholds instead of producing NaN.
    """
    v1 = np.asarray(v1, dtype=np.float64)
    v2 = np.asarray(v2, dtype=np.float64)
    norm1 = float(np.linalg.norm(v1))
    norm2 = float(np.linalg.norm(v2))
    if norm1 == 0.0 or norm2 == 0.0:
        return NOT_SIMILAR
    return float(np.dot(v1, v2) / (norm1 * norm2))


def l1_distance(a, b) -> float:
    """Sum of absolute component differences."""
    return float(np.abs(subtract(a, b)).sum())


def within_per_axis(a, b, threshold: float, axes=(0, 1)) -> bool:
    """True when every listed axis differs by strictly less than ``threshold``."""
    delta = np.abs(subtract(a, b))
    return bool(all(delta[axis] < threshold for axis in axes))
