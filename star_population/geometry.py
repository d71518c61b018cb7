"""Vector helpers for positions in light years."""

import numpy as np

from .errors import NormalizingZeroVectorError

ORIGIN = np.zeros(3)
X_DIRECTION = np.array([1.0, 0.0, 0.0])


def as_position(vector) -> np.ndarray:
    """Copy a 3-vector into a float64 numpy array of shape (3,)."""
    position = np.array(vector, dtype=np.float64)
    if position.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {position.shape}")
    return position


def unit_vector(vector) -> np.ndarray:
    """
    Normalize a vector.

    Raises:
        NormalizingZeroVectorError: If the vector has zero length
    """
    vector = np.asarray(vector, dtype=np.float64)
    length = np.linalg.norm(vector)
    if length == 0.0:
        raise NormalizingZeroVectorError("Cannot normalize a zero-length vector")
    return vector / length
