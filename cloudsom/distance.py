"""Distance calculation utilities for SOM."""

import numpy as np

from .exceptions import DimensionMismatchError


class DistanceCalculator:
    """Calculate distances between equally sized vectors."""

    @staticmethod
    def check_dimensions(a: np.ndarray, b: np.ndarray) -> None:
        """Reject operands whose trailing dimension differs."""
        if a.shape[-1] != b.shape[-1]:
            raise DimensionMismatchError(
                f"Dimension mismatch: {a.shape[-1]} != {b.shape[-1]}"
            )

    @staticmethod
    def euclidean(a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Calculate Euclidean distance."""
        DistanceCalculator.check_dimensions(a, b)
        return np.linalg.norm(b - a, axis=-1)

    @staticmethod
    def manhattan(a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Calculate Manhattan distance."""
        DistanceCalculator.check_dimensions(a, b)
        return np.sum(np.abs(b - a), axis=-1)
