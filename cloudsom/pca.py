"""
PCA-based weight initialization

Neurons are seeded along the dominant directions of the dataset instead of
uniformly at random, which avoids tangled lattices early in training.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog
from sklearn.preprocessing import StandardScaler

from .config import DegeneratePolicy
from .exceptions import (
    DegenerateStatisticsError,
    DimensionMismatchError,
    EmptyDatasetError,
)
from .lattice import Lattice

logger = structlog.get_logger(__name__)


def _as_matrix(data) -> np.ndarray:
    data = np.asarray(data, dtype=np.float64)
    if data.ndim != 2:
        raise ValueError(f"Input data must be 2D array, got {data.ndim}D")
    if data.shape[0] == 0:
        raise EmptyDatasetError("Input data is empty")
    if np.any(np.isnan(data)) or np.any(np.isinf(data)):
        raise ValueError("Input data contains NaN or infinite values")
    return data


@dataclass(frozen=True)
class PCABasis:
    """
    Low-rank linear approximation of a dataset.

    Attributes:
        mean: Per-dimension mean, shape (D,)
        std: Per-dimension standard deviation after guarding, shape (D,)
        components: Orthonormal projection matrix, shape (D, k)
        lower: Minimum of the projected sample along each axis, shape (k,)
        upper: Maximum of the projected sample along each axis, shape (k,)
    """

    mean: np.ndarray
    std: np.ndarray
    components: np.ndarray
    lower: np.ndarray
    upper: np.ndarray

    def __post_init__(self):
        for name in ("mean", "std", "components", "lower", "upper"):
            array = np.array(getattr(self, name), dtype=np.float64)
            array.flags.writeable = False
            object.__setattr__(self, name, array)

    @property
    def n_features(self) -> int:
        return self.components.shape[0]

    @property
    def n_components(self) -> int:
        return self.components.shape[1]

    @classmethod
    def fit(
        cls,
        data,
        n_components: int,
        std_epsilon: float = 1e-8,
        degenerate_policy: DegeneratePolicy = DegeneratePolicy.GUARD,
    ) -> "PCABasis":
        """
        Derive the basis from a (sub)sample of the dataset

        Args:
            data: Samples of shape (m, D)
            n_components: Retained dimensionality k, 1 <= k <= D
            std_epsilon: Standard deviations at or below this are degenerate
            degenerate_policy: GUARD replaces degenerate deviations by 1.0,
                RAISE rejects the dataset

        Returns:
            Immutable PCABasis
        """
        data = _as_matrix(data)
        n_samples, n_features = data.shape
        if not 1 <= n_components <= n_features:
            raise ValueError(
                f"n_components must be in [1, {n_features}], got {n_components}"
            )

        scaler = StandardScaler().fit(data)
        mean = scaler.mean_
        std = np.sqrt(scaler.var_)

        degenerate = std <= std_epsilon
        if np.any(degenerate):
            dims = np.flatnonzero(degenerate).tolist()
            if degenerate_policy == DegeneratePolicy.RAISE:
                raise DegenerateStatisticsError(
                    f"Zero variance in dimension(s) {dims}"
                )
            logger.warning(
                "Guarding zero-variance dimensions", dimensions=dims, epsilon=std_epsilon
            )
            std = np.where(degenerate, 1.0, std)

        standardized = (data - mean) / std
        covariance = standardized.T @ standardized / n_samples
        u, _, _ = np.linalg.svd(covariance)
        components = u[:, :n_components]

        projected = standardized @ components
        logger.debug(
            "PCA basis fitted",
            n_samples=n_samples,
            n_features=n_features,
            n_components=n_components,
        )
        return cls(
            mean=mean,
            std=std,
            components=components,
            lower=projected.min(axis=0),
            upper=projected.max(axis=0),
        )

    def _check_width(self, values: np.ndarray, expected: int) -> None:
        if values.shape[-1] != expected:
            raise DimensionMismatchError(
                f"Expected {expected} components, got {values.shape[-1]}"
            )

    def rescale(self, latent) -> np.ndarray:
        """Map normalized [0, 1]^k coordinates into the observed projection range."""
        latent = np.asarray(latent, dtype=np.float64)
        self._check_width(latent, self.n_components)
        return latent * (self.upper - self.lower) + self.lower

    def recover(self, latent) -> np.ndarray:
        """Map normalized latent coordinates, (k,) or (n, k), back into data space."""
        raw = self.rescale(latent) @ self.components.T
        return raw * self.std + self.mean

    def project(self, data) -> np.ndarray:
        """Map data-space points, (D,) or (n, D), to normalized latent coordinates."""
        data = np.asarray(data, dtype=np.float64)
        self._check_width(data, self.n_features)
        projected = ((data - self.mean) / self.std) @ self.components
        value_range = self.upper - self.lower
        safe_range = np.where(value_range == 0, 1.0, value_range)
        return (projected - self.lower) / safe_range


class PCAInitializer:
    """
    Seeds lattice weights from a PCA basis of the dataset

    Each neuron's normalized lattice coordinate is fed through
    ``PCABasis.recover`` so a chain is laid along the first principal axis
    and a grid spans the first two.
    """

    def __init__(
        self,
        sample_size: Optional[int] = None,
        std_epsilon: float = 1e-8,
        degenerate_policy: DegeneratePolicy = DegeneratePolicy.GUARD,
        rng: Optional[np.random.Generator] = None,
    ):
        self.sample_size = sample_size
        self.std_epsilon = std_epsilon
        self.degenerate_policy = degenerate_policy
        self.rng = rng if rng is not None else np.random.default_rng()

    def fit(self, data, n_components: int) -> PCABasis:
        data = _as_matrix(data)
        if self.sample_size is not None and self.sample_size < len(data):
            rows = self.rng.choice(len(data), self.sample_size, replace=False)
            data = data[np.sort(rows)]
        return PCABasis.fit(
            data,
            n_components,
            std_epsilon=self.std_epsilon,
            degenerate_policy=self.degenerate_policy,
        )

    def initial_weights(self, lattice: Lattice, data) -> np.ndarray:
        """Return an (n_neurons, D) array of starting weights for ``lattice``."""
        data = _as_matrix(data)
        if data.shape[1] != lattice.n_features:
            raise DimensionMismatchError(
                f"Expected {lattice.n_features} features, got {data.shape[1]}"
            )
        if lattice.position_dim > data.shape[1]:
            raise ValueError(
                f"Cannot seed a {lattice.position_dim}D lattice from "
                f"{data.shape[1]}D data"
            )

        basis = self.fit(data, lattice.position_dim)
        latent = np.array([lattice.normalized_position(n) for n in lattice])
        return basis.recover(latent)
