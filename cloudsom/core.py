"""
Core SOM training implementation
"""

import math
import threading
import time
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

import numpy as np
import structlog
from tqdm import tqdm

from .callbacks import Callback, SnapshotCallback
from .config import TrainerConfig, InitStrategy
from .distance import DistanceCalculator
from .exceptions import DimensionMismatchError, EmptyDatasetError, EmptyLatticeError
from .lattice import Lattice
from .observability import log_reset_metrics, log_run_metrics, log_step_metrics
from .pca import PCAInitializer
from .vector import Vector

logger = structlog.get_logger(__name__)


class TrainingState(NamedTuple):
    """Decay state read by callers for status display"""

    learning_factor: float
    neighbor_size: float
    steps: int


def _as_dataset(data) -> np.ndarray:
    if len(data) > 0 and isinstance(data[0], Vector):
        data = [v.to_array() for v in data]
    data = np.array(data, dtype=np.float64)

    if data.ndim == 1 and data.shape[0] == 0:
        raise EmptyDatasetError("Input data is empty")
    if data.ndim != 2:
        raise ValueError(f"Input data must be 2D array, got {data.ndim}D")
    if data.shape[0] == 0:
        raise EmptyDatasetError("Input data is empty")
    if np.any(np.isnan(data)) or np.any(np.isinf(data)):
        raise ValueError("Input data contains NaN or infinite values")
    return data


class SOMTrainer:
    """
    Online Kohonen training over a lattice of neurons

    Each step draws one sample uniformly from the dataset, finds its
    best-matching unit and pulls every neuron's weight towards the sample,
    scaled by a Gaussian of the lattice distance to the BMU. The learning
    factor and neighbour size then decay geometrically.

    ``step``, ``run`` and ``reset`` require exclusive access; they are
    serialized by a per-instance lock. Callers that need to cancel training
    should loop over ``step`` and check their own signal between calls.

    Args:
        data: Dataset of shape (n_samples, n_features) or a sequence of Vectors
        config: TrainerConfig; defaults are derived from the data if None
        lattice: Pre-built lattice whose weights are used as-is; its shape must
            equal ``config.shape``. When None a lattice of ``config.shape`` is
            built and initialized per ``config.init_strategy``
        rng: Random generator for sampling and initialization
        callbacks: Callbacks notified after every step
        verbose: Whether to show a progress bar in ``run``
    """

    def __init__(
        self,
        data,
        config: Optional[TrainerConfig] = None,
        lattice: Optional[Lattice] = None,
        rng: Optional[np.random.Generator] = None,
        callbacks: Optional[Sequence[Callback]] = None,
        verbose: bool = False,
    ):
        data = _as_dataset(data)
        if config is None:
            shape = lattice.shape if lattice is not None else (40,)
            config = TrainerConfig(shape=shape, n_features=data.shape[1])
        if data.shape[1] != config.n_features:
            raise DimensionMismatchError(
                f"Expected {config.n_features} features, got {data.shape[1]}"
            )

        self.config = config
        self.verbose = verbose
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self._lock = threading.RLock()

        data.flags.writeable = False
        self._data = data
        self.dataset = tuple(Vector(row, frozen=True) for row in data)

        build_lattice = lattice is None
        if build_lattice:
            lattice = Lattice.from_shape(config.shape, config.n_features)
        elif lattice.n_features != config.n_features:
            raise DimensionMismatchError(
                f"Lattice weights are {lattice.n_features}D, data is {config.n_features}D"
            )
        elif lattice.shape != config.shape:
            raise ValueError(
                f"Config shape {config.shape} does not match lattice shape {lattice.shape}"
            )
        self.lattice = lattice

        # Positions never change, so lattice distances are computed once
        positions = lattice.positions()
        self._lattice_distances = DistanceCalculator.euclidean(
            positions[:, np.newaxis, :], positions[np.newaxis, :, :]
        )

        self.learning_factor = config.learning_factor
        self.neighbor_size = config.neighbor_size
        self.steps = 0
        self.history: List[Dict[str, Any]] = []

        self.callbacks: List[Callback] = list(callbacks or [])
        self.snapshot_callback: Optional[SnapshotCallback] = None
        if config.snapshot_interval:
            self.snapshot_callback = SnapshotCallback(config.snapshot_interval)
            self.callbacks.append(self.snapshot_callback)

        if build_lattice:
            self._initialize_weights()

        logger.info(
            "Trainer created",
            shape=lattice.shape,
            n_neurons=len(lattice),
            n_samples=len(self.dataset),
            init_strategy=config.init_strategy.value,
        )

    @property
    def data(self) -> np.ndarray:
        """Read-only (n_samples, n_features) view of the dataset"""
        return self._data

    @property
    def state(self) -> TrainingState:
        return TrainingState(self.learning_factor, self.neighbor_size, self.steps)

    def _initialize_weights(self) -> None:
        """Give every neuron a fresh weight; positions are untouched"""
        if self.config.init_strategy == InitStrategy.PCA:
            initializer = PCAInitializer(
                sample_size=self.config.pca_sample_size,
                std_epsilon=self.config.std_epsilon,
                degenerate_policy=self.config.degenerate_policy,
                rng=self.rng,
            )
            weights = initializer.initial_weights(self.lattice, self._data)
        else:
            weights = self.rng.random((len(self.lattice), self.config.n_features))

        for neuron, weight in zip(self.lattice, weights):
            neuron.weight = Vector(weight)

    def best_matching_unit(self, sample: Vector) -> int:
        """
        Index of the neuron whose weight is closest to ``sample``

        Neurons are scanned in lattice order and a later neuron only replaces
        the incumbent when it is strictly closer, so the earliest wins ties.
        """
        bmu_index = None
        bmu_distance = math.inf
        for index, neuron in enumerate(self.lattice):
            distance = neuron.weight.euclidean_distance(sample)
            if bmu_index is None or distance < bmu_distance:
                bmu_index = index
                bmu_distance = distance

        if bmu_index is None:
            raise EmptyLatticeError("Cannot search for a BMU in an empty lattice")
        return bmu_index

    def _step(self) -> int:
        sample = self.dataset[int(self.rng.integers(len(self.dataset)))]
        bmu_index = self.best_matching_unit(sample)
        bmu_distances = self._lattice_distances[bmu_index].tolist()

        denominator = 2 * self.neighbor_size * self.neighbor_size

        for neuron, bmu_distance in zip(self.lattice, bmu_distances):
            if denominator > 0.0:
                decay_factor = math.exp(-bmu_distance * bmu_distance / denominator)
            else:
                # Neighbourhood has collapsed onto the BMU
                decay_factor = 1.0 if bmu_distance == 0.0 else 0.0
            lf = 1.0 - self.learning_factor * decay_factor
            neuron.weight.scalar_multiply(lf)
            neuron.weight.add(sample, 1.0 - lf)

        self.learning_factor *= self.config.learning_decay
        self.neighbor_size *= self.config.neighbor_decay
        self.steps += 1
        log_step_metrics(self.learning_factor, self.neighbor_size)
        return bmu_index

    def step(self) -> int:
        """Run a single training iteration and return the BMU index"""
        with self._lock:
            bmu_index = self._step()
            for callback in self.callbacks:
                callback.on_step_end(self.steps, self, bmu_index)
            return bmu_index

    def run(
        self, n_steps: int, callbacks: Optional[Sequence[Callback]] = None
    ) -> TrainingState:
        """
        Apply ``step`` n_steps times

        Args:
            n_steps: Number of iterations, >= 0
            callbacks: Extra callbacks for this batch only

        Returns:
            Final TrainingState
        """
        if n_steps < 0:
            raise ValueError(f"n_steps must be non-negative, got {n_steps}")

        with self._lock:
            active = self.callbacks + list(callbacks or [])
            for callback in active:
                callback.on_run_begin(self, n_steps)

            start_time = time.time()
            iterator = range(n_steps)
            if self.verbose:
                iterator = tqdm(iterator, desc="Training SOM")

            for i in iterator:
                bmu_index = self._step()
                for callback in active:
                    callback.on_step_end(self.steps, self, bmu_index)

                if self.verbose and i % 100 == 0:
                    iterator.set_postfix(
                        {
                            "lf": f"{self.learning_factor:.4f}",
                            "σ": f"{self.neighbor_size:.3f}",
                        }
                    )

            for callback in active:
                callback.on_run_end(self)

            log_run_metrics(len(self.lattice), time.time() - start_time)
            logger.debug("Batch finished", n_steps=n_steps, **self.state._asdict())
            return self.state

    def reset(self) -> TrainingState:
        """Restore the starting decay state and re-seed every neuron weight"""
        with self._lock:
            self.learning_factor = self.config.learning_factor
            self.neighbor_size = self.config.neighbor_size
            self.steps = 0
            self.history = []
            if self.snapshot_callback is not None:
                self.snapshot_callback.snapshots = []
            self._initialize_weights()

            log_reset_metrics()
            logger.info("Trainer reset", init_strategy=self.config.init_strategy.value)
            return self.state

    def _sample_distances(self, data) -> np.ndarray:
        data = self._data if data is None else _as_dataset(data)
        if data.shape[1] != self.config.n_features:
            raise DimensionMismatchError(
                f"Expected {self.config.n_features} features, got {data.shape[1]}"
            )
        weights = self.lattice.weights()
        return DistanceCalculator.euclidean(
            data[:, np.newaxis, :], weights[np.newaxis, :, :]
        )

    def quantization_error(self, data=None) -> float:
        """Mean squared distance from each sample to its BMU weight"""
        distances = self._sample_distances(data)
        return float(np.mean(distances.min(axis=1) ** 2))

    def topographic_error(self, data=None) -> float:
        """
        Fraction of samples whose first and second BMUs are not lattice neighbours
        """
        distances = self._sample_distances(data)
        if len(self.lattice) < 2:
            return 0.0

        ranked = np.argsort(distances, axis=1, kind="stable")[:, :2]
        errors = 0
        for first, second in ranked:
            gap = self.lattice[first].position.manhattan_distance(
                self.lattice[second].position
            )
            if gap != 1.0:
                errors += 1
        return errors / len(distances)

    def get_info(self) -> Dict:
        """Get comprehensive information about the trainer"""
        return {
            "config": self.config.to_dict(),
            "shape": self.lattice.shape,
            "n_neurons": len(self.lattice),
            "n_features": self.config.n_features,
            "n_samples": len(self.dataset),
            "steps": self.steps,
            "learning_factor": self.learning_factor,
            "neighbor_size": self.neighbor_size,
        }
