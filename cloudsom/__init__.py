"""
Kohonen Self-Organizing Map engine for 3D point clouds

Generic vectors, a neuron lattice, an online SOM trainer and a PCA-based
weight initializer. Rendering is left to the caller, which reads neuron
positions and weights after each batch of steps.
"""

from .core import SOMTrainer, TrainingState
from .config import TrainerConfig, InitStrategy, DegeneratePolicy
from .vector import Vector
from .lattice import Neuron, Lattice
from .pca import PCABasis, PCAInitializer
from .callbacks import Callback, SnapshotCallback, HistoryCallback
from .exceptions import (
    SOMError,
    DimensionMismatchError,
    DegenerateStatisticsError,
    EmptyDatasetError,
    EmptyLatticeError,
    ReadOnlyVectorError,
)
from .observability import setup_logging, trace_operation, get_metrics

__version__ = "0.1.0"

__all__ = [
    "SOMTrainer",
    "TrainingState",
    "TrainerConfig",
    "InitStrategy",
    "DegeneratePolicy",
    "Vector",
    "Neuron",
    "Lattice",
    "PCABasis",
    "PCAInitializer",
    "Callback",
    "SnapshotCallback",
    "HistoryCallback",
    "SOMError",
    "DimensionMismatchError",
    "DegenerateStatisticsError",
    "EmptyDatasetError",
    "EmptyLatticeError",
    "ReadOnlyVectorError",
    "setup_logging",
    "trace_operation",
    "get_metrics",
]
