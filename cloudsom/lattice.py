"""
Neuron and lattice data model
"""

from itertools import product
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from .exceptions import DimensionMismatchError, EmptyLatticeError
from .vector import Vector


class Neuron:
    """
    A lattice node pairing a fixed position with a mutable weight.

    Args:
        position: Coordinate in lattice space (frozen on construction)
        weight: Coordinate in data space, copied on construction and on
            assignment, then updated in place during training
    """

    __slots__ = ("_position", "_weight")

    def __init__(self, position: Vector, weight: Vector):
        self._position = Vector(position.to_numpy(), frozen=True)
        self._weight = weight.clone()

    @property
    def position(self) -> Vector:
        return self._position

    @property
    def weight(self) -> Vector:
        return self._weight

    @weight.setter
    def weight(self, value: Vector) -> None:
        if value.dim != self._weight.dim:
            raise DimensionMismatchError(
                f"Expected {self._weight.dim}D weight, got {value.dim}D"
            )
        self._weight = value.clone()

    def __repr__(self) -> str:
        return f"Neuron(position={self._position.to_array()}, weight={self._weight.to_array()})"


class Lattice:
    """
    Ordered collection of neurons on a regular 1D or 2D grid.

    Insertion order is the iteration order, and therefore the order in which
    best-matching-unit ties are resolved.
    """

    def __init__(self, neurons: Sequence[Neuron]):
        neurons = list(neurons)
        if not neurons:
            raise EmptyLatticeError("Lattice must contain at least one neuron")

        position_dim = neurons[0].position.dim
        n_features = neurons[0].weight.dim
        for neuron in neurons[1:]:
            if neuron.position.dim != position_dim:
                raise DimensionMismatchError(
                    f"Mixed lattice dimensions: {position_dim} and {neuron.position.dim}"
                )
            if neuron.weight.dim != n_features:
                raise DimensionMismatchError(
                    f"Mixed weight dimensions: {n_features} and {neuron.weight.dim}"
                )

        self._neurons: List[Neuron] = neurons
        self.position_dim = position_dim
        self.n_features = n_features

        coords = self.positions()
        self._origin = coords.min(axis=0)
        self.extent = coords.max(axis=0) - self._origin

    @classmethod
    def from_shape(cls, shape: Tuple[int, ...], n_features: int) -> "Lattice":
        """
        Build a regular grid with zero weights

        ``(40,)`` gives a chain of 40 neurons, ``(w, h)`` a w x h grid laid
        out with x as the outer index.
        """
        if not shape or any(int(s) < 1 for s in shape):
            raise ValueError(f"Lattice shape must contain positive sizes, got {shape}")
        if n_features < 1:
            raise ValueError(f"n_features must be positive, got {n_features}")

        neurons = [
            Neuron(Vector(coord), Vector.zeros(n_features))
            for coord in product(*(range(int(s)) for s in shape))
        ]
        return cls(neurons)

    @property
    def shape(self) -> Tuple[int, ...]:
        """Number of distinct coordinates along each axis"""
        coords = self.positions()
        return tuple(len(np.unique(coords[:, axis])) for axis in range(self.position_dim))

    def __len__(self) -> int:
        return len(self._neurons)

    def __iter__(self) -> Iterator[Neuron]:
        return iter(self._neurons)

    def __getitem__(self, index: int) -> Neuron:
        return self._neurons[index]

    def normalized_position(self, neuron: Neuron) -> np.ndarray:
        """Map a neuron's position into [0, 1] per axis (0.5 on flat axes)."""
        coords = neuron.position.to_numpy() - self._origin
        safe_extent = np.where(self.extent == 0, 1.0, self.extent)
        normalized = coords / safe_extent
        return np.where(self.extent == 0, 0.5, normalized)

    def positions(self) -> np.ndarray:
        return np.array([n.position.to_array() for n in self._neurons])

    def weights(self) -> np.ndarray:
        return np.array([n.weight.to_array() for n in self._neurons])

    def neighbors(self, index: int) -> List[int]:
        """Indices of neurons directly adjacent to ``index`` on the grid."""
        origin = self._neurons[index].position
        return [
            i
            for i, neuron in enumerate(self._neurons)
            if origin.manhattan_distance(neuron.position) == 1.0
        ]

    def edges(self) -> List[Tuple[int, int]]:
        """All adjacent index pairs ``(i, j)`` with ``i < j``."""
        return [
            (i, j)
            for i in range(len(self._neurons))
            for j in range(i + 1, len(self._neurons))
            if self._neurons[i].position.manhattan_distance(self._neurons[j].position)
            == 1.0
        ]
