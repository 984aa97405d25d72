"""
Fixed-dimension numeric vector used for both lattice positions and weights
"""

from typing import Iterable, Iterator, List, Union

import numpy as np

from .distance import DistanceCalculator
from .exceptions import DimensionMismatchError, ReadOnlyVectorError


class Vector:
    """
    Ordered tuple of D real components.

    The dimension is fixed at construction. Mutating operations work in place
    and return ``self`` so they can be chained::

        weight.scalar_multiply(lf).add(sample, 1.0 - lf)

    Frozen vectors reject every mutating operation; neurons use them for
    their lattice positions.
    """

    __slots__ = ("_values", "_frozen")

    def __init__(self, values: Union[Iterable[float], np.ndarray], frozen: bool = False):
        array = np.array(values, dtype=np.float64)
        if array.ndim != 1:
            raise ValueError(f"Vector values must be 1D, got {array.ndim}D")
        if array.shape[0] == 0:
            raise ValueError("Vector must have at least one component")
        if frozen:
            array.flags.writeable = False
        self._values = array
        self._frozen = frozen

    @classmethod
    def zeros(cls, dim: int) -> "Vector":
        return cls(np.zeros(dim))

    @property
    def dim(self) -> int:
        return self._values.shape[0]

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return self.dim

    def __getitem__(self, index: int) -> float:
        return float(self._values[index])

    def __iter__(self) -> Iterator[float]:
        return iter(self.to_array())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.dim == other.dim and bool(np.array_equal(self._values, other._values))

    __hash__ = None

    def __repr__(self) -> str:
        components = ", ".join(f"{v:g}" for v in self._values)
        return f"Vector([{components}]{', frozen=True' if self._frozen else ''})"

    def _other_values(self, other: "Vector") -> np.ndarray:
        if not isinstance(other, Vector):
            raise TypeError(f"Expected Vector, got {type(other).__name__}")
        if other.dim != self.dim:
            raise DimensionMismatchError(
                f"Cannot combine {self.dim}D vector with {other.dim}D vector"
            )
        return other._values

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ReadOnlyVectorError("Vector is frozen and cannot be modified")

    def euclidean_distance(self, other: "Vector") -> float:
        return float(DistanceCalculator.euclidean(self._values, self._other_values(other)))

    def manhattan_distance(self, other: "Vector") -> float:
        """Grid distance; 1.0 between directly adjacent lattice positions."""
        return float(DistanceCalculator.manhattan(self._values, self._other_values(other)))

    def scalar_multiply(self, scalar: float) -> "Vector":
        self._check_mutable()
        self._values *= scalar
        return self

    def add(self, other: "Vector", scalar: float = 1.0) -> "Vector":
        """Accumulate ``other * scalar`` into this vector."""
        values = self._other_values(other)
        self._check_mutable()
        self._values += values * scalar
        return self

    def zero(self) -> "Vector":
        self._check_mutable()
        self._values[:] = 0.0
        return self

    def to_array(self) -> List[float]:
        return self._values.tolist()

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the components as a float64 array."""
        return self._values.copy()

    def clone(self) -> "Vector":
        """Return a new mutable vector with the same components."""
        return Vector(self._values)
