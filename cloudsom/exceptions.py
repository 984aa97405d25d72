"""
Exception hierarchy for the SOM engine
"""


class SOMError(Exception):
    """Base exception for cloudsom."""


class DimensionMismatchError(SOMError, ValueError):
    """Raised when two vectors of different dimensionality are combined."""


class DegenerateStatisticsError(SOMError, ValueError):
    """Raised when a dataset dimension has zero variance and guarding is off."""


class EmptyDatasetError(SOMError, ValueError):
    """Raised when training or fitting is attempted on an empty dataset."""


class EmptyLatticeError(SOMError, ValueError):
    """Raised when a lattice holds no neurons."""


class ReadOnlyVectorError(SOMError, TypeError):
    """Raised when a frozen vector (e.g. a neuron position) is mutated."""
