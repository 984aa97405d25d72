"""
Configuration classes and enums for the SOM trainer
"""

from enum import Enum
from dataclasses import dataclass, asdict
from typing import Optional, Tuple, Dict


class InitStrategy(Enum):
    """How neuron weights are seeded on creation and reset"""

    RANDOM = "random"
    PCA = "pca"


class DegeneratePolicy(Enum):
    """What PCA standardization does with a zero-variance dimension"""

    GUARD = "guard"
    RAISE = "raise"


@dataclass
class TrainerConfig:
    """Centralized configuration management for SOM training parameters"""

    # Lattice and data space
    shape: Tuple[int, ...] = (40,)
    n_features: int = 3

    # Training state (decayed geometrically every step)
    learning_factor: float = 0.1
    neighbor_size: Optional[float] = None  # Auto-calculated if None
    learning_decay: float = 0.998
    neighbor_decay: float = 0.998

    # Initialization
    init_strategy: InitStrategy = InitStrategy.RANDOM
    pca_sample_size: Optional[int] = None
    std_epsilon: float = 1e-8
    degenerate_policy: DegeneratePolicy = DegeneratePolicy.GUARD

    # Reproducibility
    seed: Optional[int] = None

    # Weight snapshots for renderers
    snapshot_interval: Optional[int] = None

    def __post_init__(self):
        """Auto-calculate the neighbour size and validate ranges"""
        self.shape = tuple(int(s) for s in self.shape)
        if not self.shape or any(s < 1 for s in self.shape):
            raise ValueError(f"shape must contain positive sizes, got {self.shape}")
        if self.n_features < 1:
            raise ValueError(f"n_features must be positive, got {self.n_features}")

        if self.neighbor_size is None:
            self.neighbor_size = max(self.shape) / 2

        if not 0 < self.learning_factor <= 1:
            raise ValueError(
                f"learning_factor must be in (0, 1], got {self.learning_factor}"
            )
        if self.neighbor_size <= 0:
            raise ValueError(f"neighbor_size must be positive, got {self.neighbor_size}")
        for name in ("learning_decay", "neighbor_decay"):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        if self.pca_sample_size is not None and self.pca_sample_size < 1:
            raise ValueError(
                f"pca_sample_size must be positive, got {self.pca_sample_size}"
            )
        if self.snapshot_interval is not None and self.snapshot_interval < 1:
            raise ValueError(
                f"snapshot_interval must be positive, got {self.snapshot_interval}"
            )

    def to_dict(self) -> Dict:
        """Convert config to dictionary for serialization"""
        config_dict = asdict(self)
        # Convert enums to strings
        for key, value in config_dict.items():
            if isinstance(value, Enum):
                config_dict[key] = value.value
        config_dict["shape"] = list(self.shape)
        return config_dict

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "TrainerConfig":
        """Create config from dictionary"""
        config_dict = dict(config_dict)
        # Convert string back to enums
        enum_fields = {
            "init_strategy": InitStrategy,
            "degenerate_policy": DegeneratePolicy,
        }
        for field_name, enum_class in enum_fields.items():
            if field_name in config_dict and isinstance(config_dict[field_name], str):
                config_dict[field_name] = enum_class(config_dict[field_name])
        if "shape" in config_dict:
            config_dict["shape"] = tuple(config_dict["shape"])
        return cls(**config_dict)
