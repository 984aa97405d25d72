"""
Callback system for monitoring SOM training
"""

from abc import ABC, abstractmethod
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .core import SOMTrainer
    from .vector import Vector


class Callback(ABC):
    """Abstract base class for callbacks"""

    @abstractmethod
    def on_run_begin(self, trainer: "SOMTrainer", n_steps: int) -> None:
        pass

    @abstractmethod
    def on_step_end(self, step: int, trainer: "SOMTrainer", bmu_index: int) -> None:
        pass

    @abstractmethod
    def on_run_end(self, trainer: "SOMTrainer") -> None:
        pass


class SnapshotCallback(Callback):
    """
    Clone all neuron weights every ``interval`` steps

    Renderers use consecutive snapshots as before/after frames; the trainer
    itself keeps no animation state.
    """

    def __init__(self, interval: int = 1):
        if interval < 1:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self.snapshots: List[List["Vector"]] = []

    def capture(self, trainer: "SOMTrainer") -> None:
        self.snapshots.append([neuron.weight.clone() for neuron in trainer.lattice])

    def on_run_begin(self, trainer: "SOMTrainer", n_steps: int) -> None:
        if not self.snapshots:
            self.capture(trainer)

    def on_step_end(self, step: int, trainer: "SOMTrainer", bmu_index: int) -> None:
        if step % self.interval == 0:
            self.capture(trainer)

    def on_run_end(self, trainer: "SOMTrainer") -> None:
        pass


class HistoryCallback(Callback):
    """Append decay state and quantization error to ``trainer.history``"""

    def __init__(self, interval: int = 100):
        if interval < 1:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval

    def record(self, trainer: "SOMTrainer") -> None:
        trainer.history.append(
            {
                "step": trainer.steps,
                "learning_factor": trainer.learning_factor,
                "neighbor_size": trainer.neighbor_size,
                "qe": trainer.quantization_error(),
            }
        )

    def on_run_begin(self, trainer: "SOMTrainer", n_steps: int) -> None:
        pass

    def on_step_end(self, step: int, trainer: "SOMTrainer", bmu_index: int) -> None:
        if step % self.interval == 0:
            self.record(trainer)

    def on_run_end(self, trainer: "SOMTrainer") -> None:
        if not trainer.history or trainer.history[-1]["step"] != trainer.steps:
            self.record(trainer)
