"""
Static plot export for trained lattices
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

# Set matplotlib backend to Agg (non-interactive) before importing pyplot
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

if TYPE_CHECKING:
    from .core import SOMTrainer


def ensure_plots_dir(save_path: str) -> str:
    """Ensure plots directory exists and return full path"""
    if not os.path.isabs(save_path):
        plots_dir = Path("plots")
        plots_dir.mkdir(exist_ok=True)
        return str(plots_dir / save_path)
    return save_path


def plot_lattice(trainer: "SOMTrainer", save_path: str = "lattice.png") -> str:
    """
    Scatter the dataset and draw the lattice through the neuron weights

    Only the first three data dimensions are plotted; 2D data is drawn on
    the z = 0 plane.

    Returns:
        Path of the written image
    """
    points = trainer.data
    weights = trainer.lattice.weights()

    def xyz(values):
        return [
            values[:, i] if i < values.shape[1] else np.zeros(len(values))
            for i in range(3)
        ]

    fig = plt.figure(figsize=(8, 6))
    ax = fig.add_subplot(111, projection="3d")
    ax.scatter(*xyz(points), s=4, c="tab:blue", alpha=0.4, label="Dataset")
    ax.scatter(*xyz(weights), s=16, c="tab:red", label="Neurons")

    for i, j in trainer.lattice.edges():
        segment = weights[[i, j]]
        ax.plot(*xyz(segment), c="tab:red", linewidth=1)

    ax.set_title(
        f"Step {trainer.steps}  lf={trainer.learning_factor:.4f}  "
        f"σ={trainer.neighbor_size:.3f}"
    )
    ax.legend()

    full_path = ensure_plots_dir(save_path)
    fig.savefig(full_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return full_path


def plot_training_history(
    trainer: "SOMTrainer", save_path: str = "training_history.png"
) -> str:
    """
    Plot quantization error and decay state recorded by HistoryCallback

    Returns:
        Path of the written image, or an empty string when there is no history
    """
    history = trainer.history
    if not history:
        return ""

    steps = [h["step"] for h in history]

    fig, axes = plt.subplots(1, 3, figsize=(15, 4))
    axes[0].plot(steps, [h["qe"] for h in history], "b-", linewidth=2)
    axes[0].set_title("Quantization Error")
    axes[1].plot(steps, [h["learning_factor"] for h in history], "g-", linewidth=2)
    axes[1].set_title("Learning Factor")
    axes[2].plot(steps, [h["neighbor_size"] for h in history], "r-", linewidth=2)
    axes[2].set_title("Neighbour Size")
    for ax in axes:
        ax.set_xlabel("Step")
        ax.grid(True, alpha=0.3)

    full_path = ensure_plots_dir(save_path)
    fig.savefig(full_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return full_path
