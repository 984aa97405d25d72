"""
Example usage of the cloudsom package
"""

import numpy as np
from cloudsom import (
    SOMTrainer,
    TrainerConfig,
    InitStrategy,
    HistoryCallback,
    SnapshotCallback,
)
from cloudsom.datasets import spiral
from cloudsom.visualization import plot_lattice, plot_training_history


def run_examples():
    """Run examples of cloudsom usage"""

    data = spiral(n_points=500, rng=np.random.default_rng(42))

    # Example 1: A 40-neuron chain on the spiral, in batches like a UI timer would
    print("Example 1: Chain of 40 neurons on a spiral")
    config = TrainerConfig(shape=(40,), n_features=3, seed=42)
    trainer = SOMTrainer(data, config)
    history = HistoryCallback(interval=100)

    for _ in range(10):
        state = trainer.run(100, callbacks=[history])
        print(
            f"step={state.steps} lf={state.learning_factor:.4f} "
            f"σ={state.neighbor_size:.3f} QE={trainer.quantization_error():.4f}"
        )

    plot_lattice(trainer, "chain_random.png")
    plot_training_history(trainer, "chain_random_history.png")

    # Example 2: Random versus PCA seeding
    print("\nExample 2: Comparing initialization strategies")
    for strategy in [InitStrategy.RANDOM, InitStrategy.PCA]:
        config = TrainerConfig(
            shape=(10, 10), n_features=3, init_strategy=strategy, seed=42
        )
        trainer = SOMTrainer(data, config)
        before = trainer.quantization_error()
        trainer.run(1000)
        print(
            f"{strategy.value}: QE {before:.4f} -> {trainer.quantization_error():.4f}, "
            f"TE = {trainer.topographic_error():.4f}"
        )
        plot_lattice(trainer, f"grid_{strategy.value}.png")

    # Example 3: Before/after snapshots for an external animator
    print("\nExample 3: Weight snapshots")
    config = TrainerConfig(shape=(20,), n_features=3, seed=7)
    trainer = SOMTrainer(data, config)
    snapshots = SnapshotCallback(interval=50)
    trainer.run(200, callbacks=[snapshots])
    print(f"Captured {len(snapshots.snapshots)} frames of {len(trainer.lattice)} weights")

    # Example 4: Reset and train again
    print("\nExample 4: Reset")
    state = trainer.reset()
    print(f"After reset: lf={state.learning_factor} σ={state.neighbor_size}")

    print("\nPlots have been saved under plots/")


if __name__ == "__main__":
    run_examples()
