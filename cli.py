"""
Command Line Interface for the cloudsom trainer
"""

import argparse
import os
import sys
import structlog
from typing import Tuple

import numpy as np

from cloudsom import (
    SOMTrainer,
    TrainerConfig,
    InitStrategy,
    HistoryCallback,
    SOMError,
    setup_logging,
    trace_operation,
    __version__,
)
from cloudsom.datasets import spiral, load_points, save_points
from cloudsom.visualization import plot_lattice, plot_training_history

# Initialize observability
setup_logging(
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    json_format=False,  # Use console format for CLI
)

logger = structlog.get_logger()


def parse_shape(value: str) -> Tuple[int, ...]:
    """Parse a lattice shape such as ``40`` or ``10x8``"""
    try:
        shape = tuple(int(part) for part in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid lattice shape: {value}")
    if not 1 <= len(shape) <= 2 or any(s < 1 for s in shape):
        raise argparse.ArgumentTypeError(f"Invalid lattice shape: {value}")
    return shape


def load_dataset(args) -> np.ndarray:
    """Load the input file, or generate the spiral cloud when none is given"""
    if args.input:
        print(f"Loading data from: {args.input}")
        return load_points(args.input, args.format)

    print(f"Generating spiral dataset with {args.points} points")
    return spiral(n_points=args.points, rng=np.random.default_rng(args.seed))


def train_command(args) -> None:
    """Train a lattice on a point cloud"""
    try:
        data = load_dataset(args)
    except Exception as e:
        print(f"Error loading data: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Data shape: {data.shape}")

    try:
        config = TrainerConfig(
            shape=args.shape,
            n_features=data.shape[1],
            learning_factor=args.learning_factor,
            neighbor_size=args.neighbor_size,
            learning_decay=args.decay,
            neighbor_decay=args.decay,
            init_strategy=InitStrategy(args.init),
            pca_sample_size=args.pca_sample_size,
            seed=args.seed,
        )

        shape_label = "x".join(str(s) for s in config.shape)
        print(f"Training SOM: {shape_label} lattice, {args.steps} steps")
        print(f"Initialization: {args.init}")

        with trace_operation("train", shape=shape_label, steps=args.steps):
            trainer = SOMTrainer(data, config, verbose=args.verbose)
            callbacks = []
            if args.history_interval:
                callbacks.append(HistoryCallback(args.history_interval))
            state = trainer.run(args.steps, callbacks=callbacks)

        print("Training completed!")
        print(f"Learning Factor: {state.learning_factor:.6f}")
        print(f"Neighbor Size: {state.neighbor_size:.6f}")
        print(f"Quantization Error: {trainer.quantization_error():.4f}")
        print(f"Topographic Error: {trainer.topographic_error():.4f}")

        if args.plot:
            path = plot_lattice(trainer, args.plot)
            print(f"Lattice plot saved to: {path}")
            if trainer.history:
                history_path = plot_training_history(
                    trainer, args.plot.replace(".png", "_history.png")
                )
                print(f"History plot saved to: {history_path}")

    except (SOMError, ValueError) as e:
        print(f"Error training SOM: {e}", file=sys.stderr)
        sys.exit(1)


def spiral_command(args) -> None:
    """Write the demo spiral point cloud to a file"""
    points = spiral(
        n_points=args.points,
        turns=args.turns,
        noise=args.noise,
        rng=np.random.default_rng(args.seed),
    )
    try:
        save_points(points, args.output)
    except (ValueError, OSError) as e:
        print(f"Error saving dataset: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Spiral dataset saved to: {args.output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Kohonen Self-Organizing Map for 3D point clouds",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Train command
    train_parser = subparsers.add_parser("train", help="Train a lattice")
    train_parser.add_argument(
        "input", nargs="?", help="Input data file (spiral dataset if omitted)"
    )
    train_parser.add_argument(
        "--points", type=int, default=500, help="Spiral size when no input is given"
    )
    train_parser.add_argument(
        "--shape", type=parse_shape, default=(40,), help="Lattice shape, e.g. 40 or 10x10"
    )
    train_parser.add_argument(
        "--steps", type=int, default=1000, help="Number of training steps"
    )
    train_parser.add_argument(
        "--learning-factor", type=float, default=0.1, help="Initial learning factor"
    )
    train_parser.add_argument(
        "--neighbor-size",
        type=float,
        help="Initial neighbourhood radius (half the lattice extent if not set)",
    )
    train_parser.add_argument(
        "--decay", type=float, default=0.998, help="Per-step decay constant"
    )
    train_parser.add_argument(
        "--init",
        choices=["random", "pca"],
        default="random",
        help="Weight initialization strategy",
    )
    train_parser.add_argument(
        "--pca-sample-size", type=int, help="Rows sub-sampled for PCA seeding"
    )
    train_parser.add_argument(
        "--format",
        choices=["auto", "csv", "json", "npy"],
        default="auto",
        help="Input data format",
    )
    train_parser.add_argument(
        "--seed", type=int, help="Random seed for reproducibility"
    )
    train_parser.add_argument("--plot", help="Save a lattice plot to this PNG file")
    train_parser.add_argument(
        "--history-interval",
        type=int,
        help="Record quantization error every N steps",
    )
    train_parser.add_argument("--verbose", action="store_true", help="Verbose output")

    # Spiral command
    spiral_parser = subparsers.add_parser("spiral", help="Write the spiral dataset")
    spiral_parser.add_argument("output", help="Output file (.csv, .json or .npy)")
    spiral_parser.add_argument("--points", type=int, default=500)
    spiral_parser.add_argument("--turns", type=float, default=24.0)
    spiral_parser.add_argument("--noise", type=float, default=0.1)
    spiral_parser.add_argument("--seed", type=int)

    # Version command
    subparsers.add_parser("version", help="Show version information")

    return parser


def main():
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "train":
        train_command(args)
    elif args.command == "spiral":
        spiral_command(args)
    elif args.command == "version":
        print(f"cloudsom CLI v{__version__}")
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
