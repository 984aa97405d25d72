"""
Point-cloud datasets for training
"""

import json
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd


def spiral(
    n_points: int = 500,
    turns: float = 24.0,
    noise: float = 0.1,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Noisy conical spiral in 3D

    For t ~ U[0, 1) each point is
    ``(sin(turns*t)*t, cos(turns*t)*t, 1 - t)`` plus ``noise * U[0, 1)`` per axis.
    """
    if n_points < 1:
        raise ValueError(f"n_points must be positive, got {n_points}")
    rng = rng if rng is not None else np.random.default_rng()

    t = rng.random(n_points)
    jitter = noise * rng.random((n_points, 3))
    points = np.column_stack(
        [np.sin(t * turns) * t, np.cos(t * turns) * t, 1.0 - t]
    )
    return points + jitter


def load_points(file_path: str, format: str = "auto") -> np.ndarray:
    """Load a point cloud from CSV, JSON or NPY"""
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {file_path}")

    # Auto-detect format if not specified
    if format == "auto":
        format = path.suffix.lower()

    try:
        if format in [".csv", "csv"]:
            df = pd.read_csv(file_path)
            values = df.select_dtypes(include=[np.number]).values
        elif format in [".json", "json"]:
            with open(file_path, "r") as f:
                values = json.load(f)
        elif format in [".npy", "npy"]:
            values = np.load(file_path)
        else:
            raise ValueError(f"Unsupported format: {format}")
        points = np.asarray(values, dtype=np.float64)
    except Exception as e:
        raise ValueError(f"Failed to load data from {file_path}: {e}")

    if points.ndim != 2 or points.shape[0] == 0 or points.shape[1] == 0:
        raise ValueError(f"No numeric points found in {file_path}")
    return points


def save_points(points: np.ndarray, file_path: str) -> None:
    """Write a point cloud, choosing the format from the file suffix"""
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        columns = ["x", "y", "z"] if points.shape[1] == 3 else None
        pd.DataFrame(points, columns=columns).to_csv(path, index=False)
    elif suffix == ".json":
        with open(path, "w") as f:
            json.dump(np.asarray(points).tolist(), f)
    elif suffix == ".npy":
        np.save(path, points)
    else:
        raise ValueError(f"Unsupported format: {suffix}")
