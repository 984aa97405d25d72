"""
Tests for dataset generation and loading
"""

import json

import pytest
import numpy as np
from cloudsom.datasets import spiral, load_points, save_points


@pytest.mark.unit
class TestSpiral:
    """Test the spiral point cloud"""

    def test_shape(self):
        points = spiral(n_points=500, rng=np.random.default_rng(0))
        assert points.shape == (500, 3)

    def test_reproducible(self):
        a = spiral(rng=np.random.default_rng(4))
        b = spiral(rng=np.random.default_rng(4))
        np.testing.assert_array_equal(a, b)

    def test_noise_free_points_on_curve(self):
        points = spiral(n_points=50, noise=0.0, rng=np.random.default_rng(1))
        t = 1.0 - points[:, 2]
        np.testing.assert_allclose(points[:, 0], np.sin(24 * t) * t, atol=1e-12)
        np.testing.assert_allclose(points[:, 1], np.cos(24 * t) * t, atol=1e-12)

    def test_bounds(self):
        points = spiral(n_points=1000, noise=0.1, rng=np.random.default_rng(2))
        assert np.all(np.abs(points[:, :2]) <= 1.1)
        assert np.all((points[:, 2] > 0) & (points[:, 2] <= 1.1))

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            spiral(n_points=0)


@pytest.mark.io
class TestLoadPoints:
    """Test reading and writing point clouds"""

    @pytest.mark.parametrize("suffix", [".csv", ".json", ".npy"])
    def test_save_and_load(self, tmp_path, suffix):
        points = spiral(n_points=20, rng=np.random.default_rng(3))
        path = tmp_path / f"cloud{suffix}"
        save_points(points, str(path))
        np.testing.assert_allclose(load_points(str(path)), points)

    def test_csv_ignores_text_columns(self, tmp_path):
        path = tmp_path / "cloud.csv"
        path.write_text("label,x,y,z\na,1.0,2.0,3.0\nb,4.0,5.0,6.0\n")
        np.testing.assert_array_equal(load_points(str(path)), [[1, 2, 3], [4, 5, 6]])

    def test_explicit_format(self, tmp_path):
        path = tmp_path / "cloud.txt"
        path.write_text(json.dumps([[1, 2, 3]]))
        np.testing.assert_array_equal(load_points(str(path), "json"), [[1, 2, 3]])

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_points("nonexistent.csv")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "cloud.txt"
        path.write_text("1 2 3")
        with pytest.raises(ValueError, match="Unsupported format"):
            load_points(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "cloud.json"
        path.write_text("{invalid json}")
        with pytest.raises(ValueError):
            load_points(str(path))

    def test_no_numeric_columns(self, tmp_path):
        path = tmp_path / "cloud.csv"
        path.write_text("a,b\nx,y\n")
        with pytest.raises(ValueError, match="No numeric points"):
            load_points(str(path))

    def test_save_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported format"):
            save_points(np.zeros((2, 3)), str(tmp_path / "cloud.parquet"))
