"""
Pytest configuration and fixtures for cloudsom tests
"""

import pytest
import numpy as np
from cloudsom import SOMTrainer, TrainerConfig, InitStrategy
from cloudsom.datasets import spiral


@pytest.fixture
def sample_data():
    """Generate a small spiral point cloud for testing"""
    return spiral(n_points=100, rng=np.random.default_rng(42))


@pytest.fixture
def triangle_data():
    """Three corner points of the unit triangle in 3D"""
    return np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])


@pytest.fixture
def basic_config():
    """Basic trainer configuration for testing"""
    return TrainerConfig(shape=(5, 5), n_features=3, seed=42)


@pytest.fixture
def chain_config():
    """1D chain configuration for quick tests"""
    return TrainerConfig(shape=(10,), n_features=3, seed=42)


@pytest.fixture
def trained_trainer(basic_config, sample_data):
    """Trainer that has already run a few hundred steps"""
    trainer = SOMTrainer(sample_data, basic_config)
    trainer.run(300)
    return trainer


@pytest.fixture
def all_init_strategies():
    """All initialization strategies for testing"""
    return [InitStrategy.RANDOM, InitStrategy.PCA]
