"""
Tests for the neuron and lattice model
"""

import pytest
import numpy as np
from cloudsom import (
    Vector,
    Neuron,
    Lattice,
    DimensionMismatchError,
    EmptyLatticeError,
    ReadOnlyVectorError,
)


@pytest.mark.unit
class TestNeuron:
    """Test neuron position/weight semantics"""

    def test_position_is_frozen(self):
        neuron = Neuron(Vector([1, 2]), Vector([0, 0, 0]))
        assert neuron.position.frozen
        with pytest.raises(ReadOnlyVectorError):
            neuron.position.scalar_multiply(2)

    def test_position_cannot_be_reassigned(self):
        neuron = Neuron(Vector([1]), Vector([0, 0, 0]))
        with pytest.raises(AttributeError):
            neuron.position = Vector([2])

    def test_position_does_not_alias_source(self):
        source = Vector([1, 2])
        neuron = Neuron(source, Vector([0, 0, 0]))
        source.scalar_multiply(10)
        assert neuron.position.to_array() == [1.0, 2.0]

    def test_weight_is_mutable_in_place(self):
        neuron = Neuron(Vector([0]), Vector([1, 1, 1]))
        neuron.weight.scalar_multiply(0.5)
        assert neuron.weight.to_array() == [0.5, 0.5, 0.5]

    def test_weight_replacement_checks_dimension(self):
        neuron = Neuron(Vector([0]), Vector([1, 1, 1]))
        neuron.weight = Vector([2, 2, 2])
        assert neuron.weight.to_array() == [2.0, 2.0, 2.0]
        with pytest.raises(DimensionMismatchError):
            neuron.weight = Vector([1, 1])


@pytest.mark.unit
class TestLatticeConstruction:
    """Test lattice factories and validation"""

    def test_chain(self):
        lattice = Lattice.from_shape((40,), n_features=3)
        assert len(lattice) == 40
        assert lattice.position_dim == 1
        assert lattice.n_features == 3
        assert lattice.shape == (40,)
        assert [n.position.to_array() for n in lattice][:3] == [[0.0], [1.0], [2.0]]

    def test_grid_order(self):
        lattice = Lattice.from_shape((3, 2), n_features=2)
        assert len(lattice) == 6
        assert lattice.shape == (3, 2)
        np.testing.assert_array_equal(
            lattice.positions(),
            [[0, 0], [0, 1], [1, 0], [1, 1], [2, 0], [2, 1]],
        )

    def test_weights_start_at_zero(self):
        lattice = Lattice.from_shape((2, 2), n_features=3)
        np.testing.assert_array_equal(lattice.weights(), np.zeros((4, 3)))

    def test_empty_lattice_rejected(self):
        with pytest.raises(EmptyLatticeError):
            Lattice([])

    def test_invalid_shape_rejected(self):
        with pytest.raises(ValueError):
            Lattice.from_shape((0,), n_features=3)
        with pytest.raises(ValueError):
            Lattice.from_shape((), n_features=3)

    def test_mixed_dimensions_rejected(self):
        with pytest.raises(DimensionMismatchError):
            Lattice([Neuron(Vector([0]), Vector([0, 0])), Neuron(Vector([0, 1]), Vector([0, 0]))])
        with pytest.raises(DimensionMismatchError):
            Lattice([Neuron(Vector([0]), Vector([0, 0])), Neuron(Vector([1]), Vector([0, 0, 0]))])

    def test_neurons_not_shared(self):
        lattice = Lattice.from_shape((3,), n_features=2)
        lattice[0].weight.add(Vector([1, 1]))
        assert lattice[1].weight.to_array() == [0.0, 0.0]

    def test_hand_built_neurons_own_their_weights(self):
        shared = Vector([0.5, 0.5])
        lattice = Lattice([Neuron(Vector([0]), shared), Neuron(Vector([1]), shared)])
        assert lattice[0].weight is not lattice[1].weight

        lattice[0].weight.scalar_multiply(2)
        assert lattice[1].weight.to_array() == [0.5, 0.5]
        assert shared.to_array() == [0.5, 0.5]

    def test_frozen_weight_is_copied_mutable(self):
        neuron = Neuron(Vector([0]), Vector([1, 2], frozen=True))
        assert not neuron.weight.frozen
        neuron.weight.scalar_multiply(2)
        assert neuron.weight.to_array() == [2.0, 4.0]

        replacement = Vector([3, 3], frozen=True)
        neuron.weight = replacement
        assert neuron.weight is not replacement
        assert not neuron.weight.frozen

    def test_sparse_coordinates_shape(self):
        lattice = Lattice(
            [Neuron(Vector([0]), Vector([0, 0])), Neuron(Vector([2]), Vector([0, 0]))]
        )
        assert lattice.shape == (2,)
        assert lattice.extent.tolist() == [2.0]


@pytest.mark.unit
class TestLatticeGeometry:
    """Test normalized coordinates and adjacency"""

    def test_normalized_chain(self):
        lattice = Lattice.from_shape((5,), n_features=3)
        coords = [lattice.normalized_position(n)[0] for n in lattice]
        np.testing.assert_array_almost_equal(coords, [0.0, 0.25, 0.5, 0.75, 1.0])

    def test_normalized_grid_corners(self):
        lattice = Lattice.from_shape((3, 5), n_features=3)
        np.testing.assert_array_almost_equal(lattice.normalized_position(lattice[0]), [0, 0])
        np.testing.assert_array_almost_equal(lattice.normalized_position(lattice[-1]), [1, 1])

    def test_flat_axis_maps_to_center(self):
        lattice = Lattice.from_shape((1,), n_features=3)
        np.testing.assert_array_almost_equal(lattice.normalized_position(lattice[0]), [0.5])

        lattice = Lattice.from_shape((4, 1), n_features=3)
        np.testing.assert_array_almost_equal(
            lattice.normalized_position(lattice[3]), [1.0, 0.5]
        )

    def test_neighbors_chain(self):
        lattice = Lattice.from_shape((4,), n_features=3)
        assert lattice.neighbors(0) == [1]
        assert lattice.neighbors(2) == [1, 3]

    def test_neighbors_grid(self):
        lattice = Lattice.from_shape((3, 3), n_features=3)
        # Centre neuron (1, 1) has index 4 and four direct neighbours
        assert lattice.neighbors(4) == [1, 3, 5, 7]
        assert lattice.neighbors(0) == [1, 3]

    def test_edges(self):
        assert Lattice.from_shape((3,), n_features=3).edges() == [(0, 1), (1, 2)]
        grid_edges = Lattice.from_shape((2, 2), n_features=3).edges()
        assert grid_edges == [(0, 1), (0, 2), (1, 3), (2, 3)]

    def test_edge_count_grid(self):
        lattice = Lattice.from_shape((4, 3), n_features=3)
        # Horizontal plus vertical links in a 4x3 grid
        assert len(lattice.edges()) == 3 * 3 + 4 * 2
