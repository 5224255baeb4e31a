"""Tests for neighbourhood geometry and canonically ordered offset tables."""

import pytest
from src.topology import get_geometry, moore, von_neumann, axis, face, edge, corner, TOPOLOGIES
from src.core.neighborhood import NeighborhoodTable, canonical_key


class TestGeometryProviders:
    """Test raw offset generation for each topology."""

    @pytest.mark.parametrize(
        "provider,neighborhood_range,dimension,count",
        [
            (moore, 1, 1, 2),
            (moore, 1, 2, 8),
            (moore, 2, 2, 24),
            (moore, 1, 3, 26),
            (von_neumann, 1, 2, 4),
            (von_neumann, 2, 2, 12),
            (von_neumann, 1, 3, 6),
            (axis, 1, 2, 4),
            (axis, 2, 3, 12),
            (face, 1, 3, 6),
            (edge, 1, 3, 12),
            (corner, 1, 3, 8),
            (corner, 1, 2, 4),
        ],
    )
    def test_neighbour_counts(self, provider, neighborhood_range, dimension, count):
        """Each topology yields the expected number of offsets."""
        offsets = provider(neighborhood_range, dimension)
        assert len(offsets) == count
        assert len(set(offsets)) == count

    @pytest.mark.parametrize("name", TOPOLOGIES)
    def test_zero_vector_excluded(self, name):
        """No topology includes the cell itself."""
        offsets = get_geometry(name)(2, 3)
        assert (0, 0, 0) not in offsets
        assert all(len(offset) == 3 for offset in offsets)

    def test_von_neumann_within_manhattan_range(self):
        """Von Neumann offsets respect the Manhattan distance."""
        for offset in von_neumann(2, 3):
            assert sum(abs(c) for c in offset) <= 2

    def test_corner_offsets_are_diagonal(self):
        """Corner offsets have every component on the shell."""
        for offset in corner(2, 3):
            magnitudes = {abs(c) for c in offset}
            assert len(magnitudes) == 1

    def test_unknown_topology_falls_back_to_moore(self):
        """Unknown names resolve to the Moore provider."""
        assert get_geometry('hexagonal') is moore
        assert get_geometry('von-neumann') is von_neumann


class TestNeighborhoodTable:
    """Test canonical ordering and table construction."""

    def test_canonical_key(self):
        """Offsets are keyed by their comma-joined components."""
        assert canonical_key((-1, 0, 2)) == '-1,0,2'

    def test_moore_2d_order(self):
        """Moore neighbours are ordered left to right, top to bottom."""
        table = NeighborhoodTable.build('moore', 1, 2)
        assert table.offsets == (
            (-1, -1), (-1, 0), (-1, 1),
            (0, -1), (0, 1),
            (1, -1), (1, 0), (1, 1),
        )
        assert table.count == 8

    def test_order_is_string_order(self):
        """Ordering compares joined strings, not numbers."""
        table = NeighborhoodTable.build('moore', 2, 1)
        assert table.offsets == ((-1,), (-2,), (1,), (2,))

    def test_one_dimensional_order_is_left_right(self):
        """The two range-1 neighbours of a 1D cell come left first."""
        table = NeighborhoodTable.build('moore', 1, 1)
        assert table.offsets == ((-1,), (1,))

    def test_builds_are_stable(self):
        """Identical parameters produce identical ordered offsets."""
        for name in TOPOLOGIES:
            first = NeighborhoodTable.build(name, 2, 3)
            second = NeighborhoodTable(name, 2, 3, list(reversed(get_geometry(name)(2, 3))))
            assert first.offsets == second.offsets
            assert first == second

    def test_unknown_topology_and_missing_range(self):
        """Unknown topology becomes moore and a missing range becomes 1."""
        table = NeighborhoodTable.build('spiral', None, 2)
        assert table.topology == 'moore'
        assert table.neighborhood_range == 1
        assert table.count == 8

    def test_array_view(self):
        """The offset array is int64, read-only and shaped (count, dimension)."""
        table = NeighborhoodTable.build('von-neumann', 1, 3)
        array = table.as_array()
        assert array.shape == (6, 3)
        assert not array.flags.writeable
        assert [tuple(row) for row in array.tolist()] == list(table.offsets)

    def test_edge_table_in_1d_is_empty(self):
        """A 1D cell has no edge neighbours."""
        table = NeighborhoodTable.build('edge', 1, 1)
        assert table.count == 0
        assert table.as_array().shape == (0, 1)
