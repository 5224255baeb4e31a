"""Integration tests for the cellular automaton engine.

Covers construction in several dimensions, rule and neighbourhood
selection, the double-buffered sweep, boundary policies, byte wrap-around
and the reference scenarios for one-, two- and three-dimensional grids.
"""

import pytest
import numpy as np
from src.core import (
    CellularAutomaton, AutomatonConfig, Fixed, Wrap, Clamp,
    CustomRule, ParsedRule, RuleParseError, InvalidRuleError, RuleNotSetError,
)


def sum_rule(value, neighbors):
    return value + sum(neighbors)


class TestConstruction:
    """Test allocation and defaults."""

    @pytest.mark.parametrize("shape", [[5], [4, 3], [3, 2, 2], [2, 2, 2, 2]])
    def test_shape_and_size(self, shape):
        """Shape, dimension and size follow the requested dims."""
        ca = CellularAutomaton(shape)
        assert ca.shape == tuple(shape)
        assert ca.dimension == len(shape)
        assert ca.size == int(np.prod(shape))
        assert ca.to_array().shape == tuple(shape)

    def test_default_value(self):
        """Every cell starts at the default value."""
        ca = CellularAutomaton([2, 3], 4)
        assert (ca.to_array() == 4).all()

    def test_defaults(self):
        """Fresh instances have no rule and a fixed 0 boundary."""
        ca = CellularAutomaton([3, 3])
        assert ca.rule is None
        assert ca.neighborhood is None
        assert ca.boundary == Fixed(0)
        assert ca.generation == 0
        assert ca.active_index == 0

    def test_config_boundary(self):
        """The configured boundary is the initial policy."""
        ca = CellularAutomaton([3], config=AutomatonConfig(out_of_bound="wrap"))
        assert ca.boundary == Wrap()

    def test_config_rejects_signed_dtype(self):
        """Cell values are unsigned."""
        with pytest.raises(ValueError, match="unsigned"):
            AutomatonConfig(dtype="int8")

    def test_instances_do_not_share_boundary(self):
        """Changing one instance's boundary leaves others untouched."""
        first = CellularAutomaton([3])
        second = CellularAutomaton([3])
        first.set_out_of_bound_value("clamp")
        assert second.boundary == Fixed(0)


class TestRuleSelection:
    """Test set_rule and set_neighborhood."""

    def test_rule_string_neighbourhood(self):
        """'23/3' implies Moore range 1."""
        ca = CellularAutomaton([5, 5]).set_rule('23/3')
        assert isinstance(ca.rule, ParsedRule)
        assert ca.rule.rule_string == '23/3'
        assert ca.neighborhood_type == 'moore'
        assert ca.neighborhood_range == 1
        assert ca.neighborhood.count == 8

    def test_rule_string_von_neumann_range_2(self):
        """'1/1V2' implies von Neumann range 2."""
        ca = CellularAutomaton([5, 5]).set_rule('1/1V2')
        assert ca.neighborhood_type == 'von-neumann'
        assert ca.neighborhood_range == 2
        assert ca.neighborhood.count == 12

    def test_callable_defaults(self):
        """A callable without neighbourhood runs on Moore range 1."""
        ca = CellularAutomaton([5, 5]).set_rule(sum_rule)
        assert isinstance(ca.rule, CustomRule)
        assert ca.neighborhood_type == 'moore'
        assert ca.neighborhood_range == 1

    def test_callable_explicit_neighbourhood(self):
        """A callable takes the explicit neighbourhood."""
        ca = CellularAutomaton([5, 5]).set_rule(sum_rule, 'von-neumann', 2)
        assert ca.neighborhood_type == 'von-neumann'
        assert ca.neighborhood_range == 2

    def test_callable_config_default_neighbourhood(self):
        """The configured neighbourhood applies to callables that name none."""
        config = AutomatonConfig(neighborhood_type='von-neumann', neighborhood_range=1)
        ca = CellularAutomaton([3, 3], config=config).set_rule(sum_rule)
        assert ca.neighborhood_type == 'von-neumann'

    def test_unparseable_string_raises_and_keeps_rule(self):
        """A parse failure raises and leaves the previous rule armed."""
        ca = CellularAutomaton([3, 3]).set_rule('23/3')
        previous = ca.rule
        with pytest.raises(RuleParseError):
            ca.set_rule('hello')
        assert ca.rule is previous

    def test_invalid_rule_type(self):
        """A non-string, non-callable rule is rejected."""
        with pytest.raises(InvalidRuleError):
            CellularAutomaton([3]).set_rule(12)

    def test_chaining(self):
        """Mutators return the instance."""
        ca = CellularAutomaton([3, 3])
        assert ca.set_rule('23/3') is ca
        assert ca.set_out_of_bound_value("wrap") is ca
        assert ca.set_neighborhood('moore', 1) is ca
        assert ca.set_rng(None) is ca
        assert ca.iterate() is ca

    def test_iterate_without_rule(self):
        """Iterating before a rule is set is an error."""
        with pytest.raises(RuleNotSetError):
            CellularAutomaton([3, 3]).iterate()


class TestReferenceScenarios:
    """Small grids with hand-checked outcomes."""

    def test_1d_life_von_neumann(self):
        """A lone live cell on [3] spreads to both sides and dies."""
        ca = CellularAutomaton([3])
        ca[1] = 1
        ca.apply('1/1V')
        assert ca.to_array().tolist() == [1, 0, 1]

    def test_2d_birth_only_rule(self):
        """'S/B12V' turns a lone cell into a plus, then into the corners."""
        ca = CellularAutomaton([3, 3])
        ca[1, 1] = 1
        ca.apply('S/B12V')
        assert ca.to_array().tolist() == [[0, 1, 0], [1, 0, 1], [0, 1, 0]]

        ca.iterate()
        assert ca.to_array().tolist() == [[1, 0, 1], [0, 0, 0], [1, 0, 1]]

    def test_2d_custom_sum_rule(self):
        """Two sweeps of a neighbour-sum rule read only the previous generation."""
        ca = CellularAutomaton([3, 3])
        ca[1, 1] = 1
        ca.apply(sum_rule, 2, 'von-neumann', 1)
        assert ca.to_array().tolist() == [[2, 2, 2], [2, 5, 2], [2, 2, 2]]

    def test_3d_life_von_neumann(self):
        """In 3D the six face neighbours of a lone cell are born."""
        ca = CellularAutomaton([3, 3, 3])
        ca[1, 1, 1] = 1
        ca.apply('1/1V')
        grid = ca.to_array()
        assert grid.sum() == 6
        assert grid[1, 1, 1] == 0
        for coord in [(0, 1, 1), (2, 1, 1), (1, 0, 1), (1, 2, 1), (1, 1, 0), (1, 1, 2)]:
            assert grid[coord] == 1

    def test_wolfram_rule_90(self):
        """Rule 90 draws a Sierpinski triangle from a single seed."""
        ca = CellularAutomaton([7])
        ca[3] = 1
        ca.apply('W90')
        assert ca.to_array().tolist() == [0, 0, 1, 0, 1, 0, 0]
        ca.iterate()
        assert ca.to_array().tolist() == [0, 1, 0, 0, 0, 1, 0]

    def test_blinker_oscillates(self):
        """A blinker flips between horizontal and vertical."""
        ca = CellularAutomaton([5, 5]).set_out_of_bound_value("wrap")
        ca.load_pattern(np.array([[1, 1, 1]]), (2, 1))
        horizontal = ca.to_array()

        ca.apply('23/3')
        expected = np.zeros((5, 5), dtype=np.uint8)
        expected[1:4, 2] = 1
        assert np.array_equal(ca.to_array(), expected)

        ca.iterate()
        assert np.array_equal(ca.to_array(), horizontal)

    def test_glider_wraps_around_torus(self):
        """A glider moves one cell diagonally every four generations."""
        glider = np.array([[0, 1, 0], [0, 0, 1], [1, 1, 1]])
        ca = CellularAutomaton([6, 6]).set_out_of_bound_value("wrap")
        ca.load_pattern(glider, (3, 3))
        start = ca.to_array()

        ca.apply('23/3', 4)
        assert np.array_equal(ca.to_array(), np.roll(start, (1, 1), axis=(0, 1)))
        assert ca.count(1) == 5


class TestSweep:
    """Test the double-buffered evolution."""

    def _random_life(self, config=None):
        ca = CellularAutomaton([8, 8], config=config).set_out_of_bound_value("wrap")
        ca.fill_with_distribution([(0, 60), (1, 40)], np.random.default_rng(7).random)
        return ca.set_rule('23/3')

    def test_iterations_compose(self):
        """iterate(a) then iterate(b) equals iterate(a + b)."""
        split = self._random_life().iterate(2).iterate(3)
        joined = self._random_life().iterate(5)
        assert np.array_equal(split.to_array(), joined.to_array())
        assert split.generation == joined.generation == 5

    def test_zero_iterations_is_noop(self):
        """iterate(0) leaves the grid and buffer slot untouched."""
        ca = self._random_life()
        before = ca.to_array()
        ca.iterate(0)
        assert np.array_equal(ca.to_array(), before)
        assert ca.active_index == 0
        assert ca.generation == 0

    def test_active_slot_flips(self):
        """Each sweep swaps the buffer roles."""
        ca = self._random_life()
        ca.iterate()
        assert ca.active_index == 1
        ca.iterate()
        assert ca.active_index == 0

    def test_blockwise_resolution_matches_cached_table(self):
        """Grids too large for a cached index table give the same result."""
        cached = self._random_life().iterate(3)
        blockwise = self._random_life(AutomatonConfig(max_cached_indices=10)).iterate(3)
        assert np.array_equal(cached.to_array(), blockwise.to_array())

    def test_values_wrap_modulo_256(self):
        """Rule results outside the byte range wrap around."""
        ca = CellularAutomaton([1], 100)
        ca.apply(lambda value, neighbors: value + 200, 2)
        assert ca[0] == (100 + 400) % 256

    def test_rng_passed_to_callback(self):
        """Three-argument rules receive the instance random source."""
        calls = []

        def rng():
            calls.append(1)
            return 0.1

        ca = CellularAutomaton([3, 3]).set_rng(rng)
        ca.apply(lambda value, neighbors, draw: 1 if draw() < 0.5 else 0)
        assert (ca.to_array() == 1).all()
        assert len(calls) == 9

    def test_boundary_change_rebuilds_indices(self):
        """Switching boundary after a sweep takes effect on the next one."""
        ca = CellularAutomaton([3])
        ca[0] = 1
        ca.apply(lambda value, neighbors: neighbors[0])
        assert ca.to_array().tolist() == [0, 1, 0]

        ca.set_out_of_bound_value("wrap").iterate(2)
        assert ca.to_array().tolist() == [1, 0, 0]


class TestBoundaryPolicies:
    """Test neighbour lookups under each boundary."""

    def setup_method(self):
        """A 1D line [5, 6, 7] with a range-1 neighbourhood."""
        self.ca = CellularAutomaton([3]).load_array(np.array([5, 6, 7]))
        self.ca.set_neighborhood('moore', 1)

    def test_fixed(self):
        """Out-of-bound neighbours read the fixed value."""
        self.ca.set_out_of_bound_value(9)
        assert self.ca.boundary == Fixed(9)
        assert self.ca.get_neighbors((0,)) == [9, 6]
        assert self.ca.get_neighbors((2,)) == [6, 9]
        assert self.ca.get((-1,)) == 9

    def test_wrap(self):
        """The left neighbour of the first cell is the last cell."""
        self.ca.set_out_of_bound_value("wrap")
        assert self.ca.boundary == Wrap()
        assert self.ca.get_neighbors((0,)) == [7, 6]
        assert self.ca.get((3,)) == 5

    def test_clamp(self):
        """The left neighbour of the first cell is itself."""
        self.ca.set_out_of_bound_value("clamp")
        assert self.ca.boundary == Clamp()
        assert self.ca.get_neighbors((0,)) == [5, 6]
        assert self.ca.get((10,)) == 7

    def test_neighbors_need_neighbourhood(self):
        """Neighbour lookup without a neighbourhood is an error."""
        with pytest.raises(RuleNotSetError):
            CellularAutomaton([3]).get_neighbors((0,))

    def test_fixed_value_used_in_sweep(self):
        """A fixed boundary feeds its value into rules."""
        ca = CellularAutomaton([2]).set_out_of_bound_value(3)
        ca.apply(sum_rule)
        assert ca.to_array().tolist() == [3, 3]


class TestCellAccess:
    """Test reading and writing cells and whole grids."""

    def test_get_set(self):
        """Cells written by coordinate read back."""
        ca = CellularAutomaton([3, 4])
        ca.set((2, 3), 8)
        assert ca.get((2, 3)) == 8
        assert ca[2, 3] == 8

    def test_set_out_of_range(self):
        """Writes outside the grid are rejected."""
        with pytest.raises(IndexError):
            CellularAutomaton([3, 3]).set((3, 0), 1)

    def test_wrong_coordinate_length(self):
        """Coordinates carry exactly one component per dimension."""
        with pytest.raises(ValueError):
            CellularAutomaton([3, 3]).get((1,))

    def test_to_array_is_copy(self):
        """Exported arrays do not alias the live buffer."""
        ca = CellularAutomaton([2, 2])
        array = ca.to_array()
        array[0, 0] = 1
        assert ca[0, 0] == 0

    def test_load_array_shape_mismatch(self):
        """Loaded arrays must match the grid."""
        with pytest.raises(ValueError):
            CellularAutomaton([3, 3]).load_array(np.zeros((2, 3)))

    def test_load_pattern_wraps(self):
        """Patterns stamped near an edge wrap around."""
        ca = CellularAutomaton([4, 4]).load_pattern(np.array([[1, 1]]), (0, 3))
        assert ca[0, 3] == 1
        assert ca[0, 0] == 1
        assert ca.count(1) == 2

    def test_fill_and_count(self):
        """fill sets every cell."""
        ca = CellularAutomaton([3, 3]).fill(2)
        assert ca.count(2) == 9
        assert ca.count(0) == 0

    def test_copy_is_independent(self):
        """Copies share settings but not cells."""
        ca = CellularAutomaton([3, 3]).set_rule('23/3').set_out_of_bound_value("wrap")
        clone = ca.copy()
        clone[1, 1] = 1
        assert ca[1, 1] == 0
        assert clone.rule is ca.rule
        assert clone.boundary == Wrap()

    def test_str_rows(self):
        """2D grids print as rows."""
        ca = CellularAutomaton([2, 3])
        ca[0, 1] = 1
        assert str(ca) == "0 1 0\n0 0 0"
