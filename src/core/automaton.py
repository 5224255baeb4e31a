"""N-dimensional cellular automaton simulator.

Holds two cell buffers of identical size. During a sweep every cell's next
value is computed from the frozen active buffer and written to the staging
buffer; only once all cells are written do the two swap roles. Every cell
therefore observes the same generation regardless of traversal order.
"""

import numpy as np
from typing import Iterator, Optional, Sequence, Tuple, Union
import logging

from .boundary import BoundaryPolicy, Fixed, make_boundary, resolve_coordinate, resolve_neighbor_indices
from .buffer import GridBuffer
from .config import AutomatonConfig
from .errors import RuleNotSetError
from .index import GridShape, Coordinate
from .neighborhood import NeighborhoodTable
from .rule import Rule, RuleCallback, make_rule
from . import sampler
from .sampler import RandomSource, Distribution, DEFAULT_RANDOM_SOURCE, make_random_source

logger = logging.getLogger(__name__)


class CellularAutomaton:
    """Cellular automaton over a grid of arbitrary dimension.

    Typical use::

        ca = CellularAutomaton([64, 64])
        ca.set_out_of_bound_value("wrap")
        ca.fill_with_distribution([(0, 85), (1, 15)])
        ca.apply("23/3", 10)

    All mutating methods return the instance for chaining.
    """

    def __init__(self, shape: Sequence[int], default_value: int = 0,
                 config: Optional[AutomatonConfig] = None):
        """Allocate both cell buffers.

        Args:
            shape: Size of each dimension (not validated)
            default_value: Initial value of every cell
            config: Instance configuration (defaults if None)
        """
        self.config = config.copy() if config is not None else AutomatonConfig()
        self.default_value = default_value or 0

        self._shape = GridShape(shape)
        self._buffers = (
            GridBuffer(self._shape, self.default_value, self.config.dtype),
            GridBuffer(self._shape, self.default_value, self.config.dtype),
        )
        self._active = 0
        self.generation = 0

        self._rule: Optional[Rule] = None
        self._neighborhood: Optional[NeighborhoodTable] = None
        self._index_table: Optional[np.ndarray] = None
        self._boundary: BoundaryPolicy = make_boundary(self.config.out_of_bound)

        if self.config.seed is not None:
            self._default_rng = make_random_source(self.config.seed)
        else:
            self._default_rng = DEFAULT_RANDOM_SOURCE
        self._rng: RandomSource = self._default_rng

        logger.debug(f"Created {self!r}")

    # Geometry

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape.dims

    @property
    def dimension(self) -> int:
        return self._shape.dimension

    @property
    def size(self) -> int:
        return self._shape.size

    @property
    def stride(self) -> Tuple[int, ...]:
        return self._shape.stride

    @property
    def grid_shape(self) -> GridShape:
        return self._shape

    @property
    def active_index(self) -> int:
        """Which of the two buffer slots currently holds the live generation."""
        return self._active

    @property
    def _current(self) -> GridBuffer:
        return self._buffers[self._active]

    # Configuration

    @property
    def rule(self) -> Optional[Rule]:
        return self._rule

    @property
    def neighborhood(self) -> Optional[NeighborhoodTable]:
        return self._neighborhood

    @property
    def neighborhood_type(self) -> Optional[str]:
        return self._neighborhood.topology if self._neighborhood else None

    @property
    def neighborhood_range(self) -> Optional[int]:
        return self._neighborhood.neighborhood_range if self._neighborhood else None

    @property
    def boundary(self) -> BoundaryPolicy:
        return self._boundary

    @property
    def rng(self) -> RandomSource:
        return self._rng

    def set_rng(self, rng: Optional[RandomSource] = None) -> 'CellularAutomaton':
        """Replace the random source used by rules and distribution filling.

        Args:
            rng: Zero-argument callable returning floats in [0, 1); None
                restores the default source
        """
        self._rng = rng or self._default_rng
        return self

    set_random_source = set_rng

    def set_out_of_bound_value(self, value: Union[int, str, BoundaryPolicy] = 0) -> 'CellularAutomaton':
        """Define how neighbours outside the grid are read.

        Args:
            value: An integer fixed value, "wrap" for toroidal wrap-around or
                "clamp" to repeat the edge cells
        """
        self._boundary = make_boundary(value)
        self._index_table = None
        logger.debug(f"Boundary set to {self._boundary}")
        return self

    def set_neighborhood(self, neighborhood_type: Optional[str] = None,
                         neighborhood_range: Optional[int] = None) -> 'CellularAutomaton':
        """Select the neighbourhood and precompute its ordered offsets.

        Args:
            neighborhood_type: moore, von-neumann, axis, corner, edge or face;
                anything else means moore
            neighborhood_range: Neighbourhood range, 1 if not given
        """
        self._neighborhood = NeighborhoodTable.build(neighborhood_type, neighborhood_range, self.dimension)
        self._index_table = None
        logger.debug(f"Neighbourhood set to {self._neighborhood!r}")
        return self

    def set_rule(self, rule: Union[str, RuleCallback, Rule],
                 neighborhood_type: Optional[str] = None,
                 neighborhood_range: Optional[int] = None) -> 'CellularAutomaton':
        """Define the transition rule and the neighbourhood it runs over.

        Args:
            rule: A rule string (S/B, S/B/C, R/T/C/N, Wolfram) or a function
                ``(current_value, neighbors[, rng]) -> next_value``
            neighborhood_type: Topology for function rules (config default if None)
            neighborhood_range: Range for function rules (config default if None)

        Raises:
            RuleParseError: If the rule string cannot be parsed
            InvalidRuleError: If the rule is neither a string nor a function
        """
        self._rule = make_rule(rule, neighborhood_type, neighborhood_range,
                               self.config.neighborhood_type, self.config.neighborhood_range)
        logger.debug(f"Rule set to {self._rule!r}")
        return self.set_neighborhood(self._rule.neighborhood_type, self._rule.neighborhood_range)

    # Cell access

    def _check_coordinate(self, coord: Sequence[int]) -> Coordinate:
        coord = tuple(coord)
        if len(coord) != self.dimension:
            raise ValueError(f"Coordinate {coord} has {len(coord)} components, grid has {self.dimension}")
        return coord

    def _fixed_value(self) -> int:
        return self._boundary.value if isinstance(self._boundary, Fixed) else 0

    def get(self, coord: Sequence[int]) -> int:
        """Read a cell, applying the boundary policy to out-of-range coordinates.

        Args:
            coord: Cell coordinate, one component per dimension

        Returns:
            Cell value, or the fixed value for an out-of-bound lookup
        """
        coord = self._check_coordinate(coord)
        resolved = resolve_coordinate(self._boundary, coord, self._shape)
        if resolved is None:
            return self._fixed_value()
        return self._current.get(resolved)

    def set(self, coord: Sequence[int], value: int) -> 'CellularAutomaton':
        """Write a cell of the live generation.

        Raises:
            IndexError: If the coordinate is outside the grid
        """
        coord = self._check_coordinate(coord)
        if not all(0 <= c < d for c, d in zip(coord, self.shape)):
            raise IndexError(f"Coordinate {coord} out of bounds for shape {self.shape}")
        self._current.set(coord, value)
        return self

    def __getitem__(self, coord: Sequence[int]) -> int:
        return self.get(coord if isinstance(coord, tuple) else (coord,))

    def __setitem__(self, coord: Sequence[int], value: int) -> None:
        self.set(coord if isinstance(coord, tuple) else (coord,), value)

    def get_neighbors(self, coord: Sequence[int]) -> list:
        """Ordered neighbour values of one cell under the current boundary.

        Raises:
            RuleNotSetError: If no neighbourhood has been selected yet
        """
        if self._neighborhood is None:
            raise RuleNotSetError("No neighbourhood set; call set_rule() or set_neighborhood() first")

        coord = self._check_coordinate(coord)
        values = []
        for offset in self._neighborhood.offsets:
            candidate = tuple(c + o for c, o in zip(coord, offset))
            resolved = resolve_coordinate(self._boundary, candidate, self._shape)
            values.append(self._fixed_value() if resolved is None else self._current.get(resolved))
        return values

    # Bulk initialisation

    def fill(self, value: int) -> 'CellularAutomaton':
        """Set every cell of the live generation to ``value``."""
        self._current.fill(value)
        return self

    def load_array(self, array: np.ndarray) -> 'CellularAutomaton':
        """Replace the live generation with an array of the grid's shape.

        Raises:
            ValueError: If the array shape does not match the grid
        """
        array = np.asarray(array)
        if array.shape != self.shape:
            raise ValueError(f"Array shape {array.shape} doesn't match grid shape {self.shape}")
        self._current.write_all(array.reshape(-1).tolist())
        return self

    def load_pattern(self, pattern: np.ndarray, origin: Sequence[int]) -> 'CellularAutomaton':
        """Stamp the non-zero cells of a pattern into the grid at ``origin``.

        The pattern wraps around the grid edges.

        Args:
            pattern: Array with one axis per grid dimension
            origin: Grid coordinate of the pattern's first cell
        """
        pattern = np.asarray(pattern)
        origin = self._check_coordinate(origin)
        if pattern.ndim != self.dimension:
            raise ValueError(f"Pattern has {pattern.ndim} dimensions, grid has {self.dimension}")

        for offset in zip(*np.nonzero(pattern)):
            target = tuple((o + int(p)) % d for o, p, d in zip(origin, offset, self.shape))
            self._current.set(target, int(pattern[offset]))
        return self

    def fill_with_distribution(self, distribution: Distribution,
                               rng: Optional[RandomSource] = None) -> 'CellularAutomaton':
        """Fill the grid from a weighted value distribution.

        Args:
            distribution: ``(value, weight)`` pairs, e.g. ``[(0, 90), (1, 10)]``
                for 90% zeros and 10% ones; None values are never written
            rng: Random source for this call (instance source if None)
        """
        sampler.fill_with_distribution(self._current, distribution, rng or self._rng)
        return self

    # Evolution

    def _index_blocks(self) -> Iterator[Tuple[int, np.ndarray]]:
        """Yield ``(first_cell, neighbour_index_table)`` blocks covering the grid."""
        if self._index_table is not None:
            yield 0, self._index_table
            return

        offsets = self._neighborhood.as_array()
        count = max(1, self._neighborhood.count)

        if self.size * count <= self.config.max_cached_indices:
            self._index_table = resolve_neighbor_indices(self._shape, offsets, self._boundary)
            yield 0, self._index_table
            return

        block = max(1, self.config.max_cached_indices // count)
        for start in range(0, self.size, block):
            stop = min(self.size, start + block)
            yield start, resolve_neighbor_indices(self._shape, offsets, self._boundary, start, stop)

    def _sweep(self) -> None:
        active = self._buffers[self._active]
        staging = self._buffers[1 - self._active]

        cells = active.tolist()
        fixed = self._fixed_value()
        evaluate = self._rule.evaluate
        rng = self._rng

        results = []
        for start, table in self._index_blocks():
            for index, row in enumerate(table.tolist(), start):
                neighbors = [cells[j] if j >= 0 else fixed for j in row]
                results.append(evaluate(cells[index], neighbors, rng))

        staging.write_all(results)
        self._active = 1 - self._active
        self.generation += 1

    def iterate(self, iterations: int = 1) -> 'CellularAutomaton':
        """Apply the current rule ``iterations`` times.

        Args:
            iterations: Number of sweeps; 0 leaves the grid untouched

        Raises:
            RuleNotSetError: If no rule has been set
        """
        if self._rule is None:
            raise RuleNotSetError("No rule set; call set_rule() before iterate()")

        for _ in range(iterations):
            self._sweep()

        logger.debug(f"Completed {iterations} iteration(s), generation {self.generation}")
        return self

    def apply(self, rule: Union[str, RuleCallback, Rule], iterations: int = 1,
              neighborhood_type: Optional[str] = None,
              neighborhood_range: Optional[int] = None) -> 'CellularAutomaton':
        """Shortcut for ``set_rule(...)`` followed by ``iterate(iterations)``."""
        return self.set_rule(rule, neighborhood_type, neighborhood_range).iterate(iterations)

    # Inspection

    def to_array(self) -> np.ndarray:
        """Copy of the live generation shaped like the grid."""
        return self._current.to_array()

    def count(self, value: int = 1) -> int:
        """Number of cells holding ``value``."""
        return int(np.count_nonzero(self._current.data == value))

    def copy(self) -> 'CellularAutomaton':
        """Create an independent automaton with the same state and settings."""
        clone = CellularAutomaton(self.shape, self.default_value, self.config)
        clone._current.write_all(self._current.tolist())
        clone.generation = self.generation
        clone._rule = self._rule
        clone._neighborhood = self._neighborhood
        clone._boundary = self._boundary
        clone._rng = self._rng
        return clone

    def __str__(self) -> str:
        """Rows of cell values for 1D and 2D grids."""
        array = self.to_array()
        if array.ndim == 1:
            array = array.reshape(1, -1)
        if array.ndim != 2:
            return repr(self)
        return '\n'.join(' '.join(str(v) for v in row) for row in array.tolist())

    def __repr__(self) -> str:
        return (f"CellularAutomaton(shape={list(self.shape)}, generation={self.generation}, "
                f"boundary={self._boundary}, neighborhood={self.neighborhood_type}/{self.neighborhood_range})")
