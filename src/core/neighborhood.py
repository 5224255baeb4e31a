"""Canonically ordered neighbourhood offset tables.

Rules receive their neighbours as a plain ordered sequence with no coordinate
labels, so the order has to be reproducible across runs and topologies.
Offsets are sorted by the string formed by joining their components with
commas, which orders neighbours left to right, top to bottom, and so on.
"""

import numpy as np
from functools import lru_cache
from typing import Sequence, Tuple
import logging

from ..topology import get_geometry, is_known_topology, DEFAULT_TOPOLOGY

logger = logging.getLogger(__name__)

Offset = Tuple[int, ...]


def canonical_key(offset: Sequence[int]) -> str:
    """Sort key of an offset: its components joined by commas."""
    return ','.join(str(c) for c in offset)


class NeighborhoodTable:
    """Ordered neighbour offsets for one (topology, range, dimension) triple.

    Attributes:
        topology: Resolved topology name (unknown names become moore)
        neighborhood_range: Neighbourhood range
        dimension: Number of grid dimensions
        offsets: Canonically ordered offset tuples
        count: Number of neighbours
    """

    def __init__(self, topology: str, neighborhood_range: int, dimension: int,
                 offsets: Sequence[Offset]):
        self.topology = topology
        self.neighborhood_range = neighborhood_range
        self.dimension = dimension
        self.offsets: Tuple[Offset, ...] = tuple(sorted((tuple(o) for o in offsets), key=canonical_key))
        self.count = len(self.offsets)

        array = np.array(self.offsets, dtype=np.int64).reshape(self.count, dimension)
        array.setflags(write=False)
        self._array = array

    @classmethod
    def build(cls, topology: str = None, neighborhood_range: int = None,
              dimension: int = 2) -> 'NeighborhoodTable':
        """Build (or fetch from cache) the table for a topology.

        Args:
            topology: Topology name; unknown or missing names fall back to moore
            neighborhood_range: Range, defaults to 1 when missing or zero
            dimension: Number of grid dimensions

        Returns:
            The ordered neighbourhood table
        """
        topology = topology if topology and is_known_topology(topology) else DEFAULT_TOPOLOGY
        neighborhood_range = int(neighborhood_range) if neighborhood_range else 1
        return _build_cached(topology, neighborhood_range, int(dimension))

    def as_array(self) -> np.ndarray:
        """Read-only int64 array of shape (count, dimension)."""
        return self._array

    def __len__(self) -> int:
        return self.count

    def __iter__(self):
        return iter(self.offsets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NeighborhoodTable):
            return NotImplemented
        return (self.topology == other.topology and
                self.neighborhood_range == other.neighborhood_range and
                self.offsets == other.offsets)

    def __hash__(self) -> int:
        return hash((self.topology, self.neighborhood_range, self.offsets))

    def __repr__(self) -> str:
        return (f"NeighborhoodTable({self.topology}, range={self.neighborhood_range}, "
                f"dimension={self.dimension}, count={self.count})")


@lru_cache(maxsize=64)
def _build_cached(topology: str, neighborhood_range: int, dimension: int) -> NeighborhoodTable:
    offsets = get_geometry(topology)(neighborhood_range, dimension)
    table = NeighborhoodTable(topology, neighborhood_range, dimension, offsets)
    logger.debug(f"Built {table!r}")
    return table
