"""Relative neighbour offsets for the named neighbourhood topologies.

Every provider has the signature ``provider(range, dimension)`` and returns a
list of offset tuples of length ``dimension``, never including the zero
vector. Providers make no ordering promise.

The sparse topologies classify each Moore offset by its shell
``s = max(|c|)`` and by ``m``, the number of components sitting on that shell:

- ``face``: ``m == 1`` (cells across a facet of the shell cube)
- ``edge``: ``m == 2`` (cells along an edge of the shell cube)
- ``corner``: ``m == dimension`` (the cube's corners)

At range 1 in three dimensions this yields the familiar 6 face, 12 edge and
8 corner neighbours. ``axis`` keeps offsets lying on a coordinate axis.
"""

from itertools import product
from typing import Callable, Dict, List, Tuple
import logging

logger = logging.getLogger(__name__)

Offset = Tuple[int, ...]
GeometryProvider = Callable[[int, int], List[Offset]]


def _lattice(neighborhood_range: int, dimension: int):
    """All non-zero offsets inside the Chebyshev ball of the given range."""
    span = range(-neighborhood_range, neighborhood_range + 1)
    for offset in product(span, repeat=dimension):
        if any(offset):
            yield offset


def _shell_count(offset: Offset) -> int:
    """Number of components lying on the offset's outermost shell."""
    shell = max(abs(c) for c in offset)
    return sum(1 for c in offset if abs(c) == shell)


def moore(neighborhood_range: int = 1, dimension: int = 2) -> List[Offset]:
    """Offsets within Chebyshev distance ``neighborhood_range``."""
    return list(_lattice(neighborhood_range, dimension))


def von_neumann(neighborhood_range: int = 1, dimension: int = 2) -> List[Offset]:
    """Offsets within Manhattan distance ``neighborhood_range``."""
    return [
        offset for offset in _lattice(neighborhood_range, dimension)
        if sum(abs(c) for c in offset) <= neighborhood_range
    ]


def axis(neighborhood_range: int = 1, dimension: int = 2) -> List[Offset]:
    """Offsets with exactly one non-zero component."""
    offsets = []
    for dim in range(dimension):
        for distance in range(1, neighborhood_range + 1):
            for sign in (-1, 1):
                offset = [0] * dimension
                offset[dim] = sign * distance
                offsets.append(tuple(offset))
    return offsets


def face(neighborhood_range: int = 1, dimension: int = 2) -> List[Offset]:
    """Moore offsets lying on a facet of their shell cube."""
    return [offset for offset in _lattice(neighborhood_range, dimension)
            if _shell_count(offset) == 1]


def edge(neighborhood_range: int = 1, dimension: int = 2) -> List[Offset]:
    """Moore offsets lying on an edge of their shell cube."""
    return [offset for offset in _lattice(neighborhood_range, dimension)
            if _shell_count(offset) == 2]


def corner(neighborhood_range: int = 1, dimension: int = 2) -> List[Offset]:
    """Moore offsets lying on a corner of their shell cube."""
    return [offset for offset in _lattice(neighborhood_range, dimension)
            if _shell_count(offset) == dimension]


GEOMETRIES: Dict[str, GeometryProvider] = {
    'moore': moore,
    'von-neumann': von_neumann,
    'axis': axis,
    'corner': corner,
    'edge': edge,
    'face': face,
}

DEFAULT_TOPOLOGY = 'moore'

TOPOLOGIES = tuple(GEOMETRIES)


def is_known_topology(name: str) -> bool:
    """Check whether ``name`` is a registered topology."""
    return name in GEOMETRIES


def get_geometry(name: str) -> GeometryProvider:
    """Look up a provider by topology name, falling back to Moore.

    Args:
        name: Topology name (moore, von-neumann, axis, corner, edge, face)

    Returns:
        The geometry provider function
    """
    provider = GEOMETRIES.get(name)
    if provider is None:
        logger.debug(f"Unknown topology {name!r}, falling back to {DEFAULT_TOPOLOGY}")
        return GEOMETRIES[DEFAULT_TOPOLOGY]
    return provider
