"""
Neighbourhood topology geometry.

Produces the raw relative offsets of the named neighbourhoods in any
dimension. Ordering is left to the consumer.
"""

from .geometry import (
    GEOMETRIES, TOPOLOGIES, DEFAULT_TOPOLOGY,
    moore, von_neumann, axis, corner, edge, face,
    get_geometry, is_known_topology,
)

__all__ = [
    'GEOMETRIES',
    'TOPOLOGIES',
    'DEFAULT_TOPOLOGY',
    'moore',
    'von_neumann',
    'axis',
    'corner',
    'edge',
    'face',
    'get_geometry',
    'is_known_topology',
]
