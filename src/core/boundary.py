"""Boundary policies for neighbour lookups that fall outside the grid.

Three policies exist:

- ``Fixed(value)``: a neighbour with any out-of-range component is replaced
  by ``value`` as a whole.
- ``Wrap``: each component wraps around toroidally (Euclidean modulo).
- ``Clamp``: each component is clamped to the nearest edge cell.

The policies resolve single components for callers that walk coordinates by
hand, and the module also provides the numba kernel that resolves every
neighbour of a block of cells to linear buffer offsets in one pass.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union
from numba import jit
import logging

from .index import GridShape, Coordinate

logger = logging.getLogger(__name__)

# Kernel mode codes
MODE_FIXED = 0
MODE_WRAP = 1
MODE_CLAMP = 2

# Linear offset recorded for neighbours that resolve to the fixed value
OUT_OF_BOUND = -1


@dataclass(frozen=True)
class Fixed:
    """Out-of-range neighbours read as a constant value."""
    value: int = 0

    mode = MODE_FIXED

    def resolve(self, candidate: int, dim_size: int) -> Tuple[bool, int]:
        """Return ``(in_bound, candidate)``; the coordinate is left untouched."""
        return 0 <= candidate < dim_size, candidate


@dataclass(frozen=True)
class Wrap:
    """Toroidal wrap-around on every axis."""

    mode = MODE_WRAP

    def resolve(self, candidate: int, dim_size: int) -> Tuple[bool, int]:
        """Return ``(True, wrapped)``."""
        return True, ((candidate % dim_size) + dim_size) % dim_size


@dataclass(frozen=True)
class Clamp:
    """Out-of-range components stick to the nearest edge."""

    mode = MODE_CLAMP

    def resolve(self, candidate: int, dim_size: int) -> Tuple[bool, int]:
        """Return ``(True, clamped)``."""
        return True, max(0, min(candidate, dim_size - 1))


BoundaryPolicy = Union[Fixed, Wrap, Clamp]


def make_boundary(value: Union[int, str, None] = 0) -> BoundaryPolicy:
    """Build a policy from the public ``int | "wrap" | "clamp"`` form.

    Args:
        value: ``"wrap"``, ``"clamp"``, or an integer fixed value (``None`` means 0)

    Returns:
        The matching boundary policy
    """
    if isinstance(value, (Fixed, Wrap, Clamp)):
        return value
    if value == "wrap":
        return Wrap()
    if value == "clamp":
        return Clamp()
    return Fixed(0 if value is None else int(value))


def resolve_coordinate(policy: BoundaryPolicy, coord: Sequence[int],
                       shape: GridShape) -> Optional[Coordinate]:
    """Resolve every component of a coordinate against the grid bounds.

    Args:
        policy: Boundary policy to apply
        coord: Candidate coordinate, possibly out of range
        shape: Grid geometry

    Returns:
        The in-range coordinate, or None when the lookup is out of bound
        under a ``Fixed`` policy
    """
    resolved = []
    for candidate, dim_size in zip(coord, shape.dims):
        in_bound, value = policy.resolve(candidate, dim_size)
        if not in_bound:
            return None
        resolved.append(value)
    return tuple(resolved)


@jit(nopython=True, cache=True)
def _resolve_neighbor_indices(dims: np.ndarray, stride: np.ndarray, offsets: np.ndarray,
                              mode: int, start: int, stop: int) -> np.ndarray:
    """Resolve the linear offset of every neighbour of cells ``start..stop-1``.

    Args:
        dims: Size of each dimension (int64)
        stride: Stride of each dimension (int64)
        offsets: Neighbour offsets, shape (count, dimension) (int64)
        mode: One of MODE_FIXED, MODE_WRAP, MODE_CLAMP
        start: First cell index
        stop: One past the last cell index

    Returns:
        int64 array of shape (stop - start, count); OUT_OF_BOUND marks a
        neighbour that reads the fixed value
    """
    dimension = dims.shape[0]
    count = offsets.shape[0]
    table = np.empty((stop - start, count), dtype=np.int64)

    for row in range(stop - start):
        index = start + row
        for n in range(count):
            linear = 0
            out_of_bound = False
            for d in range(dimension):
                size = dims[d]
                c = (index // stride[d]) % size + offsets[n, d]
                if c < 0 or c >= size:
                    if mode == MODE_WRAP:
                        c = ((c % size) + size) % size
                    elif mode == MODE_CLAMP:
                        c = max(0, min(c, size - 1))
                    else:
                        out_of_bound = True
                        break
                linear += c * stride[d]
            table[row, n] = OUT_OF_BOUND if out_of_bound else linear

    return table


def resolve_neighbor_indices(shape: GridShape, offsets: np.ndarray, policy: BoundaryPolicy,
                             start: int = 0, stop: Optional[int] = None) -> np.ndarray:
    """Resolve neighbour linear offsets for a contiguous block of cells.

    Args:
        shape: Grid geometry
        offsets: Neighbour offsets, shape (count, dimension)
        policy: Boundary policy applied to every component
        start: First cell index
        stop: One past the last cell index (defaults to the grid size)

    Returns:
        int64 array of shape (stop - start, count)
    """
    if stop is None:
        stop = shape.size

    dims = np.asarray(shape.dims, dtype=np.int64)
    stride = np.asarray(shape.stride, dtype=np.int64)
    offsets = np.asarray(offsets, dtype=np.int64).reshape(-1, shape.dimension)

    table = _resolve_neighbor_indices(dims, stride, offsets, policy.mode, start, stop)
    logger.debug(f"Resolved {table.size} neighbour offsets for cells {start}..{stop} under {policy}")
    return table
