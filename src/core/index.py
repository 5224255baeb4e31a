"""Shape and stride arithmetic for N-dimensional grids.

Cells are stored in one flat buffer. A coordinate maps to a linear offset by
a dot product with the stride vector, and back again with the usual
floor-divide / modulo decomposition. The stride layout is row-major (the last
dimension varies fastest), which matches numpy's C order so the flat buffer
can be reshaped to the grid's shape without copying.
"""

from typing import Sequence, Tuple

Coordinate = Tuple[int, ...]


def compute_strides(shape: Sequence[int]) -> Tuple[int, ...]:
    """Compute the row-major stride vector for a shape.

    Args:
        shape: Size of each dimension

    Returns:
        Stride per dimension, with ``stride[-1] == 1``
    """
    strides = [1] * len(shape)
    for dim in range(len(shape) - 2, -1, -1):
        strides[dim] = strides[dim + 1] * shape[dim + 1]
    return tuple(strides)


class GridShape:
    """Immutable grid geometry: dimension sizes, strides and total cell count.

    Attributes:
        dims: Size of each dimension
        stride: Linear-offset multiplier of each dimension
        dimension: Number of dimensions
        size: Total number of cells
    """

    __slots__ = ('dims', 'stride', 'dimension', 'size')

    def __init__(self, dims: Sequence[int]):
        """Initialize shape from per-dimension sizes.

        Args:
            dims: Size of each dimension (not validated)
        """
        dims = tuple(int(d) for d in dims)
        size = 1
        for d in dims:
            size *= d

        object.__setattr__(self, 'dims', dims)
        object.__setattr__(self, 'stride', compute_strides(dims))
        object.__setattr__(self, 'dimension', len(dims))
        object.__setattr__(self, 'size', size)

    def __setattr__(self, name, value):
        raise AttributeError("GridShape is immutable")

    def linear_index(self, coord: Sequence[int]) -> int:
        """Convert an in-range coordinate to its linear buffer offset.

        No bounds checking is done; callers resolve boundaries first.
        """
        index = 0
        for c, s in zip(coord, self.stride):
            index += c * s
        return index

    def coordinate_of(self, index: int) -> Coordinate:
        """Decode a linear buffer offset into a coordinate."""
        return tuple((index // s) % d for s, d in zip(self.stride, self.dims))

    def __len__(self) -> int:
        return self.dimension

    def __iter__(self):
        return iter(self.dims)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GridShape):
            return self.dims == other.dims
        if isinstance(other, (tuple, list)):
            return self.dims == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.dims)

    def __repr__(self) -> str:
        return f"GridShape({list(self.dims)}, size={self.size})"
