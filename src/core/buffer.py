"""Flat fixed-width cell storage for one generation of the automaton."""

import numpy as np
from typing import Sequence

from .index import GridShape


class GridBuffer:
    """Contiguous array of cell states plus the grid shape it is laid out in.

    Attributes:
        shape: Grid geometry shared with the owning automaton
        data: 1D numpy array of length ``shape.size``
    """

    def __init__(self, shape: GridShape, default_value: int = 0, dtype: str = "uint8"):
        """Allocate a buffer filled with ``default_value``.

        Args:
            shape: Grid geometry
            default_value: Initial value of every cell
            dtype: Unsigned integer numpy dtype of the cells
        """
        self.shape = shape
        self.data = np.empty(shape.size, dtype=np.dtype(dtype))
        self.fill(default_value)

    @property
    def dtype(self) -> np.dtype:
        return self.data.dtype

    def __len__(self) -> int:
        return self.data.shape[0]

    def fill(self, value: int) -> None:
        """Set every cell to ``value`` (wrapped to the buffer's width)."""
        self.data[:] = wrap_values([value], self.data.dtype)[0]

    def get(self, coord: Sequence[int]) -> int:
        """Read the cell at an in-range coordinate."""
        return int(self.data[self.shape.linear_index(coord)])

    def set(self, coord: Sequence[int], value: int) -> None:
        """Write the cell at an in-range coordinate."""
        self.data[self.shape.linear_index(coord)] = wrap_values([value], self.data.dtype)[0]

    def write_all(self, values: Sequence[int]) -> None:
        """Overwrite every cell from a flat sequence of ``len(self)`` values."""
        self.data[:] = wrap_values(values, self.data.dtype)

    def tolist(self) -> list:
        """Cell values as a flat list of Python ints."""
        return self.data.tolist()

    def to_array(self) -> np.ndarray:
        """Copy of the cells reshaped to the grid's shape."""
        return self.data.reshape(self.shape.dims).copy()


def wrap_values(values: Sequence[int], dtype: np.dtype) -> np.ndarray:
    """Convert values to ``dtype`` with modular wrap-around.

    Values go through int64 first so negative and oversized results wrap the
    same way a byte store does instead of raising.

    Args:
        values: Integer (or float, truncated) cell values
        dtype: Target unsigned numpy dtype

    Returns:
        Array of ``values`` cast to ``dtype``
    """
    return np.asarray(values, dtype=np.int64).astype(dtype)
