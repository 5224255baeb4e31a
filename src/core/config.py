"""Per-instance configuration for cellular automata."""

import numpy as np
from typing import Optional, Union

from ..topology import DEFAULT_TOPOLOGY


class AutomatonConfig:
    """Configuration owned by a single automaton instance."""

    def __init__(self,
                 dtype: str = "uint8",
                 out_of_bound: Union[int, str] = 0,
                 neighborhood_type: str = DEFAULT_TOPOLOGY,
                 neighborhood_range: int = 1,
                 seed: Optional[int] = None,
                 max_cached_indices: int = 4_000_000):
        """Initialize automaton configuration.

        Args:
            dtype: Unsigned numpy integer dtype of the cell buffers
            out_of_bound: Initial boundary, an int fixed value, "wrap" or "clamp"
            neighborhood_type: Topology used by custom rules that name none
            neighborhood_range: Range used by custom rules that name none
            seed: Seed for a private random source (process-wide source if None)
            max_cached_indices: Largest neighbour index table (cells x neighbours)
                kept between sweeps; bigger grids resolve indices per block
        """
        dtype = np.dtype(dtype)
        if dtype.kind != 'u':
            raise ValueError(f"Cell dtype must be an unsigned integer type, got {dtype}")

        self.dtype = dtype.name
        self.out_of_bound = out_of_bound
        self.neighborhood_type = neighborhood_type
        self.neighborhood_range = max(1, int(neighborhood_range))
        self.seed = seed
        self.max_cached_indices = max(0, int(max_cached_indices))

    def copy(self) -> 'AutomatonConfig':
        """Create a copy of the configuration."""
        return AutomatonConfig(
            dtype=self.dtype,
            out_of_bound=self.out_of_bound,
            neighborhood_type=self.neighborhood_type,
            neighborhood_range=self.neighborhood_range,
            seed=self.seed,
            max_cached_indices=self.max_cached_indices
        )

    def __repr__(self) -> str:
        return (f"AutomatonConfig(dtype={self.dtype}, out_of_bound={self.out_of_bound!r}, "
                f"neighborhood={self.neighborhood_type}/{self.neighborhood_range}, seed={self.seed})")
