"""Random sources and weighted random initialisation of a grid."""

import numpy as np
from typing import Callable, Optional, Sequence, Tuple
import logging

from .buffer import GridBuffer

logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]
Distribution = Sequence[Tuple[Optional[int], float]]

# Process-wide default: numpy's global generator
DEFAULT_RANDOM_SOURCE: RandomSource = np.random.random


def make_random_source(seed: Optional[int] = None) -> RandomSource:
    """Create an independent zero-argument random source.

    Args:
        seed: Seed for reproducible sequences

    Returns:
        Callable returning floats in [0, 1)
    """
    return np.random.default_rng(seed).random


def sample_distribution(distribution: Distribution, total: float, rng: RandomSource) -> Optional[int]:
    """Draw one value from a weighted distribution.

    Exactly one random number is drawn. Entries are scanned in order and the
    draw is reduced by each weight; the first entry at which it drops to zero
    or below and whose value is not None wins. A None entry does not reset the
    draw, so its mass falls to the next non-None entry.

    Args:
        distribution: ``(value, weight)`` pairs; None values never get written
        total: Sum of all weights
        rng: Random source

    Returns:
        The selected value, or None if nothing was selected
    """
    selection = rng() * total
    for value, weight in distribution:
        selection -= weight
        if selection <= 0 and value is not None:
            return value
    return None


def fill_with_distribution(buffer: GridBuffer, distribution: Distribution, rng: RandomSource) -> None:
    """Fill a buffer cell by cell from a weighted value distribution.

    Cells for which no value is selected keep their current value.

    Args:
        buffer: Buffer to fill in place
        distribution: ``(value, weight)`` pairs, e.g. ``[(0, 90), (1, 10)]``
        rng: Random source, called once per cell
    """
    total = sum(weight for _, weight in distribution)
    cells = buffer.tolist()

    for index in range(len(cells)):
        value = sample_distribution(distribution, total, rng)
        if value is not None:
            cells[index] = value

    buffer.write_all(cells)
    logger.debug(f"Filled {len(cells)} cells from distribution {list(distribution)}")
