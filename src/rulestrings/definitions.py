"""Executable rule definitions produced by the rule-string parser.

Each definition is a pure function of a cell's current value and its ordered
neighbour values, plus the neighbourhood it expects to be evaluated over.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import FrozenSet, Protocol, Sequence


class RuleDefinition(Protocol):
    rule_string: str
    rule_format: str
    neighborhood_type: str
    neighborhood_range: int

    def evaluate(self, current_value: int, neighbors: Sequence[int]) -> int:
        ...


def count_alive(neighbors: Sequence[int], state: int = 1) -> int:
    """Number of neighbours in ``state``."""
    return sum(1 for value in neighbors if value == state)


# Standard Conway rules
CONWAY_SURVIVAL: FrozenSet[int] = frozenset({2, 3})
CONWAY_BIRTH: FrozenSet[int] = frozenset({3})


@dataclass(frozen=True)
class LifeRule:
    """Outer-totalistic two-state rule in S/B notation.

    A dead cell (0) is born when its live-neighbour count is in ``birth``; a
    live cell (1) survives when the count is in ``survival``. Every other
    cell, including cells in any state other than 0 or 1, becomes 0.
    """
    survival: FrozenSet[int]
    birth: FrozenSet[int]
    neighborhood_type: str = 'moore'
    neighborhood_range: int = 1
    rule_string: str = ''

    rule_format = 'life'

    @classmethod
    def standard(cls) -> LifeRule:
        """Conway's Game of Life, B3/S23."""
        return cls(CONWAY_SURVIVAL, CONWAY_BIRTH, rule_string='23/3')

    def evaluate(self, current_value: int, neighbors: Sequence[int]) -> int:
        alive = count_alive(neighbors)
        if current_value == 0:
            return 1 if alive in self.birth else 0
        if current_value == 1:
            return 1 if alive in self.survival else 0
        return 0


@dataclass(frozen=True)
class GenerationsRule:
    """Multi-state S/B/C rule with decaying "dying" states.

    States run from 0 to ``states - 1``. State 1 is alive and is the only state
    counted in neighbourhoods; states above 1 are dying and advance by one
    each generation until they wrap back to 0.
    """
    survival: FrozenSet[int]
    birth: FrozenSet[int]
    states: int
    neighborhood_type: str = 'moore'
    neighborhood_range: int = 1
    rule_string: str = ''

    rule_format = 'generations'

    def evaluate(self, current_value: int, neighbors: Sequence[int]) -> int:
        if current_value == 0:
            return 1 if count_alive(neighbors) in self.birth else 0
        if current_value == 1:
            if count_alive(neighbors) in self.survival:
                return 1
            return 2 if self.states > 2 else 0
        return (current_value + 1) % self.states


@dataclass(frozen=True)
class CyclicRule:
    """Cyclic cellular automaton in R/T/C/N notation.

    A cell in state ``s`` advances to ``(s + 1) % states`` once at least
    ``threshold`` neighbours already hold that successor state.
    """
    threshold: int
    states: int
    neighborhood_type: str = 'moore'
    neighborhood_range: int = 1
    rule_string: str = ''

    rule_format = 'cyclic'

    def evaluate(self, current_value: int, neighbors: Sequence[int]) -> int:
        successor = (current_value + 1) % self.states
        if count_alive(neighbors, successor) >= self.threshold:
            return successor
        return current_value


@dataclass(frozen=True)
class WolframRule:
    """Elementary one-dimensional rule, numbered 0-255.

    Expects the two neighbours of a 1D Moore range-1 neighbourhood in
    canonical order, i.e. ``[left, right]``.
    """
    number: int
    neighborhood_type: str = 'moore'
    neighborhood_range: int = 1
    rule_string: str = ''

    rule_format = 'wolfram'

    def evaluate(self, current_value: int, neighbors: Sequence[int]) -> int:
        left = 1 if neighbors[0] == 1 else 0
        right = 1 if neighbors[-1] == 1 else 0
        center = 1 if current_value == 1 else 0
        return (self.number >> (left << 2 | center << 1 | right)) & 1
