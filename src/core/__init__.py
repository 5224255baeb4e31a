"""
Cellular automaton engine core.

N-dimensional indexing, boundary policies, ordered neighbourhoods, the rule
abstraction and the double-buffered simulator.
"""

from .automaton import CellularAutomaton
from .boundary import Fixed, Wrap, Clamp, BoundaryPolicy, make_boundary
from .config import AutomatonConfig
from .errors import AutomatonError, RuleParseError, InvalidRuleError, RuleNotSetError
from .index import GridShape
from .neighborhood import NeighborhoodTable
from .rule import ParsedRule, CustomRule, Rule, RuleParseResult, parse_rule_string
from .sampler import make_random_source

__all__ = [
    'CellularAutomaton',
    'Fixed',
    'Wrap',
    'Clamp',
    'BoundaryPolicy',
    'make_boundary',
    'AutomatonConfig',
    'AutomatonError',
    'RuleParseError',
    'InvalidRuleError',
    'RuleNotSetError',
    'GridShape',
    'NeighborhoodTable',
    'ParsedRule',
    'CustomRule',
    'Rule',
    'RuleParseResult',
    'parse_rule_string',
    'make_random_source',
]
