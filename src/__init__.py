"""
N-dimensional cellular automata.

Synchronous simulation of discrete cellular automata on grids of any
dimension, driven by rule strings or Python callables.
"""

__version__ = "0.1.0"

from .core import CellularAutomaton, AutomatonConfig, RuleParseError, InvalidRuleError

__all__ = [
    'CellularAutomaton',
    'AutomatonConfig',
    'RuleParseError',
    'InvalidRuleError',
    '__version__',
]
