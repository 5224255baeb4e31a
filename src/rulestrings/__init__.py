"""
Rule-string mini-language.

Turns compact rule notations (S/B, S/B/C, R/T/C/N, Wolfram numbers) into
executable rule definitions that know their own neighbourhood.
"""

from .definitions import RuleDefinition, LifeRule, GenerationsRule, CyclicRule, WolframRule
from .parser import parse_rule, parse_counts, NEIGHBORHOOD_LETTERS

__all__ = [
    'RuleDefinition',
    'LifeRule',
    'GenerationsRule',
    'CyclicRule',
    'WolframRule',
    'parse_rule',
    'parse_counts',
    'NEIGHBORHOOD_LETTERS',
]
