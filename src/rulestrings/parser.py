"""Rule-string parser.

Recognised notations (case-insensitive):

- life, ``S/B``: ``23/3``, ``S23/B3``, ``B3/S23``, ``S/B12V``, ``1/1V2``
- generations, ``S/B/C``: ``23/3/8``, ``S23/B3/C8``, ``B3/S23/C8``
- cyclic, ``R/T/C/N``: ``R1/T3/C3/NM``
- wolfram: ``W30``, ``Rule 110``

Life and generations rules accept a neighbourhood suffix: a letter (M moore,
V von-neumann, A axis, C corner, E edge, F face) optionally followed by the
range. Neighbour counts are single digits (``23`` is {2, 3}) unless written
as a comma-separated list, which also accepts ``a..b`` ranges
(``S2,3,10..12/B3``).

``parse_rule`` returns None for anything it does not recognise.
"""

import re
from typing import FrozenSet, Optional
import logging

from .definitions import RuleDefinition, LifeRule, GenerationsRule, CyclicRule, WolframRule

logger = logging.getLogger(__name__)

NEIGHBORHOOD_LETTERS = {
    'M': 'moore',
    'V': 'von-neumann',
    'N': 'von-neumann',
    'A': 'axis',
    'C': 'corner',
    'E': 'edge',
    'F': 'face',
}

_COUNTS = r'[0-9,.]*'
_SUFFIX = r'(?:(?P<nh>[MVACEF])(?P<range>[0-9]*))?'

LIFE_SB = re.compile(rf'^S?(?P<s>{_COUNTS})/B?(?P<b>{_COUNTS}){_SUFFIX}$')
LIFE_BS = re.compile(rf'^B(?P<b>{_COUNTS})/S(?P<s>{_COUNTS}){_SUFFIX}$')
GENERATIONS_SB = re.compile(rf'^S?(?P<s>{_COUNTS})/B?(?P<b>{_COUNTS})/C?(?P<c>[0-9]+){_SUFFIX}$')
GENERATIONS_BS = re.compile(rf'^B(?P<b>{_COUNTS})/S(?P<s>{_COUNTS})/C(?P<c>[0-9]+){_SUFFIX}$')
CYCLIC = re.compile(r'^R(?P<r>[0-9]+)/T(?P<t>[0-9]+)/C(?P<c>[0-9]+)/N(?P<nh>[MNVACEF])$')
WOLFRAM = re.compile(r'^(?:W|RULE\s*)(?P<n>[0-9]{1,3})$')


def parse_counts(text: str) -> Optional[FrozenSet[int]]:
    """Parse a neighbour-count list.

    Args:
        text: Digit string (``"23"``) or comma list (``"2,3,10..12"``)

    Returns:
        Set of counts, or None if the list is malformed
    """
    if ',' not in text and '.' not in text:
        return frozenset(int(ch) for ch in text)

    counts = set()
    for part in text.split(','):
        if not part:
            return None
        if '..' in part:
            low, _, high = part.partition('..')
            if not low.isdigit() or not high.isdigit() or int(low) > int(high):
                return None
            counts.update(range(int(low), int(high) + 1))
        elif part.isdigit():
            counts.add(int(part))
        else:
            return None
    return frozenset(counts)


def _neighborhood(match: re.Match) -> tuple:
    letter = match.group('nh') or 'M'
    neighborhood_range = int(match.group('range')) if match.group('range') else 1
    return NEIGHBORHOOD_LETTERS[letter], neighborhood_range


def _parse_life(rule: str, original: str) -> Optional[RuleDefinition]:
    match = LIFE_SB.match(rule) or LIFE_BS.match(rule)
    if match is None:
        return None

    survival = parse_counts(match.group('s'))
    birth = parse_counts(match.group('b'))
    if survival is None or birth is None:
        return None

    neighborhood_type, neighborhood_range = _neighborhood(match)
    return LifeRule(survival, birth, neighborhood_type, neighborhood_range, original)


def _parse_generations(rule: str, original: str) -> Optional[RuleDefinition]:
    match = GENERATIONS_SB.match(rule) or GENERATIONS_BS.match(rule)
    if match is None:
        return None

    survival = parse_counts(match.group('s'))
    birth = parse_counts(match.group('b'))
    states = int(match.group('c'))
    if survival is None or birth is None or states < 2:
        return None

    neighborhood_type, neighborhood_range = _neighborhood(match)
    return GenerationsRule(survival, birth, states, neighborhood_type, neighborhood_range, original)


def _parse_cyclic(rule: str, original: str) -> Optional[RuleDefinition]:
    match = CYCLIC.match(rule)
    if match is None:
        return None

    neighborhood_range = int(match.group('r'))
    states = int(match.group('c'))
    if neighborhood_range < 1 or states < 2:
        return None

    return CyclicRule(int(match.group('t')), states,
                      NEIGHBORHOOD_LETTERS[match.group('nh')], neighborhood_range, original)


def _parse_wolfram(rule: str, original: str) -> Optional[RuleDefinition]:
    match = WOLFRAM.match(rule)
    if match is None:
        return None

    number = int(match.group('n'))
    if number > 255:
        return None

    return WolframRule(number, rule_string=original)


_PARSERS = (_parse_wolfram, _parse_cyclic, _parse_generations, _parse_life)


def parse_rule(rule_string: str) -> Optional[RuleDefinition]:
    """Parse a rule string into an executable rule definition.

    Args:
        rule_string: Rule in one of the supported notations

    Returns:
        The rule definition, or None if the string is not recognised
    """
    if not isinstance(rule_string, str):
        return None

    rule = rule_string.strip().upper()
    for parser in _PARSERS:
        definition = parser(rule, rule_string)
        if definition is not None:
            logger.debug(f"Parsed {rule_string!r} as {definition.rule_format} rule")
            return definition

    logger.debug(f"Could not parse rule string {rule_string!r}")
    return None
