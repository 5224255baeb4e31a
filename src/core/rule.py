"""Rule abstraction: a parsed rule string or a caller-supplied callback.

``Rule`` is the union of two variants:

- ``ParsedRule`` wraps a definition produced by the rule-string parser and
  carries that definition's neighbourhood.
- ``CustomRule`` wraps an arbitrary ``(value, neighbors[, rng]) -> value``
  callable with an explicitly chosen neighbourhood.

Both expose ``evaluate(current_value, neighbors, rng)``.
"""

import inspect
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union
import logging

from .errors import InvalidRuleError, RuleParseError
from ..rulestrings import RuleDefinition, parse_rule

logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]
RuleCallback = Callable[..., int]


@dataclass(frozen=True)
class ParsedRule:
    """Rule backed by a parsed rule string."""
    definition: RuleDefinition

    @property
    def rule_string(self) -> str:
        return self.definition.rule_string

    @property
    def neighborhood_type(self) -> str:
        return self.definition.neighborhood_type

    @property
    def neighborhood_range(self) -> int:
        return self.definition.neighborhood_range

    def evaluate(self, current_value: int, neighbors: Sequence[int], rng: RandomSource) -> int:
        return self.definition.evaluate(current_value, neighbors)


@dataclass(frozen=True)
class CustomRule:
    """Rule backed by a caller-supplied function.

    Attributes:
        function: Callable receiving ``(current_value, neighbors)`` and, when it
            accepts a third positional argument, the random source
        neighborhood_type: Topology the function expects
        neighborhood_range: Range the function expects
        accepts_rng: Whether the random source is passed as third argument
    """
    function: RuleCallback
    neighborhood_type: str = 'moore'
    neighborhood_range: int = 1
    accepts_rng: bool = True

    @classmethod
    def from_callable(cls, function: RuleCallback, neighborhood_type: str = 'moore',
                      neighborhood_range: int = 1) -> 'CustomRule':
        """Wrap a callable, inspecting its signature once."""
        return cls(function, neighborhood_type, neighborhood_range, _accepts_rng(function))

    def evaluate(self, current_value: int, neighbors: Sequence[int], rng: RandomSource) -> int:
        if self.accepts_rng:
            return self.function(current_value, neighbors, rng)
        return self.function(current_value, neighbors)


Rule = Union[ParsedRule, CustomRule]


def _accepts_rng(function: RuleCallback) -> bool:
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures get the full argument list
        return True

    positional = 0
    for parameter in signature.parameters.values():
        if parameter.kind == parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 3


@dataclass(frozen=True)
class RuleParseResult:
    """Outcome of parsing a rule string: either a rule or the parse error."""
    rule: Optional[ParsedRule] = None
    error: Optional[RuleParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ParsedRule:
        """Return the parsed rule or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.rule


def parse_rule_string(rule_string: str) -> RuleParseResult:
    """Parse a rule string without raising.

    Args:
        rule_string: Rule in any notation the rule-string parser accepts

    Returns:
        Result holding either a ParsedRule or a RuleParseError
    """
    definition = parse_rule(rule_string)
    if definition is None:
        logger.warning(f"Rule string {rule_string!r} could not be parsed")
        return RuleParseResult(error=RuleParseError(rule_string))
    return RuleParseResult(rule=ParsedRule(definition))


def make_rule(rule: Union[str, RuleCallback, ParsedRule, CustomRule],
              neighborhood_type: Optional[str] = None,
              neighborhood_range: Optional[int] = None,
              default_type: str = 'moore', default_range: int = 1) -> Rule:
    """Build a Rule from the public ``string | callable`` form.

    Args:
        rule: Rule string, callable, or an already built rule
        neighborhood_type: Topology for callables (ignored for rule strings)
        neighborhood_range: Range for callables (ignored for rule strings)
        default_type: Topology used when a callable gets none
        default_range: Range used when a callable gets none

    Returns:
        The rule variant

    Raises:
        RuleParseError: If a rule string cannot be parsed
        InvalidRuleError: If ``rule`` is neither a string nor callable
    """
    if isinstance(rule, (ParsedRule, CustomRule)):
        return rule
    if isinstance(rule, str):
        return parse_rule_string(rule).unwrap()
    if callable(rule):
        return CustomRule.from_callable(rule,
                                        neighborhood_type or default_type,
                                        neighborhood_range or default_range)
    raise InvalidRuleError(rule)
