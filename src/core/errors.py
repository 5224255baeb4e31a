"""Exception hierarchy for the cellular automaton engine."""

from typing import Any


class AutomatonError(Exception):
    """Base class for all engine errors."""


class RuleParseError(AutomatonError, ValueError):
    """A rule string could not be parsed into an executable rule."""

    def __init__(self, rule_string: str, message: str = "The rulestring could not be parsed."):
        super().__init__(f"{message} ({rule_string!r})")
        self.rule_string = rule_string


class InvalidRuleError(AutomatonError, TypeError):
    """A rule was neither a rule string nor a callable."""

    def __init__(self, rule: Any):
        super().__init__(f"Invalid rule, neither a string nor a function: {type(rule).__name__}")
        self.rule = rule


class RuleNotSetError(AutomatonError, RuntimeError):
    """The automaton was iterated before a rule was armed."""
