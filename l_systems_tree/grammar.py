"""
Grammar engine: parameters of an L-system and the string rewriting pass.

An L-system is a rewriting system made of an alphabet of symbols, a set of
production rules that expand each symbol into a (possibly empty) string, an
initial string and the number of times the rules are applied.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator

from l_systems_tree.errors import GrammarOverflow, InvalidGrammar

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 1_000_000
MAX_ROTATION_DEGREES = 180.0


@dataclass(frozen=True)
class GrammarParams:
    """
    Parameters for string generation with an L-system.

    Args:
        initial_string: Axiom the rewriting starts from (trimmed before use)
        rules: Mapping of a single symbol to its replacement string
        iteration_count: Number of rewriting passes, must be >= 0
        rotation_degrees: Turn magnitude used by the turtle interpreter
    """

    initial_string: str
    rules: Dict[str, str] = field(default_factory=dict)
    iteration_count: int = 1
    rotation_degrees: float = 22.5

    @classmethod
    def default(cls) -> "GrammarParams":
        return cls(
            initial_string="F",
            rules={"F": "F+F-F-F+F"},
            iteration_count=1,
            rotation_degrees=22.5,
        )

    def validate(self) -> None:
        """Raise InvalidGrammar if the parameters cannot be rewritten."""
        if not isinstance(self.initial_string, str) or not self.initial_string.strip():
            raise InvalidGrammar("initial string must not be empty or whitespace")
        if not self.rules:
            raise InvalidGrammar("rule set must contain at least one rule")
        for key, value in self.rules.items():
            if not isinstance(key, str) or len(key) != 1:
                raise InvalidGrammar(f"rule key {key!r} must be a single symbol")
            if not isinstance(value, str):
                raise InvalidGrammar(f"rule value for {key!r} must be a string")
        if isinstance(self.iteration_count, bool) or not isinstance(self.iteration_count, int):
            raise InvalidGrammar(
                f"iteration count must be an integer, got {self.iteration_count!r}"
            )
        if self.iteration_count < 0:
            raise InvalidGrammar(
                f"iteration count must be >= 0, got {self.iteration_count}"
            )
        if not isinstance(self.rotation_degrees, (int, float)) or not math.isfinite(self.rotation_degrees):
            raise InvalidGrammar(
                f"rotation degrees must be a finite number, got {self.rotation_degrees!r}"
            )
        if abs(self.rotation_degrees) > MAX_ROTATION_DEGREES:
            raise InvalidGrammar(
                f"rotation degrees must lie in [-180, 180], got {self.rotation_degrees}"
            )

    # Rule editing between runs. Each helper returns a new GrammarParams.

    def with_rule(self, key: str, value: str) -> "GrammarParams":
        key = key.strip()[:1]
        if not key:
            raise InvalidGrammar("rule key must not be empty")
        if key in self.rules:
            raise InvalidGrammar(f"a rule for {key!r} already exists")
        rules = dict(self.rules)
        rules[key] = value.strip()
        return replace(self, rules=rules)

    def replace_rule(self, key: str, value: str) -> "GrammarParams":
        if key not in self.rules:
            raise KeyError(key)
        rules = dict(self.rules)
        rules[key] = value.strip()
        return replace(self, rules=rules)

    def without_rule(self, key: str) -> "GrammarParams":
        if key not in self.rules:
            raise KeyError(key)
        rules = {k: v for k, v in self.rules.items() if k != key}
        return replace(self, rules=rules)


def _next_length(current: str, rules: Dict[str, str]) -> int:
    counts = Counter(current)
    return sum(
        count * (len(rules[symbol]) if symbol in rules else 1)
        for symbol, count in counts.items()
    )


def rewrite_steps(params: GrammarParams, max_length: int = DEFAULT_MAX_LENGTH) -> Iterator[str]:
    """
    Yield the string after each iteration, starting with the trimmed axiom.

    Every pass scans the current string once from left to right; symbols
    inserted by a replacement are not rewritten again in the same pass and
    symbols without a rule are copied unchanged.

    Raises:
        InvalidGrammar: parameters fail validation (raised before the first yield)
        GrammarOverflow: an iteration would exceed max_length symbols
    """
    params.validate()
    if max_length <= 0:
        raise InvalidGrammar(f"max_length must be positive, got {max_length}")

    # Snapshot so edits to the caller's dict cannot leak into a running pass
    rules = dict(params.rules)
    current = params.initial_string.strip()
    if len(current) > max_length:
        raise GrammarOverflow(0, len(current), max_length)
    yield current

    for iteration in range(1, params.iteration_count + 1):
        length = _next_length(current, rules)
        if length > max_length:
            raise GrammarOverflow(iteration, length, max_length)
        current = "".join(rules.get(ch, ch) for ch in current)
        logger.debug("iteration %d: %d symbols", iteration, len(current))
        yield current


def rewrite(params: GrammarParams, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Apply the production rules iteration_count times and return the result."""
    result = ""
    for result in rewrite_steps(params, max_length=max_length):
        pass
    return result
