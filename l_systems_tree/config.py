import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from l_systems_tree.errors import InvalidGrammar
from l_systems_tree.grammar import DEFAULT_MAX_LENGTH, GrammarParams


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Tunables of a generation run that are not part of the grammar itself.

    Args:
        distance_range: (low, high) bounds of the uniform forward step draw
        jitter_fraction: Half-width of the rotation jitter, as a fraction of the rotation
        max_length: Upper bound on the rewritten string length
        strict: Fail on an unmatched branch close instead of ignoring it
    """

    distance_range: Tuple[float, float] = (2.0, 5.0)
    jitter_fraction: float = 0.05
    max_length: int = DEFAULT_MAX_LENGTH
    strict: bool = True

    def __post_init__(self):
        low, high = self.distance_range
        if not (math.isfinite(low) and math.isfinite(high)) or low < 0 or high < low:
            raise InvalidGrammar(
                f"distance_range must satisfy 0 <= low <= high, got {self.distance_range}"
            )
        if not math.isfinite(self.jitter_fraction) or self.jitter_fraction < 0:
            raise InvalidGrammar(
                f"jitter_fraction must be >= 0, got {self.jitter_fraction}"
            )
        if isinstance(self.max_length, bool) or not isinstance(self.max_length, int) or self.max_length <= 0:
            raise InvalidGrammar(f"max_length must be a positive integer, got {self.max_length!r}")


def _as_float(x: Any, path: str) -> float:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        raise InvalidGrammar(f"{path} must be a number, got {x!r}")
    return float(x)


def load_config(obj: Optional[Dict[str, Any]]) -> GeneratorConfig:
    """Build a GeneratorConfig from the optional 'generator' section of a file."""
    if not obj:
        return GeneratorConfig()
    if not isinstance(obj, dict):
        raise InvalidGrammar("'generator' section must be an object")
    kwargs: Dict[str, Any] = {}
    if "distance_range" in obj:
        rng = obj["distance_range"]
        if not isinstance(rng, (list, tuple)) or len(rng) != 2:
            raise InvalidGrammar("generator.distance_range must be a [low, high] pair")
        kwargs["distance_range"] = (
            _as_float(rng[0], "generator.distance_range[0]"),
            _as_float(rng[1], "generator.distance_range[1]"),
        )
    if "jitter_fraction" in obj:
        kwargs["jitter_fraction"] = _as_float(obj["jitter_fraction"], "generator.jitter_fraction")
    if "max_length" in obj:
        kwargs["max_length"] = obj["max_length"]
    if "strict" in obj:
        if not isinstance(obj["strict"], bool):
            raise InvalidGrammar(f"generator.strict must be a boolean, got {obj['strict']!r}")
        kwargs["strict"] = obj["strict"]
    return GeneratorConfig(**kwargs)


def params_from_dict(obj: Dict[str, Any]) -> GrammarParams:
    """
    Build GrammarParams from a JSON-style mapping.

    Accepted keys: 'axiom' (or 'initial_string'), 'rules', 'iterations'
    (or 'iteration_count') and 'angle' (or 'rotation_degrees').
    """
    if not isinstance(obj, dict):
        raise InvalidGrammar("grammar file must contain a JSON object")
    axiom = obj.get("axiom", obj.get("initial_string", ""))
    rules = obj.get("rules", {})
    if not isinstance(rules, dict):
        raise InvalidGrammar("'rules' must be an object mapping symbols to strings")
    params = GrammarParams(
        initial_string=axiom,
        rules=dict(rules),
        iteration_count=obj.get("iterations", obj.get("iteration_count", 1)),
        rotation_degrees=obj.get("angle", obj.get("rotation_degrees", 22.5)),
    )
    params.validate()
    return params


def load_params(path: str) -> Tuple[GrammarParams, GeneratorConfig]:
    """Read a grammar JSON file, returning its parameters and generator config."""
    with open(path, encoding="utf-8") as f:
        try:
            obj = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidGrammar(f"invalid JSON in {path}: {e}") from e
    params = params_from_dict(obj)
    return params, load_config(obj.get("generator"))
