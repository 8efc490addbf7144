import logging
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Protocol

import numpy as np

from l_systems_tree import rotation
from l_systems_tree.config import GeneratorConfig
from l_systems_tree.errors import UnbalancedBranches
from l_systems_tree.grammar import GrammarParams, rewrite
from l_systems_tree.tree import ROOT_INDEX, SpatialTree

logger = logging.getLogger(__name__)

FORWARD = "F"
TURN_RIGHT = "+"
TURN_LEFT = "-"
BRANCH_OPEN = "["
BRANCH_CLOSE = "]"
SUPPORTED_SYMBOLS = frozenset((FORWARD, TURN_RIGHT, TURN_LEFT, BRANCH_OPEN, BRANCH_CLOSE))


class RandomSource(Protocol):
    """Seedable uniform generator, e.g. numpy.random.Generator or random.Random."""

    def uniform(self, low: float, high: float) -> float: ...

    def random(self) -> float: ...


@dataclass(frozen=True)
class Cursor:
    """Where the turtle is, which way it faces and which node it extends."""

    position: np.ndarray
    orientation: np.ndarray
    node: int

    def direction(self) -> np.ndarray:
        return rotation.rotate(self.orientation, rotation.UP)


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    index: int
    symbol: str
    message: str


@dataclass
class Interpretation:
    tree: SpatialTree
    diagnostics: List[Diagnostic] = field(default_factory=list)
    final_stack_depth: int = 1
    forward_count: int = 0


@dataclass
class Generation:
    symbols: str
    interpretation: Interpretation

    @property
    def tree(self) -> SpatialTree:
        return self.interpretation.tree

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.interpretation.diagnostics


class TurtleInterpreter:
    """
    Single-use interpreter turning a symbol string into a SpatialTree.

    Commands:
        F: Move forward a random distance and create a node
        +/-: Turn right/left around a jittered rotation magnitude
        [: Jitter the orientation with a random sign and push a new branch
        ]: Pop back to the parent branch

    The cursor stack, random source and output tree all belong to this
    object, so separate runs never share mutable state.
    """

    def __init__(
        self,
        params: GrammarParams,
        rng: RandomSource,
        config: Optional[GeneratorConfig] = None,
    ):
        self.params = params
        self.rng = rng
        self.config = config or GeneratorConfig()
        self.stack: List[Cursor] = []

    # -------------------------------
    # Random draws
    # -------------------------------
    def random_distance(self) -> float:
        low, high = self.config.distance_range
        return float(self.rng.uniform(low, high))

    def _jitter(self) -> float:
        spread = abs(self.params.rotation_degrees) * self.config.jitter_fraction
        return float(self.rng.uniform(-spread, spread))

    def random_right_angle(self) -> float:
        return self._jitter() + self.params.rotation_degrees

    def random_left_angle(self) -> float:
        return self._jitter() - self.params.rotation_degrees

    def random_branch_angle(self) -> float:
        sign = 1.0 if self.rng.random() > 0.5 else -1.0
        return self._jitter() + self.params.rotation_degrees * sign

    def _compose(self, orientation: np.ndarray, angle) -> np.ndarray:
        # Yaw/roll on the world side, pitch on the local side
        outer = rotation.euler(0.0, angle(), angle())
        inner = rotation.euler(angle(), 0.0, 0.0)
        return rotation.normalize(
            rotation.multiply(rotation.multiply(outer, orientation), inner)
        )

    # -------------------------------
    # Stack helpers
    # -------------------------------
    def _peek(self) -> Cursor:
        return self.stack[len(self.stack) - 1]

    def _replace_top(self, cursor: Cursor) -> None:
        self.stack[len(self.stack) - 1] = cursor

    # -------------------------------
    # Interpretation
    # -------------------------------
    def run(self, symbols: str, root: Any = None, root_name: str = "Root") -> Interpretation:
        """
        Walk `symbols` once from left to right and build the tree.

        Args:
            symbols: Rewritten L-system string
            root: Opaque handle of the caller's root object, stored on the root node
            root_name: Label given to the root node

        Returns:
            Interpretation holding the tree and any diagnostics

        Raises:
            UnbalancedBranches: a ']' with no open branch, when config.strict is set
        """
        tree = SpatialTree(root_handle=root, root_name=root_name)
        result = Interpretation(tree=tree)
        self.stack = [Cursor(
            position=np.zeros(3),
            orientation=rotation.IDENTITY.copy(),
            node=ROOT_INDEX,
        )]

        for i, symbol in enumerate(symbols):
            if symbol == FORWARD:
                cursor = self._peek()
                position = cursor.position + cursor.direction() * self.random_distance()
                node = tree.add_child(cursor.node, position, cursor.orientation, symbol_index=i)
                self._replace_top(replace(cursor, position=position, node=node.index))
                result.forward_count += 1

            elif symbol == TURN_RIGHT:
                cursor = self._peek()
                self._replace_top(replace(
                    cursor, orientation=self._compose(cursor.orientation, self.random_right_angle)
                ))

            elif symbol == TURN_LEFT:
                cursor = self._peek()
                self._replace_top(replace(
                    cursor, orientation=self._compose(cursor.orientation, self.random_left_angle)
                ))

            elif symbol == BRANCH_OPEN:
                cursor = self._peek()
                self.stack.append(replace(
                    cursor, orientation=self._compose(cursor.orientation, self.random_branch_angle)
                ))

            elif symbol == BRANCH_CLOSE:
                if len(self.stack) <= 1:
                    if self.config.strict:
                        raise UnbalancedBranches(i, symbol)
                    message = f"ignored unbalanced '{symbol}' at index {i}"
                    logger.warning(message)
                    result.diagnostics.append(
                        Diagnostic("unbalanced_close", i, symbol, message)
                    )
                    continue
                self.stack.pop()

            else:
                message = f"The character '{symbol}'({ord(symbol)}) is unknown."
                logger.warning("%s (index %d)", message, i)
                result.diagnostics.append(
                    Diagnostic("unsupported_symbol", i, symbol, message)
                )

        if len(self.stack) > 1:
            open_count = len(self.stack) - 1
            message = f"{open_count} branch(es) still open at end of string"
            logger.warning(message)
            result.diagnostics.append(
                Diagnostic("unclosed_branch", len(symbols), BRANCH_OPEN, message)
            )

        result.final_stack_depth = len(self.stack)
        return result


def interpret(
    symbols: str,
    params: GrammarParams,
    root: Any,
    rng: RandomSource,
    config: Optional[GeneratorConfig] = None,
    root_name: str = "Root",
) -> Interpretation:
    """Interpret `symbols` as turtle commands, building a tree under `root`."""
    return TurtleInterpreter(params, rng, config).run(symbols, root, root_name)


def generate_lsystem(
    root: Any,
    params: GrammarParams,
    rng: Optional[RandomSource] = None,
    config: Optional[GeneratorConfig] = None,
    seed: Optional[int] = None,
    root_name: str = "Root",
) -> Generation:
    """
    Rewrite the grammar and interpret the result in one step.

    When no rng is supplied a fresh numpy Generator seeded with `seed` is
    created for this run only.
    """
    config = config or GeneratorConfig()
    if rng is None:
        rng = np.random.default_rng(seed)
    symbols = rewrite(params, max_length=config.max_length)
    interpretation = interpret(symbols, params, root, rng, config, root_name=root_name)
    logger.info(
        "generated %d nodes from %d symbols (%d diagnostics)",
        len(interpretation.tree), len(symbols), len(interpretation.diagnostics),
    )
    return Generation(symbols=symbols, interpretation=interpretation)
