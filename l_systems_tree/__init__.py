"""Deterministic L-system rewriting and 3D turtle interpretation into node trees."""

from l_systems_tree.config import GeneratorConfig, load_params
from l_systems_tree.errors import GrammarOverflow, InvalidGrammar, LSystemError, UnbalancedBranches
from l_systems_tree.grammar import GrammarParams, rewrite, rewrite_steps
from l_systems_tree.preset import LSYSTEM_PRESETS, get_preset
from l_systems_tree.tree import SpatialNode, SpatialTree, traverse, visit_edges
from l_systems_tree.turtle_3d import (
    Cursor,
    Diagnostic,
    Generation,
    Interpretation,
    TurtleInterpreter,
    generate_lsystem,
    interpret,
)

__version__ = "0.1.0"
