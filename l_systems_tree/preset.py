from typing import List

from l_systems_tree.grammar import GrammarParams

# Every preset only uses the symbols the turtle understands: F + - [ ]
LSYSTEM_PRESETS = {
    # Grammar the tree builder starts with
    "default": {
        "axiom": "F",
        "rules": {"F": "F+F-F-F+F"},
        "angle": 22.5,
        "description": "Default zig-zag growth"
    },

    "plant_basic": {
        "axiom": "F",
        "rules": {"F": "F[+F]F[-F]F"},
        "angle": 25,
        "description": "Basic plant with balanced branching"
    },

    # Taproot systems (main axis with laterals)
    "taproot_simple": {
        "axiom": "F",
        "rules": {"F": "FF[+F][-F]"},
        "angle": 30,
        "description": "Simple taproot with lateral branches"
    },
    "taproot_sparse": {
        "axiom": "F",
        "rules": {"F": "FFFF[+F][-F]"},
        "angle": 35,
        "description": "Very deep taproot with sparse laterals"
    },

    "adventitious": {
        "axiom": "F[+F][-F]",
        "rules": {"F": "FF[+F][-F]"},
        "angle": 30,
        "description": "Several stems from one base"
    },

    # Dichotomous branching (forking)
    "dichotomous": {
        "axiom": "F",
        "rules": {"F": "F[+F][-F]"},
        "angle": 30,
        "description": "Simple dichotomous forking"
    },

    "herringbone": {
        "axiom": "F",
        "rules": {"F": "F[-F]FF[+F]F"},
        "angle": 35,
        "description": "Herringbone branching pattern"
    },

    # Tree-like structures
    "tree_binary": {
        "axiom": "F",
        "rules": {"F": "FF[+F][-F]"},
        "angle": 25,
        "description": "Binary tree structure"
    },
    "tree_hierarchical": {
        "axiom": "F",
        "rules": {"F": "F[+F[-F]]F[--F[+F]]"},
        "angle": 20,
        "description": "Branches that branch again"
    },

    "coral_branching": {
        "axiom": "F",
        "rules": {"F": "FF[+F][+F][-F][-F]"},
        "angle": 25,
        "description": "Coral-like branching"
    },

    "vine": {
        "axiom": "F",
        "rules": {"F": "F[+F]F[-F][F]"},
        "angle": 20,
        "description": "Vine-like growth"
    },

    "lightning": {
        "axiom": "F",
        "rules": {"F": "F[++F][--F]F"},
        "angle": 15,
        "description": "Lightning bolt pattern"
    },
}


def list_presets() -> List[str]:
    return sorted(LSYSTEM_PRESETS)


def get_preset(name: str, iterations: int = 3) -> GrammarParams:
    """Return GrammarParams for a named preset with the given iteration count."""
    try:
        preset = LSYSTEM_PRESETS[name]
    except KeyError:
        raise KeyError(
            f"unknown preset {name!r}; available: {', '.join(list_presets())}"
        ) from None
    return GrammarParams(
        initial_string=preset["axiom"],
        rules=dict(preset["rules"]),
        iteration_count=iterations,
        rotation_degrees=float(preset["angle"]),
    )
