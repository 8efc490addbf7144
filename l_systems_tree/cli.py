"""
Command line front end.

Usage:
  python -m l_systems_tree string --preset plant_basic --iterations 3
  python -m l_systems_tree generate --axiom F --rule F=FF[+F][-F] --seed 7 --json tree.json
  python -m l_systems_tree batch --preset dichotomous --count 20 --output runs.json
  python -m l_systems_tree presets
"""

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict, replace
from typing import List, Optional, Tuple

from tqdm import tqdm

from l_systems_tree.config import GeneratorConfig, load_params
from l_systems_tree.errors import InvalidGrammar, LSystemError
from l_systems_tree.grammar import GrammarParams, rewrite
from l_systems_tree.preset import LSYSTEM_PRESETS, get_preset, list_presets
from l_systems_tree.turtle_3d import generate_lsystem

logger = logging.getLogger(__name__)


def _parse_rule(text: str) -> Tuple[str, str]:
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"rule {text!r} must look like KEY=REPLACEMENT")
    key, value = text.split("=", 1)
    return key, value


def _add_grammar_args(p: argparse.ArgumentParser) -> None:
    src = p.add_mutually_exclusive_group()
    src.add_argument('--preset', help='Name of a built-in grammar')
    src.add_argument('--config', help='Path to a JSON grammar file')
    src.add_argument('--axiom', help='Initial string')
    p.add_argument('--rule', action='append', type=_parse_rule, default=[],
                   help='Production rule KEY=REPLACEMENT (repeatable, used with --axiom)')
    p.add_argument('--iterations', type=int, default=None)
    p.add_argument('--angle', type=float, default=None, help='Rotation magnitude in degrees')
    p.add_argument('--max_length', type=int, default=None,
                   help='Fail when the rewritten string would grow past this many symbols')


def _add_generator_args(p: argparse.ArgumentParser) -> None:
    p.add_argument('--seed', type=int, default=None)
    p.add_argument('--min_distance', type=float, default=None)
    p.add_argument('--max_distance', type=float, default=None)
    p.add_argument('--jitter', type=float, default=None, help='Rotation jitter fraction')
    p.add_argument('--lenient', action='store_true',
                   help='Ignore unmatched branch closes instead of failing')


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='l_systems_tree',
        description='Generate L-system strings and 3D branching trees.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    sub = parser.add_subparsers(dest='cmd', required=True)

    ps = sub.add_parser('string', help='Print the rewritten symbol string')
    _add_grammar_args(ps)

    pg = sub.add_parser('generate', help='Build a tree and optionally export or plot it')
    _add_grammar_args(pg)
    _add_generator_args(pg)
    pg.add_argument('--json', dest='json_path', help='Write nodes and diagnostics as JSON')
    pg.add_argument('--plot', dest='plot_path', help='Save a PNG preview of the tree')

    pb = sub.add_parser('batch', help='Generate one tree per seed and summarise the runs')
    _add_grammar_args(pb)
    _add_generator_args(pb)
    pb.add_argument('--count', type=int, default=10)
    pb.add_argument('--output', default='batch_summary.json')

    sub.add_parser('presets', help='List the built-in grammars')
    return parser


def resolve_params(args) -> Tuple[GrammarParams, GeneratorConfig]:
    config = GeneratorConfig()
    if args.rule and args.axiom is None:
        raise InvalidGrammar("--rule can only be combined with --axiom")
    if args.config:
        params, config = load_params(args.config)
    elif args.axiom is not None:
        if not args.rule:
            raise InvalidGrammar("--axiom needs at least one --rule")
        params = GrammarParams(initial_string=args.axiom)
        for key, value in args.rule:
            params = params.with_rule(key, value)
    else:
        # The default grammar runs a single iteration, presets run three
        name = args.preset or 'default'
        params = get_preset(name, iterations=1 if name == 'default' else 3)

    if args.iterations is not None:
        params = replace(params, iteration_count=args.iterations)
    if args.angle is not None:
        params = replace(params, rotation_degrees=args.angle)
    params.validate()

    overrides = {}
    if args.max_length is not None:
        overrides['max_length'] = args.max_length
    if getattr(args, 'min_distance', None) is not None or getattr(args, 'max_distance', None) is not None:
        low, high = config.distance_range
        overrides['distance_range'] = (
            args.min_distance if args.min_distance is not None else low,
            args.max_distance if args.max_distance is not None else high,
        )
    if getattr(args, 'jitter', None) is not None:
        overrides['jitter_fraction'] = args.jitter
    if getattr(args, 'lenient', False):
        overrides['strict'] = False
    if overrides:
        config = replace(config, **overrides)
    return params, config


def _ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)


def cmd_string(args) -> None:
    params, config = resolve_params(args)
    print(rewrite(params, max_length=config.max_length))


def cmd_generate(args) -> None:
    params, config = resolve_params(args)
    generation = generate_lsystem("root", params, config=config, seed=args.seed)
    tree = generation.tree
    logger.info("nodes: %d, leaves: %d, diagnostics: %d",
                len(tree), len(tree.leaves()), len(generation.diagnostics))
    for diag in generation.diagnostics:
        logger.warning("%s at %d: %s", diag.kind, diag.index, diag.message)

    if args.json_path:
        _ensure_parent_dir(args.json_path)
        out = {
            "symbols": generation.symbols,
            "seed": args.seed,
            "diagnostics": [asdict(diag) for diag in generation.diagnostics],
            **tree.to_dict(),
        }
        with open(args.json_path, "w", encoding="utf-8") as f:
            json.dump(out, f, indent=2)
        logger.info("wrote %s", args.json_path)

    if args.plot_path:
        # Imported lazily so the other commands never pull in matplotlib
        from l_systems_tree.visualize import plot_tree
        _ensure_parent_dir(args.plot_path)
        plot_tree(tree, title=f"seed={args.seed}", save_path=args.plot_path)


def cmd_batch(args) -> None:
    params, config = resolve_params(args)
    start = args.seed if args.seed is not None else 0
    runs = []
    symbol_count = 0
    for seed in tqdm(range(start, start + args.count), desc="Generating"):
        generation = generate_lsystem(None, params, config=config, seed=seed)
        tree = generation.tree
        symbol_count = len(generation.symbols)
        heights = [float(node.position[1]) for node in tree]
        runs.append({
            "seed": seed,
            "nodes": len(tree),
            "leaves": len(tree.leaves()),
            "max_depth": max(tree.depth(node.index) for node in tree),
            "height": max(heights) - min(heights),
            "diagnostics": len(generation.diagnostics),
        })

    _ensure_parent_dir(args.output)
    with open(args.output, "w", encoding="utf-8") as f:
        json.dump({"symbols": symbol_count, "runs": runs}, f, indent=2)
    logger.info("wrote %d runs to %s", len(runs), args.output)


def cmd_presets(args) -> None:
    for name in list_presets():
        preset = LSYSTEM_PRESETS[name]
        print(f"{name:20s} {preset['description']}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    commands = {
        'string': cmd_string,
        'generate': cmd_generate,
        'batch': cmd_batch,
        'presets': cmd_presets,
    }
    try:
        commands[args.cmd](args)
    except (LSystemError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 2
    return 0
