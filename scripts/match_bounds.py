#!/usr/bin/env python3
"""Match rendered-element bounds back to design nodes.

Scores every rendered component against the design nodes using four capped
heuristics (text, category, visual features, size ratio), keeps the top
candidates per component, and writes the MatchingResult as JSON.

Usage:
    python scripts/match_bounds.py workspace/design_nodes.json workspace/rendered_bounds.json \
        -o workspace/bounds_matches.json [--policy exclusive|non_exclusive] [--config config/engine.yaml]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError

from src.match_engine.bounds_matcher import BoundsMatcher, get_policy
from src.schemas.engine_config import EngineConfig
from src.utils.file_utils import load_design_nodes, load_rendered_bounds, save_json

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


def main():
    parser = argparse.ArgumentParser(
        description="Match rendered component bounds to design nodes"
    )
    parser.add_argument("design_nodes", type=Path, help="Path to flattened design nodes JSON")
    parser.add_argument("rendered_bounds", type=Path, help="Path to rendered component bounds JSON")
    parser.add_argument(
        "-o", "--output", type=Path,
        default=Path("workspace/bounds_matches.json"),
        help="Output path for the matching result JSON",
    )
    parser.add_argument(
        "--policy", choices=["exclusive", "non_exclusive"], default="exclusive",
        help="exclusive: a node is rank-1 for at most one component (input order wins); "
             "non_exclusive: independent top-K per component (default: exclusive)",
    )
    parser.add_argument("--config", type=Path, default=None, help="Engine config YAML")
    args = parser.parse_args()

    for path in (args.design_nodes, args.rendered_bounds):
        if not path.exists():
            print(f"Error: Input not found: {path}", file=sys.stderr)
            sys.exit(1)

    try:
        config = EngineConfig.from_yaml(args.config) if args.config else EngineConfig()
        nodes = load_design_nodes(args.design_nodes)
        components = load_rendered_bounds(args.rendered_bounds)
    except (ValueError, ValidationError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    matcher = BoundsMatcher(config.matching)
    result = matcher.match(components, nodes, get_policy(args.policy))

    save_json(result, args.output)
    print(f"\nResults: {len(result.component_matches)} matched, "
          f"{len(result.unmatched_components)} unmatched components, "
          f"{len(result.unmatched_nodes)} unclaimed nodes")
    print(f"Overall confidence: {result.overall_confidence:.1f}")
    print(f"Written to: {args.output}")

    for match in result.component_matches:
        best = match.best
        print(f"  {match.component.name[:30]:30s} -> {best.node.id:12s} "
              f"[{best.match_type.value:11s}] conf={best.confidence:5.1f} "
              f"({', '.join(best.reasons) or 'no strong signal'})")

    collisions = result.rank_one_collisions()
    if collisions:
        print(f"\n{len(collisions)} nodes are rank-1 for several components -- confirm manually:")
        for node_id, positions in collisions.items():
            print(f"  {node_id}: components {positions}")


if __name__ == "__main__":
    main()
