#!/usr/bin/env python3
"""Group design nodes into semantic UI sections.

With a classifier proposal, skeleton groups that list their children are
validated and passed through; skeletons without children are filled from
the unclaimed nodes by position, keyword, category and proximity
heuristics. Without a proposal every node becomes its own group.

Usage:
    python scripts/group_nodes.py workspace/design_nodes.json \
        [--proposal workspace/classifier_groups.json] \
        -o workspace/semantic_groups.json [--config config/engine.yaml]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError

from src.agents.semantic_grouper import SemanticGrouper
from src.schemas.engine_config import EngineConfig
from src.utils.file_utils import load_design_nodes, load_proposal, save_json

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


def main():
    parser = argparse.ArgumentParser(description="Semantic grouping of design nodes")
    parser.add_argument("design_nodes", type=Path, help="Path to flattened design nodes JSON")
    parser.add_argument(
        "--proposal", type=Path, default=None,
        help="Classifier proposal JSON ({groups, layoutStructure, confidence}); "
             "omit to use the 1:1 fallback",
    )
    parser.add_argument(
        "-o", "--output", type=Path,
        default=Path("workspace/semantic_groups.json"),
        help="Output path for the grouping result JSON",
    )
    parser.add_argument("--config", type=Path, default=None, help="Engine config YAML")
    args = parser.parse_args()

    if not args.design_nodes.exists():
        print(f"Error: Design nodes not found: {args.design_nodes}", file=sys.stderr)
        sys.exit(1)

    try:
        config = EngineConfig.from_yaml(args.config) if args.config else EngineConfig()
        nodes = load_design_nodes(args.design_nodes)
        proposal = load_proposal(args.proposal) if args.proposal else None
    except (ValueError, ValidationError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    grouper = SemanticGrouper(config)
    if proposal is None:
        result = grouper.group(nodes)
    else:
        result = grouper.group(
            nodes,
            proposal.groups,
            layout_summary=proposal.layout_structure,
            confidence=proposal.confidence,
        )

    save_json(result, args.output)
    mode = "fallback" if proposal is None else "proposal"
    print(f"\nResults ({mode}): {len(result.groups)} groups, "
          f"{result.grouped_nodes}/{result.total_nodes} nodes grouped, "
          f"confidence {result.overall_confidence:.2f}")
    print(f"Written to: {args.output}")

    for group in result.groups:
        status = "EMPTY " if not group.children else f"{len(group.children):2d} nd"
        print(f"  [{status}] {group.id:24s} {group.category.value:10s} {group.name}")


if __name__ == "__main__":
    main()
