#!/usr/bin/env python3
"""Summarise the layout of a flattened design node list.

Reports the canvas, vertical sections, header/main/footer band counts,
node category distribution, interaction candidates and detected layout
patterns. Useful as input for a classifier or for eyeballing a screen
before grouping.

Usage:
    python scripts/analyze_layout.py workspace/design_nodes.json \
        [-o workspace/layout_report.json] [--config config/engine.yaml]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError

from src.match_engine.layout_analyzer import analyze_layout
from src.schemas.engine_config import EngineConfig
from src.utils.file_utils import load_design_nodes, save_json

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


def main():
    parser = argparse.ArgumentParser(description="Geometry-only layout summary of design nodes")
    parser.add_argument("design_nodes", type=Path, help="Path to flattened design nodes JSON")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Optional JSON report path")
    parser.add_argument("--config", type=Path, default=None, help="Engine config YAML")
    args = parser.parse_args()

    if not args.design_nodes.exists():
        print(f"Error: Design nodes not found: {args.design_nodes}", file=sys.stderr)
        sys.exit(1)

    try:
        config = EngineConfig.from_yaml(args.config) if args.config else EngineConfig()
        nodes = load_design_nodes(args.design_nodes)
    except (ValueError, ValidationError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    report = analyze_layout(nodes, config)

    canvas = report.canvas
    print(f"Canvas: {canvas.width:.0f} x {canvas.height:.0f} (y {canvas.y:.0f} to {canvas.bottom:.0f})")
    print(f"Bands: header={report.bands.header}, main={report.bands.main}, footer={report.bands.footer}")
    print("Categories: " + ", ".join(f"{k}={v}" for k, v in sorted(report.category_distribution.items())))
    print(f"\nVertical sections ({len(report.sections)}):")
    for i, section in enumerate(report.sections, 1):
        keys = ", ".join(section.key_elements[:4])
        print(f"  {i}. y {section.start_y:.0f}-{section.end_y:.0f}: {len(section.nodes)} nodes  [{keys}]")
    print(f"\nInteraction candidates: {len(report.interaction_candidates)}")
    print("Patterns:")
    for pattern in report.patterns or ["No clear layout patterns detected"]:
        print(f"  - {pattern}")

    if args.output:
        save_json(report, args.output)
        print(f"\nWritten to: {args.output}")


if __name__ == "__main__":
    main()
