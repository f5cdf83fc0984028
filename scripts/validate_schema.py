#!/usr/bin/env python3
"""Validate a JSON file against a named Pydantic schema.

Usage:
    python scripts/validate_schema.py <json_file> <schema_name>

Schema names:
    DesignNodes         -- Flattened design node list
    RenderedBounds      -- Rendered component bounds list
    ClassifierProposal  -- External classifier groups + layout structure
    MatchingResult      -- Output of scripts/match_bounds.py
    GroupingResult      -- Output of scripts/group_nodes.py
    EngineConfig        -- Engine tuning parameters (JSON form)
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import BaseModel, Field, ValidationError

from src.schemas.design_node import DesignNode, RenderedBounds
from src.schemas.engine_config import EngineConfig
from src.schemas.grouping_schema import ClassifierProposal, GroupingResult
from src.schemas.match_schema import MatchingResult


class DesignNodeList(BaseModel):
    """Wrapper so a bare node list validates as one document."""
    nodes: list[DesignNode] = Field(default_factory=list)


class RenderedBoundsList(BaseModel):
    """Wrapper so a bare component list validates as one document."""
    components: list[RenderedBounds] = Field(default_factory=list)


SCHEMA_MAP: dict[str, type[BaseModel]] = {
    "DesignNodes": DesignNodeList,
    "RenderedBounds": RenderedBoundsList,
    "ClassifierProposal": ClassifierProposal,
    "MatchingResult": MatchingResult,
    "GroupingResult": GroupingResult,
    "EngineConfig": EngineConfig,
}

# Bare JSON lists are wrapped under this key before validation
_LIST_KEYS = {
    "DesignNodes": "nodes",
    "RenderedBounds": "components",
    "ClassifierProposal": "groups",
}


def main():
    parser = argparse.ArgumentParser(description="Validate JSON against a Pydantic schema")
    parser.add_argument("json_file", type=Path, help="Path to JSON file to validate")
    parser.add_argument("schema_name", choices=list(SCHEMA_MAP.keys()),
                        help="Name of the Pydantic schema to validate against")
    args = parser.parse_args()

    if not args.json_file.exists():
        print(f"Error: JSON file not found: {args.json_file}", file=sys.stderr)
        sys.exit(1)

    schema_cls = SCHEMA_MAP[args.schema_name]

    try:
        raw = args.json_file.read_text(encoding="utf-8")
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {args.json_file}: {e}", file=sys.stderr)
        sys.exit(1)

    if isinstance(data, list) and args.schema_name in _LIST_KEYS:
        data = {_LIST_KEYS[args.schema_name]: data}

    try:
        instance = schema_cls.model_validate(data)
    except ValidationError as e:
        print(f"Validation FAILED: {args.json_file} does not conform to {args.schema_name}", file=sys.stderr)
        print(f"  Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Validation PASSED: {args.json_file} conforms to {args.schema_name}")

    # Print summary info based on schema type
    if args.schema_name == "DesignNodes":
        print(f"  Nodes: {len(instance.nodes)}")
        with_text = sum(1 for n in instance.nodes if n.text_content)
        print(f"  With text: {with_text}")
    elif args.schema_name == "RenderedBounds":
        print(f"  Components: {len(instance.components)}")
        print(f"  With style snapshot: {sum(1 for c in instance.components if c.style)}")
    elif args.schema_name == "ClassifierProposal":
        print(f"  Groups: {len(instance.groups)}")
        print(f"  Empty groups: {sum(1 for g in instance.groups if not g.children)}")
        if instance.layout_structure:
            print(f"  Screen: {instance.layout_structure.screen_category}")
    elif args.schema_name == "MatchingResult":
        print(f"  Policy: {instance.policy}")
        print(f"  Matched: {len(instance.component_matches)}")
        print(f"  Overall confidence: {instance.overall_confidence:.1f}")
    elif args.schema_name == "GroupingResult":
        print(f"  Groups: {len(instance.groups)}")
        print(f"  Ungrouped nodes: {len(instance.ungrouped_nodes)}")
    elif args.schema_name == "EngineConfig":
        print(f"  Min confidence: {instance.matching.min_confidence}")
        print(f"  Section gap: {instance.spatial.section_gap}")


if __name__ == "__main__":
    main()
