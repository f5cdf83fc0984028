"""File I/O helpers for engine inputs and outputs."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

from src.schemas.design_node import DesignNode, RenderedBounds
from src.schemas.grouping_schema import ClassifierProposal

logger = logging.getLogger(__name__)


def ensure_directory(path: str | Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dict."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_json(path: str | Path) -> Any:
    """Load a JSON file and return its contents."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"JSON file not found: {path}")
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def save_json(data: Any, path: str | Path, indent: int = 2) -> None:
    """Save data (a dict, list, or pydantic model) to a JSON file."""
    path = Path(path)
    ensure_directory(path.parent)
    if isinstance(data, BaseModel):
        path.write_text(data.model_dump_json(indent=indent), encoding="utf-8")
        return
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)


def _records(data: Any, key: str) -> list[dict]:
    # Accept either a bare list or an object wrapping the list under ``key``
    if isinstance(data, dict):
        data = data.get(key, [])
    return list(data or [])


def load_design_nodes(path: str | Path) -> list[DesignNode]:
    """Load flattened design nodes from JSON (a list, or ``{"nodes": [...]}``)."""
    nodes = [DesignNode.model_validate(r) for r in _records(load_json(path), "nodes")]
    logger.info(f"Loaded {len(nodes)} design nodes from {path}")
    return nodes


def load_rendered_bounds(path: str | Path) -> list[RenderedBounds]:
    """Load rendered-element bounds from JSON (a list, or ``{"components": [...]}``)."""
    components = [RenderedBounds.model_validate(r) for r in _records(load_json(path), "components")]
    logger.info(f"Loaded {len(components)} rendered components from {path}")
    return components


def load_proposal(path: str | Path) -> ClassifierProposal:
    """Load a classifier proposal (``{"groups": [...], "layoutStructure": {...}}``)."""
    data = load_json(path)
    if isinstance(data, list):
        data = {"groups": data}
    return ClassifierProposal.model_validate(data)
