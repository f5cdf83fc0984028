"""Stateless geometry primitives over design nodes.

Proximity clustering, axis-alignment bucketing and vertical segmentation.
Every function takes a node sequence and returns new lists; inputs are never
reordered or mutated.
"""

import math
from typing import Literal, Sequence

from pydantic import BaseModel, Field

from src.schemas.design_node import Bounds, DesignNode


class VerticalSection(BaseModel):
    """A horizontal band of nodes separated from its neighbours by a vertical gap."""

    start_y: float
    end_y: float
    nodes: list[DesignNode] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    key_elements: list[str] = Field(default_factory=list)


def overall_bounds(nodes: Sequence[DesignNode]) -> Bounds:
    """Union of all node bounds (a zero-area rectangle for no nodes)."""
    if not nodes:
        return Bounds()
    left = min(n.bounds.x for n in nodes)
    top = min(n.bounds.y for n in nodes)
    right = max(n.bounds.right for n in nodes)
    bottom = max(n.bounds.bottom for n in nodes)
    return Bounds(x=left, y=top, width=right - left, height=bottom - top)


def cluster_by_proximity(
    nodes: Sequence[DesignNode],
    max_distance: float,
) -> list[list[DesignNode]]:
    """Group nodes whose top-left corners lie within ``max_distance`` of a seed node.

    Each not-yet-clustered node (in input order) seeds a cluster and pulls in
    every other unclustered node strictly closer than ``max_distance``. Only
    clusters with two or more members are returned, so ``max_distance=0``
    yields nothing and ``math.inf`` yields a single cluster of all nodes.
    """
    clusters: list[list[DesignNode]] = []
    processed: set[int] = set()

    for i, seed in enumerate(nodes):
        if i in processed:
            continue
        processed.add(i)
        cluster = [seed]

        for j, other in enumerate(nodes):
            if j in processed:
                continue
            if seed.bounds.distance_to(other.bounds) < max_distance:
                cluster.append(other)
                processed.add(j)

        if len(cluster) > 1:
            clusters.append(cluster)

    return clusters


def _snap(value: float, tolerance: float) -> float:
    # Half rounds up, independent of Python's banker's rounding
    if tolerance <= 0:
        return value
    return math.floor(value / tolerance + 0.5) * tolerance


def alignment_groups(
    nodes: Sequence[DesignNode],
    axis: Literal["x", "y"],
    tolerance: float,
) -> list[list[DesignNode]]:
    """Bucket nodes sharing (approximately) the same coordinate on ``axis``.

    ``axis="y"`` finds rows (sorted left to right); ``axis="x"`` finds columns
    (sorted top to bottom). Only buckets with two or more members are kept.
    """
    if axis not in ("x", "y"):
        raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")
    other_axis = "y" if axis == "x" else "x"

    buckets: dict[float, list[DesignNode]] = {}
    for node in nodes:
        key = _snap(getattr(node.bounds, axis), tolerance)
        buckets.setdefault(key, []).append(node)

    return [
        sorted(members, key=lambda n: getattr(n.bounds, other_axis))
        for _, members in sorted(buckets.items())
        if len(members) > 1
    ]


def vertical_sections(
    nodes: Sequence[DesignNode],
    gap_threshold: float,
) -> list[VerticalSection]:
    """Split nodes into top-to-bottom sections wherever the vertical gap exceeds ``gap_threshold``.

    The gap is measured from the bottom of the running section to the top of
    the next node, so a tall node keeps everything it spans in its section.
    Every input node lands in exactly one section.
    """
    ordered = sorted(nodes, key=lambda n: n.bounds.y)
    sections: list[VerticalSection] = []
    current: list[DesignNode] = []
    current_bottom = 0.0

    for node in ordered:
        if current and node.bounds.y - current_bottom > gap_threshold:
            sections.append(_make_section(current))
            current = []
        if not current:
            current_bottom = node.bounds.bottom
        current.append(node)
        current_bottom = max(current_bottom, node.bounds.bottom)

    if current:
        sections.append(_make_section(current))
    return sections


def _make_section(members: list[DesignNode]) -> VerticalSection:
    return VerticalSection(
        start_y=members[0].bounds.y,
        end_y=max(n.bounds.bottom for n in members),
        nodes=list(members),
        categories=[n.category.value for n in members],
        key_elements=[n.label for n in members if n.label],
    )
