"""Geometry-only summary of a screen's layout.

Produces the structural facts an external classifier (or a human reviewer)
needs before proposing semantic groups: overall canvas, vertical sections,
how many nodes fall in the header / main / footer bands, which nodes look
interactive, and which recurring layout patterns are present.
"""

import logging
import re
from collections import Counter
from typing import Sequence

from pydantic import BaseModel, Field

from src.schemas.design_node import Bounds, DesignNode, NodeCategory
from src.schemas.engine_config import EngineConfig
from src.match_engine.spatial_analyzer import (
    VerticalSection,
    alignment_groups,
    cluster_by_proximity,
    overall_bounds,
    vertical_sections,
)

logger = logging.getLogger(__name__)

_VALUE_PATTERN = re.compile(r"^\$?\d+")


class BandCounts(BaseModel):
    """Node counts per horizontal band of the canvas."""

    header: int = Field(default=0, description="Nodes starting in the top 25%")
    main: int = Field(default=0, description="Nodes starting in the middle 50%")
    footer: int = Field(default=0, description="Nodes starting in the bottom 25%")


class ContainerStats(BaseModel):
    """Size profile of FRAME / GROUP nodes."""

    count: int = 0
    average_area: float = 0.0
    large: int = Field(default=0, description="Containers over twice the average area")
    small: int = Field(default=0, description="Containers under half the average area")


class TextRoles(BaseModel):
    """Text node contents bucketed by likely role (a node may be in several)."""

    interactive: list[str] = Field(default_factory=list)
    headers: list[str] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)


class LayoutReport(BaseModel):
    """Everything analyze_layout() derives from a node list."""

    node_count: int = 0
    canvas: Bounds = Field(default_factory=Bounds)
    sections: list[VerticalSection] = Field(default_factory=list)
    bands: BandCounts = Field(default_factory=BandCounts)
    category_distribution: dict[str, int] = Field(default_factory=dict)
    containers: ContainerStats = Field(default_factory=ContainerStats)
    interaction_candidates: list[DesignNode] = Field(default_factory=list)
    text_roles: TextRoles = Field(default_factory=TextRoles)
    cluster_count: int = 0
    row_count: int = Field(default=0, description="Groups of nodes sharing a y coordinate")
    column_count: int = Field(default=0, description="Groups of nodes sharing an x coordinate")
    patterns: list[str] = Field(default_factory=list)


# -----------------------------------------------------------------------
# Individual analyses
# -----------------------------------------------------------------------

def band_counts(nodes: Sequence[DesignNode], canvas: Bounds) -> BandCounts:
    header_edge = canvas.y + canvas.height * 0.25
    footer_edge = canvas.y + canvas.height * 0.75
    counts = BandCounts()
    for node in nodes:
        if node.bounds.y < header_edge:
            counts.header += 1
        elif node.bounds.y < footer_edge:
            counts.main += 1
        else:
            counts.footer += 1
    return counts


def container_stats(nodes: Sequence[DesignNode]) -> ContainerStats:
    containers = [n for n in nodes if n.category in (NodeCategory.FRAME, NodeCategory.GROUP)]
    if not containers:
        return ContainerStats()
    average = sum(n.bounds.area for n in containers) / len(containers)
    return ContainerStats(
        count=len(containers),
        average_area=round(average, 1),
        large=sum(1 for n in containers if n.bounds.area > average * 2),
        small=sum(1 for n in containers if n.bounds.area < average * 0.5),
    )


def is_interaction_candidate(node: DesignNode) -> bool:
    """Heuristic: does this node look clickable?"""
    width, height = node.bounds.width, node.bounds.height
    if "button" in node.name.lower():
        return True
    if node.category == NodeCategory.TEXT:
        text = node.text_content or ""
        return height > 20 and 0 < len(text) < 25
    if node.category == NodeCategory.RECTANGLE:
        return width > 50 and height > 30
    if node.category == NodeCategory.INSTANCE:
        return width > 40 and height > 25
    return False


def text_roles(nodes: Sequence[DesignNode]) -> TextRoles:
    roles = TextRoles()
    for node in nodes:
        text = node.text_content or ""
        if node.category != NodeCategory.TEXT or not text:
            continue
        if 3 < len(text) < 25 and ("button" in text.lower() or len(text) < 15 or text[0].isupper()):
            roles.interactive.append(text)
        if len(text) < 30 and (node.bounds.y < 200 or text == text.upper() or len(text) < 15):
            roles.headers.append(text)
        if _VALUE_PATTERN.match(text):
            roles.values.append(text)
    return roles


def detect_patterns(
    nodes: Sequence[DesignNode],
    canvas: Bounds,
    rows: list[list[DesignNode]],
) -> list[str]:
    """Short descriptions of recurring layout patterns."""
    patterns = []

    buttons = [
        n for n in nodes
        if "button" in n.name.lower()
        or (n.text_content and len(n.text_content) < 20
            and n.bounds.width > 50 and n.bounds.height > 25)
    ]
    if len(buttons) >= 3:
        patterns.append(f"Button grid: {len(buttons)} interactive elements")

    top = [n for n in nodes if n.bounds.y < canvas.y + 100]
    if top:
        patterns.append(f"Header pattern: {len(top)} elements in top area")

    bottom = [n for n in nodes if n.bounds.y > canvas.bottom * 0.8]
    if bottom:
        patterns.append(f"Bottom action area: {len(bottom)} elements near bottom")

    if len(rows) > 1:
        patterns.append(f"Horizontal alignments: {len(rows)} aligned groups")

    return patterns


# -----------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------

def analyze_layout(nodes: Sequence[DesignNode], config: EngineConfig | None = None) -> LayoutReport:
    """Build a LayoutReport for the node list."""
    config = config or EngineConfig()
    spatial = config.spatial

    canvas = overall_bounds(nodes)
    rows = alignment_groups(nodes, "y", spatial.alignment_tolerance)
    columns = alignment_groups(nodes, "x", spatial.alignment_tolerance)

    report = LayoutReport(
        node_count=len(nodes),
        canvas=canvas,
        sections=vertical_sections(nodes, spatial.section_gap),
        bands=band_counts(nodes, canvas),
        category_distribution=dict(Counter(n.category.value for n in nodes)),
        containers=container_stats(nodes),
        interaction_candidates=[n for n in nodes if is_interaction_candidate(n)],
        text_roles=text_roles(nodes),
        cluster_count=len(cluster_by_proximity(nodes, spatial.cluster_distance)),
        row_count=len(rows),
        column_count=len(columns),
        patterns=detect_patterns(nodes, canvas, rows),
    )
    logger.info(
        f"Layout: {report.node_count} nodes, {len(report.sections)} sections, "
        f"{report.cluster_count} clusters, {len(report.patterns)} patterns"
    )
    return report
