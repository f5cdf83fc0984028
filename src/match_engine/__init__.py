"""Matching and grouping engine.

Usage:
    from src.match_engine import BoundsMatcher, NON_EXCLUSIVE
    result = BoundsMatcher().match(components, nodes, NON_EXCLUSIVE)
"""

from .bounds_matcher import (
    EXCLUSIVE,
    NON_EXCLUSIVE,
    BoundsMatcher,
    ExclusiveGreedy,
    NonExclusiveTopK,
    SelectionPolicy,
    get_policy,
)
from .group_scorer import GroupScorer, ScoredNode, auto_map_groups
from .layout_analyzer import LayoutReport, analyze_layout
from .match_scorer import CATEGORY_RULES, CategoryRule, MatchScorer
from .spatial_analyzer import (
    VerticalSection,
    alignment_groups,
    cluster_by_proximity,
    overall_bounds,
    vertical_sections,
)

__all__ = [
    "EXCLUSIVE",
    "NON_EXCLUSIVE",
    "BoundsMatcher",
    "ExclusiveGreedy",
    "NonExclusiveTopK",
    "SelectionPolicy",
    "get_policy",
    "GroupScorer",
    "ScoredNode",
    "auto_map_groups",
    "LayoutReport",
    "analyze_layout",
    "CATEGORY_RULES",
    "CategoryRule",
    "MatchScorer",
    "VerticalSection",
    "alignment_groups",
    "cluster_by_proximity",
    "overall_bounds",
    "vertical_sections",
]
