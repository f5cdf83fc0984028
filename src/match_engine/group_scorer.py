"""Auto-map design nodes into a group skeleton that arrived without children.

Four independent heuristics each select a subset of the still-unassigned
pool:

  1. Keyword overlap   (weight 3) -- node text/name shares a token with the group
  2. Position band     (weight 2) -- top / middle / bottom third, or near the group's y
  3. Category filter   (weight 2) -- button-, text- or container-like node types
  4. Bounds proximity  (weight 1) -- overlaps or sits near the group's declared bounds

Selected nodes are scored by the weighted count of heuristics that picked
them (plus a small bonus for nodes above the size noise floor) and the best
N are kept, N depending on the group's category.
"""

import logging
import re
from typing import NamedTuple, Sequence

from src.schemas.design_node import Bounds, DesignNode, NodeCategory
from src.schemas.engine_config import GroupingConfig
from src.schemas.grouping_schema import GroupCategory, GroupSkeleton

logger = logging.getLogger(__name__)

# Letters and digits in any script; underscores and punctuation separate words
_WORD = re.compile(r"[^\W_]+")

NodePool = tuple[DesignNode, ...]

# Name keywords -> band, checked in this order
_BAND_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("top", ("header", "top", "navigation")),
    ("bottom", ("footer", "bottom", "action")),
    ("middle", ("content", "main", "body")),
    ("near", ("section",)),
)

# Name keyword -> category whose member limit applies, checked in this order
_LIMIT_KEYWORDS: tuple[tuple[str, GroupCategory], ...] = (
    ("section", GroupCategory.CONTAINER),
    ("button", GroupCategory.BUTTON),
    ("text", GroupCategory.TEXT),
)

_CONTAINER_CATEGORIES =frozenset({NodeCategory.FRAME, NodeCategory.GROUP, NodeCategory.RECTANGLE})


class ScoredNode(NamedTuple):
    """A candidate node with the heuristics that selected it."""

    node: DesignNode
    score: int
    heuristics: tuple[str, ...]


def _tokenize(text: str, min_length: int) -> set[str]:
    return {t for t in _WORD.findall((text or "").lower()) if len(t) >= min_length}


def position_band(group: GroupSkeleton) -> str | None:
    """Which band the group's name implies: 'top', 'bottom', 'middle', 'near' or None."""
    name = group.name.lower()
    for band, keywords in _BAND_KEYWORDS:
        if any(k in name for k in keywords):
            return band
    return None


def member_limit(group: GroupSkeleton, config: GroupingConfig) -> int:
    """How many nodes a group may receive.

    Name keywords win over the declared category: 'section' uses the
    container limit, 'button' the button limit, 'text' the text limit.
    """
    name = group.name.lower()
    for keyword, category in _LIMIT_KEYWORDS:
        if keyword in name:
            return config.member_limits.get(category.value, config.default_member_limit)
    return config.member_limits.get(group.category.value, config.default_member_limit)


class GroupScorer:
    """Select and rank pool nodes for an empty group skeleton."""

    def __init__(self, config: GroupingConfig | None = None):
        self.config = config or GroupingConfig()

    # ------------------------------------------------------------------
    # Heuristics
    # ------------------------------------------------------------------

    def keyword_matches(self, group: GroupSkeleton, pool: NodePool) -> list[DesignNode]:
        keywords = _tokenize(f"{group.name} {group.description}", self.config.min_keyword_length)
        if not keywords:
            return []
        return [
            n for n in pool
            if keywords & _tokenize(f"{n.text_content or ''} {n.name}", self.config.min_keyword_length)
        ]

    def position_matches(self, group: GroupSkeleton, pool: NodePool, frame: Bounds) -> list[DesignNode]:
        band = position_band(group)
        if band is None:
            return []
        top_edge = frame.y + frame.height / 3
        bottom_edge = frame.y + frame.height * 2 / 3

        if band == "top":
            return [n for n in pool if n.bounds.y < top_edge]
        if band == "bottom":
            return [n for n in pool if n.bounds.y > bottom_edge]
        if band == "middle":
            return [n for n in pool if top_edge <= n.bounds.y <= bottom_edge]
        return [
            n for n in pool
            if abs(n.bounds.y - group.bounds.y) < self.config.section_tolerance
        ]

    def category_matches(self, group: GroupSkeleton, pool: NodePool) -> list[DesignNode]:
        name = group.name.lower()
        category = group.category

        if category == GroupCategory.BUTTON or "button" in name:
            return [
                n for n in pool
                if n.category == NodeCategory.INSTANCE
                or "button" in n.name.lower()
                or (n.category == NodeCategory.RECTANGLE
                    and n.bounds.width > self.config.wide_rectangle_width)
            ]
        if category == GroupCategory.TEXT or "text" in name or "label" in name:
            return [n for n in pool if n.category == NodeCategory.TEXT]
        if category in (GroupCategory.CONTAINER, GroupCategory.CARD) or "container" in name or "card" in name:
            return [n for n in pool if n.category in _CONTAINER_CATEGORIES]
        return []

    def proximity_matches(self, group: GroupSkeleton, pool: NodePool) -> list[DesignNode]:
        if not group.bounds.has_area:
            return []
        return [
            n for n in pool
            if n.bounds.overlaps(group.bounds)
            or n.bounds.distance_to(group.bounds) < self.config.proximity_radius
        ]

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def candidates(self, group: GroupSkeleton, pool: NodePool, frame: Bounds) -> list[ScoredNode]:
        """All nodes any heuristic selected, best first (ties keep pool order)."""
        cfg = self.config
        subsets = (
            ("keyword", cfg.keyword_weight, self.keyword_matches(group, pool)),
            ("position", cfg.position_weight, self.position_matches(group, pool, frame)),
            ("category", cfg.category_weight, self.category_matches(group, pool)),
            ("proximity", cfg.proximity_weight, self.proximity_matches(group, pool)),
        )
        selected = [{n.id for n in members} for _, _, members in subsets]

        scored = []
        for node in pool:
            hits = tuple(label for (label, _, _), ids in zip(subsets, selected) if node.id in ids)
            if not hits:
                continue
            score = sum(weight for (label, weight, _) in subsets if label in hits)
            if node.bounds.width > cfg.min_size_width and node.bounds.height > cfg.min_size_height:
                score += cfg.size_bonus
            scored.append(ScoredNode(node, score, hits))

        scored.sort(key=lambda s: s.score, reverse=True)
        return scored

    def auto_map(
        self,
        group: GroupSkeleton,
        pool: NodePool,
        frame: Bounds,
    ) -> tuple[list[DesignNode], NodePool]:
        """Pick children for ``group`` and return them with the reduced pool."""
        ranked = self.candidates(group, pool, frame)
        chosen = [s.node for s in ranked[: member_limit(group, self.config)]]
        chosen_ids = {n.id for n in chosen}
        remaining = tuple(n for n in pool if n.id not in chosen_ids)

        logger.debug(
            f"Mapped {len(chosen)} nodes to '{group.name}' "
            f"from {len(ranked)} candidates; {len(remaining)} remain"
        )
        return chosen, remaining


def auto_map_groups(
    groups: Sequence[GroupSkeleton],
    pool: Sequence[DesignNode],
    frame: Bounds,
    scorer: GroupScorer | None = None,
) -> tuple[list[list[DesignNode]], NodePool]:
    """Fold ``auto_map`` over groups in order, threading the pool through each step."""
    scorer = scorer or GroupScorer()
    remaining: NodePool = tuple(pool)
    assigned: list[list[DesignNode]] = []
    for group in groups:
        children, remaining = scorer.auto_map(group, remaining, frame)
        assigned.append(children)
    return assigned, remaining
