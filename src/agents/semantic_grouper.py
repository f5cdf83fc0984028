"""Semantic Grouper Agent -- completes classifier proposals into node groups.

Primary mode: an external classifier proposes group skeletons. Skeletons that
name their children are validated and passed through; skeletons without
children are filled by the GroupScorer heuristics, in proposal order, from
the nodes nobody has claimed yet.

Fallback mode: when no proposal exists at all, every node becomes its own
single-member group (category inferred from the node type), so callers
always receive a usable result without any external classification.
"""

import logging
import time
from typing import Optional, Sequence

from src.schemas.design_node import DesignNode, NodeCategory
from src.schemas.engine_config import EngineConfig
from src.schemas.grouping_schema import (
    GroupCategory,
    GroupingResult,
    GroupSkeleton,
    LayoutSummary,
    SemanticGroup,
    clamp_confidence,
)
from src.match_engine.group_scorer import GroupScorer, auto_map_groups
from src.match_engine.spatial_analyzer import overall_bounds

logger = logging.getLogger(__name__)

# Node category -> semantic category for the 1:1 fallback
_FALLBACK_CATEGORIES = {
    NodeCategory.TEXT: GroupCategory.TEXT,
    NodeCategory.RECTANGLE: GroupCategory.CONTAINER,
    NodeCategory.FRAME: GroupCategory.CONTAINER,
    NodeCategory.GROUP: GroupCategory.CONTAINER,
}


def fallback_category(category: NodeCategory) -> GroupCategory:
    return _FALLBACK_CATEGORIES.get(category, GroupCategory.OTHER)


class SemanticGrouper:
    """Turn a node list (plus optional classifier skeletons) into semantic groups."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.scorer = GroupScorer(self.config.grouping)

    def group(
        self,
        nodes: Sequence[DesignNode],
        proposed_groups: Optional[Sequence[GroupSkeleton]] = None,
        layout_summary: Optional[LayoutSummary] = None,
        confidence: Optional[float] = None,
    ) -> GroupingResult:
        """Group ``nodes``.

        Args:
            nodes: Flattened design nodes.
            proposed_groups: Classifier skeletons. ``None`` triggers the 1:1
                fallback; an empty list yields no groups.
            layout_summary: Classifier's screen-level reading, passed through.
            confidence: Classifier's overall confidence, clamped to [0.1, 1.0].
                Defaults to the mean group confidence.
        """
        start = time.perf_counter()
        nodes = list(nodes)

        if proposed_groups is None:
            result = self._fallback(nodes)
        else:
            groups = self._complete(nodes, proposed_groups)
            if confidence is not None:
                overall = clamp_confidence(confidence)
            elif groups:
                overall = sum(g.confidence for g in groups) / len(groups)
            else:
                overall = 0.0
            result = GroupingResult(
                groups=groups,
                layout_summary=layout_summary,
                ungrouped_nodes=_ungrouped(nodes, groups),
                overall_confidence=round(overall, 3),
                total_nodes=len(nodes),
            )

        result.elapsed_time = time.perf_counter() - start
        logger.info(
            f"Grouped {result.grouped_nodes}/{result.total_nodes} nodes into "
            f"{len(result.groups)} groups ({result.elapsed_time * 1000:.1f} ms)"
        )
        return result

    # ------------------------------------------------------------------
    # Proposal completion
    # ------------------------------------------------------------------

    def _complete(
        self,
        nodes: list[DesignNode],
        skeletons: Sequence[GroupSkeleton],
    ) -> list[SemanticGroup]:
        by_id = {n.id: n for n in nodes}
        resolved: list[list[DesignNode]] = []

        for skeleton in skeletons:
            children = []
            for child_id in skeleton.children:
                node = by_id.get(child_id)
                if node is None:
                    logger.warning(f"Group '{skeleton.name}': unknown child id {child_id!r} dropped")
                    continue
                children.append(node)
            resolved.append(children)

        claimed = {n.id for children in resolved for n in children}
        pool = [n for n in nodes if n.id not in claimed]
        empty = [i for i, children in enumerate(resolved) if not children]

        if empty:
            logger.info(f"Auto-mapping nodes to {len(empty)} empty groups...")
            assigned, remaining = auto_map_groups(
                [skeletons[i] for i in empty],
                pool,
                overall_bounds(nodes),
                self.scorer,
            )
            for i, children in zip(empty, assigned):
                resolved[i] = children
                if not children:
                    logger.warning(f"Group '{skeletons[i].name}': no candidates, left unassigned")
            logger.info(f"Auto-mapping complete. {len(remaining)} nodes remain unmapped.")

        return [
            self._build_group(i, skeleton, children)
            for i, (skeleton, children) in enumerate(zip(skeletons, resolved))
        ]

    @staticmethod
    def _build_group(index: int, skeleton: GroupSkeleton, children: list[DesignNode]) -> SemanticGroup:
        bounds = skeleton.bounds
        if not bounds.has_area and children:
            bounds = overall_bounds(children)
        return SemanticGroup(
            id=skeleton.id or f"group-{index}",
            name=skeleton.name,
            category=skeleton.category,
            description=skeleton.description,
            bounds=bounds,
            children=children,
            properties=dict(skeleton.properties),
            confidence=clamp_confidence(skeleton.confidence),
        )

    # ------------------------------------------------------------------
    # Fallback
    # ------------------------------------------------------------------

    def _fallback(self, nodes: list[DesignNode]) -> GroupingResult:
        cfg = self.config.grouping
        groups = [
            SemanticGroup(
                id=f"fallback-{node.id}",
                name=node.name or f"{node.category.value} Component",
                category=fallback_category(node.category),
                description=f"{node.category.value} component",
                bounds=node.bounds,
                children=[node],
                properties={
                    "interactive": "button" in node.name.lower(),
                    "text": node.text_content,
                },
                confidence=cfg.fallback_confidence,
            )
            for node in nodes[: cfg.max_fallback_groups]
        ]
        if len(nodes) > cfg.max_fallback_groups:
            logger.warning(
                f"Fallback grouping capped at {cfg.max_fallback_groups} groups; "
                f"{len(nodes) - cfg.max_fallback_groups} nodes left ungrouped"
            )
        return GroupingResult(
            groups=groups,
            ungrouped_nodes=_ungrouped(nodes, groups),
            overall_confidence=cfg.fallback_confidence,
            total_nodes=len(nodes),
        )


def _ungrouped(nodes: list[DesignNode], groups: list[SemanticGroup]) -> list[DesignNode]:
    grouped = {child.id for g in groups for child in g.children}
    return [n for n in nodes if n.id not in grouped]


def group_nodes(
    nodes: Sequence[DesignNode],
    proposed_groups: Optional[Sequence[GroupSkeleton]] = None,
    config: EngineConfig | None = None,
    **kwargs,
) -> GroupingResult:
    """Convenience wrapper around SemanticGrouper.group()."""
    return SemanticGrouper(config).group(nodes, proposed_groups, **kwargs)
