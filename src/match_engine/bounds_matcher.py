"""Match rendered elements back to design nodes.

For every rendered element (in input order) the matcher scores the current
node pool, drops candidates below the relevance threshold, and keeps the
top-K by confidence. What happens to the pool afterwards is decided by a
SelectionPolicy:

  - ExclusiveGreedy:   the rank-1 node leaves the pool, so earlier elements
                       have priority and no node is rank-1 twice.
  - NonExclusiveTopK:  the pool never shrinks; every element gets an
                       independent top-K and collisions are left for a
                       confirmation step.

Neither policy attempts a globally optimal assignment.
"""

import logging
from typing import Optional, Sequence

from src.schemas.design_node import DesignNode, RenderedBounds
from src.schemas.engine_config import MatchingConfig
from src.schemas.match_schema import ComponentMatches, MatchingResult
from src.match_engine.match_scorer import MatchScorer

logger = logging.getLogger(__name__)

NodePool = tuple[DesignNode, ...]


# -----------------------------------------------------------------------
# Selection policies
# -----------------------------------------------------------------------

class SelectionPolicy:
    """Decides which nodes remain available after a component picks its rank-1 node."""

    name = "base"

    def release(self, pool: NodePool, chosen: DesignNode) -> NodePool:
        raise NotImplementedError


class ExclusiveGreedy(SelectionPolicy):
    """Remove each component's rank-1 node before the next component is scored."""

    name = "exclusive"

    def release(self, pool: NodePool, chosen: DesignNode) -> NodePool:
        return tuple(n for n in pool if n.id != chosen.id)


class NonExclusiveTopK(SelectionPolicy):
    """Leave the pool untouched; every component sees every node."""

    name = "non_exclusive"

    def release(self, pool: NodePool, chosen: DesignNode) -> NodePool:
        return pool


EXCLUSIVE = ExclusiveGreedy()
NON_EXCLUSIVE = NonExclusiveTopK()

_POLICIES = {p.name: p for p in (EXCLUSIVE, NON_EXCLUSIVE)}


def get_policy(name: str) -> SelectionPolicy:
    """Look up a policy by name ('exclusive' or 'non_exclusive')."""
    try:
        return _POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown selection policy {name!r}; expected one of {sorted(_POLICIES)}"
        ) from None


# -----------------------------------------------------------------------
# Matcher
# -----------------------------------------------------------------------

class BoundsMatcher:
    """Rank design-node candidates for each rendered element."""

    def __init__(self, config: MatchingConfig | None = None, scorer: MatchScorer | None = None):
        self.config = config or MatchingConfig()
        self.scorer = scorer or MatchScorer(self.config)

    def match_step(
        self,
        component: RenderedBounds,
        pool: NodePool,
        policy: SelectionPolicy = EXCLUSIVE,
    ) -> tuple[Optional[ComponentMatches], NodePool]:
        """Rank one component against ``pool`` and return the pool for the next step.

        Returns ``(None, pool)`` when no candidate reaches ``min_confidence``.
        """
        style = component.capture_style()
        candidates = [self.scorer.score(component, node, style) for node in pool]
        candidates = [c for c in candidates if c.confidence >= self.config.min_confidence]
        # Stable sort: equal confidences keep node input order
        candidates.sort(key=lambda c: c.confidence, reverse=True)
        top = candidates[: self.config.top_k]

        if not top:
            logger.debug(f"Component '{component.name}': no candidate above {self.config.min_confidence}")
            return None, pool

        logger.debug(
            f"Component '{component.name}': best node {top[0].node.id} "
            f"({top[0].confidence:.1f}, {top[0].match_type.value})"
        )
        return ComponentMatches(component=component, candidates=top), policy.release(pool, top[0].node)

    def match(
        self,
        components: Sequence[RenderedBounds],
        nodes: Sequence[DesignNode],
        policy: SelectionPolicy | str = EXCLUSIVE,
    ) -> MatchingResult:
        """Match every component against the design nodes.

        Components are processed in input order; with the exclusive policy
        that order sets priority for contested nodes.
        """
        if isinstance(policy, str):
            policy = get_policy(policy)

        pool: NodePool = tuple(nodes)
        component_matches: list[ComponentMatches] = []
        unmatched_components: list[RenderedBounds] = []

        for component in components:
            matches, pool = self.match_step(component, pool, policy)
            if matches is None:
                unmatched_components.append(component)
            else:
                component_matches.append(matches)

        rank_one = {m.best.node.id for m in component_matches if m.best}
        unmatched_nodes = [n for n in nodes if n.id not in rank_one]

        overall = 0.0
        if component_matches:
            overall = sum(m.candidates[0].confidence for m in component_matches) / len(component_matches)

        logger.info(
            f"Matched {len(component_matches)}/{len(components)} components "
            f"({policy.name}); {len(unmatched_nodes)} nodes unclaimed, "
            f"overall confidence {overall:.1f}"
        )
        return MatchingResult(
            policy=policy.name,
            component_matches=component_matches,
            unmatched_components=unmatched_components,
            unmatched_nodes=unmatched_nodes,
            overall_confidence=round(overall, 3),
        )
