"""Pydantic models for rendered-element to design-node matching results."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .design_node import DesignNode, RenderedBounds


class MatchType(str, Enum):
    """Coarse label derived from a candidate's confidence."""

    EXACT = "exact"
    PARTIAL = "partial"
    APPROXIMATE = "approximate"

    @classmethod
    def from_confidence(cls, confidence: float) -> "MatchType":
        if confidence > 80:
            return cls.EXACT
        if confidence > 60:
            return cls.PARTIAL
        return cls.APPROXIMATE


class MatchCandidate(BaseModel):
    """One scored pairing between a rendered element and a design node."""

    model_config = ConfigDict(frozen=True)

    component: RenderedBounds
    node: DesignNode
    text_score: float = 0.0
    category_score: float = 0.0
    visual_score: float = 0.0
    size_score: float = 0.0
    confidence: float = Field(ge=0.0, le=100.0)
    match_type: MatchType
    reasons: list[str] = Field(
        default_factory=list,
        description="Factors that passed their own significance threshold",
    )
    category_rule: str = Field(
        default="",
        description="Name of the category rule that produced category_score",
    )


class ComponentMatches(BaseModel):
    """Ranked candidates (best first) for a single rendered element."""

    component: RenderedBounds
    candidates: list[MatchCandidate] = Field(default_factory=list)
    confirmed_match: Optional[MatchCandidate] = None

    @property
    def best(self) -> Optional[MatchCandidate]:
        return self.candidates[0] if self.candidates else None


class MatchingResult(BaseModel):
    """Outcome of one BoundsMatcher run.

    In exclusive mode no node id is rank-1 for two components. In
    non-exclusive mode collisions are expected and left for confirmation.
    """

    policy: str = "exclusive"
    component_matches: list[ComponentMatches] = Field(default_factory=list)
    unmatched_components: list[RenderedBounds] = Field(default_factory=list)
    unmatched_nodes: list[DesignNode] = Field(default_factory=list)
    overall_confidence: float = 0.0

    def rank_one_ids(self) -> list[str]:
        return [m.best.node.id for m in self.component_matches if m.best]

    def rank_one_collisions(self) -> dict[str, list[int]]:
        """Node ids that are rank-1 for more than one component, with the component positions."""
        seen: dict[str, list[int]] = {}
        for i, match in enumerate(self.component_matches):
            if match.best:
                seen.setdefault(match.best.node.id, []).append(i)
        return {node_id: idx for node_id, idx in seen.items() if len(idx) > 1}

    def confirm(self, index: int, node_id: str) -> "MatchingResult":
        """Return a copy with the candidate for ``node_id`` confirmed on component ``index``.

        Raises:
            IndexError: no component match at ``index``.
            KeyError: ``node_id`` is not among that component's candidates.
        """
        match = self.component_matches[index]
        chosen = next((c for c in match.candidates if c.node.id == node_id), None)
        if chosen is None:
            raise KeyError(f"Node {node_id!r} is not a candidate for component {index}")
        updated = list(self.component_matches)
        updated[index] = match.model_copy(update={"confirmed_match": chosen})
        return self.model_copy(update={"component_matches": updated})
