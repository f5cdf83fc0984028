from .design_node import (
    Bounds, NodeCategory, VisualAttributes, DesignNode,
    ElementHandle, ElementStyle, RenderedBounds,
)
from .match_schema import MatchType, MatchCandidate, ComponentMatches, MatchingResult
from .grouping_schema import (
    GroupCategory, GroupSkeleton, SemanticGroup, LayoutSummary,
    ClassifierProposal, GroupingResult,
)
from .engine_config import MatchingConfig, SpatialConfig, GroupingConfig, EngineConfig

__all__ = [
    "Bounds",
    "NodeCategory",
    "VisualAttributes",
    "DesignNode",
    "ElementHandle",
    "ElementStyle",
    "RenderedBounds",
    "MatchType",
    "MatchCandidate",
    "ComponentMatches",
    "MatchingResult",
    "GroupCategory",
    "GroupSkeleton",
    "SemanticGroup",
    "LayoutSummary",
    "ClassifierProposal",
    "GroupingResult",
    "MatchingConfig",
    "SpatialConfig",
    "GroupingConfig",
    "EngineConfig",
]
