"""Pydantic models for semantic grouping of design nodes.

Group skeletons arrive from an external classifier (possibly with no
children); SemanticGrouper turns them into completed SemanticGroups.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .design_node import Bounds, DesignNode

DEFAULT_GROUP_CONFIDENCE = 0.7
MIN_GROUP_CONFIDENCE = 0.1
MAX_GROUP_CONFIDENCE = 1.0


def clamp_confidence(value: Optional[float]) -> float:
    """Clamp a group confidence into [0.1, 1.0], defaulting missing values to 0.7."""
    if value is None:
        value = DEFAULT_GROUP_CONFIDENCE
    return max(MIN_GROUP_CONFIDENCE, min(MAX_GROUP_CONFIDENCE, float(value)))


class GroupCategory(str, Enum):
    """Semantic categories a group of nodes can represent."""

    BUTTON = "button"
    TEXT = "text"
    CARD = "card"
    NAVIGATION = "navigation"
    INPUT = "input"
    LIST = "list"
    IMAGE = "image"
    CONTAINER = "container"
    OTHER = "other"

    @classmethod
    def coerce(cls, value: Any) -> "GroupCategory":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.OTHER


class GroupSkeleton(BaseModel):
    """A group as proposed by an external classifier; children are node ids."""

    id: Optional[str] = None
    name: str = ""
    category: GroupCategory = Field(
        default=GroupCategory.OTHER,
        validation_alias="type",
    )
    description: str = ""
    bounds: Bounds = Field(default_factory=Bounds)
    children: list[str] = Field(default_factory=list)
    properties: dict[str, Any] = Field(default_factory=dict)
    confidence: Optional[float] = None

    model_config = {"populate_by_name": True}

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> GroupCategory:
        return GroupCategory.coerce(value) if value is not None else GroupCategory.OTHER

    @field_validator("name", "description", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> str:
        return value or ""

    @field_validator("bounds", mode="before")
    @classmethod
    def _default_bounds(cls, value: Any) -> Any:
        return value if value is not None else Bounds()

    @field_validator("children", mode="before")
    @classmethod
    def _default_children(cls, value: Any) -> Any:
        return value if value is not None else []

    @field_validator("properties", mode="before")
    @classmethod
    def _default_properties(cls, value: Any) -> Any:
        return value if value is not None else {}


class SemanticGroup(BaseModel):
    """A completed cluster of design nodes forming one logical UI section."""

    id: str
    name: str = ""
    category: GroupCategory = GroupCategory.OTHER
    description: str = ""
    bounds: Bounds = Field(default_factory=Bounds)
    children: list[DesignNode] = Field(default_factory=list)
    properties: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(default=DEFAULT_GROUP_CONFIDENCE, ge=0.0, le=1.0)

    @property
    def child_ids(self) -> list[str]:
        return [child.id for child in self.children]


class LayoutSummary(BaseModel):
    """Screen-level reading of the layout (usually proposed by the classifier)."""

    screen_category: str = Field(
        default="general",
        validation_alias="screenType",
        description="form, navigation, dashboard, modal, list, detail, ...",
    )
    ordered_section_names: list[str] = Field(
        default_factory=list,
        validation_alias="mainSections",
    )
    flow_description: str = Field(
        default="User interacts with interface",
        validation_alias="userFlow",
    )

    model_config = {"populate_by_name": True}


class ClassifierProposal(BaseModel):
    """A complete external classifier response."""

    groups: list[GroupSkeleton] = Field(default_factory=list)
    layout_structure: Optional[LayoutSummary] = Field(
        default=None,
        validation_alias="layoutStructure",
    )
    confidence: Optional[float] = None

    model_config = {"populate_by_name": True}


class GroupingResult(BaseModel):
    """Outcome of one SemanticGrouper run."""

    groups: list[SemanticGroup] = Field(default_factory=list)
    layout_summary: Optional[LayoutSummary] = None
    ungrouped_nodes: list[DesignNode] = Field(default_factory=list)
    overall_confidence: float = 0.0
    elapsed_time: float = Field(default=0.0, description="Seconds spent grouping")
    total_nodes: int = 0

    @property
    def grouped_nodes(self) -> int:
        return self.total_nodes - len(self.ungrouped_nodes)
