"""Pydantic models for engine tuning parameters.

Every threshold the matching and grouping heuristics use lives here so a
project can adjust them from one YAML file (see ``config/engine.yaml``)
instead of patching code. Defaults reproduce the stock behaviour.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

class MatchingConfig(BaseModel):
    """Caps, significance thresholds, and selection limits for bounds matching."""

    text_cap: float = Field(default=40.0, description="Maximum text-similarity sub-score")
    substring_fraction: float = Field(
        default=0.75, description="Share of text_cap awarded for substring containment"
    )
    token_overlap_fraction: float = Field(
        default=0.625, description="Share of text_cap the token-overlap ratio is scaled to"
    )
    visual_increment: float = Field(default=5.0, description="Points per matching visual indicator")
    visual_cap: float = 20.0
    size_cap: float = Field(default=40.0, description="Size sub-score before weighting")
    size_weight: float = Field(
        default=0.375,
        description="Down-weighting applied to size similarity (layouts reflow)",
    )

    # Significance thresholds -- a sub-score above these is listed in reasons
    text_threshold: float = 20.0
    category_threshold: float = 15.0
    visual_threshold: float = 10.0

    min_confidence: float = Field(
        default=20.0, description="Candidates scoring below this are dropped"
    )
    top_k: int = Field(default=3, ge=1, description="Candidates kept per component")

    @property
    def size_max(self) -> float:
        return self.size_cap * self.size_weight

    @property
    def size_threshold(self) -> float:
        """Break-even: a size ratio of 0.5."""
        return self.size_max / 2


# ---------------------------------------------------------------------------
# Spatial analysis
# ---------------------------------------------------------------------------

class SpatialConfig(BaseModel):
    """Default parameters for the geometry primitives."""

    cluster_distance: float = Field(default=100.0, description="Proximity clustering radius (px)")
    alignment_tolerance: float = Field(default=10.0, description="Axis bucketing step (px)")
    section_gap: float = Field(default=50.0, description="Vertical gap that splits sections (px)")


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

def _default_member_limits() -> dict[str, int]:
    return {
        "container": 8,
        "list": 8,
        "card": 6,
        "navigation": 5,
        "text": 5,
        "other": 4,
        "button": 3,
        "input": 3,
        "image": 2,
    }


class GroupingConfig(BaseModel):
    """Weights and limits for auto-mapping nodes into group skeletons."""

    keyword_weight: int = 3
    position_weight: int = 2
    category_weight: int = 2
    proximity_weight: int = 1
    size_bonus: int = Field(default=1, description="Bonus for nodes above the size noise floor")
    min_size_width: float = 20.0
    min_size_height: float = 10.0

    min_keyword_length: int = 3
    section_tolerance: float = Field(
        default=100.0, description="Max |y - group.y| for generic 'section' groups (px)"
    )
    proximity_radius: float = Field(
        default=150.0, description="Top-left distance that counts as near a group (px)"
    )
    wide_rectangle_width: float = Field(
        default=100.0, description="RECTANGLEs wider than this look like buttons"
    )

    member_limits: dict[str, int] = Field(default_factory=_default_member_limits)
    default_member_limit: int = 4

    max_fallback_groups: int = Field(
        default=15, description="Cap on 1:1 groups produced without a classifier"
    )
    fallback_confidence: float = 0.5


class EngineConfig(BaseModel):
    """Complete engine configuration."""

    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    spatial: SpatialConfig = Field(default_factory=SpatialConfig)
    grouping: GroupingConfig = Field(default_factory=GroupingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "EngineConfig":
        """Load engine configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Engine config file not found: {path}")
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    def to_yaml(self, path: str | Path) -> None:
        """Save engine configuration to a YAML file."""
        path = Path(path)
        data = self.model_dump(exclude_none=True)
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
