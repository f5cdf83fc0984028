"""Pydantic models for design-tree nodes and rendered-element bounds.

Two independently produced views of the same screen meet here:

1. **DesignNode** -- one entry of the flattened design-tool document tree
   (geometry, category, optional text, declared visual attributes).
2. **RenderedBounds** -- one measured rectangle from a generated rendering,
   optionally carrying a live handle that can be asked for computed style
   and text.

All spatial values are in px. Missing geometry defaults to a zero-area
rectangle at the origin rather than failing validation.
"""

import math
import re
from enum import Enum
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

class Bounds(BaseModel):
    """Axis-aligned rectangle (top-left corner plus size, px)."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0

    def overlaps(self, other: "Bounds") -> bool:
        """True when the two rectangles share interior area."""
        return (
            self.x < other.right
            and self.right > other.x
            and self.y < other.bottom
            and self.bottom > other.y
        )

    def distance_to(self, other: "Bounds") -> float:
        """Euclidean distance between the two top-left corners."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def union(self, other: "Bounds") -> "Bounds":
        left = min(self.x, other.x)
        top = min(self.y, other.y)
        return Bounds(
            x=left,
            y=top,
            width=max(self.right, other.right) - left,
            height=max(self.bottom, other.bottom) - top,
        )


# ---------------------------------------------------------------------------
# Design nodes
# ---------------------------------------------------------------------------

class NodeCategory(str, Enum):
    """Design-tool node categories the engine distinguishes."""

    TEXT = "TEXT"
    RECTANGLE = "RECTANGLE"
    ELLIPSE = "ELLIPSE"
    FRAME = "FRAME"
    GROUP = "GROUP"
    COMPONENT = "COMPONENT"
    INSTANCE = "INSTANCE"
    OTHER = "OTHER"

    @classmethod
    def coerce(cls, value: Any) -> "NodeCategory":
        """Map any raw type string onto a category; unknown values become OTHER."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.OTHER


class VisualAttributes(BaseModel):
    """Visual features declared on a design node."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    has_corner_radius: bool = Field(default=False, alias="hasCornerRadius")
    has_fill: bool = Field(default=False, alias="hasFill")
    has_stroke: bool = Field(default=False, alias="hasStroke")
    has_shadow: bool = Field(default=False, alias="hasShadow")


class DesignNode(BaseModel):
    """A single node of the flattened design document. Read-only to the engine."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str = ""
    category: NodeCategory = Field(
        default=NodeCategory.OTHER,
        validation_alias=AliasChoices("category", "type"),
    )
    bounds: Bounds = Field(default_factory=Bounds)
    text_content: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("text_content", "textContent", "characters"),
        description="Characters of a TEXT node (or any text the extractor attached)",
    )
    visual_attributes: VisualAttributes = Field(
        default_factory=VisualAttributes,
        validation_alias=AliasChoices("visual_attributes", "visualAttributes"),
    )

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> NodeCategory:
        return NodeCategory.coerce(value)

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> str:
        return value or ""

    @field_validator("bounds", mode="before")
    @classmethod
    def _default_bounds(cls, value: Any) -> Any:
        return value if value is not None else Bounds()

    @property
    def label(self) -> str:
        """Text if the node has any, else its name."""
        return self.text_content or self.name


# ---------------------------------------------------------------------------
# Rendered elements
# ---------------------------------------------------------------------------

@runtime_checkable
class ElementHandle(Protocol):
    """Read-only view of a live rendered element (e.g. a browser element handle)."""

    def text_content(self) -> Optional[str]: ...

    def computed_style(self) -> Mapping[str, str]: ...


_TRANSPARENT = {"", "transparent"}
_LEADING_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_COLOR_FUNCTION = re.compile(r"^(?:rgb|hsl)a?\((.*)\)$")


def _alpha(color: str) -> float:
    """Alpha channel of a CSS colour string (1.0 when none is given)."""
    color = color.strip().lower()
    if color.startswith("#") and len(color) in (5, 9):
        digits = color[-1] if len(color) == 5 else color[-2:]
        try:
            return int(digits, 16) / (15 if len(digits) == 1 else 255)
        except ValueError:
            return 1.0

    match = _COLOR_FUNCTION.match(color)
    if not match:
        return 1.0
    body = match.group(1)
    if "/" in body:
        value = body.rsplit("/", 1)[1]
    else:
        parts = body.split(",")
        if len(parts) < 4:
            return 1.0
        value = parts[3]
    value = value.strip()
    try:
        if value.endswith("%"):
            return float(value[:-1]) / 100
        return float(value)
    except ValueError:
        return 1.0


def _style_value(style: Mapping[str, str], camel: str, kebab: str) -> str:
    value = style.get(camel)
    if value is None:
        value = style.get(kebab, "")
    return str(value or "").strip()


def _parse_px(value: str) -> float:
    match = _LEADING_NUMBER.search(value)
    return float(match.group()) if match else 0.0


class ElementStyle(BaseModel):
    """Snapshot of the computed style and text of one rendered element.

    Taken once per RenderedBounds so scoring against many nodes never queries
    the live view again.
    """

    model_config = ConfigDict(frozen=True)

    text: str = ""
    border_radius: float = 0.0
    background_color: str = ""
    box_shadow: str = ""
    border: str = ""

    @property
    def has_radius(self) -> bool:
        return self.border_radius > 0

    @property
    def has_background(self) -> bool:
        color = self.background_color.strip().lower()
        return color not in _TRANSPARENT and _alpha(color) > 0

    @property
    def has_shadow(self) -> bool:
        return self.box_shadow.lower() not in ("", "none")

    @property
    def has_border(self) -> bool:
        border = self.border.lower()
        if border in ("", "none"):
            return False
        # "0px none rgb(...)" is how browsers report an absent border
        return not border.startswith(("0px", "0 ")) and "none" not in border.split()

    @classmethod
    def from_computed(cls, style: Mapping[str, str], text: Optional[str] = None) -> "ElementStyle":
        """Build a snapshot from a computed-style mapping (camelCase or kebab-case keys)."""
        return cls(
            text=(text or "").strip(),
            border_radius=_parse_px(_style_value(style, "borderRadius", "border-radius")),
            background_color=_style_value(style, "backgroundColor", "background-color"),
            box_shadow=_style_value(style, "boxShadow", "box-shadow"),
            border=_style_value(style, "border", "border"),
        )


class RenderedBounds(BaseModel):
    """A measured on-screen rectangle produced by the generated rendering."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = ""
    bounds: Bounds = Field(default_factory=Bounds)
    style: Optional[ElementStyle] = Field(
        default=None,
        description="Pre-captured style snapshot (e.g. shipped in a probe JSON file)",
    )
    handle: Optional[Any] = Field(
        default=None,
        exclude=True,
        description="Live ElementHandle; queried at most once via capture_style()",
    )

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> str:
        return value or ""

    @field_validator("bounds", mode="before")
    @classmethod
    def _default_bounds(cls, value: Any) -> Any:
        return value if value is not None else Bounds()

    def capture_style(self) -> Optional[ElementStyle]:
        """Return the style snapshot, querying the live handle if none was supplied.

        Returns None when neither a snapshot nor a handle is available.
        """
        if self.style is not None:
            return self.style
        if self.handle is None:
            return None
        return ElementStyle.from_computed(
            self.handle.computed_style() or {},
            self.handle.text_content(),
        )
