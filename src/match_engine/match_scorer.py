"""Score one rendered element against one design node.

The confidence (0-100) combines four independent, capped sub-scores:
  1. Text similarity       (cap 40)
  2. Category similarity   (cap 30, from CATEGORY_RULES)
  3. Visual features       (cap 20, 5 per shared indicator)
  4. Size ratio            (cap 40 x size_weight; down-weighted because layouts reflow)

Scoring is pure: the element's live style is captured once by the caller and
passed in, so one component can be scored against thousands of nodes
without touching the rendering again.
"""

import logging
import re
from typing import NamedTuple, Optional

from src.schemas.design_node import DesignNode, ElementStyle, NodeCategory, RenderedBounds
from src.schemas.engine_config import MatchingConfig
from src.schemas.match_schema import MatchCandidate, MatchType

logger = logging.getLogger(__name__)

# Letters and digits in any script; underscores and punctuation separate words
_WORD = re.compile(r"[^\W_]+")


# -----------------------------------------------------------------------
# Category rule table
# -----------------------------------------------------------------------

class CategoryRule(NamedTuple):
    """One row of the category table: name keyword x node category -> score.

    An empty ``keywords`` tuple matches any component name; an empty
    ``categories`` set matches any node category.
    """

    name: str
    keywords: tuple[str, ...]
    categories: frozenset[NodeCategory]
    score: float

    def matches(self, component_name: str, category: NodeCategory) -> bool:
        if self.keywords and not any(k in component_name for k in self.keywords):
            return False
        return not self.categories or category in self.categories


# Ordered by score; the first matching row wins
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("button_instance", ("button", "btn"), frozenset({NodeCategory.INSTANCE}), 30.0),
    CategoryRule("text_text", ("text", "label", "title"), frozenset({NodeCategory.TEXT}), 30.0),
    CategoryRule("button_component", ("button", "btn"), frozenset({NodeCategory.COMPONENT}), 25.0),
    CategoryRule("card_frame", ("card",), frozenset({NodeCategory.FRAME}), 20.0),
    CategoryRule("image_rectangle", ("image", "img", "photo"), frozenset({NodeCategory.RECTANGLE}), 20.0),
    CategoryRule(
        "icon_instance", ("icon",),
        frozenset({NodeCategory.INSTANCE, NodeCategory.COMPONENT}), 20.0,
    ),
    CategoryRule(
        "generic_container", (),
        frozenset({NodeCategory.FRAME, NodeCategory.INSTANCE}), 10.0,
    ),
    CategoryRule("fallback", (), frozenset(), 5.0),
)


def find_category_rule(component_name: str, category: NodeCategory) -> CategoryRule:
    """Return the first rule in CATEGORY_RULES that fires for this pair."""
    name = component_name.strip().lower()
    for rule in CATEGORY_RULES:
        if rule.matches(name, category):
            return rule
    return CATEGORY_RULES[-1]


# -----------------------------------------------------------------------
# Sub-scores
# -----------------------------------------------------------------------

def _tokens(text: str) -> list[str]:
    return _WORD.findall(text)


def text_similarity(component_text: str, node_text: str, config: MatchingConfig) -> float:
    """Score how closely two strings agree (0 - config.text_cap)."""
    a = (component_text or "").strip().lower()
    b = (node_text or "").strip().lower()
    if not a or not b:
        return 0.0
    if a == b:
        return config.text_cap
    if a in b or b in a:
        return config.text_cap * config.substring_fraction

    component_tokens = _tokens(a)
    if not component_tokens:
        return 0.0
    node_tokens = set(_tokens(b))
    shared = sum(1 for token in component_tokens if token in node_tokens)
    ratio = shared / len(component_tokens)
    return ratio * config.text_cap * config.token_overlap_fraction


def visual_similarity(style: Optional[ElementStyle], node: DesignNode, config: MatchingConfig) -> float:
    """Count indicators observed on the element AND declared on the node."""
    if style is None:
        return 0.0
    attrs = node.visual_attributes
    pairs = (
        (style.has_radius, attrs.has_corner_radius),
        (style.has_background, attrs.has_fill),
        (style.has_shadow, attrs.has_shadow),
        (style.has_border, attrs.has_stroke),
    )
    matched = sum(1 for observed, declared in pairs if observed and declared)
    return min(config.visual_cap, matched * config.visual_increment)


def size_ratio(component: RenderedBounds, node: DesignNode) -> float:
    """Mean of the min/max width and height ratios (0.0 - 1.0).

    Any zero or negative dimension on either side scores 0.
    """
    cw, ch = component.bounds.width, component.bounds.height
    nw, nh = node.bounds.width, node.bounds.height
    if min(cw, ch, nw, nh) <= 0:
        return 0.0
    width_ratio = min(cw, nw) / max(cw, nw)
    height_ratio = min(ch, nh) / max(ch, nh)
    return (width_ratio + height_ratio) / 2


# -----------------------------------------------------------------------
# Scorer
# -----------------------------------------------------------------------

class MatchScorer:
    """Score (rendered element, design node) pairs into MatchCandidates."""

    def __init__(self, config: MatchingConfig | None = None):
        self.config = config or MatchingConfig()

    def score(
        self,
        component: RenderedBounds,
        node: DesignNode,
        style: Optional[ElementStyle] = None,
    ) -> MatchCandidate:
        """Score a single pair.

        Args:
            component: The rendered element.
            node: The design node.
            style: The element's captured style. Pass the result of
                ``component.capture_style()`` when scoring against many nodes;
                when omitted only a pre-captured ``component.style`` is used.
        """
        cfg = self.config
        if style is None:
            style = component.style

        component_text = (style.text if style and style.text else "") or component.name
        text_score = max(
            text_similarity(component_text, node.text_content or "", cfg),
            text_similarity(component_text, node.name, cfg),
        )

        rule = find_category_rule(component.name, node.category)
        category_score = rule.score

        visual_score = visual_similarity(style, node, cfg)
        size_score = size_ratio(component, node) * cfg.size_max

        total = text_score + category_score + visual_score + size_score
        confidence = round(max(0.0, min(100.0, total)), 3)

        reasons = []
        if text_score > cfg.text_threshold:
            reasons.append("text")
        if category_score > cfg.category_threshold:
            reasons.append(f"category:{rule.name}")
        if visual_score > cfg.visual_threshold:
            reasons.append("visual")
        if size_score > cfg.size_threshold:
            reasons.append("size")

        return MatchCandidate(
            component=component,
            node=node,
            text_score=round(text_score, 3),
            category_score=category_score,
            visual_score=visual_score,
            size_score=round(size_score, 3),
            confidence=confidence,
            match_type=MatchType.from_confidence(confidence),
            reasons=reasons,
            category_rule=rule.name,
        )
