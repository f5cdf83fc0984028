"""Tests for auto-mapping nodes into empty group skeletons."""

import pytest

from src.match_engine.group_scorer import (
    GroupScorer,
    auto_map_groups,
    member_limit,
    position_band,
)
from src.schemas.design_node import Bounds, DesignNode
from src.schemas.engine_config import GroupingConfig
from src.schemas.grouping_schema import GroupSkeleton

FRAME = Bounds(x=0, y=0, width=400, height=800)


def _node(node_id, y=0, x=0, w=10, h=10, name="", category="OTHER", text=None):
    return DesignNode(
        id=node_id,
        name=name,
        category=category,
        bounds=Bounds(x=x, y=y, width=w, height=h),
        text_content=text,
    )


def _ids(nodes):
    return [n.id for n in nodes]


class TestPositionBand:
    @pytest.mark.parametrize(
        "name, band",
        [
            ("Header Section", "top"),
            ("Top Bar", "top"),
            ("Navigation", "top"),
            ("Footer", "bottom"),
            ("Action Area", "bottom"),
            ("Main Content", "middle"),
            ("Section 2", "near"),
            ("Sidebar", None),
        ],
    )
    def test_band_from_name(self, name, band):
        assert position_band(GroupSkeleton(name=name)) == band


class TestHeuristics:
    def setup_method(self):
        self.scorer = GroupScorer()

    def test_header_section_selects_top_band(self):
        pool = (_node("a", y=10), _node("b", y=50), _node("c", y=700))
        group = GroupSkeleton(name="Header Section")

        assert _ids(self.scorer.position_matches(group, pool, FRAME)) == ["a", "b"]
        children, _ = self.scorer.auto_map(group, pool, FRAME)
        assert _ids(children) == ["a", "b"]

    def test_bottom_node_needs_another_heuristic(self):
        pool = (_node("a", y=10), _node("b", y=50), _node("c", y=700, name="Header link"))
        children, _ = self.scorer.auto_map(GroupSkeleton(name="Header Section"), pool, FRAME)
        assert sorted(_ids(children)) == ["a", "b", "c"]

    def test_middle_band_is_inclusive(self):
        pool = (_node("edge", y=800 / 3), _node("mid", y=400), _node("low", y=700))
        group = GroupSkeleton(name="Main Content")
        assert _ids(self.scorer.position_matches(group, pool, FRAME)) == ["edge", "mid"]

    def test_bottom_band(self):
        pool = (_node("top", y=10), _node("bottom", y=600))
        group = GroupSkeleton(name="Footer")
        assert _ids(self.scorer.position_matches(group, pool, FRAME)) == ["bottom"]

    def test_near_band_uses_group_y(self):
        group = GroupSkeleton(name="Section 2", bounds=Bounds(y=300))
        pool = (_node("in", y=350), _node("out", y=400))
        assert _ids(self.scorer.position_matches(group, pool, FRAME)) == ["in"]

    def test_keywords_ignore_short_tokens(self):
        group = GroupSkeleton(name="Go to cart", description="")
        pool = (_node("go", text="Go"), _node("cart", name="Cart icon"))
        assert _ids(self.scorer.keyword_matches(group, pool)) == ["cart"]

    def test_keywords_in_non_latin_scripts(self):
        group = GroupSkeleton(name="Корзина товаров")
        pool = (_node("list", name="товаров список"), _node("other", name="Профиль"))
        assert _ids(self.scorer.keyword_matches(group, pool)) == ["list"]

    def test_accented_keywords(self):
        group = GroupSkeleton(name="Café menu")
        pool = (_node("cafe", text="Le café"), _node("caf", text="caf"))
        assert _ids(self.scorer.keyword_matches(group, pool)) == ["cafe"]

    def test_button_category(self):
        group = GroupSkeleton(name="Actions", category="button")
        pool = (
            _node("inst", category="INSTANCE"),
            _node("named", name="Buy button", category="FRAME"),
            _node("wide", category="RECTANGLE", w=150),
            _node("narrow", category="RECTANGLE", w=50),
            _node("text", category="TEXT"),
        )
        assert _ids(self.scorer.category_matches(group, pool)) == ["inst", "named", "wide"]

    def test_text_category(self):
        group = GroupSkeleton(name="Field labels")
        pool = (_node("t", category="TEXT"), _node("f", category="FRAME"))
        assert _ids(self.scorer.category_matches(group, pool)) == ["t"]

    def test_container_category(self):
        group = GroupSkeleton(name="Cards", category="card")
        pool = (_node("f", category="FRAME"), _node("g", category="GROUP"), _node("t", category="TEXT"))
        assert _ids(self.scorer.category_matches(group, pool)) == ["f", "g"]

    def test_proximity_needs_group_area(self):
        pool = (_node("a", y=10),)
        assert self.scorer.proximity_matches(GroupSkeleton(name="x"), pool) == []

    def test_proximity_overlap_or_near(self):
        group = GroupSkeleton(name="x", bounds=Bounds(x=0, y=0, width=100, height=100))
        pool = (
            _node("inside", x=50, y=50),
            _node("near", x=120, y=0),
            _node("far", x=300, y=300),
        )
        assert _ids(self.scorer.proximity_matches(group, pool)) == ["inside", "near"]


class TestScoring:
    def test_weights_and_size_bonus(self):
        scorer = GroupScorer()
        group = GroupSkeleton(name="Header Section")
        pool = (
            _node("both", y=10, name="Header title", w=100, h=30),
            _node("small", y=20),
        )
        ranked = scorer.candidates(group, pool, FRAME)

        assert [s.node.id for s in ranked] == ["both", "small"]
        assert ranked[0].score == 3 + 2 + 1
        assert ranked[0].heuristics == ("keyword", "position")
        assert ranked[1].score == 2

    def test_ties_keep_pool_order(self):
        pool = tuple(_node(f"n{i}", y=i) for i in range(4))
        ranked = GroupScorer().candidates(GroupSkeleton(name="Header"), pool, FRAME)
        assert [s.node.id for s in ranked] == ["n0", "n1", "n2", "n3"]

    def test_unselected_nodes_are_not_candidates(self):
        pool = (_node("a", y=10),)
        assert GroupScorer().candidates(GroupSkeleton(name="Sidebar"), pool, FRAME) == []


class TestMemberLimits:
    def test_button_group_capped(self):
        pool = tuple(_node(f"b{i}", y=400, category="INSTANCE") for i in range(6))
        children, remaining = GroupScorer().auto_map(
            GroupSkeleton(name="Actions", category="button"), pool, FRAME
        )
        assert len(children) == 3
        assert len(remaining) == 3

    def test_section_name_uses_container_limit(self):
        config = GroupingConfig()
        group = GroupSkeleton(name="Image Section", category="image")
        assert member_limit(group, config) == config.member_limits["container"]

    @pytest.mark.parametrize(
        "name, limit",
        [
            ("Submit Button", 3),
            ("Body text", 5),
            ("Button Section", 8),
            ("Sidebar", 4),
        ],
    )
    def test_name_keywords_override_category(self, name, limit):
        group = GroupSkeleton(name=name, category="other")
        assert member_limit(group, GroupingConfig()) == limit

    def test_named_button_group_capped(self):
        pool = tuple(_node(f"b{i}", y=400, category="INSTANCE") for i in range(6))
        children, _ = GroupScorer().auto_map(GroupSkeleton(name="Submit Button"), pool, FRAME)
        assert len(children) == 3

    def test_unknown_category_uses_default(self):
        config = GroupingConfig(member_limits={})
        assert member_limit(GroupSkeleton(name="x", category="card"), config) == config.default_member_limit

    @pytest.mark.parametrize(
        "category, limit",
        [("container", 8), ("list", 8), ("card", 6), ("navigation", 5), ("text", 5),
         ("other", 4), ("button", 3), ("input", 3), ("image", 2)],
    )
    def test_default_limits(self, category, limit):
        assert member_limit(GroupSkeleton(name="Group", category=category), GroupingConfig()) == limit


class TestAutoMapGroups:
    def test_pool_shrinks_across_groups(self):
        pool = [
            _node("h1", y=10),
            _node("h2", y=40),
            _node("f1", y=700),
            _node("f2", y=750),
            _node("m", y=400),
        ]
        groups = [GroupSkeleton(name="Header"), GroupSkeleton(name="Footer"), GroupSkeleton(name="Top again")]

        assigned, remaining = auto_map_groups(groups, pool, FRAME)

        assert [_ids(children) for children in assigned] == [["h1", "h2"], ["f1", "f2"], []]
        assert _ids(remaining) == ["m"]

    def test_no_node_assigned_twice(self):
        pool = [_node(f"n{i}", y=i * 20, name="Header item") for i in range(20)]
        groups = [GroupSkeleton(name="Header"), GroupSkeleton(name="Header nav")]

        assigned, remaining = auto_map_groups(groups, pool, FRAME)

        ids = [n.id for children in assigned for n in children]
        assert len(ids) == len(set(ids))
        assert len(ids) + len(remaining) == len(pool)

    def test_empty_pool(self):
        assigned, remaining = auto_map_groups([GroupSkeleton(name="Header")], [], FRAME)
        assert assigned == [[]]
        assert remaining == ()
