"""Tests for the geometry-only layout summary."""

import pytest

from src.match_engine.layout_analyzer import (
    analyze_layout,
    band_counts,
    container_stats,
    detect_patterns,
    is_interaction_candidate,
    text_roles,
)
from src.schemas.design_node import Bounds, DesignNode


def _node(node_id, y=0, x=0, w=10, h=10, name="", category="OTHER", text=None):
    return DesignNode(
        id=node_id,
        name=name,
        category=category,
        bounds=Bounds(x=x, y=y, width=w, height=h),
        text_content=text,
    )


CANVAS = Bounds(x=0, y=0, width=400, height=800)


class TestBandCounts:
    def test_quarters(self):
        nodes = [_node("a", y=0), _node("b", y=199), _node("c", y=200), _node("d", y=599), _node("e", y=600)]
        counts = band_counts(nodes, CANVAS)
        assert (counts.header, counts.main, counts.footer) == (2, 2, 1)

    def test_empty(self):
        counts = band_counts([], CANVAS)
        assert (counts.header, counts.main, counts.footer) == (0, 0, 0)


class TestContainerStats:
    def test_only_frames_and_groups(self):
        nodes = [
            _node("big", category="FRAME", w=100, h=100),
            _node("mid", category="GROUP", w=30, h=30),
            _node("tiny", category="FRAME", w=10, h=10),
            _node("rect", category="RECTANGLE", w=500, h=500),
        ]
        stats = container_stats(nodes)
        assert stats.count == 3
        assert stats.average_area == pytest.approx(3666.7)
        assert stats.large == 1
        assert stats.small == 2

    def test_no_containers(self):
        assert container_stats([_node("t", category="TEXT")]).count == 0


class TestInteractionCandidates:
    def test_named_button(self):
        assert is_interaction_candidate(_node("a", name="Close Button", category="VECTOR"))

    def test_short_tall_text(self):
        assert is_interaction_candidate(_node("a", category="TEXT", h=24, text="Continue"))
        assert not is_interaction_candidate(_node("a", category="TEXT", h=12, text="Continue"))
        assert not is_interaction_candidate(_node("a", category="TEXT", h=24, text="x" * 30))

    def test_sized_shapes(self):
        assert is_interaction_candidate(_node("r", category="RECTANGLE", w=120, h=40))
        assert not is_interaction_candidate(_node("r", category="RECTANGLE", w=40, h=40))
        assert is_interaction_candidate(_node("i", category="INSTANCE", w=48, h=48))
        assert not is_interaction_candidate(_node("f", category="FRAME", w=500, h=500))


class TestTextRoles:
    def test_roles(self):
        nodes = [
            _node("cta", y=500, category="TEXT", text="Sign in"),
            _node("price", y=500, category="TEXT", text="$42.00"),
            _node("head", y=10, category="TEXT", text="a long heading for the page"),
            _node("frame", category="FRAME", text="ignored"),
        ]
        roles = text_roles(nodes)
        assert roles.interactive == ["Sign in", "$42.00"]
        assert roles.headers == ["Sign in", "$42.00", "a long heading for the page"]
        assert roles.values == ["$42.00"]


class TestPatterns:
    def test_detects_button_grid_header_and_footer(self):
        nodes = [
            _node("b1", y=10, name="Button 1"),
            _node("b2", y=10, x=100, name="Button 2"),
            _node("b3", y=10, x=200, name="Button 3"),
            _node("foot", y=700),
        ]
        patterns = detect_patterns(nodes, CANVAS, rows=[nodes[:3]])
        assert "Button grid: 3 interactive elements" in patterns
        assert "Header pattern: 3 elements in top area" in patterns
        assert "Bottom action area: 1 elements near bottom" in patterns
        assert not any(p.startswith("Horizontal") for p in patterns)

    def test_horizontal_alignments_need_two_rows(self):
        rows = [[_node("a"), _node("b")], [_node("c"), _node("d")]]
        patterns = detect_patterns([], CANVAS, rows)
        assert patterns == ["Horizontal alignments: 2 aligned groups"]


class TestAnalyzeLayout:
    def test_report(self):
        nodes = [
            _node("title", y=0, x=0, w=200, h=30, category="TEXT", text="Welcome"),
            _node("avatar", y=0, x=300, w=40, h=40, category="RECTANGLE"),
            _node("card", y=300, w=400, h=200, category="FRAME", name="Card"),
            _node("cta", y=750, w=400, h=50, category="INSTANCE", name="Primary Button"),
        ]
        report = analyze_layout(nodes)

        assert report.node_count == 4
        assert report.canvas == Bounds(x=0, y=0, width=400, height=800)
        assert len(report.sections) == 3
        assert (report.bands.header, report.bands.main, report.bands.footer) == (2, 1, 1)
        assert report.category_distribution == {"TEXT": 1, "RECTANGLE": 1, "FRAME": 1, "INSTANCE": 1}
        assert [n.id for n in report.interaction_candidates] == ["title", "cta"]
        assert report.row_count == 1
        assert report.containers.count == 1

    def test_empty(self):
        report = analyze_layout([])
        assert report.node_count == 0
        assert report.sections == []
        assert report.patterns == []
