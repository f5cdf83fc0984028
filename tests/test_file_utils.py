"""Tests for JSON/YAML loading and saving helpers."""

import json

import pytest

from src.schemas.design_node import Bounds, DesignNode, NodeCategory
from src.schemas.grouping_schema import GroupingResult
from src.utils.file_utils import (
    ensure_directory,
    load_design_nodes,
    load_json,
    load_proposal,
    load_rendered_bounds,
    load_yaml,
    save_json,
)


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestBasicIO:
    def test_ensure_directory(self, tmp_path):
        target = ensure_directory(tmp_path / "a" / "b")
        assert target.is_dir()

    def test_missing_files(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / "missing.json")
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "missing.yaml")

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml(path) == {}

    def test_save_dict_creates_parent(self, tmp_path):
        path = tmp_path / "out" / "data.json"
        save_json({"a": 1}, path)
        assert load_json(path) == {"a": 1}

    def test_save_model(self, tmp_path):
        node = DesignNode(id="1", name="Title", category="TEXT", text_content="Hi")
        path = tmp_path / "result.json"
        save_json(GroupingResult(ungrouped_nodes=[node], total_nodes=1), path)

        loaded = GroupingResult.model_validate(load_json(path))
        assert loaded.ungrouped_nodes == [node]


class TestLoaders:
    def test_design_nodes_bare_list(self, tmp_path):
        path = _write(tmp_path / "nodes.json", [
            {"id": "1:2", "name": "Pay", "type": "INSTANCE",
             "bounds": {"x": 0, "y": 0, "width": 100, "height": 40}},
            {"id": "1:3", "type": "TEXT", "characters": "Total"},
        ])
        nodes = load_design_nodes(path)

        assert [n.id for n in nodes] == ["1:2", "1:3"]
        assert nodes[0].category == NodeCategory.INSTANCE
        assert nodes[0].bounds == Bounds(width=100, height=40)
        assert nodes[1].text_content == "Total"

    def test_design_nodes_wrapped(self, tmp_path):
        path = _write(tmp_path / "nodes.json", {"nodes": [{"id": "a"}]})
        assert [n.id for n in load_design_nodes(path)] == ["a"]

    def test_rendered_bounds(self, tmp_path):
        path = _write(tmp_path / "bounds.json", {"components": [
            {"name": "Submit", "bounds": {"x": 1, "y": 2, "width": 3, "height": 4},
             "style": {"text": "Submit", "border_radius": 4}},
            {"name": "Icon"},
        ]})
        components = load_rendered_bounds(path)

        assert components[0].style.has_radius
        assert components[1].style is None
        assert components[1].capture_style() is None

    def test_proposal_object(self, tmp_path):
        path = _write(tmp_path / "proposal.json", {
            "groups": [{"id": "g1", "name": "Header", "type": "container", "children": ["1:2"]}],
            "layoutStructure": {"screenType": "form", "mainSections": ["header"]},
            "confidence": 0.9,
        })
        proposal = load_proposal(path)

        assert proposal.groups[0].children == ["1:2"]
        assert proposal.layout_structure.screen_category == "form"
        assert proposal.confidence == 0.9

    def test_proposal_bare_list(self, tmp_path):
        path = _write(tmp_path / "proposal.json", [{"name": "Footer"}])
        proposal = load_proposal(path)
        assert [g.name for g in proposal.groups] == ["Footer"]
        assert proposal.layout_structure is None

    def test_invalid_node_raises(self, tmp_path):
        from pydantic import ValidationError

        path = _write(tmp_path / "nodes.json", [{"name": "no id"}])
        with pytest.raises(ValidationError):
            load_design_nodes(path)
