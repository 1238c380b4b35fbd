"""Tests for layout models and validation."""

import pytest

from genui.core.result import Failure, Success

from .lib import (
    LayoutNode,
    Specification,
    iter_nodes,
    validate_layout,
    validate_specification,
    widget_types,
)


def _spec_dict(**layout_overrides):
    layout = {
        "id": "root",
        "type": "layout-row",
        "children": [
            {"id": "editor", "type": "widget-editor", "title": "Draft", "flex": 2},
            {"id": "chat", "type": "widget-chat", "title": "AI", "flex": 1},
        ],
    }
    layout.update(layout_overrides)
    return {"layout": layout, "theme": "minimal", "rationale": "Editor first."}


class TestLayoutNode:
    """Tests for LayoutNode model."""

    @pytest.mark.unit
    def test_effective_flex_defaults_to_one(self):
        node = LayoutNode(id="a", type="widget-chat")
        assert node.flex is None
        assert node.effective_flex == 1

    @pytest.mark.unit
    def test_flex_range(self):
        with pytest.raises(ValueError):
            LayoutNode(id="a", type="widget-chat", flex=13)
        with pytest.raises(ValueError):
            LayoutNode(id="a", type="widget-chat", flex=0)

    @pytest.mark.unit
    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            LayoutNode(id="a", type="widget-hologram")

    @pytest.mark.unit
    def test_iteration_order(self):
        spec = Specification.model_validate(_spec_dict())
        assert [n.id for n in iter_nodes(spec.layout)] == ["root", "editor", "chat"]
        assert widget_types(spec.layout) == ["widget-editor", "widget-chat"]


class TestSpecification:
    """Tests for Specification serialization."""

    @pytest.mark.unit
    def test_camel_case_round_trip(self):
        data = _spec_dict()
        data["retrievedContext"] = {"matchedPatterns": ["Spatial Canvas"]}
        spec = Specification.model_validate(data)
        assert spec.retrieved_context.matched_patterns == ["Spatial Canvas"]
        assert spec.to_dict()["retrievedContext"] == {"matchedPatterns": ["Spatial Canvas"]}

    @pytest.mark.unit
    def test_to_dict_omits_unset_fields(self):
        spec = Specification.model_validate(_spec_dict())
        chat = spec.to_dict()["layout"]["children"][1]
        assert "props" not in chat
        assert "retrievedContext" not in spec.to_dict()

    @pytest.mark.unit
    def test_frozen(self):
        spec = Specification.model_validate(_spec_dict())
        with pytest.raises(ValueError):
            spec.rationale = "changed"
        updated = spec.model_copy(update={"rationale": "changed"})
        assert spec.rationale == "Editor first."
        assert updated.rationale == "changed"


class TestValidateLayout:
    """Tests for tree-level checks."""

    @pytest.mark.unit
    def test_valid_tree(self):
        spec = Specification.model_validate(_spec_dict())
        assert validate_layout(spec.layout) == []

    @pytest.mark.unit
    def test_duplicate_ids(self):
        node = LayoutNode(
            id="root",
            type="layout-col",
            children=[
                LayoutNode(id="x", type="widget-chat"),
                LayoutNode(id="x", type="widget-editor"),
            ],
        )
        errors = validate_layout(node)
        assert [e.error_type for e in errors] == ["duplicate_id"]

    @pytest.mark.unit
    def test_widget_with_children(self):
        node = LayoutNode(
            id="chat",
            type="widget-chat",
            children=[LayoutNode(id="inner", type="widget-editor")],
        )
        errors = validate_layout(node)
        assert errors[0].error_type == "constraint_violation"
        assert errors[0].node_id == "chat"

    @pytest.mark.unit
    def test_unknown_type_constructed_without_validation(self):
        node = LayoutNode.model_construct(
            id="x", type="widget-hologram", title=None, flex=None, children=[], props=None
        )
        assert validate_layout(node)[0].error_type == "unknown_type"


class TestValidateSpecification:
    """Tests for validate_specification."""

    @pytest.mark.unit
    def test_success(self):
        outcome = validate_specification(_spec_dict())
        assert isinstance(outcome, Success)
        assert outcome.value.layout.children[0].flex == 2

    @pytest.mark.unit
    def test_missing_layout_type(self):
        data = _spec_dict()
        del data["layout"]["type"]
        outcome = validate_specification(data)
        assert isinstance(outcome, Failure)
        assert "layout.type" in outcome.reason

    @pytest.mark.unit
    def test_missing_layout(self):
        outcome = validate_specification({"theme": "minimal"})
        assert isinstance(outcome, Failure)
        assert outcome.reason.startswith("layout")

    @pytest.mark.unit
    def test_not_an_object(self):
        outcome = validate_specification(["layout"])
        assert isinstance(outcome, Failure)
        assert "list" in outcome.reason

    @pytest.mark.unit
    def test_structural_failure(self):
        data = _spec_dict(children=[
            {"id": "a", "type": "widget-chat"},
            {"id": "a", "type": "widget-chat"},
        ])
        outcome = validate_specification(data)
        assert isinstance(outcome, Failure)
        assert "Duplicate ID 'a'" in outcome.reason

    @pytest.mark.unit
    def test_extra_keys_ignored(self):
        data = _spec_dict(orientation="horizontal")
        assert isinstance(validate_specification(data), Success)
