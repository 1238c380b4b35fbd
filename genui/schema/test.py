"""Tests for the component schema and request models."""

import pytest

from .lib import (
    COMPONENT_REGISTRY,
    ComponentCategory,
    ComponentType,
    Intent,
    Persona,
    coerce_intent,
    coerce_persona,
    describe_component_types,
    get_component_meta,
    get_constraints,
    is_container_type,
    resolve_component_type,
)
from .models import TaskGoal, UserProfile


class TestRegistry:
    """Tests for the component registry."""

    @pytest.mark.unit
    def test_every_type_registered(self):
        """Registry covers the whole vocabulary."""
        assert set(COMPONENT_REGISTRY) == set(ComponentType)

    @pytest.mark.unit
    def test_widgets_are_leaves(self):
        for ct, meta in COMPONENT_REGISTRY.items():
            if meta.category == ComponentCategory.WIDGET:
                assert not get_constraints(ct).can_have_children
            else:
                assert get_constraints(ct).can_have_children

    @pytest.mark.unit
    def test_meta_lookup_by_string(self):
        assert get_component_meta("widget-chat").type == ComponentType.CHAT

    @pytest.mark.unit
    def test_unknown_type_raises_key_error(self):
        with pytest.raises(KeyError):
            get_component_meta("widget-hologram")

    @pytest.mark.unit
    def test_resolve_component_type(self):
        assert resolve_component_type("layout-col") == ComponentType.LAYOUT_COL
        assert resolve_component_type("nope") is None

    @pytest.mark.unit
    def test_is_container_type(self):
        assert is_container_type("layout-split")
        assert not is_container_type("widget-editor")
        assert not is_container_type("nope")


class TestDescribeComponentTypes:
    """Tests for the prompt catalogue."""

    @pytest.mark.unit
    def test_lists_every_type(self):
        text = describe_component_types()
        for ct in ComponentType:
            assert ct.value in text

    @pytest.mark.unit
    def test_containers_share_first_line(self):
        first = describe_component_types().splitlines()[0]
        assert first == "- layout-row, layout-col, layout-split"

    @pytest.mark.unit
    def test_widget_line_format(self):
        assert "- widget-editor (rich text)" in describe_component_types()


class TestCoercion:
    """Tests for lenient enum parsing."""

    @pytest.mark.unit
    def test_known_values(self):
        assert coerce_persona("LinearWriter") == Persona.LINEAR
        assert coerce_intent("review") == Intent.REVIEW

    @pytest.mark.unit
    def test_unknown_values_use_defaults(self):
        assert coerce_persona("Poet") == Persona.VISUAL
        assert coerce_intent(None) == Intent.WRITE


class TestModels:
    """Tests for request models."""

    @pytest.mark.unit
    def test_default_profile(self):
        profile = UserProfile()
        assert profile.persona == "VisualWriter"
        assert profile.preferences.density == "comfortable"
        assert profile.preferences.show_minimap is True

    @pytest.mark.unit
    def test_preferences_camel_case_alias(self):
        profile = UserProfile.model_validate(
            {"persona": "LinearWriter", "preferences": {"density": "compact", "showMinimap": False}}
        )
        assert profile.preferences.show_minimap is False
        dumped = profile.preferences.model_dump(by_alias=True)
        assert dumped == {"density": "compact", "showMinimap": False}

    @pytest.mark.unit
    def test_goal_rejects_empty_description(self):
        with pytest.raises(ValueError):
            TaskGoal(description="", intent="write")

    @pytest.mark.unit
    def test_goal_rejects_unknown_intent(self):
        with pytest.raises(ValueError):
            TaskGoal(description="x", intent="daydream")
