"""Tests for prompt construction."""

import json

import pytest

from genui.knowledge import KnowledgeBase
from genui.layout import Specification
from genui.retrieval import retrieve_context
from genui.schema import ComponentType, Condition, TaskGoal, UserProfile

from .lib import EVALUATION_USER_MESSAGE, PromptBuilder


@pytest.fixture
def goal():
    return TaskGoal(description="Help me brainstorm thesis ideas about AI", intent="brainstorm")


@pytest.fixture
def profile():
    return UserProfile(persona="VisualWriter")


@pytest.fixture
def spec():
    return Specification.model_validate(
        {
            "layout": {
                "id": "root",
                "type": "layout-row",
                "children": [{"id": "chat", "type": "widget-chat", "title": "Chat"}],
            },
            "rationale": "Chat only.",
        }
    )


class TestGenerationPrompt:
    """Tests for build_generation."""

    @pytest.mark.unit
    def test_personalized_includes_context(self, goal, profile):
        bundle = retrieve_context(goal, profile)
        pair = PromptBuilder().build_generation(
            goal, profile, Condition.PERSONALIZED_GENUI, bundle
        )
        assert "## User Context (Personalization Enabled)" in pair.system
        assert "- Persona: VisualWriter" in pair.system
        assert "## Retrieved Design Context" in pair.system
        assert bundle.persona.history_snippets[0] in pair.system
        assert "1. VisualWriter: prioritize" in pair.system
        assert pair.user == 'Design a personalized workspace for: "Help me brainstorm thesis ideas about AI"'
        assert pair.context.personalized
        assert pair.context.exemplar_ids == [ex.id for ex in bundle.exemplars]

    @pytest.mark.unit
    def test_generic_excludes_personalization(self, goal, profile):
        bundle = retrieve_context(goal, profile)
        pair = PromptBuilder().build_generation(goal, profile, "generic-genui", bundle)
        assert "## Generic Mode (No Personalization)" in pair.system
        assert "Retrieved Design Context" not in pair.system
        assert "VisualWriter: prioritize" not in pair.system
        assert "Include editor as primary component" in pair.system
        assert pair.user.startswith("Design a generic workspace")
        assert not pair.context.personalized

    @pytest.mark.unit
    def test_personalized_without_bundle_is_generic(self, goal, profile):
        pair = PromptBuilder().build_generation(goal, profile, Condition.PERSONALIZED_GENUI)
        assert "Generic Mode" in pair.system

    @pytest.mark.unit
    def test_task_and_catalogue(self, goal, profile):
        pair = PromptBuilder().build_generation(goal, profile, "generic-genui")
        assert '- Goal: "Help me brainstorm thesis ideas about AI"' in pair.system
        assert "- Intent: brainstorm" in pair.system
        for ct in ComponentType:
            assert ct.value in pair.system
        assert "Always include widget-chat" in pair.system
        assert pair.system.rstrip().endswith("no markdown fencing.")

    @pytest.mark.unit
    def test_missing_persona_record(self, goal):
        profile = UserProfile(persona="LinearWriter")
        bundle = retrieve_context(goal, profile, KnowledgeBase())
        pair = PromptBuilder(KnowledgeBase()).build_generation(
            goal, profile, "personalized-genui", bundle
        )
        assert "- Cognitive Style: unknown" in pair.system


class TestEvaluationPrompt:
    """Tests for build_evaluation."""

    @pytest.mark.unit
    def test_contains_context_and_spec(self, spec, goal, profile):
        pair = PromptBuilder().build_evaluation(spec, goal, profile, "baseline-chat")
        assert "- Condition: baseline-chat (chat-only baseline)" in pair.system
        assert '"widget-chat"' in pair.system
        assert "Avoid compression around 70-80" in pair.system
        assert pair.user == EVALUATION_USER_MESSAGE

    @pytest.mark.unit
    def test_contains_rubric_and_sub_criteria(self, spec, goal, profile):
        pair = PromptBuilder().build_evaluation(spec, goal, profile, "personalized-genui")
        assert "GenUI 5-Factor Interface Rubric" in pair.system
        assert "- mentalDemand: How much thinking" in pair.system
        assert "- coherence:" in pair.system

    @pytest.mark.unit
    def test_output_shape_is_json(self, spec, goal, profile):
        pair = PromptBuilder().build_evaluation(spec, goal, profile, "generic-genui")
        shape_text = pair.system.split("Return JSON:\n", 1)[1].split("\n\nUse the FULL", 1)[0]
        shape = json.loads(shape_text)
        assert set(shape["detailed"]) == {
            "cognitiveLoad",
            "clarity",
            "efficiency",
            "personalizationFit",
            "aestheticAppeal",
        }
        assert shape["detailed"]["clarity"]["details"] == {
            "visibility": "number",
            "recognition": "number",
            "consistency": "number",
        }

    @pytest.mark.unit
    def test_empty_rubric(self, spec, goal, profile):
        pair = PromptBuilder(KnowledgeBase()).build_evaluation(spec, goal, profile, "generic-genui")
        assert "## Evaluation Rubric\n{}" in pair.system
        assert "- mentalDemand: mentalDemand" in pair.system
