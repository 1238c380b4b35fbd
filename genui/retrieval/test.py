"""Tests for retrieval functions."""

import pytest

from genui.knowledge import (
    ExemplarRecord,
    KnowledgeBase,
    PatternRecord,
    TraceRecord,
    load_knowledge_base,
)
from genui.schema import Persona, TaskGoal, UserProfile

from .lib import (
    RetrievalBundle,
    pick_persona_context,
    retrieve_context,
    retrieve_exemplars,
    retrieve_patterns,
    retrieve_trace_snippet,
)


def _exemplar(id, task, intent, persona_hint="LinearWriter"):
    return ExemplarRecord(
        id=id,
        task=task,
        intent=intent,
        persona_hint=persona_hint,
        layout_hint="layout-row",
        expected_components=["widget-chat"],
        rationale="r",
    )


def _pattern(id, persona_fit=None, intent_fit=None):
    return PatternRecord(
        id=id,
        name=id.title(),
        description="d",
        persona_fit=persona_fit,
        intent_fit=intent_fit,
        components=["widget-chat"],
        cognitive_rationale="c",
    )


def _trace(id, persona_hint, intent):
    return TraceRecord(
        id=id,
        task="t",
        persona_hint=persona_hint,
        intent=intent,
        patterns=[],
        cognitive_insight=f"insight {id}",
    )


@pytest.fixture
def exemplar_kb():
    return KnowledgeBase(
        exemplars=(
            _exemplar("k1", "Outline a grant proposal", "research"),
            _exemplar("i1", "Draft an essay", "write"),
            _exemplar("p1", "Sketch ideas", "review", persona_hint="VisualWriter"),
            _exemplar("i2", "Compose a letter", "write"),
            _exemplar("none", "Tabulate data", "review"),
        )
    )


class TestPickPersonaContext:
    """Tests for persona lookup."""

    @pytest.mark.unit
    def test_by_name(self):
        record = pick_persona_context("VisualWriter")
        assert record is not None
        assert record.name == "VisualWriter"

    @pytest.mark.unit
    def test_by_enum(self):
        assert pick_persona_context(Persona.RESEARCH).name == "ResearchWriter"

    @pytest.mark.unit
    def test_by_id(self):
        record = pick_persona_context("linear-writer")
        assert record is not None
        assert record.id == "linear-writer"

    @pytest.mark.unit
    def test_unknown_returns_none(self):
        assert pick_persona_context("Poet") is None
        assert pick_persona_context("VisualWriter", KnowledgeBase()) is None


class TestRetrieveExemplars:
    """Tests for exemplar selection."""

    @pytest.mark.unit
    def test_intent_matches_first(self, exemplar_kb):
        goal = TaskGoal(description="Please outline my paper", intent="write")
        result = retrieve_exemplars(goal, "VisualWriter", exemplar_kb)
        assert [ex.id for ex in result] == ["i1", "i2", "k1"]

    @pytest.mark.unit
    def test_persona_hint_counts_as_keyword(self, exemplar_kb):
        goal = TaskGoal(description="Something unrelated", intent="brainstorm")
        result = retrieve_exemplars(goal, "VisualWriter", exemplar_kb)
        assert [ex.id for ex in result] == ["p1"]

    @pytest.mark.unit
    def test_unique_and_capped(self, exemplar_kb):
        goal = TaskGoal(description="draft, sketch, outline, compose", intent="write")
        result = retrieve_exemplars(goal, "LinearWriter", exemplar_kb)
        ids = [ex.id for ex in result]
        assert len(ids) == 3
        assert len(set(ids)) == 3
        assert ids[:2] == ["i1", "i2"]

    @pytest.mark.unit
    def test_no_matches(self, exemplar_kb):
        goal = TaskGoal(description="nothing here", intent="brainstorm")
        assert retrieve_exemplars(goal, "ResearchWriter", exemplar_kb) == []

    @pytest.mark.unit
    def test_bundled_tables(self):
        goal = TaskGoal(description="Brainstorm thesis ideas", intent="brainstorm")
        result = retrieve_exemplars(goal, "VisualWriter")
        assert 1 <= len(result) <= 3
        assert result[0].intent == "brainstorm"


class TestRetrievePatterns:
    """Tests for pattern selection."""

    @pytest.mark.unit
    def test_fit_by_persona_or_intent(self):
        kb = KnowledgeBase(
            patterns=(
                _pattern("a", persona_fit=["LinearWriter"]),
                _pattern("b", intent_fit=["review"]),
                _pattern("c", persona_fit=["VisualWriter"]),
            )
        )
        assert [p.id for p in retrieve_patterns("VisualWriter", "review", kb)] == ["b", "c"]

    @pytest.mark.unit
    def test_capped_at_two(self):
        kb = KnowledgeBase(patterns=tuple(_pattern(f"p{i}", intent_fit=["write"]) for i in range(4)))
        assert len(retrieve_patterns("LinearWriter", "write", kb)) == 2

    @pytest.mark.unit
    def test_visual_fallback(self):
        kb = KnowledgeBase(
            patterns=(
                _pattern("editor-basic"),
                _pattern("kanban-board"),
                _pattern("mindmap-canvas"),
            )
        )
        result = retrieve_patterns("VisualWriter", "write", kb)
        assert [p.id for p in result] == ["kanban-board", "mindmap-canvas"]

    @pytest.mark.unit
    def test_research_fallback(self):
        kb = KnowledgeBase(patterns=(_pattern("editor-basic"), _pattern("synthesis-grid")))
        assert [p.id for p in retrieve_patterns("ResearchWriter", "write", kb)] == ["synthesis-grid"]

    @pytest.mark.unit
    def test_default_fallback(self):
        kb = KnowledgeBase(
            patterns=(
                _pattern("kanban-board"),
                _pattern("outline-sidebar"),
                _pattern("editor-basic"),
                _pattern("editor-wide"),
            )
        )
        result = retrieve_patterns("LinearWriter", "write", kb)
        assert [p.id for p in result] == ["outline-sidebar", "editor-basic"]

    @pytest.mark.unit
    def test_empty_table(self):
        assert retrieve_patterns("VisualWriter", "write", KnowledgeBase()) == []


class TestRetrieveTraceSnippet:
    """Tests for trace selection."""

    @pytest.mark.unit
    def test_first_match(self):
        kb = KnowledgeBase(
            traces=(
                _trace("t0", "LinearWriter", "write"),
                _trace("t1", "VisualWriter", "review"),
                _trace("t2", "ResearchWriter", "brainstorm"),
            )
        )
        assert retrieve_trace_snippet("ResearchWriter", "brainstorm", kb).id == "t2"
        assert retrieve_trace_snippet("VisualWriter", "brainstorm", kb).id == "t1"

    @pytest.mark.unit
    def test_falls_back_to_first(self):
        kb = KnowledgeBase(traces=(_trace("t0", "LinearWriter", "write"),))
        assert retrieve_trace_snippet("VisualWriter", "research", kb).id == "t0"

    @pytest.mark.unit
    def test_empty_table(self):
        assert retrieve_trace_snippet("VisualWriter", "write", KnowledgeBase()) is None


class TestRetrieveContext:
    """Tests for the combined bundle."""

    @pytest.mark.unit
    def test_bundle_from_bundled_tables(self):
        goal = TaskGoal(description="Help me brainstorm thesis ideas", intent="brainstorm")
        bundle = retrieve_context(goal, UserProfile(persona="VisualWriter"))
        assert bundle.persona.name == "VisualWriter"
        assert len(bundle.patterns) <= 2
        context = bundle.to_retrieved_context()
        assert context.persona_traits == bundle.persona.history_snippets
        assert context.matched_patterns == [p.name for p in bundle.patterns]
        assert context.behavior_insights == [bundle.trace.cognitive_insight]

    @pytest.mark.unit
    def test_empty_bundle_context(self):
        context = RetrievalBundle(persona=None).to_retrieved_context()
        assert context.persona_traits == []
        assert context.matched_patterns == []
        assert context.behavior_insights == []

    @pytest.mark.unit
    def test_uses_given_knowledge_base(self):
        goal = TaskGoal(description="x", intent="write")
        bundle = retrieve_context(goal, UserProfile(), KnowledgeBase())
        assert bundle.persona is None
        assert load_knowledge_base().personas
