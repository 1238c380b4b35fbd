"""Tests for knowledge table loading."""

import json

import pytest

from genui.schema import EVALUATION_FACTORS, ComponentType, Persona

from .lib import (
    KnowledgeBase,
    clear_knowledge_cache,
    load_knowledge_base,
    read_knowledge_base,
)


class TestBundledTables:
    """Tests against the tables shipped with the package."""

    @pytest.mark.unit
    def test_all_tables_present(self):
        kb = load_knowledge_base()
        assert kb.personas and kb.exemplars and kb.patterns and kb.traces
        assert kb.rubric is not None

    @pytest.mark.unit
    def test_every_persona_has_a_record(self):
        kb = load_knowledge_base()
        names = {p.name for p in kb.personas}
        assert names == {p.value for p in Persona}

    @pytest.mark.unit
    def test_components_use_vocabulary(self):
        """Exemplars and patterns only name real component types."""
        kb = load_knowledge_base()
        vocabulary = {ct.value for ct in ComponentType}
        for exemplar in kb.exemplars:
            assert set(exemplar.expected_components) <= vocabulary
        for pattern in kb.patterns:
            assert set(pattern.components) <= vocabulary

    @pytest.mark.unit
    def test_rubric_covers_factors(self):
        kb = load_knowledge_base()
        assert set(kb.rubric["factors"]) == set(EVALUATION_FACTORS)
        for factor, subs in EVALUATION_FACTORS.items():
            assert set(kb.rubric["factors"][factor]["subCriteria"]) == set(subs)

    @pytest.mark.unit
    def test_cached(self):
        assert load_knowledge_base() is load_knowledge_base()

    @pytest.mark.unit
    def test_record_to_dict_uses_camel_case(self):
        persona = load_knowledge_base().personas[0]
        data = persona.to_dict()
        assert "cognitiveStyle" in data
        assert "showMinimap" in data["preferences"]


class TestCustomDirectory:
    """Tests for loading from other directories."""

    @pytest.mark.unit
    def test_missing_files_give_empty_tables(self, tmp_path):
        kb = read_knowledge_base(tmp_path)
        assert kb == KnowledgeBase()
        assert kb.rubric_json == "{}"

    @pytest.mark.unit
    def test_env_override(self, tmp_path, monkeypatch):
        traces = [
            {
                "id": "t1",
                "task": "Notes",
                "personaHint": "LinearWriter",
                "intent": "write",
                "patterns": [],
                "cognitiveInsight": "Insight",
            }
        ]
        (tmp_path / "writing_traces.json").write_text(json.dumps(traces))
        monkeypatch.setenv("GENUI_KNOWLEDGE_DIR", str(tmp_path))
        clear_knowledge_cache()
        try:
            kb = load_knowledge_base()
            assert [t.id for t in kb.traces] == ["t1"]
            assert kb.personas == ()
        finally:
            clear_knowledge_cache()

    @pytest.mark.unit
    def test_malformed_records_raise(self, tmp_path):
        (tmp_path / "personas.json").write_text(json.dumps([{"id": "x"}]))
        with pytest.raises(ValueError):
            read_knowledge_base(tmp_path)
