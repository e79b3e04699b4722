"""Tests for the cultural knowledge base: defaults, immutability, overrides and load errors."""

import json
import pytest
from dataclasses import FrozenInstanceError
from unittest.mock import patch

import knowledge_base
from exceptions import ConfigurationError
from knowledge_base import (
    ALL_INDIA,
    DEFAULT_KB_VERSION,
    GENERATIONS,
    REQUIRED_LEXICONS,
    build_knowledge_base,
    load_knowledge_base,
)


class TestBuiltInTables:

    def test_version_is_builtin(self, kb):
        assert kb.version == DEFAULT_KB_VERSION

    def test_all_required_lexicons_present(self, kb):
        for name in REQUIRED_LEXICONS:
            assert len(kb.lexicon(name)) > 0, name

    def test_generation_profiles_complete(self, kb):
        assert set(kb.generation_profiles) == set(GENERATIONS)
        assert kb.generation_profiles["gen-z"].digital_savviness == 95
        assert kb.generation_profiles["boomer"].digital_savviness == 45

    def test_festival_values_in_range(self, kb):
        for festival in kb.festivals:
            assert 0 <= festival.importance <= 1
            assert 0 <= festival.sentiment_boost <= 1
            assert festival.applicable_months <= set(range(1, 13))

    def test_diwali_entry(self, kb):
        diwali = next(f for f in kb.festivals if f.name == "Diwali")
        assert diwali.importance == 0.9
        assert diwali.applicable_months == frozenset({10, 11})

    def test_scenario_d_religious_term(self, kb):
        topic = next(t for t in kb.sensitive_topics if t.term == "hindu muslim")
        assert topic.risk_weight == 25
        assert topic.category == "religious"

    def test_unknown_lexicon_raises(self, kb):
        with pytest.raises(ConfigurationError):
            kb.lexicon("does_not_exist")

    def test_script_lookup(self, kb):
        assert kb.script_for_language("Hindi").script == "devanagari"
        assert kb.script_for_language("Klingon") is None

    def test_topics_in_category(self, kb):
        political = kb.topics_in_category("political")
        assert political
        assert all(t.category == "political" for t in political)


class TestImmutability:

    def test_snapshot_fields_frozen(self, kb):
        with pytest.raises(FrozenInstanceError):
            kb.version = "changed"

    def test_lexicon_table_read_only(self, kb):
        with pytest.raises(TypeError):
            kb.lexicons["viral"] = ("nope",)

    def test_festival_entry_frozen(self, kb):
        with pytest.raises(FrozenInstanceError):
            kb.festivals[0].importance = 0.1


class TestRegionMarkers:

    def test_known_region(self, kb):
        terms = [m.term for m in kb.markers_for_region("South India")]
        assert "anna" in terms
        assert "bhai" not in terms

    def test_all_india_is_union_without_duplicates(self, kb):
        terms = [m.term for m in kb.markers_for_region(ALL_INDIA)]
        assert "anna" in terms
        assert "bhai" in terms
        assert len(terms) == len(set(terms))

    def test_unknown_region_is_empty(self, kb):
        assert kb.markers_for_region("Atlantis") == ()


class TestBuildOverrides:

    def test_lexicon_override_merges_per_lexicon(self):
        kb = build_knowledge_base({"lexicons": {"viral": ["FOMO"]}})
        assert kb.lexicon("viral") == ("fomo",)
        assert "amazing" in kb.lexicon("cultural_positive")

    def test_festival_month_out_of_range(self):
        bad = [{"name": "Test", "months": [13], "importance": 0.5, "sentiment_boost": 0.5}]
        with pytest.raises(ConfigurationError):
            build_knowledge_base({"festivals": bad})

    def test_festival_importance_out_of_range(self):
        bad = [{"name": "Test", "months": [1], "importance": 9, "sentiment_boost": 0.5}]
        with pytest.raises(ConfigurationError):
            build_knowledge_base({"festivals": bad})

    def test_festival_missing_field(self):
        with pytest.raises(ConfigurationError):
            build_knowledge_base({"festivals": [{"name": "Test", "months": [1]}]})

    def test_negative_risk_weight(self):
        bad = [{"term": "x", "risk_weight": -1, "category": "social", "description": "d"}]
        with pytest.raises(ConfigurationError):
            build_knowledge_base({"sensitive_topics": bad})

    def test_unknown_topic_category(self):
        bad = [{"term": "x", "risk_weight": 5, "category": "sports", "description": "d"}]
        with pytest.raises(ConfigurationError):
            build_knowledge_base({"sensitive_topics": bad})

    def test_missing_generation_profile(self):
        profiles = {"gen-z": {
            "communication_style": "s", "value_system": [], "digital_savviness": 90,
            "consumption_pattern": "c",
        }}
        with pytest.raises(ConfigurationError):
            build_knowledge_base({"generation_profiles": profiles})

    def test_malformed_regional_markers(self):
        with pytest.raises(ConfigurationError):
            build_knowledge_base({"regional_markers": {"North India": [{"term": "bhai"}]}})

    @pytest.mark.parametrize("overrides", [
        {"lexicons": ["viral", "trending"]},
        {"lexicons": {"viral": "viral"}},
        {"lexicons": {"viral": [1, 2]}},
        {"romanized_lexicons": ["yaar", "bhai"]},
        {"romanized_lexicons": {"Hindi": 5}},
        {"dialect_markers": {"North India": ["thare"]}},
        {"dialect_markers": []},
    ])
    def test_malformed_term_tables(self, overrides):
        with pytest.raises(ConfigurationError):
            build_knowledge_base(overrides)

    def test_romanized_override_lowercased(self):
        kb = build_knowledge_base({"romanized_lexicons": {"Hindi": ["Yaar", "BHAI"]}})
        assert kb.romanized_lexicons["Hindi"] == frozenset({"yaar", "bhai"})


class TestLoadFromDirectory:

    def test_manifest_and_festival_override(self, tmp_path):
        (tmp_path / "manifest.json").write_text(json.dumps({"version": "2026.11-test"}))
        (tmp_path / "festivals.json").write_text(json.dumps([
            {"name": "Lohri", "months": [1], "importance": 0.6, "sentiment_boost": 0.5},
        ]))

        kb = load_knowledge_base(tmp_path)

        assert kb.version == "2026.11-test"
        assert [f.name for f in kb.festivals] == ["Lohri"]
        # Tables without an override file keep the built-in values
        assert kb.sensitive_topics == build_knowledge_base().sensitive_topics

    def test_empty_directory_uses_builtin(self, tmp_path):
        kb = load_knowledge_base(tmp_path)
        assert kb.version == DEFAULT_KB_VERSION

    def test_explicit_missing_directory_raises(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_knowledge_base(tmp_path / "nope")

    def test_default_directory_absent_falls_back(self, tmp_path):
        with patch.object(knowledge_base, "DEFAULT_KB_PATH", tmp_path / "nope"):
            kb = load_knowledge_base()
        assert kb.version == DEFAULT_KB_VERSION

    def test_malformed_json_raises(self, tmp_path):
        (tmp_path / "lexicons.json").write_text("{not json")
        with pytest.raises(ConfigurationError) as exc_info:
            load_knowledge_base(tmp_path)
        assert exc_info.value.context["path"].endswith("lexicons.json")

    def test_manifest_must_be_object(self, tmp_path):
        (tmp_path / "manifest.json").write_text(json.dumps(["2026.11-test"]))
        with pytest.raises(ConfigurationError):
            load_knowledge_base(tmp_path)

    def test_string_lexicon_file_rejected(self, tmp_path):
        (tmp_path / "lexicons.json").write_text(json.dumps({"viral": "viral"}))
        with pytest.raises(ConfigurationError):
            load_knowledge_base(tmp_path)
