"""
Unit tests for config/settings.py - Settings validation
"""
from pathlib import Path

import pytest

from config.settings import Settings, TargetConfig


def valid_settings(**overrides):
    values = dict(targets=["de:docs/de"], llm_provider="openai")
    values.update(overrides)
    return Settings(**values)


class TestParsedTargets:

    def test_parse(self):
        settings = valid_settings(targets=["de:docs/de", " fr : out/fr "])
        assert settings.parsed_targets() == [
            TargetConfig("de", Path("docs/de")),
            TargetConfig("fr", Path("out/fr")),
        ]

    @pytest.mark.parametrize("entry", ["de", ":docs/de", "de:", "  :  "])
    def test_invalid_entries(self, entry):
        with pytest.raises(ValueError, match="Invalid target"):
            valid_settings(targets=[entry]).parsed_targets()


class TestValidateForTranslation:
    """Test rejection of unusable settings."""

    def test_valid(self):
        valid_settings().validate_for_translation()

    def test_claude_alias_accepted(self):
        valid_settings(llm_provider="claude").validate_for_translation()

    @pytest.mark.parametrize("overrides", [
        {"llm_provider": "gemini"},
        {"parallelism": 0},
        {"limit": -1},
        {"chunk_target_size": 0},
        {"chunk_tolerance": 0.0},
        {"chunk_tolerance": 1.0},
        {"targets": []},
        {"targets": ["broken"]},
    ])
    def test_invalid(self, overrides):
        with pytest.raises(ValueError):
            valid_settings(**overrides).validate_for_translation()

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "gpt-4.1")
        monkeypatch.setenv("PARALLELISM", "8")
        settings = Settings()
        assert settings.llm_model == "gpt-4.1"
        assert settings.parallelism == 8
