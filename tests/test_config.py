"""Tests for settings, engine calibration and the model registry."""

import pytest
from pydantic import ValidationError

from crossmodel.config import EngineConfig, Settings
from crossmodel.results.registry import ModelDescriptor, ModelRegistry


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.conflict_high_confidence_threshold == 0.8
        assert config.confidence_spread_medium == 0.3
        assert config.low_similarity_threshold == 25.0
        assert config.max_common_findings is None

    def test_rejects_out_of_range_threshold(self):
        with pytest.raises(ValidationError):
            EngineConfig(conflict_high_confidence_threshold=1.5)

    def test_settings_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("CROSSMODEL_CONFIDENCE_SPREAD_MEDIUM", "0.45")
        monkeypatch.setenv("CROSSMODEL_LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)
        assert settings.log_level == "DEBUG"

        config = EngineConfig.from_settings(settings)
        assert config.confidence_spread_medium == 0.45
        assert config.conflict_high_confidence_threshold == 0.8


class TestModelRegistry:
    def test_default_models(self):
        registry = ModelRegistry()

        assert registry.ids() == ["gpt-4", "claude-3", "gemini-pro"]
        assert "claude-3" in registry
        assert registry.display_name("gemini-pro") == "Gemini Pro"
        assert registry.display_name("llama-3") == "llama-3"

    def test_from_config(self):
        registry = ModelRegistry.from_config(
            [{"id": "llama-3", "displayName": "Llama 3"}, {"id": "mistral", "display_name": "Mistral"}]
        )

        assert len(registry) == 2
        assert registry.get("llama-3").icon == "🤖"
        assert registry.display_name("mistral") == "Mistral"

    def test_duplicate_ids_are_rejected(self):
        descriptor = ModelDescriptor(id="gpt-4", display_name="GPT-4")
        with pytest.raises(ValueError):
            ModelRegistry([descriptor, descriptor])

    def test_register_replaces_descriptor(self):
        registry = ModelRegistry()
        registry.register(ModelDescriptor(id="gpt-4", display_name="GPT-4 Turbo"))

        assert len(registry) == 3
        assert registry.display_name("gpt-4") == "GPT-4 Turbo"
