"""
Unit Tests for Tutor Configuration
"""

import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "adaptive_geometry_tutor", "src"))

from adaptive_geometry_tutor.config import DEFAULT_HINT_AI_ACTIONS, TutorConfig

ENV_KEYS = (
    "HINT_AI_PROVIDER", "GROQ_API_KEY", "GROQ_MODEL", "GEMINI_API_KEY", "AI_MODEL",
    "HINT_DAILY_LIMIT", "HINT_PER_MINUTE_LIMIT", "QUESTION_DAILY_LIMIT", "QUESTION_PER_MINUTE_LIMIT",
    "HINT_CACHE_TTL_HOURS", "HINT_CACHE_MAX_SIZE", "QUESTION_CACHE_TTL_HOURS",
    "QUESTION_CACHE_STABLE_KEYS", "HINT_AI_ACTIONS",
)


class TestTutorConfig:
    """Test suite for TutorConfig."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for key in ENV_KEYS:
            monkeypatch.delenv(key, raising=False)

    def test_defaults(self):
        config = TutorConfig.from_env()

        assert config.hint_provider == "groq"
        assert config.hint_per_minute_limit == 15
        assert config.question_daily_limit == 14000
        assert config.question_per_minute_limit == 25
        assert config.hint_cache_max_size == 500
        assert config.stable_question_cache_keys is False
        assert config.hint_ai_actions == DEFAULT_HINT_AI_ACTIONS
        assert config.has_ai_credentials is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("HINT_AI_PROVIDER", "Gemini")
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        monkeypatch.setenv("AI_MODEL", "gemini-test")
        monkeypatch.setenv("HINT_PER_MINUTE_LIMIT", "5")
        monkeypatch.setenv("QUESTION_CACHE_STABLE_KEYS", "true")
        monkeypatch.setenv("HINT_AI_ACTIONS", "give_hint_then_retry, switch_to_visual_example")

        config = TutorConfig.from_env()

        assert config.hint_provider == "gemini"
        assert config.gemini_model == "gemini-test"
        assert config.hint_per_minute_limit == 5
        assert config.stable_question_cache_keys is True
        assert config.hint_ai_actions == ("give_hint_then_retry", "switch_to_visual_example")
        assert config.has_ai_credentials is True

    def test_malformed_number_uses_default(self, monkeypatch):
        monkeypatch.setenv("HINT_DAILY_LIMIT", "lots")

        assert TutorConfig.from_env().hint_daily_limit == 1000

    def test_unknown_provider_falls_back_to_groq(self):
        assert TutorConfig(hint_provider="mystery").hint_provider == "groq"

    def test_describe_hides_secrets(self):
        config = TutorConfig(groq_api_key="super-secret")

        summary = config.describe()

        assert summary["has_groq_key"] is True
        assert "super-secret" not in str(summary)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
