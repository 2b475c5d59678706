"""
Unit Tests for the AI Adapter (prompt -> provider -> parse -> validate)
"""

import json
import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "adaptive_geometry_tutor", "src"))

from adaptive_geometry_tutor.ai_adapter import AIAdapter
from adaptive_geometry_tutor.ai_providers import AIProvider, AIProviderError, ProviderChain
from adaptive_geometry_tutor.schemas import HintRequest, QuestionGenerationRequest


def question_payload(correct_text="20 cm²", duplicate=False):
    texts = ["9 cm²", correct_text, "18 cm²", "9 cm²" if duplicate else "40 cm²"]
    return json.dumps({
        "questionText": "A rectangle is 4 cm wide and 5 cm long. What is its area?",
        "options": [
            {"label": label, "text": text, "correct": label == "B"}
            for label, text in zip("ABCD", texts)
        ],
        "correctAnswer": "B",
        "hint": "Multiply length by width.",
    })


class RecordingProvider(AIProvider):
    def __init__(self, text, name="groq"):
        self.name = name
        self.text = text
        self.calls = []

    async def complete(self, prompt, system_prompt=None, temperature=0.7, max_tokens=1000):
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens})
        if isinstance(self.text, Exception):
            raise self.text
        return self.text


def make_adapter(hint_text=None, question_text=None):
    hint_provider = RecordingProvider(hint_text)
    question_provider = RecordingProvider(question_text)
    adapter = AIAdapter(ProviderChain([hint_provider]), ProviderChain([question_provider]))
    return adapter, hint_provider, question_provider


class TestAIAdapter:
    """Test suite for AIAdapter."""

    @pytest.mark.asyncio
    async def test_hint_uses_short_completion(self):
        adapter, hint_provider, _ = make_adapter(hint_text="Count the squares inside.")

        hint = await adapter.generate_hint(
            HintRequest(question_text="Area of 3x3?", topic="Area", wrong_streak=2)
        )

        assert hint == "Count the squares inside."
        assert hint_provider.calls[0]["max_tokens"] == AIAdapter.HINT_MAX_TOKENS
        assert "Area of 3x3?" in hint_provider.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_valid_question_is_stamped(self):
        adapter, _, question_provider = make_adapter(question_text=question_payload())

        question = await adapter.generate_question(
            QuestionGenerationRequest(topic="Area", difficulty_level=4, cognitive_domain="procedural_skills")
        )

        assert question is not None
        assert question.id.startswith("ai_")
        assert question.source == "ai"
        assert question.difficulty_level == 4
        assert question.metadata == {
            "topic": "Area",
            "cognitive_domain": "procedural_skills",
            "provider": "groq",
        }
        assert question_provider.calls[0]["max_tokens"] == AIAdapter.QUESTION_MAX_TOKENS

    @pytest.mark.asyncio
    async def test_wrong_arithmetic_is_rejected(self):
        adapter, _, _ = make_adapter(question_text=question_payload(correct_text="25 cm²"))

        assert await adapter.generate_question(
            QuestionGenerationRequest(topic="Area", difficulty_level=4)
        ) is None

    @pytest.mark.asyncio
    async def test_duplicate_options_are_rejected(self):
        adapter, _, _ = make_adapter(question_text=question_payload(duplicate=True))

        assert await adapter.generate_question(
            QuestionGenerationRequest(topic="Area", difficulty_level=4)
        ) is None

    @pytest.mark.asyncio
    async def test_unparseable_text_returns_none(self):
        adapter, _, _ = make_adapter(question_text="Sorry, I cannot help with that.")

        assert await adapter.generate_question(
            QuestionGenerationRequest(topic="Area", difficulty_level=5)
        ) is None

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self):
        adapter, _, _ = make_adapter(hint_text=AIProviderError("quota", provider="groq"))

        with pytest.raises(AIProviderError):
            await adapter.generate_hint(HintRequest(question_text="Q", topic="Area", wrong_streak=2))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
