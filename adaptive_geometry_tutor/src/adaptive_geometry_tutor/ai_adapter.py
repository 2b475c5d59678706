"""
AI Provider Adapter

Prompt -> provider -> parse -> validate, for hints and generated questions.
Provider errors propagate as AIProviderError; parse and validation failures
come back as None so the caller can fall back.
"""

import time
import uuid
import logging
from typing import Optional

from adaptive_geometry_tutor.ai_providers import ProviderChain
from adaptive_geometry_tutor.prompts import (
    HINT_SYSTEM_PROMPT,
    QUESTION_SYSTEM_PROMPT,
    build_hint_prompt,
    build_question_prompt,
)
from adaptive_geometry_tutor.question_parser import QuestionResponseParser
from adaptive_geometry_tutor.question_validator import QuestionValidator
from adaptive_geometry_tutor.schemas import GeneratedQuestion, HintRequest, QuestionGenerationRequest

logger = logging.getLogger(__name__)


class AIAdapter:
    HINT_TEMPERATURE = 0.7
    HINT_MAX_TOKENS = 100
    QUESTION_TEMPERATURE = 0.7
    QUESTION_MAX_TOKENS = 1000

    def __init__(
        self,
        hint_providers: ProviderChain,
        question_providers: ProviderChain,
        parser: Optional[QuestionResponseParser] = None,
        validator: Optional[QuestionValidator] = None,
    ):
        self.hint_providers = hint_providers
        self.question_providers = question_providers
        self.parser = parser or QuestionResponseParser()
        self.validator = validator or QuestionValidator()

    async def generate_hint(self, request: HintRequest) -> Optional[str]:
        prompt = build_hint_prompt(
            question_text=request.question_text,
            topic=request.topic,
            difficulty_level=request.difficulty_level,
            representation_type=request.representation_type,
            wrong_streak=request.wrong_streak,
            mastery_level=request.mastery_level,
            unlocked_concepts=request.unlocked_concepts,
        )
        hint = await self.hint_providers.complete(
            prompt,
            system_prompt=HINT_SYSTEM_PROMPT,
            temperature=self.HINT_TEMPERATURE,
            max_tokens=self.HINT_MAX_TOKENS,
        )
        logger.info(f"💡 [AIAdapter] Hint generated by {self.hint_providers.last_provider}")
        return hint or None

    async def generate_question(self, request: QuestionGenerationRequest) -> Optional[GeneratedQuestion]:
        """
        Ask the question provider for a question and keep it only if it validates.

        Returns:
            GeneratedQuestion with id/source/metadata filled in, or None
        """
        prompt = build_question_prompt(
            topic=request.topic,
            difficulty_level=request.difficulty_level,
            cognitive_domain=request.cognitive_domain,
            topic_filter=request.topic_filter,
        )
        text = await self.question_providers.complete(
            prompt,
            system_prompt=QUESTION_SYSTEM_PROMPT,
            temperature=self.QUESTION_TEMPERATURE,
            max_tokens=self.QUESTION_MAX_TOKENS,
        )

        question = self.parser.parse(text)
        if question is None:
            return None

        result = self.validator.validate(question)
        if not result.valid:
            return None

        question.id = f"ai_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"
        question.source = "ai"
        question.difficulty_level = request.difficulty_level
        question.metadata = {
            "topic": request.topic,
            "cognitive_domain": request.cognitive_domain,
            "provider": self.question_providers.last_provider,
        }
        logger.info(f"✅ [AIAdapter] Generated question {question.id}")
        return question
