"""
Hint/Question Gate

Ordered guard chain in front of the AI provider. The first failed guard
short-circuits to a rule-based answer:

    eligibility -> action relevance (hints) -> rate limit -> cache -> credentials

Only when every guard passes is the request counted against the rate limit
and sent to the provider. Any error from that point on becomes a
"rule-fallback" hint (or None for questions); nothing is raised to the caller.
"""

import time
import logging
from typing import Callable, Optional

from adaptive_geometry_tutor.ai_adapter import AIAdapter
from adaptive_geometry_tutor.ai_providers import build_hint_providers, build_question_provider
from adaptive_geometry_tutor.config import TutorConfig
from adaptive_geometry_tutor.rate_limiter import RateLimiter
from adaptive_geometry_tutor.response_cache import ResponseCache, hint_cache_key, question_cache_key
from adaptive_geometry_tutor.rule_hints import get_rule_based_hint
from adaptive_geometry_tutor.schemas import (
    GeneratedQuestion,
    HintRequest,
    HintResponse,
    QuestionGenerationRequest,
)

logger = logging.getLogger(__name__)

HINT_MIN_WRONG_STREAK = 2
AI_QUESTION_MIN_DIFFICULTY = 4


class HintGate:
    """Guards AI hint and question generation behind eligibility, quota and cache checks."""

    def __init__(
        self,
        config: TutorConfig,
        ai_adapter: AIAdapter,
        hint_limiter: RateLimiter,
        question_limiter: RateLimiter,
        hint_cache: ResponseCache,
        question_cache: ResponseCache,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.ai = ai_adapter
        self.hint_limiter = hint_limiter
        self.question_limiter = question_limiter
        self.hint_cache = hint_cache
        self.question_cache = question_cache
        self._clock = clock

    @classmethod
    def from_config(cls, config: Optional[TutorConfig] = None) -> "HintGate":
        """Wire providers, limiters and caches from configuration."""
        config = config or TutorConfig.from_env()
        adapter = AIAdapter(
            hint_providers=build_hint_providers(config),
            question_providers=build_question_provider(config),
        )
        return cls(
            config=config,
            ai_adapter=adapter,
            hint_limiter=RateLimiter(config.hint_daily_limit, config.hint_per_minute_limit, name="hints"),
            question_limiter=RateLimiter(
                config.question_daily_limit, config.question_per_minute_limit, name="questions"
            ),
            hint_cache=ResponseCache(
                ttl_hours=config.hint_cache_ttl_hours,
                max_size=config.hint_cache_max_size,
                name="hints",
            ),
            question_cache=ResponseCache(ttl_hours=config.question_cache_ttl_hours, name="questions"),
        )

    def _rule_hint(self, request: HintRequest, source: str, reason: str) -> HintResponse:
        return HintResponse(
            hint=get_rule_based_hint(request.topic, request.representation_type),
            source=source,
            reason=reason,
        )

    async def generate_hint(self, request: HintRequest) -> HintResponse:
        """Hint for a struggling student; always returns a hint."""
        # Guard 1: eligibility
        if request.wrong_streak < HINT_MIN_WRONG_STREAK:
            return self._rule_hint(
                request, "rule",
                f"Wrong streak {request.wrong_streak} below AI threshold ({HINT_MIN_WRONG_STREAK})",
            )

        # Guard 2: action relevance
        if request.current_action not in self.config.hint_ai_actions:
            return self._rule_hint(
                request, "rule", f"Action '{request.current_action}' does not call for an AI hint"
            )

        # Guard 3: rate limit
        decision = self.hint_limiter.check()
        if not decision.allowed:
            logger.warning(f"⚠️ [HintGate] Rate limit: {decision.reason}")
            return self._rule_hint(request, "rule", f"Rate limit: {decision.reason}")

        # Guard 4: cache
        cache_key = hint_cache_key(request.topic, request.representation_type, request.question_text)
        cached = self.hint_cache.get(cache_key)
        if cached is not None:
            logger.info("[HintGate] Cache HIT")
            return HintResponse(hint=cached, source="ai-cached", reason="Cache hit")

        # Guard 5: credentials
        if not self.ai.hint_providers:
            return self._rule_hint(request, "rule", "No AI provider configured")

        self.hint_limiter.record()
        try:
            hint = await self.ai.generate_hint(request)
        except Exception as e:
            logger.error(f"❌ [HintGate] AI hint failed: {e}")
            return self._rule_hint(request, "rule-fallback", f"AI error: {e}")

        if not hint:
            return self._rule_hint(request, "rule-fallback", "AI returned no hint")

        self.hint_cache.put(cache_key, hint, metadata={"topic": request.topic})
        return HintResponse(
            hint=hint,
            source="ai",
            reason=f"Generated by {self.ai.hint_providers.last_provider}",
        )

    async def generate_question(self, request: QuestionGenerationRequest) -> Optional[GeneratedQuestion]:
        """
        AI question for difficulty 4-5.

        Returns:
            GeneratedQuestion (source "ai" or "ai-cached"), or None when the
            caller should use a template question instead
        """
        if request.difficulty_level < AI_QUESTION_MIN_DIFFICULTY:
            logger.debug(f"[HintGate] Difficulty {request.difficulty_level} uses templates")
            return None

        decision = self.question_limiter.check()
        if not decision.allowed:
            logger.warning(f"⚠️ [HintGate] Question rate limit: {decision.reason}")
            return None

        token = None if self.config.stable_question_cache_keys else str(int(self._clock() * 1000))
        cache_key = question_cache_key(request.topic, request.difficulty_level, request.cognitive_domain, token)
        cached = self.question_cache.get(cache_key)
        if cached is not None and cached.id not in request.exclude_ids:
            logger.info("[HintGate] Question cache HIT")
            return cached.model_copy(update={"source": "ai-cached"}, deep=True)

        if not self.ai.question_providers:
            logger.debug("[HintGate] No AI provider configured for questions")
            return None

        self.question_limiter.record()
        try:
            question = await self.ai.generate_question(request)
        except Exception as e:
            logger.error(f"❌ [HintGate] AI question failed: {e}")
            return None

        if question is None:
            return None

        # Callers get their own copy; the cached instance is never handed out
        self.question_cache.put(cache_key, question.model_copy(deep=True), metadata={"topic": request.topic})
        return question

    def get_usage(self) -> dict:
        return {
            "hints": {
                "rate_limit": self.hint_limiter.status(),
                "cache": self.hint_cache.get_stats(),
            },
            "questions": {
                "rate_limit": self.question_limiter.status(),
                "cache": self.question_cache.get_stats(),
            },
        }
