"""
Tutor Configuration

Environment-driven settings for AI providers, quotas and caches.
Missing credentials are never an error: the engine degrades to rule-based hints
and template questions.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("groq", "gemini", "none")

DEFAULT_HINT_AI_ACTIONS = (
    "give_hint_then_retry",
    "repeat_same_concept_different_representation",
    "switch_to_visual_example",
    "switch_to_real_world_context",
)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"⚠️ [Config] Invalid integer for {name}={raw!r}, using default {default}")
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"⚠️ [Config] Invalid number for {name}={raw!r}, using default {default}")
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class TutorConfig:
    """Settings for the adaptive tutoring engine."""
    hint_provider: str = "groq"
    groq_api_key: Optional[str] = None
    groq_model: str = "llama-3.1-8b-instant"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash-lite"

    # Quotas
    hint_daily_limit: int = 1000
    hint_per_minute_limit: int = 15
    question_daily_limit: int = 14000  # buffer below Groq's 14.4K RPD
    question_per_minute_limit: int = 25  # buffer below Groq's 30 RPM

    # Caches
    hint_cache_ttl_hours: float = 24
    hint_cache_max_size: int = 500
    question_cache_ttl_hours: float = 1
    stable_question_cache_keys: bool = False

    hint_ai_actions: Tuple[str, ...] = field(default=DEFAULT_HINT_AI_ACTIONS)

    def __post_init__(self):
        self.hint_provider = (self.hint_provider or "groq").strip().lower()
        if self.hint_provider not in SUPPORTED_PROVIDERS:
            logger.warning(f"⚠️ [Config] Unknown HINT_AI_PROVIDER '{self.hint_provider}', using 'groq'")
            self.hint_provider = "groq"

    @classmethod
    def from_env(cls) -> "TutorConfig":
        """Build configuration from environment variables (and .env)."""
        actions_raw = os.getenv("HINT_AI_ACTIONS")
        if actions_raw:
            hint_ai_actions = tuple(a.strip() for a in actions_raw.split(",") if a.strip())
        else:
            hint_ai_actions = DEFAULT_HINT_AI_ACTIONS

        return cls(
            hint_provider=os.getenv("HINT_AI_PROVIDER", "groq"),
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            groq_model=os.getenv("GROQ_MODEL", "llama-3.1-8b-instant"),
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("AI_MODEL", "gemini-2.5-flash-lite"),
            hint_daily_limit=_int_env("HINT_DAILY_LIMIT", 1000),
            hint_per_minute_limit=_int_env("HINT_PER_MINUTE_LIMIT", 15),
            question_daily_limit=_int_env("QUESTION_DAILY_LIMIT", 14000),
            question_per_minute_limit=_int_env("QUESTION_PER_MINUTE_LIMIT", 25),
            hint_cache_ttl_hours=_float_env("HINT_CACHE_TTL_HOURS", 24),
            hint_cache_max_size=_int_env("HINT_CACHE_MAX_SIZE", 500),
            question_cache_ttl_hours=_float_env("QUESTION_CACHE_TTL_HOURS", 1),
            stable_question_cache_keys=_bool_env("QUESTION_CACHE_STABLE_KEYS", False),
            hint_ai_actions=hint_ai_actions,
        )

    @property
    def has_ai_credentials(self) -> bool:
        return bool(self.groq_api_key or self.gemini_api_key)

    def describe(self) -> Dict[str, Any]:
        """Summary for startup logs (never includes secrets)."""
        return {
            "provider": self.hint_provider,
            "groq_model": self.groq_model,
            "gemini_model": self.gemini_model,
            "has_groq_key": bool(self.groq_api_key),
            "has_gemini_key": bool(self.gemini_api_key),
            "hint_limits": f"{self.hint_daily_limit}/day, {self.hint_per_minute_limit}/min",
            "question_limits": f"{self.question_daily_limit}/day, {self.question_per_minute_limit}/min",
        }
