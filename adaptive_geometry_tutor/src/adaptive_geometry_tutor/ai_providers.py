"""
AI Providers

Interchangeable chat-completion providers behind one interface. Groq and
Gemini both expose OpenAI-compatible endpoints, so a single AsyncOpenAI-based
adapter serves both with a different base URL and model.

ProviderChain tries providers in a fixed priority order; a failure in one
provider is logged and the next one is tried.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from openai import AsyncOpenAI

from adaptive_geometry_tutor.config import TutorConfig

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class AIProviderError(Exception):
    """Provider call failed: transport error, non-success response or empty content."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class NoProviderAvailableError(AIProviderError):
    """No configured provider could be tried."""


class AIProvider(ABC):
    """A chat-completion backend."""

    name: str = "provider"

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        """Return the text content of one completion or raise AIProviderError."""


class OpenAICompatibleProvider(AIProvider):
    """Provider reached through an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        name: str,
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.name = name
        self.model = model
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            raise AIProviderError(f"{self.name} request failed: {e}", provider=self.name) from e

        content = None
        if response.choices:
            content = response.choices[0].message.content
        if not content or not content.strip():
            raise AIProviderError(f"{self.name} returned empty content", provider=self.name)

        return content.strip()


class GroqProvider(OpenAICompatibleProvider):
    def __init__(self, api_key: str, model: str, client: Optional[AsyncOpenAI] = None):
        super().__init__("groq", api_key, model, base_url=GROQ_BASE_URL, client=client)


class GeminiProvider(OpenAICompatibleProvider):
    def __init__(self, api_key: str, model: str, client: Optional[AsyncOpenAI] = None):
        super().__init__("gemini", api_key, model, base_url=GEMINI_BASE_URL, client=client)


class ProviderChain:
    """
    Ordered provider fallback.

    Each provider gets a single attempt; the first successful completion wins.
    """

    def __init__(self, providers: Optional[List[AIProvider]] = None):
        self.providers: List[AIProvider] = list(providers or [])
        self.last_provider: Optional[str] = None

    def __bool__(self) -> bool:
        return bool(self.providers)

    def __len__(self) -> int:
        return len(self.providers)

    @property
    def names(self) -> List[str]:
        return [provider.name for provider in self.providers]

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        if not self.providers:
            raise NoProviderAvailableError("No AI provider configured")

        errors = []
        for provider in self.providers:
            try:
                text = await provider.complete(
                    prompt,
                    system_prompt=system_prompt,
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
                self.last_provider = provider.name
                return text
            except Exception as e:
                logger.warning(f"⚠️ [ProviderChain] {provider.name} failed: {type(e).__name__}: {e}")
                errors.append(f"{provider.name}: {e}")

        raise AIProviderError("All providers failed: " + "; ".join(errors))


def _configured_providers(config: TutorConfig) -> List[AIProvider]:
    providers: List[AIProvider] = []
    if config.groq_api_key:
        providers.append(GroqProvider(config.groq_api_key, config.groq_model))
    if config.gemini_api_key:
        providers.append(GeminiProvider(config.gemini_api_key, config.gemini_model))
    return providers


def build_hint_providers(config: TutorConfig) -> ProviderChain:
    """
    Hint providers in priority order.

    "groq" tries Groq then Gemini, "gemini" the reverse, "none" disables AI.
    Providers without an API key are left out.
    """
    if config.hint_provider == "none":
        return ProviderChain([])

    providers = _configured_providers(config)
    if config.hint_provider == "gemini":
        providers.reverse()

    logger.info(f"🤖 [AIProviders] Hint providers: {[p.name for p in providers] or 'none'}")
    return ProviderChain(providers)


def build_question_provider(config: TutorConfig) -> ProviderChain:
    """Question generation uses a single provider (Groq preferred)."""
    if config.hint_provider == "none":
        return ProviderChain([])
    providers = _configured_providers(config)
    return ProviderChain(providers[:1])
