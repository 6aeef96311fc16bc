"""
LLM Client Abstraction

Provides unified interface for OpenAI and Anthropic Claude.
Handles provider switching and fallback.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


@dataclass
class LLMConfig:
    """Configuration for LLM client."""

    provider: LLMProvider
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    anthropic_model: str = "claude-3-5-haiku-latest"
    max_tokens: int = 512
    temperature: float = 0.0


@dataclass
class LLMResponse:
    """Response from LLM."""

    content: str
    model: str
    provider: LLMProvider
    usage: dict


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
    ) -> LLMResponse:
        """Generate a response from the LLM."""
        pass

    async def close(self) -> None:
        """Release the SDK client, if one was created."""
        pass


class OpenAIClient(BaseLLMClient):
    """OpenAI GPT client implementation."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self._client = None

    def _get_client(self):
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            import openai

            self._client = openai.AsyncOpenAI(api_key=self.config.openai_api_key)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
    ) -> LLMResponse:
        """Generate response using GPT."""
        client = self._get_client()
        model = self.config.openai_model

        temp = temperature if temperature is not None else self.config.temperature
        tokens = max_tokens if max_tokens is not None else self.config.max_tokens

        kwargs = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temp,
            "max_tokens": tokens,
        }

        if response_format == "json":
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**kwargs)
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=model,
            provider=LLMProvider.OPENAI,
            usage={
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
            } if response.usage else {},
        )


class AnthropicClient(BaseLLMClient):
    """Anthropic Claude client implementation."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self._client = None

    def _get_client(self):
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            import anthropic

            self._client = anthropic.AsyncAnthropic(api_key=self.config.anthropic_api_key)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
    ) -> LLMResponse:
        """Generate response using Claude."""
        client = self._get_client()
        model = self.config.anthropic_model

        temp = temperature if temperature is not None else self.config.temperature
        tokens = max_tokens if max_tokens is not None else self.config.max_tokens

        # Claude has no JSON mode; the system prompt already demands strict JSON
        try:
            response = await client.messages.create(
                model=model,
                max_tokens=tokens,
                temperature=temp,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except Exception as e:
            logger.error(f"Anthropic API error: {e}")
            raise

        return LLMResponse(
            content=response.content[0].text,
            model=model,
            provider=LLMProvider.ANTHROPIC,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
        )


class LLMClient:
    """
    Unified LLM client with provider switching and fallback.

    Primary provider is tried first.
    Falls back to secondary provider on failure.
    """

    def __init__(self, config: LLMConfig):
        self.config = config
        self._primary: Optional[BaseLLMClient] = None
        self._fallback: Optional[BaseLLMClient] = None
        self._setup_clients()

    def _setup_clients(self):
        """Setup primary and fallback clients based on config."""
        if self.config.provider == LLMProvider.ANTHROPIC:
            if self.config.anthropic_api_key:
                self._primary = AnthropicClient(self.config)
            if self.config.openai_api_key:
                self._fallback = OpenAIClient(self.config)
        else:  # OpenAI
            if self.config.openai_api_key:
                self._primary = OpenAIClient(self.config)
            if self.config.anthropic_api_key:
                self._fallback = AnthropicClient(self.config)

        if self._primary is None and self._fallback is None:
            logger.warning("No LLM API keys configured. Symbol resolution disabled.")

    @property
    def is_configured(self) -> bool:
        return self._primary is not None or self._fallback is not None

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate LLM response with automatic fallback.

        Tries primary provider first, falls back to secondary on failure.
        """
        if not self.is_configured:
            raise RuntimeError("No LLM providers configured")

        kwargs = dict(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            response_format=response_format,
        )

        # Try primary
        if self._primary:
            try:
                return await self._primary.generate(**kwargs)
            except Exception as e:
                logger.warning(f"Primary LLM failed: {e}, trying fallback...")
                if self._fallback is None:
                    raise

        return await self._fallback.generate(**kwargs)

    async def close(self) -> None:
        """Close the underlying SDK clients."""
        for client in (self._primary, self._fallback):
            if client is not None:
                await client.close()


# Singleton instance management
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create LLM client singleton."""
    global _llm_client
    if _llm_client is None:
        from wing.core.config import settings

        config = LLMConfig(
            provider=LLMProvider(settings.llm_primary_provider),
            openai_api_key=settings.openai_api_key,
            anthropic_api_key=settings.anthropic_api_key,
            openai_model=settings.llm_openai_model,
            anthropic_model=settings.llm_anthropic_model,
        )
        _llm_client = LLMClient(config)
    return _llm_client


async def close_llm_client() -> None:
    """Close the singleton's SDK clients. Called on application shutdown."""
    global _llm_client
    if _llm_client is None:
        return
    await _llm_client.close()
    _llm_client = None
