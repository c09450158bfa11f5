"""
LLM Client Abstraction

Chat-completions client for OpenAI-compatible endpoints (Groq by default).
Maps SDK failures onto ExternalAPIError so routes can report them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import logging

import openai

from stockdash.core.config import Settings
from stockdash.services.base import ConfigurationError, ExternalAPIError

logger = logging.getLogger(__name__)


@dataclass
class LLMConfig:
    """Configuration for LLM client."""

    api_key: str
    base_url: str
    model: str
    max_tokens: int = 200
    temperature: Optional[float] = None
    timeout: float = 30.0


@dataclass
class LLMResponse:
    """Response from LLM."""

    content: str
    model: str
    usage: dict


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Generate a response from the LLM."""
        pass


class OpenAICompatibleClient(BaseLLMClient):
    """Client for any endpoint speaking the OpenAI chat-completions API."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self._client: Optional[openai.AsyncOpenAI] = None

    def _get_client(self) -> openai.AsyncOpenAI:
        """Lazy initialization of the SDK client."""
        if self._client is None:
            self._client = openai.AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                max_retries=0,
            )
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Generate response via chat completions."""
        client = self._get_client()

        kwargs = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_tokens if max_tokens is not None else self.config.max_tokens,
        }
        if self.config.temperature is not None:
            kwargs["temperature"] = self.config.temperature

        try:
            response = await client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            logger.error(f"LLM API error [{e.status_code}]: {e}")
            raise ExternalAPIError(
                "LLMClient",
                "Groq API request failed",
                {"details": str(e)},
                status_code=e.status_code,
            ) from e
        except openai.APIError as e:
            logger.error(f"LLM API call failed: {e}")
            raise ExternalAPIError(
                "LLMClient",
                "Failed to call Groq API",
                {"details": str(e)},
            ) from e

        content = ""
        if response.choices and response.choices[0].message:
            content = response.choices[0].message.content or ""

        usage = {}
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(content=content, model=self.config.model, usage=usage)


def build_llm_client(settings: Settings) -> OpenAICompatibleClient:
    """Create the Groq client from settings, failing when any key is missing."""
    if not settings.groq_configured:
        logger.error("Missing Groq environment variables")
        raise ConfigurationError(
            "LLMClient",
            "Server misconfigured: Missing Groq API settings",
        )

    config = LLMConfig(
        api_key=settings.groq_api_key,
        base_url=settings.groq_base.rstrip("/"),
        model=settings.groq_model,
        max_tokens=settings.prediction_max_tokens,
    )
    return OpenAICompatibleClient(config)
