"""
Async chat client for the generation provider.

One place for auth, retries and model options. Anything implementing
``LLMClient`` can be injected instead (tests use scripted fakes).
"""

import asyncio
from typing import Optional, Protocol

from openai import APIError, APITimeoutError, AsyncOpenAI, RateLimitError

from hr_assistant.utils.config import GenerationSettings, get_settings
from hr_assistant.utils.logger import get_logger

logger = get_logger(__name__)

RETRY_DELAYS = (0.5, 1.0, 2.0, 4.0)


class LLMClient(Protocol):
    """Interface of a text generation provider."""

    model: str

    async def complete(
        self,
        messages: list[dict[str, str]],
        system: Optional[str] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """Return the generated text for a chat transcript."""
        ...


class OpenAIChatClient:
    """OpenAI chat-completions client with bounded retries."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.1,
        max_tokens: int = 800,
        timeout_seconds: float = 60.0,
        max_retries: int = 3,
        base_url: Optional[str] = None,
    ):
        if not api_key:
            raise ValueError("Missing API key for the generation provider")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        # Retries are handled here, not by the SDK
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )

    @classmethod
    def from_settings(cls, settings: GenerationSettings) -> "OpenAIChatClient":
        return cls(
            api_key=settings.api_key.get_secret_value() if settings.api_key else "",
            model=settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout_seconds=settings.timeout_seconds,
            max_retries=settings.max_retries,
            base_url=settings.base_url,
        )

    async def _with_retries(self, fn, *args, **kwargs):
        delays = RETRY_DELAYS[: self.max_retries]
        for attempt, delay in enumerate(delays, start=1):
            try:
                return await fn(*args, **kwargs)
            except (RateLimitError, APITimeoutError) as e:
                logger.warning(f"LLM call attempt {attempt} failed ({type(e).__name__}), retrying in {delay}s")
                await asyncio.sleep(delay)
            except APIError as e:
                # 4xx other than rate limiting will not succeed on retry
                status = getattr(e, "status_code", None)
                if status is not None and status < 500:
                    raise
                logger.warning(f"LLM call attempt {attempt} failed ({e}), retrying in {delay}s")
                await asyncio.sleep(delay)
        return await fn(*args, **kwargs)

    async def complete(
        self,
        messages: list[dict[str, str]],
        system: Optional[str] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        payload = []
        if system:
            payload.append({"role": "system", "content": system})
        payload.extend(messages)

        kwargs = {
            "model": self.model,
            "messages": payload,
            "temperature": self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._with_retries(self._client.chat.completions.create, **kwargs)
        text = response.choices[0].message.content or ""

        usage = getattr(response, "usage", None)
        if usage:
            logger.debug(
                f"LLM {response.model}: {usage.prompt_tokens} tokens in, {usage.completion_tokens} out"
            )
        return text


def get_llm_client(settings: Optional[GenerationSettings] = None) -> Optional[OpenAIChatClient]:
    """Build the configured client, or None when no API key is set."""
    settings = settings or get_settings().generation
    if settings.api_key is None or not settings.api_key.get_secret_value():
        logger.info("No LLM API key configured; generation features are disabled")
        return None
    return OpenAIChatClient.from_settings(settings)
