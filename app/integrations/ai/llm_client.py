"""LLM unified client: OpenAI/Claude provider abstraction."""
import logging

import anthropic
import openai

from app.config import settings
from app.exceptions import LLMNotConfiguredError
from app.integrations.resilience import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "claude": "claude-sonnet-4-20250514",
}

_TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
)


class LLMClient:
    """Unified LLM client supporting OpenAI and Claude providers.

    Usage:
        client = LLMClient(provider="openai", api_key=key, model="gpt-4o-mini")
        result = await client.generate(system_prompt, user_prompt)
    """

    def __init__(
        self,
        provider: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
    ):
        self.provider = provider or settings.AI_PROVIDER
        if self.provider not in DEFAULT_MODELS:
            raise ValueError(f"Unsupported AI provider: {self.provider}")
        if not api_key:
            raise LLMNotConfiguredError(
                f"No API key configured for provider '{self.provider}'", provider=self.provider,
            )

        self.api_key = api_key
        self.model = model or DEFAULT_MODELS[self.provider]
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 1500,
    ) -> str:
        """Generate a text completion.

        Connection and rate-limit errors are retried with backoff; anything
        else propagates.
        """
        if self.provider == "claude":
            func = self._generate_claude
        else:
            func = self._generate_openai

        result = await retry_with_backoff(
            func, system_prompt, user_prompt, max_tokens,
            max_retries=settings.LLM_MAX_RETRIES,
            retryable_exceptions=_TRANSIENT_ERRORS,
        )
        logger.debug("LLM %s/%s returned %d chars", self.provider, self.model, len(result))
        return result

    # ── Claude (Anthropic) ──

    async def _generate_claude(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        client = anthropic.AsyncAnthropic(api_key=self.api_key)
        try:
            message = await client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
            return "".join(block.text for block in message.content if block.type == "text")
        finally:
            await client.close()

    # ── OpenAI ──

    async def _generate_openai(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        client = openai.AsyncOpenAI(api_key=self.api_key)
        try:
            response = await client.chat.completions.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=self.temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
            return response.choices[0].message.content or ""
        finally:
            await client.close()
