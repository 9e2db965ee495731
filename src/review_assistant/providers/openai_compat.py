# src/review_assistant/providers/openai_compat.py
import logging
from openai import AsyncOpenAI
from .base import LLMProvider


logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """Any chat-completions endpoint speaking the OpenAI protocol."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        max_tokens: int = 4000,
        default_headers: dict[str, str] | None = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            default_headers=default_headers,
        )

    async def complete(self, prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.2,
            max_tokens=self.max_tokens,
        )

        text = response.choices[0].message.content or ""
        logger.info(f"{self.model} response length: {len(text)} chars")
        logger.debug(f"{self.model} response first 500 chars: {text[:500]}")

        if not text.strip():
            raise ValueError(f"{self.model} returned empty response. Full API response: {response}")

        return text
