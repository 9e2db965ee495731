# src/review_assistant/providers/gemini.py
import logging
import httpx
from .base import LLMProvider


logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash"):
        self.api_key = api_key
        self.model = model

    async def complete(self, prompt: str) -> str:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{self.API_URL.format(model=self.model)}?key={self.api_key}",
                json={
                    "contents": [{
                        "parts": [{"text": prompt}]
                    }]
                },
                timeout=120.0
            )
            response.raise_for_status()

        data = response.json()
        text = data["candidates"][0]["content"]["parts"][0]["text"]
        logger.info(f"Gemini response length: {len(text)} chars")
        return text
