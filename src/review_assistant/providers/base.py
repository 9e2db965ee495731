# src/review_assistant/providers/base.py
from abc import ABC, abstractmethod


class LLMProvider(ABC):
    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Send prompt to LLM and return the raw response text."""
        pass
