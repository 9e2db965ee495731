# src/review_assistant/providers/__init__.py
from .base import LLMProvider
from .gemini import GeminiProvider
from .openai_compat import OpenAIProvider

__all__ = ["LLMProvider", "GeminiProvider", "OpenAIProvider"]
