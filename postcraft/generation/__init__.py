"""
Generation backend (Gemini) and prompt templates.
"""

from .gemini import GeminiClient, TextResult

__all__ = ["GeminiClient", "TextResult"]
