"""
PostCraft Messenger Assistant
Generation backend abstraction

Defines the interface the orchestrator talks to. GeminiClient is the only
production implementation; tests substitute a fake.
"""

from __future__ import annotations

from typing import Optional, Protocol, TYPE_CHECKING

from postcraft.content import Media

if TYPE_CHECKING:
    from postcraft.generation.gemini import TextResult


class GenerationBackend(Protocol):
    """
    Every method either returns a result or raises GenerationError.
    """

    def generate_text(self, prompt: str, *, grounded: bool = False) -> "TextResult":
        ...

    def synthesize_speech(self, text: str, *, voice: Optional[str] = None) -> Media:
        ...

    def generate_image(self, prompt: str, *, aspect_ratio: str = "9:16") -> Media:
        ...

    def edit_image(self, image: Media, prompt: str) -> Media:
        ...
