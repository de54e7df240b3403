"""
File: postcraft/errors.py

Project: PostCraft Messenger Assistant

Purpose:
Error taxonomy shared by the webhook pipeline, the web API and the adapters.

HTTP mapping (see postcraft.main):
- ConfigurationError -> 500
- ValidationError    -> 400
- VerificationError  -> 403

Everything else is translated into a chat reply for the sender.
"""

from __future__ import annotations


class PostcraftError(Exception):
    """Base class for all application errors."""


class ConfigurationError(PostcraftError, RuntimeError):
    """A required secret or setting is missing. Fatal for the request."""


class ValidationError(PostcraftError, ValueError):
    """Inbound payload is malformed."""


class VerificationError(PostcraftError):
    """Verify token or signed_request signature did not match."""


class GenerationError(PostcraftError):
    """
    A call to the generation backend failed.

    `user_message` is safe to show in chat; the exception text may carry
    vendor detail meant for logs.
    """

    default_user_message = "Sorry, something went wrong while generating your content. Please try again later."

    def __init__(self, message: str, *, user_message: str | None = None) -> None:
        super().__init__(message)
        self.user_message = user_message or self.default_user_message


class NoEditedImage(GenerationError):
    default_user_message = "I couldn't get an edited image back for that request. Try rephrasing the edit."


class IntentClarification(PostcraftError):
    """The classifier needs more input before it can pick a workflow."""

    def __init__(self, question: str) -> None:
        super().__init__(question)
        self.question = question


class OptionalStepFailure(PostcraftError):
    """
    An optional step (speech, image synthesis) failed.

    Recorded on the generated content and rendered as a note. Never raised
    out of the orchestrator.
    """

    def __init__(self, step: str, reason: str) -> None:
        super().__init__(f"{step} failed: {reason}")
        self.step = step
        self.reason = reason

    @property
    def note(self) -> str:
        return f"(Note: Could not generate {self.step} for this post: {self.reason})"


class PublishError(PostcraftError):
    """Page publishing failed. The message is the vendor's, verbatim."""


class PersistenceError(PostcraftError):
    """State store read/write failed."""
