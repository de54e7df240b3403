"""
File: postcraft/services/orchestrator.py

Project: PostCraft Messenger Assistant

Purpose:
Run the generation workflow for one classified Intent.

Rules:
- Sub-steps run strictly in order; later steps consume earlier output
  (the image prompt embeds the generated text)
- Required steps (primary text, image edit) raise GenerationError
- Optional steps (speech, image synthesis) degrade: the failure is recorded
  on the content and rendered as a note
- Publishable results become the sender's pending post (last write wins)
- Only ConfirmPost publishes, and it clears the pending post only on success
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from postcraft.content import GeneratedContent, Media, Reply
from postcraft.errors import GenerationError, OptionalStepFailure, PersistenceError
from postcraft.generation import prompts
from postcraft.generation.base import GenerationBackend
from postcraft.intents import (
    AttachmentHelp,
    Chat,
    ConfirmPost,
    CreateStory,
    DailyPost,
    EditImage,
    ExplainPostingLimits,
    FeaturePrompt,
    Greeting,
    Intent,
    PostType,
    ScheduleHelp,
)
from postcraft.media.fetcher import MediaFetcher
from postcraft.outbound.publisher import PagePublisher
from postcraft import profile
from postcraft.services.state_store import StateStore

logger = logging.getLogger("orchestrator")

T = TypeVar("T")

SONG_LINE = "🎵 {song} (For inspiration, not playable audio)"


class GenerationOrchestrator:
    def __init__(
        self,
        backend: GenerationBackend,
        *,
        store: Optional[StateStore] = None,
        publisher: Optional[PagePublisher] = None,
        fetcher: Optional[MediaFetcher] = None,
        voice: Optional[str] = None,
    ) -> None:
        self._backend = backend
        self._store = store
        self._publisher = publisher
        self._fetcher = fetcher
        self._voice = voice

        self._handlers: dict[type, Callable[..., Reply]] = {
            Chat: self._chat,
            DailyPost: self._daily_post,
            CreateStory: self._create_story,
            EditImage: self._edit_image,
            ConfirmPost: self._confirm_post,
            Greeting: lambda intent, sender_id: Reply.text(profile.GREETING_TEXT),
            AttachmentHelp: lambda intent, sender_id: Reply.text(profile.ATTACHMENT_HELP_TEXT),
            ScheduleHelp: lambda intent, sender_id: Reply.text(profile.SCHEDULE_HELP_TEXT),
            ExplainPostingLimits: lambda intent, sender_id: Reply.text(profile.POSTING_LIMITS_TEXT),
            FeaturePrompt: lambda intent, sender_id: Reply.text(
                profile.FEATURE_PROMPTS[intent.feature.value]
            ),
        }

    # ------------------------------------------------------------------
    # Public entry
    # ------------------------------------------------------------------
    def run(self, intent: Intent, *, sender_id: Optional[str] = None) -> Reply:
        handler = self._handlers.get(type(intent))
        if handler is None:
            raise TypeError(f"Unsupported intent: {intent!r}")

        logger.info("Running %s for sender %s", type(intent).__name__, sender_id or "-")
        return handler(intent, sender_id)

    def generate_text(
        self,
        prompt: str,
        *,
        grounded: bool = False,
        tts: bool = False,
        voice: Optional[str] = None,
    ) -> Reply:
        """
        Plain text generation with optional narration (web surface).
        """
        result = self._backend.generate_text(prompt, grounded=grounded)
        content = GeneratedContent(text=result.text, citations=list(result.citations))
        if tts:
            content.audio = self._optional(
                content,
                "audio",
                lambda: self._backend.synthesize_speech(result.text, voice=voice or self._voice),
            )
        return Reply(content=content, offer_shortcuts=False)

    def generate_image(self, prompt: str) -> Reply:
        image = self._backend.generate_image(prompt)
        return Reply(content=GeneratedContent(text="", image=image), offer_shortcuts=False)

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------
    def _chat(self, intent: Chat, sender_id: Optional[str]) -> Reply:
        result = self._backend.generate_text(prompts.chat_prompt(intent.text), grounded=True)
        return Reply(
            content=GeneratedContent(text=result.text, citations=list(result.citations)),
        )

    def _daily_post(self, intent: DailyPost, sender_id: Optional[str]) -> Reply:
        theme = intent.theme.value
        regular = intent.post_type is PostType.REGULAR_POST

        result = self._backend.generate_text(prompts.daily_post_prompt(theme, regular=regular))
        content = GeneratedContent(
            text=f"Daily Post ({theme} - {intent.post_type.label}):\n\n{result.text}",
        )

        if intent.tts:
            content.audio = self._optional(
                content,
                "audio",
                lambda: self._backend.synthesize_speech(result.text, voice=self._voice),
            )

        if not regular:
            content.image = self._optional(
                content,
                "image",
                lambda: self._backend.generate_image(prompts.reel_image_prompt(theme, result.text)),
            )

        pending = self._save_pending(sender_id, result.text, content.image)
        return Reply(content=content, pending_created=pending)

    def _create_story(self, intent: CreateStory, sender_id: Optional[str]) -> Reply:
        theme = intent.theme.value
        prompt = prompts.story_prompt(
            theme,
            narrated=intent.tts,
            idea=intent.idea,
            song=intent.song_suggestion,
        )

        result = self._backend.generate_text(prompt)
        story, song = prompts.split_song_suggestion(result.text)
        if not song and intent.song_suggestion:
            logger.warning("Song suggestion requested but not found in story output")

        body = story
        if song:
            body += "\n\n" + SONG_LINE.format(song=song)

        content = GeneratedContent(text=f"Story ({theme}):\n\n{body}")

        if intent.tts:
            content.audio = self._optional(
                content,
                "audio",
                lambda: self._backend.synthesize_speech(story, voice=self._voice),
            )

        content.image = self._optional(
            content,
            "image",
            lambda: self._backend.generate_image(prompts.story_image_prompt(theme, story)),
        )

        pending = self._save_pending(sender_id, body, content.image)
        return Reply(content=content, pending_created=pending)

    def _edit_image(self, intent: EditImage, sender_id: Optional[str]) -> Reply:
        source = intent.source
        if not source.is_inline:
            if self._fetcher is None:
                raise GenerationError("No media fetcher configured for remote attachments")
            source = self._fetcher.ensure_inline(source)

        logger.info("Editing image (%s) with prompt: %s", source.mime_type, intent.prompt)
        edited = self._backend.edit_image(source, intent.prompt)

        content = GeneratedContent(
            text=f'Here is your edited image for "{intent.prompt}":',
            image=edited,
        )
        pending = self._save_pending(sender_id, "", edited)
        return Reply(content=content, pending_created=pending)

    def _confirm_post(self, intent: ConfirmPost, sender_id: Optional[str]) -> Reply:
        if self._store is None or self._publisher is None or not sender_id:
            raise RuntimeError("ConfirmPost needs a sender, a state store and a publisher")

        draft = self._store.get_pending(sender_id)
        if draft is None:
            return Reply.text(profile.NOTHING_PENDING_TEXT)

        # PublishError propagates; the draft stays for another attempt
        result = self._publisher.publish(draft.text, draft.image)
        try:
            self._store.clear_pending(sender_id)
        except PersistenceError:
            # Already live on the Page; the post id still has to reach the user
            logger.exception("Published %s but could not clear draft for %s", result.post_id, sender_id)

        return Reply.text(profile.PUBLISHED_TEXT.format(post_id=result.post_id))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _optional(
        self,
        content: GeneratedContent,
        step: str,
        call: Callable[[], T],
    ) -> Optional[T]:
        try:
            return call()
        except GenerationError as exc:
            failure = OptionalStepFailure(step, str(exc))
            logger.warning("Optional step degraded: %s", failure)
            content.failures.append(failure)
            return None

    def _save_pending(
        self,
        sender_id: Optional[str],
        text: str,
        image: Optional[Media],
    ) -> bool:
        if not sender_id or self._store is None:
            return False
        self._store.set_pending(sender_id, text, image)
        return True
