"""
File: postcraft/intents.py

Project: PostCraft Messenger Assistant

Purpose:
Classify one inbound message into exactly one Intent.

Rules:
- Case-insensitive substring containment, no tokenization, no scoring
- Rules are evaluated in a fixed priority order; first match wins
- Ambiguous text resolves by that order, deterministically
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from postcraft.content import Media
from postcraft.errors import IntentClarification
from postcraft.profile import EDIT_NEEDS_IMAGE_TEXT, EDIT_NEEDS_PROMPT_TEXT


class BotFeature(str, Enum):
    CHAT = "chat"
    EDIT_IMAGE = "edit_image"
    DAILY_POST = "daily_post"
    CREATE_STORY = "create_story"
    SCHEDULE_POST = "schedule_post"

    @property
    def phrase(self) -> str:
        return self.value.replace("_", " ")


CONFIRM_POST_PAYLOAD = "CONFIRM_POST"


class Theme(str, Enum):
    # Scan order matters: the first theme found in the text wins
    INSPIRATIONAL = "inspirational"
    SAD = "sad"
    STORYTELLING = "storytelling"
    FUNNY = "funny"


class PostType(str, Enum):
    STORY_REEL = "story_reel"
    REGULAR_POST = "regular_post"

    @property
    def label(self) -> str:
        return "story reel" if self is PostType.STORY_REEL else "regular post"


# ---------------------------------------------------------------------
# Intent variants
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class Chat:
    text: str


@dataclass(frozen=True)
class DailyPost:
    theme: Theme = Theme.INSPIRATIONAL
    post_type: PostType = PostType.STORY_REEL
    tts: bool = False


@dataclass(frozen=True)
class CreateStory:
    theme: Theme = Theme.INSPIRATIONAL
    tts: bool = True
    song_suggestion: bool = False
    idea: str = ""


@dataclass(frozen=True)
class EditImage:
    prompt: str
    source: Media


@dataclass(frozen=True)
class ConfirmPost:
    pass


@dataclass(frozen=True)
class ScheduleHelp:
    pass


@dataclass(frozen=True)
class Greeting:
    pass


@dataclass(frozen=True)
class ExplainPostingLimits:
    pass


@dataclass(frozen=True)
class FeaturePrompt:
    feature: BotFeature


@dataclass(frozen=True)
class AttachmentHelp:
    pass


Intent = Union[
    Chat,
    DailyPost,
    CreateStory,
    EditImage,
    ConfirmPost,
    ScheduleHelp,
    Greeting,
    ExplainPostingLimits,
    FeaturePrompt,
    AttachmentHelp,
]


# ---------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------
POST_NOW_PHRASES = ("post now", "publish this", "share this", "upload this", "make it live")
DAILY_POST_MARKERS = ("story", "reel", "daily post", "generate post")
REGULAR_POST_PHRASES = ("regular post", "detailed post", "long post")
TTS_PHRASES = ("with voice", "read aloud")
STORY_TRIGGERS = ("create a story", "create story", "write a story", "tell me a story")
NO_VOICE_PHRASES = ("without voice", "no voice")
EDIT_PREFIX = "edit this image:"
CONFIRM_PHRASES = ("yes, post it", "yes post it", "confirm post")
SCHEDULE_PHRASES = ("schedule post",)


@dataclass(frozen=True)
class _Message:
    raw: str
    lowered: str
    has_image: bool
    has_attachment: bool
    image: Optional[Media]


def _contains_any(text: str, phrases) -> bool:
    return any(p in text for p in phrases)


def extract_theme(lowered: str) -> Theme:
    for theme in Theme:
        if theme.value in lowered:
            return theme
    return Theme.INSPIRATIONAL


# ---------------------------------------------------------------------
# Rule constructors
# ---------------------------------------------------------------------
def _daily_post(msg: _Message) -> DailyPost:
    post_type = (
        PostType.REGULAR_POST
        if _contains_any(msg.lowered, REGULAR_POST_PHRASES)
        else PostType.STORY_REEL
    )
    return DailyPost(
        theme=extract_theme(msg.lowered),
        post_type=post_type,
        tts=_contains_any(msg.lowered, TTS_PHRASES),
    )


def _is_story_request(msg: _Message) -> bool:
    return _contains_any(msg.lowered, STORY_TRIGGERS)


def _create_story(msg: _Message) -> CreateStory:
    trigger = next(t for t in STORY_TRIGGERS if t in msg.lowered)
    start = msg.lowered.index(trigger) + len(trigger)
    idea = msg.raw.strip()[start:].strip().lstrip(":").strip()
    if idea.lower().startswith("about "):
        idea = idea[len("about "):].strip()

    return CreateStory(
        theme=extract_theme(msg.lowered),
        tts=not _contains_any(msg.lowered, NO_VOICE_PHRASES),
        song_suggestion="song" in msg.lowered,
        idea=idea,
    )


def _is_edit_request(msg: _Message) -> bool:
    return msg.lowered.startswith(EDIT_PREFIX)


def _edit_image(msg: _Message) -> EditImage:
    if not msg.has_image or msg.image is None:
        raise IntentClarification(EDIT_NEEDS_IMAGE_TEXT)

    prompt = msg.raw.strip()[len(EDIT_PREFIX):].strip()
    if not prompt:
        raise IntentClarification(EDIT_NEEDS_PROMPT_TEXT)

    return EditImage(prompt=prompt, source=msg.image)


def _is_confirmation(msg: _Message) -> bool:
    return _contains_any(msg.lowered, CONFIRM_PHRASES)


def _matched_feature(msg: _Message) -> Optional[BotFeature]:
    for feature in BotFeature:
        if msg.lowered in (feature.value, feature.phrase):
            return feature
    return None


def _from_payload(payload: Optional[str]) -> Optional["Intent"]:
    """
    Quick-reply payloads are structured, so they bypass text matching.
    Their titles ("🗓️ Daily Post") would otherwise trip the daily post rule.
    """
    if not payload:
        return None
    if payload == CONFIRM_POST_PAYLOAD:
        return ConfirmPost()
    for feature in BotFeature:
        if payload == feature.value:
            return FeaturePrompt(feature=feature)
    return None


_Rule = tuple[Callable[[_Message], bool], Callable[[_Message], "Intent"]]

_RULES: list[_Rule] = [
    (
        lambda m: _contains_any(m.lowered, POST_NOW_PHRASES),
        lambda m: ExplainPostingLimits(),
    ),
    (
        lambda m: "post" in m.lowered and _contains_any(m.lowered, DAILY_POST_MARKERS),
        _daily_post,
    ),
    (_is_edit_request, _edit_image),
    (_is_story_request, _create_story),
    (_is_confirmation, lambda m: ConfirmPost()),
    (
        lambda m: _contains_any(m.lowered, SCHEDULE_PHRASES),
        lambda m: ScheduleHelp(),
    ),
    (
        lambda m: _matched_feature(m) is not None,
        lambda m: FeaturePrompt(feature=_matched_feature(m)),
    ),
]


def classify(
    text: Optional[str],
    *,
    has_image: bool = False,
    has_attachment: Optional[bool] = None,
    quick_reply: Optional[str] = None,
    image: Optional[Media] = None,
) -> Intent:
    """
    Return exactly one Intent for a message.

    `image` is the attachment an EditImage intent should carry; it is only
    consulted when `has_image` is true. Raises IntentClarification when an
    edit command is missing its prompt or its image.
    """
    raw = text or ""
    lowered = raw.strip().lower()
    if has_attachment is None:
        has_attachment = has_image

    from_payload = _from_payload(quick_reply)
    if from_payload is not None:
        return from_payload

    if not lowered:
        return AttachmentHelp() if has_attachment else Greeting()

    msg = _Message(
        raw=raw,
        lowered=lowered,
        has_image=has_image,
        has_attachment=has_attachment,
        image=image,
    )

    for predicate, build in _RULES:
        if predicate(msg):
            return build(msg)

    return Chat(text=raw.strip())


def classify_event(event) -> Intent:
    """Classify an InboundEvent (postcraft.events)."""
    attachment = event.first_image
    image = Media(mime_type=attachment.mime_type, url=attachment.url) if attachment else None
    return classify(
        event.text,
        has_image=event.has_image,
        has_attachment=bool(event.attachments),
        quick_reply=event.quick_reply,
        image=image,
    )
