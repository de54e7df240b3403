"""
File: postcraft/content.py

Project: PostCraft Messenger Assistant

Purpose:
Request-scoped value objects passed between the orchestrator and the
response assembler. Nothing here is persisted.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Optional

from postcraft.errors import OptionalStepFailure, ValidationError


@dataclass(frozen=True)
class Media:
    """
    A piece of binary media, either inline (base64 `data`) or remote (`url`).
    """
    mime_type: str
    data: Optional[str] = None
    url: Optional[str] = None

    @property
    def kind(self) -> str:
        # Messenger attachment types: image / audio / video / file
        major = self.mime_type.split("/", 1)[0]
        return major if major in ("image", "audio", "video") else "file"

    @property
    def is_inline(self) -> bool:
        return self.data is not None

    def raw_bytes(self) -> bytes:
        if self.data is None:
            raise ValueError("Media has no inline data")
        return base64.b64decode(self.data)

    def as_data_uri(self) -> str:
        if self.data is None:
            raise ValueError("Media has no inline data")
        return f"data:{self.mime_type};base64,{self.data}"

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> "Media":
        return cls(mime_type=mime_type, data=base64.b64encode(raw).decode("ascii"))

    @classmethod
    def from_base64(cls, payload: str, mime_type: str) -> "Media":
        """
        Inline media from a bare base64 string.
        Raises ValidationError when the payload does not decode.
        """
        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError("Invalid base64 image data.") from exc
        return cls(mime_type=mime_type, data=payload)

    @classmethod
    def from_data_uri(cls, uri: str) -> "Media":
        """
        Parse `data:<mime>;base64,<payload>`.
        Raises ValidationError on anything else.
        """
        if not uri or not uri.startswith("data:") or ";base64," not in uri:
            raise ValidationError("Invalid image data URI format.")

        header, payload = uri.split(";base64,", 1)
        mime_type = header[len("data:"):]
        if not mime_type or not payload:
            raise ValidationError("Invalid image data URI format.")

        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError("Invalid base64 payload in data URI.") from exc

        return cls(mime_type=mime_type, data=payload)


@dataclass(frozen=True)
class Citation:
    uri: str
    title: Optional[str] = None

    def to_dict(self) -> dict:
        return {"uri": self.uri, "title": self.title}


@dataclass
class GeneratedContent:
    text: str
    image: Optional[Media] = None
    audio: Optional[Media] = None
    video: Optional[Media] = None
    citations: list[Citation] = field(default_factory=list)
    failures: list[OptionalStepFailure] = field(default_factory=list)

    @property
    def notes(self) -> list[str]:
        return [f.note for f in self.failures]

    def media(self) -> list[Media]:
        return [m for m in (self.image, self.audio, self.video) if m is not None]


@dataclass(frozen=True)
class Reply:
    """
    What the orchestrator hands to the assembler for one inbound request.
    """
    content: GeneratedContent
    pending_created: bool = False
    offer_shortcuts: bool = True

    @classmethod
    def text(cls, text: str, *, offer_shortcuts: bool = True) -> "Reply":
        return cls(content=GeneratedContent(text=text), offer_shortcuts=offer_shortcuts)
