"""
File: postcraft/models.py

Project: PostCraft Messenger Assistant

Purpose:
SQLAlchemy ORM models for the two things the service keeps between requests:
- the inbound message audit log
- one pending (unconfirmed) post per sender

Design principles:
- No business logic in models
- Sender id is an opaque Messenger page-scoped id (text)
- PendingPost is keyed by sender id, so the table itself enforces
  "at most one pending post per sender"
"""

import uuid
from sqlalchemy import (
    Column,
    Text,
    DateTime,
    JSON,
    Index,
    Uuid,
    func,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


# ---------------------------------------------------------------------
# Inbound message (immutable, audit)
# ---------------------------------------------------------------------
class InboundMessage(Base):
    __tablename__ = "incoming_messages"

    message_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sender_id = Column(Text, nullable=False)
    message_text = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=True)
    quick_reply = Column(Text, nullable=True)
    source = Column(Text, nullable=False, server_default="messenger-webhook")
    full_event = Column(JSON, nullable=True)
    received_at = Column(DateTime(timezone=True), nullable=False)
    stored_at = Column(DateTime(timezone=True), server_default=func.now())


Index("ix_incoming_messages_sender", InboundMessage.sender_id)


# ---------------------------------------------------------------------
# Pending post (one per sender, last write wins)
# ---------------------------------------------------------------------
class PendingPost(Base):
    __tablename__ = "pending_posts"

    sender_id = Column(Text, primary_key=True)
    text = Column(Text, nullable=False)
    image_data = Column(Text, nullable=True)  # base64
    image_mime_type = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
