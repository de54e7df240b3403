"""
PostCraft Messenger Assistant
WebhookProcessor

Responsibilities:
- Walk one Messenger delivery batch in order
- For each event: record -> classify -> orchestrate -> assemble -> send
- Turn every failure attributable to a sender into a chat reply
- Never deal with HTTP, FastAPI, or responses

One failing event never stops the rest of the batch.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from postcraft.errors import (
    GenerationError,
    IntentClarification,
    PersistenceError,
    PublishError,
    ValidationError,
)
from postcraft.events import InboundEvent, iter_messaging_items, parse_messaging_event
from postcraft.intents import classify_event
from postcraft.outbound.messenger import MessengerClient
from postcraft import profile
from postcraft.services.assembler import MESSENGER, ResponseAssembler
from postcraft.services.orchestrator import GenerationOrchestrator
from postcraft.services.state_store import StateStore

logger = logging.getLogger("webhook_processor")


class WebhookProcessor:
    def __init__(
        self,
        *,
        store: StateStore,
        orchestrator: GenerationOrchestrator,
        messenger: MessengerClient,
        assembler: ResponseAssembler | None = None,
    ) -> None:
        self._store = store
        self._orchestrator = orchestrator
        self._messenger = messenger
        self._assembler = assembler or ResponseAssembler()

    def process_batch(self, body: Dict[str, Any]) -> int:
        """
        Process every messaging item in `body`.
        Returns the number of events attempted.
        """
        attempted = 0
        for raw in iter_messaging_items(body):
            attempted += 1
            try:
                event = parse_messaging_event(raw)
            except ValidationError as exc:
                logger.warning("Skipping messaging item: %s", exc)
                continue

            if not event.text and not event.attachments and not event.quick_reply:
                # delivery/read receipts, echoes
                logger.info("Ignoring non-message event from %s", event.sender_id)
                continue

            self.process_event(event)
        return attempted

    def process_event(self, event: InboundEvent) -> None:
        logger.info("Message from %s: %s", event.sender_id, event.text)
        self._store.record_inbound(event)

        try:
            intent = classify_event(event)
            reply = self._orchestrator.run(intent, sender_id=event.sender_id)
            message = self._assembler.assemble(reply, MESSENGER)
            payloads = self._assembler.to_messenger_payloads(message)
        except IntentClarification as exc:
            payloads = self._error_payloads(exc.question)
        except PublishError as exc:
            logger.error("Publish failed for %s: %s", event.sender_id, exc)
            payloads = self._error_payloads(profile.PUBLISH_FAILED_TEXT.format(error=exc))
        except GenerationError as exc:
            logger.error("Generation failed for %s: %s", event.sender_id, exc)
            payloads = self._error_payloads(exc.user_message)
        except PersistenceError:
            logger.exception("Pending post storage failed for %s", event.sender_id)
            payloads = self._error_payloads(profile.DRAFT_STORAGE_ERROR_TEXT)
        except Exception:
            logger.exception("Unexpected failure handling event from %s", event.sender_id)
            payloads = self._error_payloads(profile.INTERNAL_ERROR_TEXT)

        self._send_all(event.sender_id, payloads)

    # -------------------------------------------------
    # Internal
    # -------------------------------------------------
    def _error_payloads(self, text: str) -> List[Dict[str, Any]]:
        return [{"text": text}]

    def _send_all(self, recipient_id: str, payloads: List[Dict[str, Any]]) -> None:
        for message in payloads:
            try:
                result = self._messenger.send_message(recipient_id=recipient_id, message=message)
            except Exception:
                logger.exception("Send to %s raised", recipient_id)
                return
            if not result.ok:
                # later parts make no sense without the earlier ones
                return
