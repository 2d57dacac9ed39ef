"""Event dispatcher — classifies webhook events and routes them to handlers."""
import logging
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ValidationError

from core.handlers import ImageHandler, MemberJoinedHandler, TextHandler
from integrations.line.client import LineClient
from integrations.openai.client import ModelClient
from models.events import (
    ImageEvent,
    InboundEvent,
    MemberJoinedEvent,
    TextEvent,
    WebhookEvent,
)

logger = logging.getLogger(__name__)

# (event.type, event.message.type) -> handler kind
_EVENT_KINDS = {
    ("message", "image"): "image",
    ("message", "text"): "text",
    ("memberJoined", None): "member_joined",
}


class EventResult(BaseModel):
    """Outcome of one event. Only ever logged, never reported to the platform."""
    status: Literal["ok", "ignored", "suppressed"]
    event_type: str
    error: Optional[str] = None


def _label(raw: WebhookEvent) -> str:
    if raw.message is not None:
        return f"{raw.type}/{raw.message.type}"
    return raw.type


def classify(raw: WebhookEvent) -> Optional[InboundEvent]:
    """Narrow a raw event to a typed InboundEvent, or None if it isn't handled."""
    # Standby channels must not respond; another channel owns the chat
    if raw.mode == "standby" or raw.source is None:
        return None

    message_type = raw.message.type if raw.message is not None else None
    kind = _EVENT_KINDS.get((raw.type, message_type))
    if kind is None:
        return None

    common = {
        "source": raw.source,
        "reply_token": raw.reply_token,
        "timestamp": raw.timestamp,
        "webhook_event_id": raw.webhook_event_id,
    }
    try:
        if kind == "image":
            return ImageEvent(message_id=raw.message.id, **common)
        if kind == "text":
            return TextEvent(text=raw.message.text, **common)
        if raw.joined is None:
            return None
        return MemberJoinedEvent(
            member_ids=[m.user_id for m in raw.joined.members], **common
        )
    except ValidationError as e:
        logger.warning(f"Malformed {_label(raw)} event ignored: {e}")
        return None


class EventDispatcher:
    """
    Routes each event of a delivery to exactly one handler.

    Events are handled sequentially, in delivery order. A failing handler
    never stops the remaining events and ``dispatch`` never raises.
    """

    def __init__(self, line_client: LineClient, model_client: ModelClient):
        self.handlers = {
            "image": ImageHandler(line_client, model_client),
            "text": TextHandler(line_client, model_client),
            "member_joined": MemberJoinedHandler(line_client),
        }

    async def dispatch(
        self, events: List[Union[WebhookEvent, Any]]
    ) -> List[EventResult]:
        results = [await self._dispatch_one(raw) for raw in events]

        if results:
            counts = {
                status: sum(1 for r in results if r.status == status)
                for status in ("ok", "ignored", "suppressed")
            }
            logger.info(
                f"Dispatched {len(results)} events: "
                f"{counts['ok']} ok, {counts['ignored']} ignored, {counts['suppressed']} failed"
            )
        return results

    async def _dispatch_one(self, item: Union[WebhookEvent, Any]) -> EventResult:
        if isinstance(item, WebhookEvent):
            raw = item
        else:
            try:
                raw = WebhookEvent.model_validate(item)
            except ValidationError as e:
                label = str(item.get("type", "unknown")) if isinstance(item, dict) else "unknown"
                logger.warning(f"Malformed {label} event ignored: {e}")
                return EventResult(status="ignored", event_type=label, error=str(e))

        label = _label(raw)
        try:
            event = classify(raw)
            if event is None:
                logger.debug(f"Ignoring unsupported event {label}")
                return EventResult(status="ignored", event_type=label)

            await self.handlers[event.kind].handle(event)
            return EventResult(status="ok", event_type=label)

        except Exception as e:
            logger.error(f"Error handling {label} event: {e}", exc_info=True)
            return EventResult(status="suppressed", event_type=label, error=str(e))
