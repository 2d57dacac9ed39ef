"""Inbound webhook event models.

The raw LINE payload is parsed leniently into ``WebhookPayload`` /
``WebhookEvent`` (unknown event types and extra fields are kept), and the
dispatcher narrows each raw event into one of the typed ``InboundEvent``
variants it knows how to handle.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Any, List, Literal, Optional, Union


class Source(BaseModel):
    """Conversation an event came from (user, group or room)."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: Literal["user", "group", "room"]
    user_id: Optional[str] = Field(None, alias="userId")
    group_id: Optional[str] = Field(None, alias="groupId")
    room_id: Optional[str] = Field(None, alias="roomId")

    @property
    def is_group(self) -> bool:
        """True for multi-person chats (groups and rooms)."""
        return self.type in ("group", "room")

    @property
    def target_id(self) -> Optional[str]:
        """Durable id that push messages for this conversation are sent to."""
        if self.type == "group":
            return self.group_id
        if self.type == "room":
            return self.room_id
        return self.user_id


class MessageContent(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    text: Optional[str] = None


class JoinedMember(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str = "user"
    user_id: str = Field(..., alias="userId")


class Joined(BaseModel):
    members: List[JoinedMember] = []


class WebhookEvent(BaseModel):
    """A single raw event as delivered by the platform."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    timestamp: Optional[int] = None
    mode: Optional[str] = None
    webhook_event_id: Optional[str] = Field(None, alias="webhookEventId")
    reply_token: Optional[str] = Field(None, alias="replyToken")
    source: Optional[Source] = None
    message: Optional[MessageContent] = None
    joined: Optional[Joined] = None


class WebhookPayload(BaseModel):
    """Body of one webhook delivery."""
    model_config = ConfigDict(extra="allow")

    destination: Optional[str] = None
    # Kept raw; each event is validated on its own by the dispatcher
    events: List[Any] = []


# ---------------------------------------------------------------------------
# Typed events handled by the dispatcher
# ---------------------------------------------------------------------------

class _BaseInboundEvent(BaseModel):
    source: Source
    reply_token: Optional[str] = None
    timestamp: Optional[int] = None
    webhook_event_id: Optional[str] = None


class ImageEvent(_BaseInboundEvent):
    kind: Literal["image"] = "image"
    message_id: str


class TextEvent(_BaseInboundEvent):
    kind: Literal["text"] = "text"
    text: str


class MemberJoinedEvent(_BaseInboundEvent):
    kind: Literal["member_joined"] = "member_joined"
    member_ids: List[str]


InboundEvent = Annotated[
    Union[ImageEvent, TextEvent, MemberJoinedEvent],
    Field(discriminator="kind"),
]
