"""Outbound message and profile models"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional

# LINE rejects text messages longer than this
MAX_TEXT_LENGTH = 5000

MENTION_KEY = "member"


def _truncate(text: str, limit: int = MAX_TEXT_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def _escape_braces(text: str, limit: int) -> str:
    """Double literal braces for textV2, truncating without splitting a pair."""
    escaped = text.replace("{", "{{").replace("}", "}}")
    if len(escaped) <= limit:
        return escaped
    pieces, size = [], 0
    for ch in text:
        piece = ch * 2 if ch in "{}" else ch
        if size + len(piece) > limit - 1:
            break
        pieces.append(piece)
        size += len(piece)
    return "".join(pieces) + "…"


class Profile(BaseModel):
    """LINE user profile"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    display_name: str = Field(..., alias="displayName")
    picture_url: Optional[str] = Field(None, alias="pictureUrl")
    status_message: Optional[str] = Field(None, alias="statusMessage")


class OutboundMessage(BaseModel):
    """Message sent by the bot, either plain text or text that mentions a member."""
    kind: Literal["text", "mention"] = "text"
    text: str
    mention_user_id: Optional[str] = None

    @classmethod
    def plain(cls, text: str) -> "OutboundMessage":
        return cls(kind="text", text=text)

    @classmethod
    def mention(cls, user_id: str, text: str) -> "OutboundMessage":
        return cls(kind="mention", text=text, mention_user_id=user_id)

    def to_line(self) -> dict:
        """Render as a LINE message object."""
        if self.kind == "mention" and self.mention_user_id:
            # textV2 treats {key} as a substitution; literal braces are doubled
            prefix = f"{{{MENTION_KEY}}}\n"
            escaped = _escape_braces(self.text, MAX_TEXT_LENGTH - len(prefix))
            return {
                "type": "textV2",
                "text": prefix + escaped,
                "substitution": {
                    MENTION_KEY: {
                        "type": "mention",
                        "mentionee": {"type": "user", "userId": self.mention_user_id},
                    }
                },
            }
        return {"type": "text", "text": _truncate(self.text)}


class ModelRequest(BaseModel):
    """One stateless completion request: instructions plus at most one image."""
    system_prompt: str
    user_prompt: str
    image: Optional[bytes] = None
