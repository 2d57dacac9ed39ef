"""LINE Messaging API client — reply, push, profile and content lookups."""
import httpx
from typing import List, Optional, Union
from config.settings import settings
from models.message import OutboundMessage, Profile
import logging

logger = logging.getLogger(__name__)

Messages = Union[OutboundMessage, List[OutboundMessage]]


class LineAPIError(Exception):
    """Non-2xx response from the LINE platform."""
    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProfileNotFoundError(LineAPIError):
    """The user has no relationship with the bot (not a friend, or blocked it)."""


def _as_payload(messages: Messages) -> list[dict]:
    if isinstance(messages, OutboundMessage):
        messages = [messages]
    return [m.to_line() for m in messages]


class LineClient:
    """Thin wrapper over the LINE Messaging API. No retries."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        endpoint: Optional[str] = None,
        data_endpoint: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = (endpoint or settings.LINE_API_ENDPOINT).rstrip("/")
        self.data_endpoint = (data_endpoint or settings.LINE_DATA_API_ENDPOINT).rstrip("/")
        token = access_token or settings.LINE_CHANNEL_ACCESS_TOKEN

        self.client = httpx.AsyncClient(
            timeout=float(settings.LINE_TIMEOUT),
            headers={"Authorization": f"Bearer {token}"},
            transport=transport,
        )

    async def reply(self, reply_token: str, messages: Messages) -> None:
        """
        Answer an event through its reply token.

        A reply token is single-use and expires shortly after the event was
        received, so this must be the first outbound call for an event.
        """
        response = await self.client.post(
            f"{self.endpoint}/v2/bot/message/reply",
            json={"replyToken": reply_token, "messages": _as_payload(messages)},
        )
        self._raise_for_status(response, "reply")

    async def push(self, to: str, messages: Messages) -> None:
        """Send messages to a user, group or room id at any time."""
        response = await self.client.post(
            f"{self.endpoint}/v2/bot/message/push",
            json={"to": to, "messages": _as_payload(messages)},
        )
        self._raise_for_status(response, "push")

    async def get_profile(self, user_id: str) -> Profile:
        """
        Fetch a user's profile.

        Raises ProfileNotFoundError when the user has not added the bot as a friend.
        """
        response = await self.client.get(f"{self.endpoint}/v2/bot/profile/{user_id}")
        if response.status_code == 404:
            raise ProfileNotFoundError(
                f"Profile not found for user {user_id}", status_code=404
            )
        self._raise_for_status(response, "get_profile")
        return Profile.model_validate(response.json())

    async def get_message_content(self, message_id: str) -> bytes:
        """Download the binary content of an image/video/audio/file message."""
        chunks: list[bytes] = []
        async with self.client.stream(
            "GET", f"{self.data_endpoint}/v2/bot/message/{message_id}/content"
        ) as response:
            if response.is_error:
                await response.aread()
                self._raise_for_status(response, "get_message_content")
            async for chunk in response.aiter_bytes():
                chunks.append(chunk)

        content = b"".join(chunks)
        logger.debug(f"Fetched {len(content)} bytes for message {message_id}")
        return content

    @staticmethod
    def _raise_for_status(response: httpx.Response, operation: str) -> None:
        if response.is_success:
            return
        detail = response.text[:300]
        logger.warning(f"LINE {operation} failed ({response.status_code}): {detail}")
        raise LineAPIError(
            f"LINE {operation} failed with status {response.status_code}: {detail}",
            status_code=response.status_code,
        )

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()
