"""Event handlers — one per supported event class.

Every handler is stateless: it is a function of its event and the two shared
clients. Unexpected exceptions propagate to the dispatcher, which isolates
them per event.
"""
import asyncio
import logging
from typing import Optional

from integrations.line.client import LineClient, ProfileNotFoundError
from integrations.openai.client import ModelClient
from integrations.openai.prompts import (
    CHAT_SYSTEM_PROMPT,
    FRIEND_INVITE_SUFFIX,
    GENERIC_WELCOME_MESSAGE,
    NUTRITION_SYSTEM_PROMPT,
    NUTRITION_USER_PROMPT,
    PROCESSING_MESSAGE,
    WELCOME_MESSAGE,
)
from models.events import ImageEvent, MemberJoinedEvent, TextEvent
from models.message import OutboundMessage, Profile

logger = logging.getLogger(__name__)


async def resolve_profile(line_client: LineClient, user_id: str) -> Optional[Profile]:
    """Best-effort profile lookup; None when the profile can't be resolved."""
    try:
        return await line_client.get_profile(user_id)
    except ProfileNotFoundError:
        logger.info(f"No profile for {user_id} (not a friend of the bot)")
    except Exception as e:
        logger.warning(f"Profile lookup failed for {user_id}: {e}")
    return None


class ImageHandler:
    """
    Two-phase response to an image message:

    1. reply with a placeholder through the reply token (before any other
       awaited call, since the token expires within seconds);
    2. download the image, ask the model for a nutrition analysis and push
       the result to the conversation's durable id.
    """

    def __init__(self, line_client: LineClient, model_client: ModelClient):
        self.line_client = line_client
        self.model_client = model_client

    async def handle(self, event: ImageEvent) -> None:
        source = event.source

        # Phase 1: placeholder reply
        if event.reply_token:
            try:
                await self.line_client.reply(
                    event.reply_token, OutboundMessage.plain(PROCESSING_MESSAGE)
                )
            except Exception as e:
                logger.warning(f"Placeholder reply failed for message {event.message_id}: {e}")

        # Phase 2: analysis and push
        target_id = source.target_id
        if not target_id:
            raise ValueError(f"Image event {event.message_id} has no push target")

        image = await self.line_client.get_message_content(event.message_id)

        if source.is_group and source.user_id:
            answer, profile = await asyncio.gather(
                self._analyze(image),
                resolve_profile(self.line_client, source.user_id),
            )
            if profile is not None:
                message = OutboundMessage.mention(profile.user_id, answer)
            else:
                message = OutboundMessage.plain(answer + FRIEND_INVITE_SUFFIX)
        else:
            answer = await self._analyze(image)
            message = OutboundMessage.plain(answer)

        await self.line_client.push(target_id, message)
        logger.info(f"Pushed analysis for message {event.message_id} to {source.type} {target_id}")

    async def _analyze(self, image: bytes) -> str:
        return await self.model_client.analyze(
            NUTRITION_SYSTEM_PROMPT, NUTRITION_USER_PROMPT, image
        )


class TextHandler:
    """Free-form chat for one-on-one text messages; group and room text is ignored."""

    def __init__(self, line_client: LineClient, model_client: ModelClient):
        self.line_client = line_client
        self.model_client = model_client

    async def handle(self, event: TextEvent) -> None:
        if event.source.type != "user":
            logger.debug(f"Ignoring text message from {event.source.type}")
            return
        if not event.reply_token:
            logger.warning("Text event without reply token, skipping")
            return

        answer = await self.model_client.analyze(CHAT_SYSTEM_PROMPT, event.text)
        await self.line_client.reply(event.reply_token, OutboundMessage.plain(answer))


class MemberJoinedHandler:
    """Welcome each new member of a group, one push per member."""

    def __init__(self, line_client: LineClient):
        self.line_client = line_client

    async def handle(self, event: MemberJoinedEvent) -> None:
        group_id = event.source.target_id
        if not group_id:
            raise ValueError("memberJoined event has no group id")

        for member_id in event.member_ids:
            try:
                profile = await resolve_profile(self.line_client, member_id)
                if profile is not None:
                    text = WELCOME_MESSAGE.format(display_name=profile.display_name)
                else:
                    text = GENERIC_WELCOME_MESSAGE
                await self.line_client.push(group_id, OutboundMessage.plain(text))
            except Exception as e:
                logger.error(f"Failed to welcome {member_id} in {group_id}: {e}", exc_info=True)
