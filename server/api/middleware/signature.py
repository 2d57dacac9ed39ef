"""LINE webhook signature validation."""
from fastapi import Header, HTTPException, Request, status
from typing import Optional
import base64
import hashlib
import hmac
import logging

from config.settings import settings

logger = logging.getLogger(__name__)


def compute_signature(body: bytes, channel_secret: str) -> str:
    """Base64-encoded HMAC-SHA256 digest of the raw request body."""
    digest = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def is_valid_signature(body: bytes, signature: Optional[str], channel_secret: str) -> bool:
    if not signature:
        return False
    expected = compute_signature(body, channel_secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


async def verify_line_signature(
    request: Request,
    x_line_signature: Optional[str] = Header(None),
) -> bytes:
    """
    Validate the X-Line-Signature header against the raw body.

    The signature is computed over the exact bytes LINE sent, so the body is
    read here unparsed and returned for the route to decode.

    Raises HTTPException(401) if the header is missing or does not match.
    """
    body = await request.body()

    if not x_line_signature:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Line-Signature header",
        )
    if not is_valid_signature(body, x_line_signature, settings.LINE_CHANNEL_SECRET):
        logger.warning("Rejected webhook delivery with invalid signature")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature",
        )
    return body
