"""LINE webhook API route."""
from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import PlainTextResponse
import logging

from api.middleware.signature import verify_line_signature
from config.settings import settings
from core.dependencies import get_dispatcher
from models.events import WebhookPayload

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/webhook", response_class=PlainTextResponse)
async def line_webhook(
    background_tasks: BackgroundTasks,
    body: bytes = Depends(verify_line_signature),
):
    """
    Receive a batch of events from the LINE platform.

    1. Validates the signature over the raw body (401 if invalid).
    2. Parses the event batch.
    3. Dispatches events to their handlers, after the response by default.

    Once the signature is valid the response is always 200: LINE treats any
    other status as a failed delivery and redelivers, which would repeat
    replies and pushes that were already sent.
    """
    try:
        payload = WebhookPayload.model_validate_json(body)

        if not payload.events:
            # Console "Verify" requests carry no events
            return PlainTextResponse("OK")

        dispatcher = get_dispatcher()
        logger.info(f"Received {len(payload.events)} events for {payload.destination}")

        if settings.PROCESS_EVENTS_IN_BACKGROUND:
            background_tasks.add_task(dispatcher.dispatch, payload.events)
        else:
            await dispatcher.dispatch(payload.events)

        return PlainTextResponse("OK")

    except Exception as e:
        logger.error(f"Webhook error: {e}", exc_info=True)
        # Don't fail the delivery — LINE would retry it
        return PlainTextResponse("Error")
