"""
Shared singleton dependencies for the application.

The two HTTP clients (LINE and the model API) are created once at startup and
reused across requests. They carry no per-request state; handlers and the
dispatcher are cheap and built per request on top of them.
"""
import logging
from typing import Optional

from core.dispatcher import EventDispatcher
from integrations.line.client import LineClient
from integrations.openai.client import ModelClient

logger = logging.getLogger(__name__)

# Module-level singletons — initialized once via init_dependencies()
_line_client: Optional[LineClient] = None
_model_client: Optional[ModelClient] = None


def init_dependencies() -> None:
    """
    Initialize all shared singletons. Called once at application startup.
    """
    global _line_client, _model_client

    logger.info("Initializing shared dependencies...")
    _line_client = LineClient()
    _model_client = ModelClient()
    logger.info(f"Dependencies initialized (model: {_model_client.model})")


async def shutdown_dependencies() -> None:
    """Clean up resources on shutdown."""
    global _line_client, _model_client
    if _line_client:
        await _line_client.close()
        _line_client = None
        logger.info("LineClient closed")
    if _model_client:
        await _model_client.close()
        _model_client = None
        logger.info("ModelClient closed")


def get_line_client() -> LineClient:
    if _line_client is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies() first.")
    return _line_client


def get_model_client() -> ModelClient:
    if _model_client is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies() first.")
    return _model_client


def get_dispatcher() -> EventDispatcher:
    """Build an EventDispatcher on top of the shared clients."""
    return EventDispatcher(get_line_client(), get_model_client())
