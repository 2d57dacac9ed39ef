"""Vision-and-language model client for an OpenAI-compatible chat completion API."""
import base64
import httpx
from typing import Optional
from config.settings import settings
from integrations.openai.prompts import FALLBACK_MESSAGE
from models.message import ModelRequest
import logging

logger = logging.getLogger(__name__)

# Magic-byte prefixes of the image formats LINE delivers
_IMAGE_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


def _guess_image_mime(data: bytes) -> str:
    for prefix, mime in _IMAGE_SIGNATURES:
        if data.startswith(prefix):
            return mime
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def _image_data_url(data: bytes) -> str:
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:{_guess_image_mime(data)};base64,{encoded}"


class ModelClient:
    """
    Single-shot chat completion client.

    Each call is one request: fixed temperature, bounded output, no streaming
    and no retries. Failures never propagate; ``analyze`` returns
    ``FALLBACK_MESSAGE`` instead.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = (endpoint or settings.OPENAI_ENDPOINT).rstrip("/")
        self.model = model or settings.OPENAI_MODEL
        self.temperature = settings.LLM_TEMPERATURE
        self.max_tokens = settings.LLM_MAX_TOKENS

        headers = {"Authorization": f"Bearer {api_key or settings.OPENAI_API_KEY}"}
        self.client = httpx.AsyncClient(
            timeout=float(settings.LLM_TIMEOUT),
            headers=headers,
            transport=transport,
        )

    def _build_payload(self, request: ModelRequest) -> dict:
        if request.image:
            user_content = [
                {"type": "text", "text": request.user_prompt},
                {"type": "image_url", "image_url": {"url": _image_data_url(request.image)}},
            ]
        else:
            user_content = request.user_prompt

        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": user_content},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "frequency_penalty": 0.0,
        }

    async def analyze(
        self,
        system_prompt: str,
        user_prompt: str,
        image: Optional[bytes] = None,
    ) -> str:
        """Generate a completion, optionally grounded on one image."""
        try:
            payload = self._build_payload(
                ModelRequest(system_prompt=system_prompt, user_prompt=user_prompt, image=image)
            )
            response = await self.client.post(
                f"{self.endpoint}/v1/chat/completions",
                json=payload,
            )
            response.raise_for_status()
            result = response.json()
            content = result["choices"][0]["message"]["content"]
            if not isinstance(content, str) or not content.strip():
                raise ValueError("Empty completion content")
            return content.strip()

        except httpx.TimeoutException:
            logger.error(f"Model request timed out after {settings.LLM_TIMEOUT}s")
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Model request failed ({e.response.status_code}): {e.response.text[:300]}"
            )
        except Exception as e:
            logger.error(f"Model generation error: {e}")

        return FALLBACK_MESSAGE

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()
