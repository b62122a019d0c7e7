"""Language model gateway backed by Gemini (google-genai).

Two entry points share one call path (timeout + retry + error translation):

- LanguageModelGateway.invoke(prompt, shape): text completion whose reply is
  expected to embed a JSON object or array. Returns the parsed value.
- ImageGateway.generate(prompt): image-capable completion. Returns the first
  inline image (bytes + MIME type) or None when the model produced no image.

Failure contract:
- Transient failures (HTTP 429/503, transport errors, timeouts) are retried
  up to MAX_RETRIES attempts with exponential backoff.
- Any failure left after retries surfaces as GatewayError.
- Unparsable or wrongly shaped JSON surfaces as MalformedResponse.

The google-genai client is synchronous, so calls run in a worker thread via
asyncio.to_thread, bounded by asyncio.wait_for.
"""

import asyncio
import json
from enum import Enum
from typing import Any, NamedTuple, Optional

import aiohttp
import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from recipe_planner.utils.config import config
from recipe_planner.utils.errors import GatewayError, MalformedResponse
from recipe_planner.utils.logger import logger
from recipe_planner.utils.resilience import with_retry

# Rate limited / service unavailable
RETRYABLE_STATUS_CODES = frozenset({429, 503})

# Last-resort detection for transport failures wrapped in generic exceptions
TRANSIENT_KEYWORDS = ("fetch failed", "connection reset", "connection aborted", "temporarily unavailable")


class ResponseShape(str, Enum):
    """JSON value a model reply is expected to embed."""

    OBJECT = "object"
    ARRAY = "array"


class GeneratedImage(NamedTuple):
    data: bytes
    mime_type: str


def is_transient_error(exc: Exception) -> bool:
    """Classify an exception raised by a model call as retryable or fatal."""
    if isinstance(exc, genai_errors.APIError):
        return exc.code in RETRYABLE_STATUS_CODES
    if isinstance(
        exc,
        (httpx.TransportError, aiohttp.ClientConnectionError, ConnectionError, asyncio.TimeoutError, TimeoutError),
    ):
        return True
    error_str = str(exc).lower()
    return any(keyword in error_str for keyword in TRANSIENT_KEYWORDS)


def _first_balanced(text: str, opener: str, closer: str) -> Optional[str]:
    """Return the first balanced opener..closer substring, ignoring brackets inside JSON strings."""
    start = text.find(opener)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return text[start : idx + 1]
    return None


def extract_json(text: Optional[str], shape: ResponseShape) -> Any:
    """Parse the first balanced JSON object/array embedded in a model reply.

    Args:
        text: Raw model reply (may include prose or markdown fences around the JSON).
        shape: Whether a JSON object or a JSON array is expected.

    Returns:
        Parsed dict (OBJECT) or list (ARRAY).

    Raises:
        MalformedResponse: No balanced candidate, invalid JSON, or wrong JSON type.
    """
    if not text:
        raise MalformedResponse("Empty model response")

    opener, closer = ("{", "}") if shape == ResponseShape.OBJECT else ("[", "]")
    candidate = _first_balanced(text, opener, closer)
    if candidate is None:
        raise MalformedResponse(f"No JSON {shape.value} found in model response")

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Invalid JSON {shape.value} in model response: {e}") from e

    expected_type = dict if shape == ResponseShape.OBJECT else list
    if not isinstance(parsed, expected_type):
        raise MalformedResponse(f"Expected JSON {shape.value}, got {type(parsed).__name__}")
    return parsed


class _GeminiCaller:
    """Shared call path: worker thread + per-call timeout + retry + error translation."""

    def __init__(
        self,
        model: str,
        client: Optional[genai.Client] = None,
        max_attempts: Optional[int] = None,
        base_delay: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.client = client if client is not None else genai.Client(api_key=config.GEMINI_API_KEY)
        self.model = model
        self.max_attempts = max_attempts if max_attempts is not None else config.MAX_RETRIES
        self.base_delay = base_delay if base_delay is not None else config.DELAY_BETWEEN_RETRIES
        self.timeout = timeout if timeout is not None else config.GEMINI_TIMEOUT_SECONDS
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got: {self.max_attempts}")

    async def _generate(
        self,
        contents: Any,
        generation_config: Optional[types.GenerateContentConfig],
        operation_name: str,
    ) -> Any:
        async def _call():
            return await asyncio.wait_for(
                asyncio.to_thread(
                    self.client.models.generate_content,
                    model=self.model,
                    contents=contents,
                    config=generation_config,
                ),
                timeout=self.timeout,
            )

        try:
            return await with_retry(
                _call,
                max_attempts=self.max_attempts,
                classify=is_transient_error,
                base_delay=self.base_delay,
                exponential=config.EXPONENTIAL_BACKOFF,
                operation_name=operation_name,
            )
        except Exception as e:
            raise GatewayError(f"{operation_name} failed ({self.model}): {e}") from e


class LanguageModelGateway(_GeminiCaller):
    """Text completion gateway returning JSON embedded in the model reply."""

    def __init__(self, client: Optional[genai.Client] = None, model: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(model=model or config.GEMINI_MODEL, client=client, **kwargs)
        self.generation_config = types.GenerateContentConfig(
            temperature=config.TEMPERATURE,
            max_output_tokens=config.MAX_OUTPUT_TOKENS,
        )

    async def complete(self, prompt: str) -> str:
        """Raw text completion (retries included)."""
        response = await self._generate(prompt, self.generation_config, "Gemini text call")
        return response.text or ""

    async def invoke(self, prompt: str, shape: ResponseShape) -> Any:
        """Call the model and return the JSON value embedded in its reply.

        Raises:
            GatewayError: Call failed after retries, or failed with a non-retryable error.
            MalformedResponse: Reply had no parsable JSON of the expected shape.
        """
        text = await self.complete(prompt)
        return extract_json(text, shape)


class ImageGateway(_GeminiCaller):
    """Image-capable gateway returning inline image bytes."""

    def __init__(self, client: Optional[genai.Client] = None, model: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(model=model or config.IMAGE_MODEL, client=client, **kwargs)
        self.generation_config = types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"])

    async def generate(self, prompt: str) -> Optional[GeneratedImage]:
        """Generate an image for `prompt`.

        Returns:
            GeneratedImage for the first inline image part, None if the model answered without one.

        Raises:
            GatewayError: Call failed after retries.
        """
        response = await self._generate(prompt, self.generation_config, "Gemini image call")

        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                inline = getattr(part, "inline_data", None)
                if inline is not None and getattr(inline, "data", None):
                    return GeneratedImage(data=inline.data, mime_type=inline.mime_type or "image/png")

        logger.debug("Image model returned no inline image data")
        return None
