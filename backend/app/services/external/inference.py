"""
Inference Client - one multimodal completion call per verification request

Images go first in request order, each optionally followed by a
"Frame i of N" label, and the rendered prompt is always the trailing text
block. Every transport, status or envelope failure surfaces as UpstreamError.
"""
import logging
from typing import List, Optional, Protocol, Sequence, Tuple

import httpx
import requests
from openai import OpenAI, OpenAIError

from app.core.config import InferenceConfig
from app.core.constants import IMAGE_MEDIA_TYPE, UPSTREAM_LOG_BODY_LIMIT
from app.core.exceptions import ConfigurationError, UpstreamError
from app.utils.images import to_data_url

logger = logging.getLogger(__name__)

IMAGE_PART = "image"
TEXT_PART = "text"

ContentPart = Tuple[str, str]


class InferenceClient(Protocol):
    """Interface for upstream multimodal backends"""

    def invoke(
        self,
        images: Sequence[str],
        prompt_text: str,
        max_output_tokens: int,
        *,
        label_frames: bool = False,
    ) -> str: ...


def build_content_parts(images: Sequence[str], prompt_text: str, label_frames: bool = False) -> List[ContentPart]:
    """
    Order the multimodal content for one request

    Args:
        images: Base64 payloads in request (chronological) order
        prompt_text: Rendered instruction text
        label_frames: Insert "Frame i of N" after each image

    Returns:
        List of (part type, value) tuples ending with the prompt text
    """
    parts: List[ContentPart] = []
    total = len(images)
    for index, image in enumerate(images, start=1):
        parts.append((IMAGE_PART, image))
        if label_frames:
            parts.append((TEXT_PART, f"Frame {index} of {total}"))
    parts.append((TEXT_PART, prompt_text))
    return parts


class AnthropicInferenceClient:
    """Client for the Anthropic Messages API over plain HTTP"""

    def __init__(self, config: InferenceConfig) -> None:
        self._api_key = config.api_key
        self._model = config.model
        self._api_url = config.api_url
        self._api_version = config.api_version
        self._timeout = config.timeout_seconds

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "anthropic-version": self._api_version,
            "x-api-key": self._api_key,
        }

    @staticmethod
    def _to_block(part: ContentPart) -> dict:
        kind, value = part
        if kind == IMAGE_PART:
            return {
                "type": "image",
                "source": {"type": "base64", "media_type": IMAGE_MEDIA_TYPE, "data": value},
            }
        return {"type": "text", "text": value}

    def build_payload(self, images: Sequence[str], prompt_text: str, max_output_tokens: int,
                      label_frames: bool = False) -> dict:
        """Request body for a single user turn"""
        content = [self._to_block(part) for part in build_content_parts(images, prompt_text, label_frames)]
        return {
            "model": self._model,
            "max_tokens": max_output_tokens,
            "messages": [{"role": "user", "content": content}],
        }

    def invoke(self, images: Sequence[str], prompt_text: str, max_output_tokens: int, *,
               label_frames: bool = False) -> str:
        payload = self.build_payload(images, prompt_text, max_output_tokens, label_frames)
        logger.info(f"[INFERENCE] Calling {self._model} with {len(images)} image(s), max_tokens={max_output_tokens}")

        try:
            response = requests.post(self._api_url, headers=self._headers(), json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            logger.error(f"[INFERENCE] ✗ Network failure: {e}")
            raise UpstreamError(f"Upstream request failed: {e}") from e

        if not response.ok:
            logger.error(
                f"[INFERENCE] ✗ Upstream error: {response.status_code} - "
                f"{response.text[:UPSTREAM_LOG_BODY_LIMIT]}"
            )
            raise UpstreamError(f"Upstream returned HTTP {response.status_code}")

        try:
            envelope = response.json()
            blocks = envelope.get("content") or []
            text = next(
                (b.get("text") for b in blocks if isinstance(b, dict) and b.get("type") == "text"),
                None,
            )
        except (ValueError, AttributeError) as e:
            logger.error(f"[INFERENCE] ✗ Malformed upstream envelope: {e}")
            raise UpstreamError("Malformed upstream response") from e

        if not text:
            logger.error("[INFERENCE] ✗ No text content in upstream response")
            raise UpstreamError("No text response from upstream")

        logger.info(f"[INFERENCE] ✓ Received {len(text)} chars")
        return text


class OpenAIInferenceClient:
    """Client for OpenAI's Chat Completions API"""

    def __init__(self, config: InferenceConfig, client: Optional[OpenAI] = None,
                 http_client: Optional[httpx.Client] = None) -> None:
        # One upstream call per request: the SDK must not retry on its own
        self._client = client or OpenAI(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
            http_client=http_client,
        )
        self._model = config.model

    @staticmethod
    def _to_part(part: ContentPart) -> dict:
        kind, value = part
        if kind == IMAGE_PART:
            return {
                "type": "image_url",
                "image_url": {"url": to_data_url(value, IMAGE_MEDIA_TYPE), "detail": "high"},
            }
        return {"type": "text", "text": value}

    def invoke(self, images: Sequence[str], prompt_text: str, max_output_tokens: int, *,
               label_frames: bool = False) -> str:
        content = [self._to_part(part) for part in build_content_parts(images, prompt_text, label_frames)]
        logger.info(f"[INFERENCE] Calling {self._model} with {len(images)} image(s), max_tokens={max_output_tokens}")

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                max_tokens=max_output_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except OpenAIError as e:
            logger.error(f"[INFERENCE] ✗ Upstream error: {str(e)[:UPSTREAM_LOG_BODY_LIMIT]}")
            raise UpstreamError("Upstream request failed") from e

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            logger.error(f"[INFERENCE] ✗ Malformed upstream envelope: {e}")
            raise UpstreamError("Malformed upstream response") from e

        if not text:
            logger.error("[INFERENCE] ✗ No text content in upstream response")
            raise UpstreamError("No text response from upstream")

        logger.info(f"[INFERENCE] ✓ Received {len(text)} chars")
        return text


def create_inference_client(config: InferenceConfig) -> InferenceClient:
    """
    Factory to create the configured upstream client

    Raises:
        ConfigurationError if the provider is unknown or its key is missing
    """
    if config.provider not in ("anthropic", "openai"):
        raise ConfigurationError(f"Unknown LLM_PROVIDER '{config.provider}'")
    if not config.api_key:
        raise ConfigurationError(f"API key for provider '{config.provider}' is missing")

    if config.provider == "openai":
        return OpenAIInferenceClient(config)
    return AnthropicInferenceClient(config)
