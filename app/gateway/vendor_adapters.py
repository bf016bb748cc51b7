"""Vendor-Specific Adapters — protocol-level handling for each provider.

Each adapter turns "describe this image" into the provider's HTTP protocol,
sends it, and returns a DescriptionResult via the shared normalizer.

Vendor-specific behaviors:
  - OpenAI: chat completions, system + user turn with an image_url part
  - Gemini: generateContent with the image downloaded and inlined as base64,
    finishReason: SAFETY → ProviderCallFailed
  - Anthropic: messages API, user turn with an image source URL + text

Adapters are built per request with the caller's key and open a
short-lived httpx.AsyncClient per call.
"""

from __future__ import annotations

import base64
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from app.core.config import settings
from app.gateway.errors import ImageDownloadFailed, ProviderCallFailed
from app.gateway.normalizer import normalize_description
from app.gateway.prompts import DESCRIPTION_PROMPT, SYSTEM_PROMPT
from app.gateway.types import DescriptionResult, ProviderFamily

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


class BaseVisionAdapter(ABC):
    """Base class for all provider adapters."""

    family: ProviderFamily
    display_name: str = ""

    def __init__(
        self,
        api_key: str,
        timeout: float | None = None,
        max_tokens: int | None = None,
        api_url: str | None = None,
    ):
        self.api_key = api_key
        self.timeout = timeout if timeout is not None else settings.provider_timeout_seconds
        self.max_tokens = max_tokens if max_tokens is not None else settings.description_max_tokens
        self.api_url = api_url or self.default_api_url()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(api_url={self.api_url!r}, timeout={self.timeout})"

    @abstractmethod
    def default_api_url(self) -> str: ...

    @abstractmethod
    async def generate_text(self, image_url: str, model: str) -> str:
        """Call the provider and return its raw reply text."""
        ...

    async def describe(self, image_url: str, model: str) -> DescriptionResult:
        """Describe an image and normalize the reply into alt text + long description."""
        start = time.monotonic()
        text = await self.generate_text(image_url, model)
        result = normalize_description(text)
        result.provider = self.family
        result.model = model
        result.latency_ms = int((time.monotonic() - start) * 1000)
        return result

    async def _post_json(self, url: str, payload: dict, headers: dict[str, str]) -> dict[str, Any]:
        """POST a JSON payload and return the decoded body.

        Timeouts, transport errors and non-2xx statuses become ProviderCallFailed.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    url,
                    json=payload,
                    headers={**headers, "Content-Type": "application/json"},
                )
        except httpx.TimeoutException:
            raise ProviderCallFailed(f"{self.display_name} timeout after {self.timeout}s", error_code="TIMEOUT")
        except httpx.RequestError as e:
            raise ProviderCallFailed(f"{self.display_name} transport error: {type(e).__name__}")

        if resp.status_code == 429:
            raise ProviderCallFailed(f"Rate limited by {self.display_name}", status_code=429, error_code="429")

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ProviderCallFailed(
                f"{self.display_name} HTTP {status}: {self._redact(e.response.text[:500])}",
                status_code=status,
                error_code=str(status),
            )

        try:
            data = resp.json()
        except ValueError:
            raise ProviderCallFailed(f"{self.display_name} returned a non-JSON body", status_code=resp.status_code)

        if not isinstance(data, dict):
            raise ProviderCallFailed(
                f"{self.display_name} returned a JSON {type(data).__name__}, expected an object",
                status_code=resp.status_code,
            )
        return data

    def _unexpected_shape(self, what: str) -> ProviderCallFailed:
        return ProviderCallFailed(f"{self.display_name} response has an unexpected shape: {what}")

    def _redact(self, text: str) -> str:
        """Provider error bodies sometimes echo the key back."""
        if self.api_key and self.api_key in text:
            return text.replace(self.api_key, "[REDACTED]")
        return text


# ---------------------------------------------------------------------------
# OpenAI Adapter (chat completions)
# ---------------------------------------------------------------------------


class OpenAIAdapter(BaseVisionAdapter):
    """OpenAI Chat Completions adapter with an image_url content part."""

    family = ProviderFamily.OPENAI
    display_name = "OpenAI"

    def default_api_url(self) -> str:
        return settings.openai_api_url

    def build_payload(self, image_url: str, model: str) -> dict:
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": DESCRIPTION_PROMPT},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                },
            ],
            "max_tokens": self.max_tokens,
        }

    async def generate_text(self, image_url: str, model: str) -> str:
        data = await self._post_json(
            self.api_url,
            self.build_payload(image_url, model),
            {"Authorization": f"Bearer {self.api_key}"},
        )
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise self._unexpected_shape("no choices[0].message.content")
        if content is not None and not isinstance(content, str):
            raise self._unexpected_shape("message.content is not a string")
        return content or ""


# ---------------------------------------------------------------------------
# Gemini Adapter (Google AI generateContent, inline image bytes)
# ---------------------------------------------------------------------------


async def download_image(
    image_url: str,
    timeout: float | None = None,
    max_bytes: int | None = None,
) -> tuple[bytes, str]:
    """Fetch image bytes and their media type.

    The body is streamed and abandoned once it exceeds ``max_bytes``.
    Anything other than a 200 response (including timeouts, bad URLs and
    oversized bodies) raises ImageDownloadFailed.
    """
    timeout = timeout if timeout is not None else settings.image_download_timeout_seconds
    max_bytes = max_bytes if max_bytes is not None else settings.max_image_bytes
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            async with client.stream("GET", image_url) as resp:
                if resp.status_code != 200:
                    raise ImageDownloadFailed(
                        f"Error downloading image: HTTP {resp.status_code}", status_code=resp.status_code
                    )

                declared = resp.headers.get("content-length", "")
                if declared.isdigit() and int(declared) > max_bytes:
                    raise ImageDownloadFailed(f"Image too large: {declared} bytes declared, limit {max_bytes}")

                chunks: list[bytes] = []
                received = 0
                async for chunk in resp.aiter_bytes():
                    received += len(chunk)
                    if received > max_bytes:
                        raise ImageDownloadFailed(f"Image too large: over {max_bytes} bytes")
                    chunks.append(chunk)
    except httpx.TimeoutException:
        raise ImageDownloadFailed(f"Image download timeout after {timeout}s")
    except (httpx.RequestError, httpx.InvalidURL) as e:
        raise ImageDownloadFailed(f"Image download error: {type(e).__name__}")

    content_type = resp.headers.get("content-type", "").split(";")[0].strip().lower()
    mime_type = content_type if content_type.startswith("image/") else DEFAULT_IMAGE_MIME_TYPE
    return b"".join(chunks), mime_type


class GeminiAdapter(BaseVisionAdapter):
    """Google Gemini adapter: downloads the image, inlines it, detects SAFETY blocks."""

    family = ProviderFamily.GEMINI
    display_name = "Gemini"

    def __init__(
        self,
        api_key: str,
        download_timeout: float | None = None,
        max_image_bytes: int | None = None,
        **kwargs,
    ):
        super().__init__(api_key=api_key, **kwargs)
        self.download_timeout = (
            download_timeout if download_timeout is not None else settings.image_download_timeout_seconds
        )
        self.max_image_bytes = max_image_bytes if max_image_bytes is not None else settings.max_image_bytes

    def default_api_url(self) -> str:
        return settings.gemini_api_url

    def build_payload(self, image_data: bytes, mime_type: str) -> dict:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": DESCRIPTION_PROMPT},
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(image_data).decode("ascii"),
                            }
                        },
                    ],
                }
            ],
            "generationConfig": {"maxOutputTokens": self.max_tokens},
        }

    async def generate_text(self, image_url: str, model: str) -> str:
        image_data, mime_type = await download_image(
            image_url, timeout=self.download_timeout, max_bytes=self.max_image_bytes
        )

        # Key goes in a header so it never shows up in request URLs
        data = await self._post_json(
            f"{self.api_url.rstrip('/')}/{model}:generateContent",
            self.build_payload(image_data, mime_type),
            {"x-goog-api-key": self.api_key},
        )

        try:
            return self._extract_text(data)
        except (AttributeError, KeyError, IndexError, TypeError):
            raise self._unexpected_shape("candidates[0].content.parts")

    @staticmethod
    def _extract_text(data: dict) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason", "")
            if block_reason:
                raise ProviderCallFailed(f"Gemini blocked the prompt: {block_reason}", error_code=f"BLOCKED_{block_reason}")
            raise ProviderCallFailed("Gemini response has no candidates")

        candidate = candidates[0]
        if candidate.get("finishReason") == "SAFETY":
            raise ProviderCallFailed("Gemini safety filter triggered", error_code="SAFETY")

        parts = (candidate.get("content") or {}).get("parts") or []
        # str.join raises TypeError on non-string text
        return "".join(p.get("text", "") for p in parts)


# ---------------------------------------------------------------------------
# Anthropic Adapter (messages API, image source by URL)
# ---------------------------------------------------------------------------


class AnthropicAdapter(BaseVisionAdapter):
    """Anthropic Messages adapter with a URL image source."""

    family = ProviderFamily.ANTHROPIC
    display_name = "Anthropic"

    def default_api_url(self) -> str:
        return settings.anthropic_api_url

    def build_payload(self, image_url: str, model: str) -> dict:
        return {
            "model": model,
            "max_tokens": self.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "image", "source": {"type": "url", "url": image_url}},
                        {"type": "text", "text": DESCRIPTION_PROMPT},
                    ],
                }
            ],
        }

    async def generate_text(self, image_url: str, model: str) -> str:
        data = await self._post_json(
            self.api_url,
            self.build_payload(image_url, model),
            {"x-api-key": self.api_key, "anthropic-version": settings.anthropic_version},
        )
        try:
            text = next(
                (block["text"] for block in data.get("content") or [] if block.get("type") == "text"),
                None,
            )
        except (AttributeError, KeyError, TypeError):
            raise self._unexpected_shape("content blocks")

        if text is None:
            raise ProviderCallFailed("Anthropic response has no text content block")
        if not isinstance(text, str):
            raise self._unexpected_shape("text block is not a string")
        return text


# ---------------------------------------------------------------------------
# Adapter registry
# ---------------------------------------------------------------------------

ADAPTER_REGISTRY: dict[ProviderFamily, type[BaseVisionAdapter]] = {
    ProviderFamily.OPENAI: OpenAIAdapter,
    ProviderFamily.GEMINI: GeminiAdapter,
    ProviderFamily.ANTHROPIC: AnthropicAdapter,
}


def get_adapter(family: ProviderFamily, api_key: str, **kwargs) -> BaseVisionAdapter:
    """Factory: get the appropriate adapter for a provider family."""
    cls = ADAPTER_REGISTRY.get(family)
    if cls is None:
        raise ValueError(f"No adapter registered for provider: {family}")
    return cls(api_key=api_key, **kwargs)
