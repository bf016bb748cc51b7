"""Core types and DTOs for the Image Description Gateway."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ProviderFamily(str, Enum):
    """Supported multimodal providers (one adapter each)."""

    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"


# Unknown model identifiers are sent here unless strict routing is enabled
DEFAULT_FAMILY = ProviderFamily.OPENAI


# ---------------------------------------------------------------------------
# Routing table: public model identifier → (family, provider model id)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ModelRoute:
    family: ProviderFamily
    model: str
    is_fallback: bool = False


MODEL_ROUTES: dict[str, ModelRoute] = {
    "gpt-4o": ModelRoute(ProviderFamily.OPENAI, "gpt-4o"),
    "gpt-4-turbo": ModelRoute(ProviderFamily.OPENAI, "gpt-4-turbo"),
    "gemini-1.5-flash": ModelRoute(ProviderFamily.GEMINI, "gemini-1.5-flash"),
    "claude-3": ModelRoute(ProviderFamily.ANTHROPIC, "claude-3-sonnet-20240229"),
    "claude-3-sonnet-20240229": ModelRoute(ProviderFamily.ANTHROPIC, "claude-3-sonnet-20240229"),
}


# ---------------------------------------------------------------------------
# Request / Result
# ---------------------------------------------------------------------------


@dataclass
class DescriptionRequest:
    """One inbound "describe this image" call. Lives for a single request."""

    image_url: str | None = None
    api_key: str | None = None
    model: str = "gpt-4o"

    def __repr__(self) -> str:
        # Never render the caller's key
        return f"DescriptionRequest(image_url={self.image_url!r}, model={self.model!r})"


@dataclass
class DescriptionResult:
    """Normalized output contract: both fields non-empty.

    provider/model/latency_ms are diagnostics only and are not serialized
    into the HTTP body.
    """

    alt_text: str
    long_description: str
    provider: ProviderFamily | None = None
    model: str = ""
    latency_ms: int = 0

    def to_dict(self) -> dict[str, str]:
        return {"altText": self.alt_text, "longDescription": self.long_description}
