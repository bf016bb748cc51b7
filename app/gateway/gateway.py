"""Image Description Gateway — validates, routes and dispatches one request.

Pipeline for a single call:
  1. Validate the image URL and caller key (no network before this passes)
  2. Resolve the model identifier to a provider family
  3. Build a per-request adapter with the caller's key
  4. Await the adapter (provider call + normalization)

Usage:
    gateway = DescriptionGateway()
    result = await gateway.describe(
        DescriptionRequest(image_url="https://...", api_key="sk-...", model="gpt-4o")
    )
"""

from __future__ import annotations

import logging
import time

from app.core.config import settings
from app.core.metrics import DESCRIPTION_REQUESTS, PROVIDER_DURATION
from app.gateway.errors import (
    DescriptionError,
    MissingCredential,
    MissingImageReference,
    UnknownModelIdentifier,
)
from app.gateway.types import (
    DEFAULT_FAMILY,
    MODEL_ROUTES,
    DescriptionRequest,
    DescriptionResult,
    ModelRoute,
)
from app.gateway.vendor_adapters import BaseVisionAdapter, get_adapter

logger = logging.getLogger(__name__)


def resolve_model(model: str, strict: bool = False) -> ModelRoute:
    """Map a public model identifier to its provider family.

    Unknown identifiers fall back to the default family with the identifier
    passed through as the provider model id, unless ``strict`` is set.
    """
    route = MODEL_ROUTES.get(model)
    if route is not None:
        return route
    if strict:
        raise UnknownModelIdentifier(model)
    return ModelRoute(DEFAULT_FAMILY, model, is_fallback=True)


def validate_request(request: DescriptionRequest) -> None:
    if not request.image_url or not request.image_url.strip():
        raise MissingImageReference()
    if not request.api_key or not request.api_key.strip():
        raise MissingCredential()


class DescriptionGateway:
    """Single entry point for describe-image calls.

    Holds no per-request state; safe to share across concurrent requests.
    """

    def __init__(self, strict_routing: bool | None = None, adapter_kwargs: dict | None = None):
        """
        Args:
            strict_routing: Reject unknown model identifiers (defaults to settings)
            adapter_kwargs: Extra kwargs for every adapter (e.g. timeout, max_tokens)
        """
        self.strict_routing = settings.strict_model_routing if strict_routing is None else strict_routing
        self._adapter_kwargs = adapter_kwargs or {}

    def _build_adapter(self, route: ModelRoute, api_key: str) -> BaseVisionAdapter:
        return get_adapter(route.family, api_key, **self._adapter_kwargs)

    async def describe(self, request: DescriptionRequest) -> DescriptionResult:
        """Run one request through validate → route → adapter.

        Raises a DescriptionError subclass on any failure; never returns a
        partial result.
        """
        validate_request(request)
        route = resolve_model(request.model, strict=self.strict_routing)

        if route.is_fallback:
            logger.warning(
                "Unknown model %r, falling back to %s adapter",
                request.model,
                route.family.value,
            )

        adapter = self._build_adapter(route, request.api_key)
        provider = route.family.value
        start = time.monotonic()

        try:
            result = await adapter.describe(request.image_url, route.model)
        except DescriptionError as e:
            DESCRIPTION_REQUESTS.labels(provider=provider, outcome=type(e).__name__).inc()
            logger.error(
                "%s description failed for model %s: %s",
                provider,
                route.model,
                e.detail,
                extra={"provider": provider},
            )
            raise
        finally:
            PROVIDER_DURATION.labels(provider=provider).observe(time.monotonic() - start)

        DESCRIPTION_REQUESTS.labels(provider=provider, outcome="success").inc()
        logger.info(
            "%s described image with %s in %d ms",
            provider,
            route.model,
            result.latency_ms,
            extra={"provider": provider},
        )
        return result
