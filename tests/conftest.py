from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import settings

# Override settings for tests
settings.app_env = "development"
settings.strict_model_routing = False
settings.sentry_dsn = ""

from app.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def provider_http():
    """Patch the adapters' httpx.AsyncClient.

    Returns an installer: ``mock_client = provider_http(post=..., get=...)``.
    ``post`` feeds ``client.post``; ``get`` feeds the image download, which
    goes through ``client.stream("GET", url)``. Each may be an httpx.Response
    (returned) or an exception (raised). Patching starts only when the
    installer is called, so the ASGI test client built by the ``client``
    fixture stays real.
    """
    patchers = []

    def _install(post=None, get=None) -> AsyncMock:
        patcher = patch("app.gateway.vendor_adapters.httpx.AsyncClient")
        mock_client_cls = patcher.start()
        patchers.append(patcher)

        mock_client = AsyncMock()
        if isinstance(post, BaseException):
            mock_client.post.side_effect = post
        elif post is not None:
            mock_client.post.return_value = post

        mock_client.stream = MagicMock()
        if isinstance(get, BaseException):
            mock_client.stream.side_effect = get
        elif get is not None:
            stream_ctx = MagicMock()
            stream_ctx.__aenter__ = AsyncMock(return_value=get)
            stream_ctx.__aexit__ = AsyncMock(return_value=None)
            mock_client.stream.return_value = stream_ctx

        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=None)
        mock_client_cls.return_value = mock_client
        mock_client.client_cls = mock_client_cls
        return mock_client

    yield _install

    for patcher in reversed(patchers):
        patcher.stop()
