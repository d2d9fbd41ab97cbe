from __future__ import annotations

from typing import Callable, Iterator

import httpx
import pytest

from restclient.config import settings as settings_module

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def clear_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("RESTCLIENT_BASE_URL", "RESTCLIENT_TIMEOUT_SECONDS", "RESTCLIENT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings_module.get_settings.cache_clear()
    yield
    settings_module.get_settings.cache_clear()


@pytest.fixture
def recorded() -> list[httpx.Request]:
    return []


@pytest.fixture
def mock_http(recorded: list[httpx.Request]) -> Iterator[Callable[[Handler], httpx.Client]]:
    """Build an ``httpx.Client`` whose transport answers with ``handler``."""

    clients: list[httpx.Client] = []

    def factory(handler: Handler) -> httpx.Client:
        def record(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(record))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
