from __future__ import annotations

import httpx
import pytest

from restclient import (
    InvalidURLError,
    OptionError,
    RestClient,
    default_error_handler,
    with_error_handler,
    with_http_client,
    with_prepare_request,
    with_timeout,
)
from restclient.client import BaseRestClient
from restclient.config.settings import Settings
from restclient.options import ClientConfig

BASE = 'https://api.example.com/v1/'


def test_defaults() -> None:
    with RestClient(BASE) as client:
        assert isinstance(client._http, httpx.Client)
        assert client._owns_http is True
        assert client._error_handler is default_error_handler
        assert client._prepare_request is None
        assert client._http.timeout.read == 10.0


@pytest.mark.parametrize(
    'option',
    [
        with_http_client(None),
        with_prepare_request('not callable'),  # type: ignore[arg-type]
        with_error_handler(42),  # type: ignore[arg-type]
        with_timeout(0),
        with_timeout(-1.5),
        with_timeout('10'),  # type: ignore[arg-type]
    ],
)
def test_rejected_option_aborts_construction(option) -> None:
    with pytest.raises(OptionError):
        RestClient(BASE, option)


def test_options_apply_in_order() -> None:
    applied: list[str] = []

    def record(name: str):
        def apply(config: ClientConfig) -> None:
            applied.append(name)
            assert config.base_url.host == 'api.example.com'

        return apply

    with RestClient(BASE, record('first'), with_timeout(1), record('second')):
        pass
    assert applied == ['first', 'second']


def test_custom_option_error_propagates() -> None:
    class Unsupported(Exception):
        pass

    def reject(config: ClientConfig) -> None:
        raise Unsupported('feature flag off')

    with pytest.raises(Unsupported):
        RestClient(BASE, reject)


def test_bad_base_url_wins_over_options() -> None:
    applied: list[ClientConfig] = []
    with pytest.raises(InvalidURLError):
        RestClient('::::', applied.append)
    assert applied == []


def test_sync_client_rejects_async_transport() -> None:
    with pytest.raises(OptionError):
        RestClient(BASE, with_http_client(httpx.AsyncClient()))


def test_later_option_overrides_earlier() -> None:
    with RestClient(BASE, with_timeout(1), with_timeout(4)) as client:
        assert client._http.timeout.connect == 4.0


def test_from_settings_uses_environment(monkeypatch) -> None:
    monkeypatch.setenv('RESTCLIENT_BASE_URL', 'https://inventory.example.com/api/')
    monkeypatch.setenv('RESTCLIENT_TIMEOUT_SECONDS', '2.5')
    with RestClient.from_settings() as client:
        assert str(client.base_url) == 'https://inventory.example.com/api/'
        assert client._http.timeout.read == 2.5
        assert str(client.build_request('GET', 'items').url) == 'https://inventory.example.com/api/items'


def test_from_settings_options_override_timeout() -> None:
    settings = Settings(base_url='https://api.example.com', timeout_seconds=5)
    with RestClient.from_settings(with_timeout(1), settings=settings) as client:
        assert client._http.timeout.read == 1.0


def test_from_settings_requires_base_url() -> None:
    with pytest.raises(InvalidURLError):
        RestClient.from_settings(settings=Settings(base_url=None))


def test_sync_client_rejects_async_prepare_hook() -> None:
    async def add_token(request: httpx.Request) -> None:
        request.headers['Authorization'] = 'Bearer token'

    with pytest.raises(OptionError):
        RestClient(BASE, with_prepare_request(add_token))


def test_sync_client_rejects_async_error_handler() -> None:
    async def handler(error, request, response):
        await response.aclose()
        return response, None

    class AsyncHandler:
        async def __call__(self, error, request, response):
            return response, None

    with pytest.raises(OptionError):
        RestClient(BASE, with_error_handler(handler))
    with pytest.raises(OptionError):
        RestClient(BASE, with_error_handler(AsyncHandler()))


def test_async_hooks_rejected_before_transport_is_created(monkeypatch) -> None:
    created: list[float] = []
    monkeypatch.setattr(RestClient, '_new_http_client', lambda self, timeout: created.append(timeout))

    async def hook(request: httpx.Request) -> None:
        return None

    with pytest.raises(OptionError):
        RestClient(BASE, with_prepare_request(hook))
    assert created == []


def test_base_client_is_abstract() -> None:
    with pytest.raises(TypeError):
        BaseRestClient(BASE)
