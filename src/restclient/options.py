from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import httpx

from restclient.errors import OptionError
from restclient.handlers import ErrorHandler, PrepareRequestHook


@dataclass
class ClientConfig:
    """Mutable view of a client's configuration while options are applied."""

    base_url: httpx.URL
    http_client: httpx.Client | httpx.AsyncClient | None = None
    prepare_request: PrepareRequestHook | None = None
    error_handler: ErrorHandler | None = None
    timeout: float | None = None


Option = Callable[[ClientConfig], None]


def with_http_client(client: httpx.Client | httpx.AsyncClient | None) -> Option:
    """Send requests through ``client`` instead of a client-owned one.

    The injected client is shared: the rest client never closes it.
    """

    def apply(config: ClientConfig) -> None:
        if client is None:
            raise OptionError("http client must not be None")
        config.http_client = client

    return apply


def with_prepare_request(hook: PrepareRequestHook) -> Option:
    """Run ``hook`` on every built request before it is returned."""

    def apply(config: ClientConfig) -> None:
        if not callable(hook):
            raise OptionError(f"prepare request hook must be callable, got {type(hook).__name__}")
        config.prepare_request = hook

    return apply


def with_error_handler(handler: ErrorHandler) -> Option:
    """Replace the default handling of responses with status >= 400."""

    def apply(config: ClientConfig) -> None:
        if not callable(handler):
            raise OptionError(f"error handler must be callable, got {type(handler).__name__}")
        config.error_handler = handler

    return apply


def with_timeout(seconds: float) -> Option:
    """Default timeout of the client-owned transport."""

    def apply(config: ClientConfig) -> None:
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)) or seconds <= 0:
            raise OptionError(f"timeout must be a positive number of seconds, got {seconds!r}")
        config.timeout = float(seconds)

    return apply


__all__ = [
    "ClientConfig",
    "Option",
    "with_error_handler",
    "with_http_client",
    "with_prepare_request",
    "with_timeout",
]
