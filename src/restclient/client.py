from __future__ import annotations

import inspect
import logging
import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError
from pydantic_core import from_json, to_json

from restclient.config.settings import Settings, get_settings
from restclient.errors import (
    DecodeError,
    InvalidURLError,
    OptionError,
    PathResolutionError,
    SerializationError,
)
from restclient.handlers import default_error_handler
from restclient.options import ClientConfig, Option, with_timeout

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"

T = TypeVar("T")
TimeoutArg = Any


@dataclass(frozen=True)
class RestResponse(Generic[T]):
    """Raw response plus the body decoded into the requested type, if any."""

    response: httpx.Response
    data: T | None = None

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers


def parse_base_url(raw: str) -> httpx.URL:
    """Parse and validate an absolute http(s) base URL."""

    if not isinstance(raw, (str, httpx.URL)):
        raise InvalidURLError(f"invalid url: expected a string, got {type(raw).__name__}")
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise InvalidURLError(f"invalid url: {exc}") from exc
    if url.scheme not in ("http", "https"):
        raise InvalidURLError(f"invalid url: {raw!r} is not an absolute http(s) URL")
    if not url.host:
        raise InvalidURLError(f"invalid url: {raw!r} has no host")
    return url


def join_path(base_path: str, rel_path: str) -> str:
    """Join ``rel_path`` onto ``base_path`` segment-wise and clean the result.

    ``/v1/`` + ``widgets`` gives ``/v1/widgets``; duplicate separators and
    ``.``/``..`` segments collapse, a trailing slash is dropped.
    """

    parts = [part for part in (base_path, rel_path) if part]
    if not parts:
        return "/"
    joined = posixpath.normpath("/".join(parts))
    if joined.startswith("//"):
        joined = "/" + joined.lstrip("/")
    if not joined.startswith("/"):
        joined = "/" + joined
    return joined


def resolve_url(base_url: httpx.URL, rel_path: str) -> httpx.URL:
    if not isinstance(rel_path, str):
        raise PathResolutionError(f"error parsing path: expected a string, got {type(rel_path).__name__}")
    path, _, fragment = rel_path.partition("#")
    path, sep, query = path.partition("?")
    reference = join_path(base_url.path, path)
    if sep:
        reference += "?" + query
    if fragment:
        reference += "#" + fragment
    try:
        return base_url.join(reference)
    except httpx.InvalidURL as exc:
        raise PathResolutionError(f"error parsing path {rel_path!r}: {exc}") from exc


def encode_body(body: Any) -> bytes:
    try:
        content = to_json(body)
        # NaN and Infinity are not JSON
        from_json(content, allow_inf_nan=False)
    except (ValueError, TypeError) as exc:
        raise SerializationError(f"error encoding request body: {exc}") from exc
    return content


def _is_coroutine_function(hook: Any) -> bool:
    if hook is None:
        return False
    return inspect.iscoroutinefunction(hook) or inspect.iscoroutinefunction(getattr(hook, "__call__", None))


def decode_body(response: httpx.Response, response_model: Any) -> Any:
    try:
        return TypeAdapter(response_model).validate_json(response.content)
    except ValidationError as exc:
        raise DecodeError(f"error unmarshalling response: {exc}", response=response) from exc


class BaseRestClient(ABC):
    """Shared construction and request-building logic.

    Configuration is fixed once ``__init__`` returns, so one instance can be
    used from many threads or tasks at once.
    """

    http_client_type: ClassVar[type]
    awaits_hooks: ClassVar[bool] = False

    def __init__(self, base_url: str, *options: Option) -> None:
        config = ClientConfig(base_url=parse_base_url(base_url))
        for option in options:
            option(config)

        if not self.awaits_hooks:
            for name, hook in (("prepare request hook", config.prepare_request), ("error handler", config.error_handler)):
                if _is_coroutine_function(hook):
                    raise OptionError(f"{type(self).__name__} cannot await the {name} {hook!r}")

        if config.http_client is None:
            timeout = config.timeout or get_settings().timeout_seconds
            self._http = self._new_http_client(timeout)
            self._owns_http = True
        elif isinstance(config.http_client, self.http_client_type):
            self._http = config.http_client
            self._owns_http = False
        else:
            raise OptionError(
                f"{type(self).__name__} requires an {self.http_client_type.__module__}."
                f"{self.http_client_type.__name__}, got {type(config.http_client).__name__}"
            )

        self._base_url = config.base_url
        self._prepare_request = config.prepare_request
        self._error_handler = config.error_handler or self._default_error_handler()

    @classmethod
    def from_settings(cls, *options: Option, settings: Settings | None = None):
        """Build a client from ``RESTCLIENT_*`` settings; later options win."""

        settings = settings or get_settings()
        if not settings.base_url:
            raise InvalidURLError("invalid url: base_url is not configured (set RESTCLIENT_BASE_URL)")
        return cls(settings.base_url, with_timeout(settings.timeout_seconds), *options)

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    def get_base_url(self) -> httpx.URL:
        return self._base_url

    @abstractmethod
    def _new_http_client(self, timeout: float):
        ...

    @abstractmethod
    def _default_error_handler(self):
        ...

    def _build(self, method: str, rel_path: str, body: Any, timeout: TimeoutArg) -> httpx.Request:
        url = resolve_url(self._base_url, rel_path)
        headers = {"Accept": JSON_MEDIA_TYPE}
        content = None
        if body is not None:
            content = encode_body(body)
            headers["Content-Type"] = JSON_MEDIA_TYPE
        return self._http.build_request(method, url, content=content, headers=headers, timeout=timeout)


class RestClient(BaseRestClient):
    """JSON REST helper on top of a blocking ``httpx.Client``."""

    http_client_type = httpx.Client

    def _new_http_client(self, timeout: float) -> httpx.Client:
        return httpx.Client(timeout=timeout)

    def _default_error_handler(self):
        return default_error_handler

    def build_request(
        self,
        method: str,
        rel_path: str,
        body: Any = None,
        *,
        timeout: TimeoutArg = httpx.USE_CLIENT_DEFAULT,
    ) -> httpx.Request:
        """Build a JSON request for ``rel_path`` under the base URL.

        ``timeout`` is bound to this request only and bounds the whole send.
        """

        request = self._build(method, rel_path, body, timeout)
        if self._prepare_request is not None:
            self._prepare_request(request)
        return request

    def execute(self, request: httpx.Request, response_model: Any = None) -> RestResponse[Any]:
        """Send ``request`` and decode the body into ``response_model``.

        Responses with status >= 400 go through the error handler and are never
        decoded. ``httpx.TransportError`` propagates unchanged.
        """

        logger.debug("Sending %s %s", request.method, request.url)
        response = self._http.send(request, stream=True)
        logger.debug("Received %s for %s %s", response.status_code, request.method, request.url)

        if response.status_code >= httpx.codes.BAD_REQUEST:
            response, error = self._error_handler(None, request, response)
            if error is not None:
                raise error
            return RestResponse(response=response)

        try:
            response.read()
        finally:
            response.close()
        if response_model is None:
            return RestResponse(response=response)
        return RestResponse(response=response, data=decode_body(response, response_model))

    def request(
        self,
        method: str,
        rel_path: str,
        body: Any = None,
        *,
        response_model: Any = None,
        timeout: TimeoutArg = httpx.USE_CLIENT_DEFAULT,
    ) -> RestResponse[Any]:
        return self.execute(self.build_request(method, rel_path, body, timeout=timeout), response_model)

    def close(self) -> None:
        """Close the transport if this client created it."""

        if self._owns_http:
            self._http.close()

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = [
    "BaseRestClient",
    "JSON_MEDIA_TYPE",
    "RestClient",
    "RestResponse",
    "join_path",
    "parse_base_url",
    "resolve_url",
]
