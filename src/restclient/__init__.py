"""Minimal JSON REST client helper built on httpx."""

from restclient.async_client import AsyncRestClient
from restclient.client import JSON_MEDIA_TYPE, RestClient, RestResponse
from restclient.errors import (
    BadStatusError,
    DecodeError,
    InvalidURLError,
    OptionError,
    PathResolutionError,
    ResponseError,
    RestClientError,
    SerializationError,
)
from restclient.handlers import ErrorHandler, async_default_error_handler, default_error_handler
from restclient.options import (
    ClientConfig,
    Option,
    with_error_handler,
    with_http_client,
    with_prepare_request,
    with_timeout,
)

__all__ = [
    "AsyncRestClient",
    "BadStatusError",
    "ClientConfig",
    "DecodeError",
    "ErrorHandler",
    "InvalidURLError",
    "JSON_MEDIA_TYPE",
    "Option",
    "OptionError",
    "PathResolutionError",
    "ResponseError",
    "RestClient",
    "RestClientError",
    "RestResponse",
    "SerializationError",
    "async_default_error_handler",
    "default_error_handler",
    "with_error_handler",
    "with_http_client",
    "with_prepare_request",
    "with_timeout",
]
