from __future__ import annotations

import httpx


class RestClientError(Exception):
    """Base class for every error raised by restclient itself.

    Transport failures are not wrapped: ``httpx.TransportError`` and its
    subclasses reach the caller untouched.
    """


class InvalidURLError(RestClientError, ValueError):
    """The base URL could not be parsed or is not an absolute http(s) URL."""


class OptionError(RestClientError, ValueError):
    """A client option rejected its argument."""


class PathResolutionError(RestClientError, ValueError):
    """A relative request path could not be resolved against the base URL."""


class SerializationError(RestClientError, TypeError):
    """A request body could not be encoded as JSON."""


class ResponseError(RestClientError):
    """Error that still carries the response it was produced from."""

    def __init__(self, message: str, *, response: httpx.Response) -> None:
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code


class BadStatusError(ResponseError):
    """The server answered with a status code of 400 or above."""


class DecodeError(ResponseError):
    """The response body could not be decoded into the requested type."""


__all__ = [
    "BadStatusError",
    "DecodeError",
    "InvalidURLError",
    "OptionError",
    "PathResolutionError",
    "ResponseError",
    "RestClientError",
    "SerializationError",
]
