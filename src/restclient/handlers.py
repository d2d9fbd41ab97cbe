from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, Tuple, Union

import httpx

from restclient.errors import BadStatusError

BAD_STATUS_MESSAGE = "bad status code"

PrepareRequestHook = Callable[[httpx.Request], Union[None, Awaitable[None]]]
HandlerResult = Tuple[httpx.Response, Union[BaseException, None]]


class ErrorHandler(Protocol):
    """Turn a failed response into ``(response, error)``.

    The handler owns the response once called and must close it. Returning
    ``None`` as the error tells the client to hand the response back as-is.
    Async clients also accept handlers returning an awaitable of the pair.
    """

    def __call__(
        self,
        error: BaseException | None,
        request: httpx.Request,
        response: httpx.Response,
    ) -> Any: ...


def _bad_status(detail: str, response: httpx.Response, error: BaseException | None) -> BadStatusError:
    prefix = str(error) if error is not None else BAD_STATUS_MESSAGE
    exc = BadStatusError(f"{prefix}: {detail}", response=response)
    exc.__cause__ = error
    return exc


def _detail(response: httpx.Response, *, body_read: bool) -> str:
    if not body_read:
        return f"response code: {response.status_code}"
    return f"response code: {response.status_code}, body:\n{response.text}"


def default_error_handler(
    error: BaseException | None,
    request: httpx.Request,
    response: httpx.Response,
) -> HandlerResult:
    """Read the body into the error message and close the response.

    A failure while reading the body is not reported; the message then only
    carries the status code. An error is returned in every case.
    """

    del request
    try:
        response.read()
        body_read = True
    except (httpx.HTTPError, httpx.StreamError):
        body_read = False
    finally:
        response.close()
    return response, _bad_status(_detail(response, body_read=body_read), response, error)


async def async_default_error_handler(
    error: BaseException | None,
    request: httpx.Request,
    response: httpx.Response,
) -> HandlerResult:
    """Coroutine flavour of :func:`default_error_handler`."""

    del request
    try:
        await response.aread()
        body_read = True
    except (httpx.HTTPError, httpx.StreamError):
        body_read = False
    finally:
        await response.aclose()
    return response, _bad_status(_detail(response, body_read=body_read), response, error)


__all__ = [
    "BAD_STATUS_MESSAGE",
    "ErrorHandler",
    "HandlerResult",
    "PrepareRequestHook",
    "async_default_error_handler",
    "default_error_handler",
]
