from __future__ import annotations

import inspect
import logging
from typing import Any

import httpx

from restclient.client import BaseRestClient, RestResponse, TimeoutArg, decode_body
from restclient.handlers import async_default_error_handler

logger = logging.getLogger(__name__)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class AsyncRestClient(BaseRestClient):
    """JSON REST helper on top of ``httpx.AsyncClient``.

    Hooks may be plain functions or coroutine functions. Cancelling the task
    awaiting :meth:`execute` aborts the in-flight send.
    """

    http_client_type = httpx.AsyncClient
    awaits_hooks = True

    def _new_http_client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout)

    def _default_error_handler(self):
        return async_default_error_handler

    async def build_request(
        self,
        method: str,
        rel_path: str,
        body: Any = None,
        *,
        timeout: TimeoutArg = httpx.USE_CLIENT_DEFAULT,
    ) -> httpx.Request:
        request = self._build(method, rel_path, body, timeout)
        if self._prepare_request is not None:
            await _resolve(self._prepare_request(request))
        return request

    async def execute(self, request: httpx.Request, response_model: Any = None) -> RestResponse[Any]:
        logger.debug("Sending %s %s", request.method, request.url)
        response = await self._http.send(request, stream=True)
        logger.debug("Received %s for %s %s", response.status_code, request.method, request.url)

        if response.status_code >= httpx.codes.BAD_REQUEST:
            response, error = await _resolve(self._error_handler(None, request, response))
            if error is not None:
                raise error
            return RestResponse(response=response)

        try:
            await response.aread()
        finally:
            await response.aclose()
        if response_model is None:
            return RestResponse(response=response)
        return RestResponse(response=response, data=decode_body(response, response_model))

    async def request(
        self,
        method: str,
        rel_path: str,
        body: Any = None,
        *,
        response_model: Any = None,
        timeout: TimeoutArg = httpx.USE_CLIENT_DEFAULT,
    ) -> RestResponse[Any]:
        request = await self.build_request(method, rel_path, body, timeout=timeout)
        return await self.execute(request, response_model)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> AsyncRestClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["AsyncRestClient"]
