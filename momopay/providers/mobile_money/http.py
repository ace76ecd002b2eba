from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from momopay.providers.mobile_money.errors import RequestSnapshot, ResponseSnapshot, TransportError
from momopay.services.redaction import redact_headers, redact_value

logger = logging.getLogger("momopay.http")


@dataclass
class HttpResponse:
    status_code: int
    data: Any
    status_text: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    text: str = ""


class HttpClient:
    """
    Async transport over a shared httpx.AsyncClient.

    Non-2xx answers raise TransportError with both request and response set;
    network failures and timeouts raise it with only the request set.
    """

    def __init__(
        self,
        timeout_s: float = 20.0,
        follow_redirects: bool = True,
        client: Optional[httpx.AsyncClient] = None,
        debug: bool = False,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s, follow_redirects=follow_redirects)
        self.debug = debug

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def post(
        self,
        url: str,
        *,
        headers: dict[str, str],
        json_body: Any = None,
    ) -> HttpResponse:
        return await self._send("POST", url, headers=headers, json_body=json_body)

    async def get(self, url: str, *, headers: dict[str, str]) -> HttpResponse:
        return await self._send("GET", url, headers=headers)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        json_body: Any = None,
    ) -> HttpResponse:
        try:
            request = self._client.build_request(method, url, headers=headers, json=json_body)
        except (httpx.InvalidURL, httpx.HTTPError, TypeError, ValueError) as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        snapshot = RequestSnapshot(method=method, url=url, headers=dict(headers or {}), body=json_body)
        try:
            r = await self._client.send(request)
        except httpx.RequestError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__, request=snapshot) from exc

        response = self._wrap(r)
        if self.debug:
            self._debug_dump(snapshot, response)

        if not r.is_success:
            raise TransportError(
                f"HTTP {r.status_code}",
                request=snapshot,
                response=ResponseSnapshot(
                    status_code=response.status_code,
                    status_text=response.status_text,
                    headers=response.headers,
                    data=response.data,
                ),
            )
        return response

    @staticmethod
    def _wrap(r: httpx.Response) -> HttpResponse:
        try:
            payload = r.json()
        except ValueError:
            payload = r.text
        return HttpResponse(
            status_code=r.status_code,
            data=payload,
            status_text=r.reason_phrase,
            headers=dict(r.headers),
            text=r.text,
        )

    @staticmethod
    def _debug_dump(request: RequestSnapshot, response: HttpResponse) -> None:
        logger.debug(
            "%s %s headers=%s json=%s -> status=%s text=%s",
            request.method,
            request.url,
            redact_headers(request.headers),
            redact_value(request.body),
            response.status_code,
            redact_value(response.text[:300]),
        )
