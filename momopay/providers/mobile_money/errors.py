from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Union

import httpx

from momopay.services.redaction import redact_headers


class MomoError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PhoneFormatError(MomoError):
    """A live-environment party id is not a phone number of that country."""


@dataclass(frozen=True)
class RequestSnapshot:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


@dataclass(frozen=True)
class ResponseSnapshot:
    status_code: int
    status_text: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    data: Any = None


class TransportError(MomoError):
    """
    Raised by the transport.

    `request` is None when the request could not be built; `response` is set
    only when the provider answered with a non-success status.
    """

    def __init__(
        self,
        message: str,
        *,
        request: Optional[RequestSnapshot] = None,
        response: Optional[ResponseSnapshot] = None,
    ):
        super().__init__(message)
        self.request = request
        self.response = response


@dataclass(frozen=True)
class ConfigFailure:
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"config_failed": self.message}


@dataclass(frozen=True)
class NoResponseFailure:
    request: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"request_failed": self.request}


@dataclass(frozen=True)
class ResponseFailure:
    status: int
    status_text: str
    headers: dict[str, str]
    body: Any
    request_body: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "response_error": {
                "data": self.body,
                "status": self.status,
                "status_text": self.status_text,
                "headers": self.headers,
            },
            "request_body": self.request_body,
        }


ClassifiedError = Union[ConfigFailure, NoResponseFailure, ResponseFailure]


def _request_dict(request: RequestSnapshot) -> dict[str, Any]:
    out = asdict(request)
    out["headers"] = redact_headers(request.headers)
    return out


def _classify_momo(error: TransportError) -> ClassifiedError:
    if error.response is not None:
        return ResponseFailure(
            status=error.response.status_code,
            status_text=error.response.status_text,
            headers=dict(error.response.headers),
            body=error.response.data,
            request_body=error.request.body if error.request is not None else None,
        )
    if error.request is not None:
        return NoResponseFailure(request=_request_dict(error.request))
    return ConfigFailure(message=error.message)


def _httpx_request(error: httpx.HTTPError) -> Optional[httpx.Request]:
    # HTTPError.request raises RuntimeError when no request was attached.
    try:
        return error.request
    except RuntimeError:
        return None


def _httpx_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _classify_httpx(error: httpx.HTTPError) -> ClassifiedError:
    request = _httpx_request(error)
    response = getattr(error, "response", None)
    if isinstance(response, httpx.Response):
        return ResponseFailure(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            body=_httpx_body(response),
            request_body=request.content.decode("utf-8", "replace") if request is not None else None,
        )
    if request is not None:
        snapshot = RequestSnapshot(
            method=request.method,
            url=str(request.url),
            headers=dict(request.headers),
            body=request.content.decode("utf-8", "replace") or None,
        )
        return NoResponseFailure(request=_request_dict(snapshot))
    return ConfigFailure(message=str(error) or error.__class__.__name__)


def classify_error(error: Any) -> Union[ClassifiedError, Any]:
    """
    Map a transport failure onto ConfigFailure / NoResponseFailure / ResponseFailure.

    Errors that did not come from the transport are returned unchanged.
    """
    if isinstance(error, TransportError):
        return _classify_momo(error)
    if isinstance(error, httpx.HTTPError):
        return _classify_httpx(error)
    return error
