from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Optional, Protocol, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class OperationError:
    message: str
    raw: Any = None


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """
    Uniform return value of every client operation.

    Success carries `data` (possibly None) and the provider body in `raw`,
    which is never None (an empty body is `""`);
    failure carries only `error`.
    """

    data: Optional[T] = None
    raw: Any = None
    error: Any = None

    def __post_init__(self) -> None:
        if self.error is not None and (self.data is not None or self.raw is not None):
            raise ValueError("OperationResult cannot carry both a payload and an error")

    @classmethod
    def success(cls, data: Optional[T], raw: Any) -> "OperationResult[T]":
        if raw is None:
            raise ValueError("success() needs the provider body; use \"\" for an empty one")
        return cls(data=data, raw=raw)

    @classmethod
    def failure(cls, error: Any) -> "OperationResult[T]":
        if error is None:
            raise ValueError("failure() needs an error")
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None


class HttpResponseLike(Protocol):
    status_code: int
    data: Any
    status_text: str
    headers: dict[str, str]


class Transport(Protocol):
    async def post(
        self,
        url: str,
        *,
        headers: dict[str, str],
        json_body: Any = None,
    ) -> HttpResponseLike: ...

    async def get(self, url: str, *, headers: dict[str, str]) -> HttpResponseLike: ...


class TokenProvider(Protocol):
    def __call__(self) -> Union[OperationResult[str], Awaitable[OperationResult[str]]]: ...
