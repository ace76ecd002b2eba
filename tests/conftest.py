# tests/conftest.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest

from momopay.providers.base import OperationResult
from momopay.providers.mobile_money.constants import TargetEnvironment
from momopay.providers.mobile_money.operations import OperationContext


PAYMENT_REF01 = "d1b9cc0a-0728-4398-8d5b-2b3947e073a9"


@dataclass
class FakeResponse:
    status_code: int = 200
    data: Any = None
    status_text: str = "OK"
    headers: Dict[str, str] = field(default_factory=dict)


class FakeTransport:
    """Records every call; returns (or raises) the configured outcome."""

    def __init__(self, post_result: Any = None, get_result: Any = None):
        self.post_result = post_result if post_result is not None else FakeResponse(202, {})
        self.get_result = get_result if get_result is not None else FakeResponse(200, {})
        self.calls: List[Dict[str, Any]] = []

    async def post(self, url: str, *, headers: Dict[str, str], json_body: Any = None):
        self.calls.append({"method": "POST", "url": url, "headers": headers, "json": json_body})
        if isinstance(self.post_result, Exception):
            raise self.post_result
        return self.post_result

    async def get(self, url: str, *, headers: Dict[str, str]):
        self.calls.append({"method": "GET", "url": url, "headers": headers, "json": None})
        if isinstance(self.get_result, Exception):
            raise self.get_result
        return self.get_result


class TokenStub:
    def __init__(self, result: OperationResult):
        self.result = result
        self.calls = 0

    async def __call__(self) -> OperationResult:
        self.calls += 1
        return self.result


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def token_ok() -> TokenStub:
    return TokenStub(
        OperationResult.success(
            "THE_ACCESS_TOKEN",
            {"access_token": "THE_ACCESS_TOKEN", "token_type": "access_token", "expires_in": 3600},
        )
    )


@pytest.fixture
def token_fail() -> TokenStub:
    return TokenStub(OperationResult.failure({"error": "invalid_client"}))


def make_context(
    transport: FakeTransport,
    token_provider: Any,
    environment: TargetEnvironment = TargetEnvironment.SANDBOX,
    subscription_key: str = "OC_APIM_SUBSCRIPTION_KEY",
    callback_url: str = "",
) -> OperationContext:
    return OperationContext(
        transport=transport,
        token_provider=token_provider,
        target_environment=environment,
        subscription_key=subscription_key,
        callback_url=callback_url,
    )


def payment_params(**overrides: Any) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "amount": 1,
        "referenceId": PAYMENT_REF01,
        "externalId": "EXTERNAL_ID_ENV",
        "payerId": "612345678",
        "payerMessage": "",
        "payeeNote": "",
    }
    params.update(overrides)
    return params


def national_mobile_number(region: str) -> Optional[str]:
    import phonenumbers
    from phonenumbers import PhoneNumberType

    example = phonenumbers.example_number_for_type(region, PhoneNumberType.MOBILE)
    if example is None:
        return None
    return phonenumbers.national_significant_number(example)
