from __future__ import annotations

import logging

import pytest

from momopay.providers.base import OperationError
from momopay.providers.mobile_money.constants import TargetEnvironment
from momopay.providers.mobile_money.errors import (
    NoResponseFailure,
    PhoneFormatError,
    RequestSnapshot,
    ResponseFailure,
    ResponseSnapshot,
    TransportError,
)
from momopay.providers.mobile_money.operations import (
    REQUEST_TO_PAY,
    TOKEN_FAILURE_MESSAGE,
    TRANSFER,
    initiate_payment,
    query_payment_status,
)
from momopay.providers.mobile_money.status import InternalStatus
from momopay.providers.mobile_money.validation import ValidationError
from tests.conftest import (
    PAYMENT_REF01,
    FakeResponse,
    FakeTransport,
    make_context,
    national_mobile_number,
    payment_params,
)

ENDPOINT = "https://sandbox.momodeveloper.mtn.com/collection/v1_0/requesttopay"


def _status_endpoint(ref: str) -> str:
    return f"https://sandbox.momodeveloper.mtn.com/collection/v1_0/requesttopay/{ref}"


# ---------------------------
# initiate_payment
# ---------------------------

@pytest.mark.asyncio
async def test_sandbox_request_to_pay_succeeds(transport, token_ok):
    result = await initiate_payment(
        payment_params(),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok),
        endpoint=ENDPOINT,
    )

    assert result.ok
    assert result.error is None
    assert result.data is None
    assert result.raw == {}
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_request_headers_and_body(transport, token_ok):
    await initiate_payment(
        payment_params(amount=150),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok, callback_url="https://example.com/momo"),
        endpoint=ENDPOINT,
    )

    call = transport.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == ENDPOINT
    assert call["headers"] == {
        "Authorization": "Bearer THE_ACCESS_TOKEN",
        "X-Reference-Id": PAYMENT_REF01,
        "X-Target-Environment": "sandbox",
        "Ocp-Apim-Subscription-Key": "OC_APIM_SUBSCRIPTION_KEY",
        "X-Callback-Url": "https://example.com/momo",
    }
    assert call["json"] == {
        "amount": "150",
        "currency": "EUR",
        "externalId": "EXTERNAL_ID_ENV",
        "payer": {"partyIdType": "MSISDN", "partyId": "612345678"},
        "payerMessage": "",
        "payeeNote": "",
    }


@pytest.mark.asyncio
async def test_transfer_uses_payee_party_and_explicit_currency(transport, token_ok):
    await initiate_payment(
        payment_params(payerId=None, payeeId=46733123454, currency="XAF"),
        profile=TRANSFER,
        context=make_context(transport, token_ok),
        endpoint="https://sandbox.momodeveloper.mtn.com/disbursement/v1_0/transfer",
    )

    body = transport.calls[0]["json"]
    assert "payer" not in body
    assert body["payee"] == {"partyIdType": "MSISDN", "partyId": "46733123454"}
    assert body["currency"] == "XAF"


@pytest.mark.asyncio
async def test_invalid_parameters_collect_every_violation(transport, token_ok):
    result = await initiate_payment(
        payment_params(amount=0, referenceId="", payerId=None),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok, subscription_key=""),
        endpoint=ENDPOINT,
    )

    assert not result.ok
    assert result.data is None and result.raw is None
    assert isinstance(result.error, ValidationError)
    fields = sorted(v.field for v in result.error.violations)
    assert fields == ["amount", "payeeId", "referenceId", "subscriptionKey"]
    assert token_ok.calls == 0
    assert transport.calls == []


@pytest.mark.asyncio
async def test_fails_when_neither_payer_nor_payee(transport, token_ok):
    result = await initiate_payment(
        payment_params(payerId=None),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok),
        endpoint=ENDPOINT,
    )

    assert isinstance(result.error, ValidationError)
    assert len(result.error.violations) == 1
    assert result.error.violations[0].message == "One of payerId or payeeId must be provided"


@pytest.mark.asyncio
async def test_fails_when_both_payer_and_payee(transport, token_ok):
    result = await initiate_payment(
        payment_params(payerId="100200300", payeeId="10001000"),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok, environment=TargetEnvironment.MTN_BENIN),
        endpoint=ENDPOINT,
    )

    assert isinstance(result.error, ValidationError)
    assert len(result.error.violations) == 1
    assert result.error.violations[0].message == "Only one of payerId or payeeId must be provided"


@pytest.mark.asyncio
async def test_live_environment_rejects_foreign_phone_number(transport, token_ok):
    result = await initiate_payment(
        payment_params(payerId="123456789"),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok, environment=TargetEnvironment.MTN_CAMEROON),
        endpoint=ENDPOINT,
    )

    assert isinstance(result.error, PhoneFormatError)
    assert result.error.message == (
        'The provided payerId:"123456789" does not match phone number of the target environment:mtncameroon'
    )
    assert token_ok.calls == 0
    assert transport.calls == []


@pytest.mark.asyncio
async def test_live_environment_normalizes_party_and_currency(transport, token_ok):
    local = national_mobile_number("CM")
    result = await initiate_payment(
        payment_params(payerId=local),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok, environment=TargetEnvironment.MTN_CAMEROON),
        endpoint=ENDPOINT,
    )

    assert result.ok, result.error
    call = transport.calls[0]
    assert call["headers"]["X-Target-Environment"] == "mtncameroon"
    assert call["json"]["payer"]["partyId"] == f"237{local}"
    assert call["json"]["currency"] == "XAF"


@pytest.mark.asyncio
async def test_token_failure_short_circuits_dispatch(transport, token_fail):
    result = await initiate_payment(
        payment_params(),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_fail),
        endpoint=ENDPOINT,
    )

    assert isinstance(result.error, OperationError)
    assert result.error.message == TOKEN_FAILURE_MESSAGE
    assert result.error.raw == {"error": "invalid_client"}
    assert token_fail.calls == 1
    assert transport.calls == []


@pytest.mark.asyncio
async def test_token_provider_exception_is_returned(transport):
    def exploding_provider():
        raise RuntimeError("vault unavailable")

    result = await initiate_payment(
        payment_params(),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, exploding_provider),
        endpoint=ENDPOINT,
    )

    assert result.error.message == TOKEN_FAILURE_MESSAGE
    assert isinstance(result.error.raw, RuntimeError)
    assert transport.calls == []


@pytest.mark.asyncio
async def test_no_response_failure_is_classified(token_ok):
    request = RequestSnapshot(
        method="POST",
        url=ENDPOINT,
        headers={"Authorization": "Bearer THE_ACCESS_TOKEN", "X-Reference-Id": PAYMENT_REF01},
        body={"amount": "1"},
    )
    transport = FakeTransport(post_result=TransportError("timed out", request=request))

    result = await initiate_payment(
        payment_params(),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok),
        endpoint=ENDPOINT,
    )

    assert len(transport.calls) == 1
    assert result.error.message == "Error occurred while posting the request"
    assert isinstance(result.error.raw, NoResponseFailure)
    assert result.error.raw.request["headers"]["Authorization"] == "[REDACTED]"
    assert result.error.raw.request["body"] == {"amount": "1"}


@pytest.mark.asyncio
async def test_provider_error_response_is_classified(token_ok):
    error = TransportError(
        "HTTP 409",
        request=RequestSnapshot(method="POST", url=ENDPOINT, body={"amount": "1"}),
        response=ResponseSnapshot(
            status_code=409,
            status_text="Conflict",
            data={"code": "RESOURCE_ALREADY_EXIST", "message": "Duplicated reference id."},
        ),
    )
    transport = FakeTransport(post_result=error)

    result = await initiate_payment(
        payment_params(),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok),
        endpoint=ENDPOINT,
    )

    raw = result.error.raw
    assert isinstance(raw, ResponseFailure)
    assert raw.status == 409
    assert raw.status_text == "Conflict"
    assert raw.body["code"] == "RESOURCE_ALREADY_EXIST"
    assert raw.request_body == {"amount": "1"}


@pytest.mark.asyncio
async def test_foreign_transport_exception_passes_through(token_ok):
    boom = KeyError("socket")
    transport = FakeTransport(post_result=boom)

    result = await initiate_payment(
        payment_params(),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok),
        endpoint=ENDPOINT,
    )

    assert result.error.message == "Error occurred while posting the request"
    assert result.error.raw is boom


@pytest.mark.asyncio
async def test_failures_are_logged(transport, token_fail, caplog):
    caplog.set_level(logging.ERROR, logger="momopay")

    await initiate_payment(
        payment_params(),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_fail),
        endpoint=ENDPOINT,
    )

    assert any(r.name == "momopay.request_to_pay" for r in caplog.records)


# ---------------------------
# query_payment_status
# ---------------------------

@pytest.mark.asyncio
async def test_status_query_rejects_empty_reference(transport, token_ok):
    result = await query_payment_status(
        {"referenceId": ""},
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok),
        endpoint_for=_status_endpoint,
    )

    assert isinstance(result.error, ValidationError)
    assert len(result.error.violations) == 1
    assert result.error.violations[0].field == "referenceId"
    assert result.error.violations[0].message == "referenceId should not be empty"
    assert transport.calls == []


@pytest.mark.asyncio
async def test_status_query_maps_pending(token_ok):
    body = {
        "amount": "1",
        "currency": "EUR",
        "externalId": "EXTERNAL_ID_ENV",
        "payer": {"partyIdType": "MSISDN", "partyId": "612345678"},
        "status": "PENDING",
    }
    transport = FakeTransport(get_result=FakeResponse(200, body))

    result = await query_payment_status(
        {"referenceId": PAYMENT_REF01},
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok),
        endpoint_for=_status_endpoint,
    )

    assert result.data is InternalStatus.PENDING
    assert result.raw == body
    call = transport.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == _status_endpoint(PAYMENT_REF01)
    assert "X-Reference-Id" not in call["headers"]
    assert call["headers"]["Authorization"] == "Bearer THE_ACCESS_TOKEN"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw_status,expected",
    [
        ("SUCCESSFUL", InternalStatus.SUCCEEDED),
        ("FAILED", InternalStatus.FAILED),
        ("ONGOING", InternalStatus.UNKNOWN),
    ],
)
async def test_status_query_maps_other_statuses(token_ok, raw_status, expected):
    transport = FakeTransport(get_result=FakeResponse(200, {"status": raw_status}))

    result = await query_payment_status(
        {"referenceId": PAYMENT_REF01},
        profile=TRANSFER,
        context=make_context(transport, token_ok),
        endpoint_for=_status_endpoint,
    )

    assert result.data is expected


@pytest.mark.asyncio
async def test_status_query_without_body_is_unknown(token_ok):
    transport = FakeTransport(get_result=FakeResponse(200, None))

    result = await query_payment_status(
        {"referenceId": PAYMENT_REF01},
        profile=TRANSFER,
        context=make_context(transport, token_ok),
        endpoint_for=_status_endpoint,
    )

    assert result.ok
    assert result.data is InternalStatus.UNKNOWN
    assert result.raw == ""


@pytest.mark.asyncio
async def test_status_query_token_failure(transport, token_fail):
    result = await query_payment_status(
        {"referenceId": PAYMENT_REF01},
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_fail),
        endpoint_for=_status_endpoint,
    )

    assert result.error.message == TOKEN_FAILURE_MESSAGE
    assert transport.calls == []


@pytest.mark.asyncio
async def test_status_query_request_failure(token_ok):
    transport = FakeTransport(get_result=TransportError("connection refused", request=RequestSnapshot("GET", "x")))

    result = await query_payment_status(
        {"referenceId": PAYMENT_REF01},
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok),
        endpoint_for=_status_endpoint,
    )

    assert len(transport.calls) == 1
    assert result.error.message == "Error occurred while getting transaction status"
    assert isinstance(result.error.raw, NoResponseFailure)


@pytest.mark.asyncio
async def test_sync_token_provider_is_accepted(transport):
    from momopay.providers.base import OperationResult

    provider = lambda: OperationResult.success("SYNC_TOKEN", {"access_token": "SYNC_TOKEN"})  # noqa: E731

    result = await initiate_payment(
        payment_params(),
        profile=REQUEST_TO_PAY,
        context=make_context(transport, provider),
        endpoint=ENDPOINT,
    )

    assert result.ok
    assert transport.calls[0]["headers"]["Authorization"] == "Bearer SYNC_TOKEN"


@pytest.mark.asyncio
async def test_concurrent_operations_do_not_share_state(token_ok):
    import asyncio
    import uuid

    transport = FakeTransport()
    refs = [str(uuid.uuid4()) for _ in range(5)]
    results = await asyncio.gather(
        *(
            initiate_payment(
                payment_params(referenceId=ref),
                profile=REQUEST_TO_PAY,
                context=make_context(transport, token_ok),
                endpoint=ENDPOINT,
            )
            for ref in refs
        )
    )

    assert all(r.ok for r in results)
    assert sorted(c["headers"]["X-Reference-Id"] for c in transport.calls) == sorted(refs)


@pytest.mark.asyncio
@pytest.mark.parametrize("reference_id", ["../account/balance", "not-a-uuid", f"{PAYMENT_REF01}/../../x"])
async def test_status_query_rejects_non_uuid_reference(transport, token_ok, reference_id):
    result = await query_payment_status(
        {"referenceId": reference_id},
        profile=REQUEST_TO_PAY,
        context=make_context(transport, token_ok),
        endpoint_for=_status_endpoint,
    )

    assert isinstance(result.error, ValidationError)
    assert [v.message for v in result.error.violations] == ["referenceId must be a UUID v4"]
    assert token_ok.calls == 0
    assert transport.calls == []


@pytest.mark.asyncio
async def test_amount_is_always_sent_as_string(transport, token_ok):
    await initiate_payment(
        payment_params(amount=2500.0),
        profile=TRANSFER,
        context=make_context(transport, token_ok),
        endpoint="https://sandbox.momodeveloper.mtn.com/disbursement/v1_0/transfer",
    )

    assert transport.calls[0]["json"]["amount"] == "2500"


def test_success_requires_provider_body():
    from momopay.providers.base import OperationResult

    with pytest.raises(ValueError):
        OperationResult.success(None, None)
    assert OperationResult.success(None, "").ok
