from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from momopay.providers.base import OperationError, OperationResult, TokenProvider, Transport
from momopay.providers.mobile_money.constants import ENVIRONMENT_CURRENCY, TargetEnvironment
from momopay.providers.mobile_money.errors import PhoneFormatError, classify_error
from momopay.providers.mobile_money.phone import check_phone, normalize_phone
from momopay.providers.mobile_money.status import InternalStatus, map_raw_status
from momopay.providers.mobile_money.validation import (
    Schema,
    ValidationError,
    exactly_one_of,
    field_rules,
    is_integer_amount,
    is_iso4217,
    is_member,
    is_non_empty_string,
    is_numeric_id,
    is_string,
    is_uuid4,
    minimum,
    to_digits,
    to_enum,
    to_int,
    validate,
)
from momopay.services.observability import context_logger, reference_id_scope
from momopay.services.redaction import redact_dict, redact_headers, redact_value

TOKEN_FAILURE_MESSAGE = "Failed to generate token"


@dataclass(frozen=True)
class OperationProfile:
    """What differs between the collection and disbursement variants of the pipeline."""

    name: str
    party_key: str
    failure_message: str
    status_name: str
    status_failure_message: str = "Error occurred while getting transaction status"


REQUEST_TO_PAY = OperationProfile(
    name="request_to_pay",
    party_key="payer",
    failure_message="Error occurred while posting the request",
    status_name="request_to_pay_status",
)

TRANSFER = OperationProfile(
    name="transfer",
    party_key="payee",
    failure_message="Error occurred while posting the request",
    status_name="transfer_status",
)


@dataclass(frozen=True)
class OperationContext:
    transport: Transport
    token_provider: TokenProvider
    target_environment: Union[TargetEnvironment, str]
    subscription_key: str
    logger: Optional[logging.Logger] = None
    callback_url: str = ""


_ENVIRONMENT_RULES = {
    "targetEnvironment": field_rules(is_member(TargetEnvironment), normalize=to_enum(TargetEnvironment)),
    "subscriptionKey": field_rules(is_string, is_non_empty_string),
}

_PARTY_ID = field_rules(is_numeric_id, optional=True, absent_values=(None, ""), normalize=to_digits)

PAYMENT_SCHEMA = Schema(
    name="PaymentOperationRequest",
    fields={
        "amount": field_rules(is_integer_amount, minimum(1), normalize=to_int),
        "referenceId": field_rules(is_uuid4),
        "currency": field_rules(is_iso4217, optional=True),
        "externalId": field_rules(is_string),
        "payerId": _PARTY_ID,
        "payeeId": _PARTY_ID,
        "payerMessage": field_rules(is_string),
        "payeeNote": field_rules(is_string),
        **_ENVIRONMENT_RULES,
    },
    cross_rules=(exactly_one_of("payerId", "payeeId"),),
)

STATUS_SCHEMA = Schema(
    name="StatusQueryRequest",
    fields={
        "referenceId": field_rules(is_non_empty_string, is_uuid4),
        **_ENVIRONMENT_RULES,
    },
)


def _with_context(params: Mapping[str, Any], context: OperationContext) -> dict[str, Any]:
    return {
        **params,
        "targetEnvironment": context.target_environment,
        "subscriptionKey": context.subscription_key,
    }


def _body(data: Any) -> Any:
    # empty provider bodies (the 202 of request-to-pay / transfer) surface as ""
    return "" if data is None else data


async def _acquire_token(context: OperationContext, log: logging.Logger) -> OperationResult[str]:
    try:
        result = context.token_provider()
        if inspect.isawaitable(result):
            result = await result
    except Exception as exc:
        log.error("token provider raised: %s", exc)
        return OperationResult.failure(exc)

    error = getattr(result, "error", None)
    token = getattr(result, "data", None)
    if error is not None or not token:
        log.error("token acquisition failed: %s", error)
        return OperationResult.failure(error if error is not None else "empty access token")
    return OperationResult.success(token, _body(getattr(result, "raw", None)))


def build_payment_body(
    parsed: Mapping[str, Any],
    party_id: str,
    environment: TargetEnvironment,
    profile: OperationProfile,
) -> dict[str, Any]:
    return {
        "amount": str(parsed["amount"]),
        "currency": parsed["currency"] or ENVIRONMENT_CURRENCY[environment],
        "externalId": parsed["externalId"],
        profile.party_key: {"partyIdType": "MSISDN", "partyId": party_id},
        "payerMessage": parsed["payerMessage"],
        "payeeNote": parsed["payeeNote"],
    }


async def initiate_payment(
    params: Mapping[str, Any],
    *,
    profile: OperationProfile,
    context: OperationContext,
    endpoint: str,
) -> OperationResult[None]:
    """
    Request a payment from a payer, or transfer to a payee.

    Success carries `data=None` and the provider body in `raw`; the provider
    answers 202 and the outcome is read later with query_payment_status().
    Every failure is returned, never raised.
    """
    log = context_logger(context.logger, profile.name)
    reference_id = params.get("referenceId")

    with reference_id_scope(str(reference_id) if reference_id else None):
        log.debug(":start with param %s", redact_dict(params))

        try:
            parsed = validate(_with_context(params, context), PAYMENT_SCHEMA)
        except ValidationError as exc:
            log.error("parameter validation failed: %s", exc.message)
            return OperationResult.failure(exc)

        environment: TargetEnvironment = parsed["targetEnvironment"]
        id_field = "payeeId" if parsed["payeeId"] else "payerId"
        party_id: str = parsed[id_field]

        if not environment.is_sandbox:
            try:
                check_phone(party_id, id_field, environment)
            except PhoneFormatError as exc:
                log.error("phone validation failed: %s", exc.message)
                return OperationResult.failure(exc)
            party_id = normalize_phone(party_id, environment, log)

        token = await _acquire_token(context, log)
        if not token.ok:
            return OperationResult.failure(OperationError(message=TOKEN_FAILURE_MESSAGE, raw=token.error))

        headers = {
            "Authorization": f"Bearer {token.data}",
            "X-Reference-Id": parsed["referenceId"],
            "X-Target-Environment": environment.value,
            "Ocp-Apim-Subscription-Key": parsed["subscriptionKey"],
        }
        if context.callback_url:
            headers["X-Callback-Url"] = context.callback_url
        body = build_payment_body(parsed, party_id, environment, profile)

        log.debug(
            "Sending request... method=POST endpoint=%s headers=%s body=%s",
            endpoint,
            redact_headers(headers),
            redact_dict(body),
        )
        try:
            resp = await context.transport.post(endpoint, headers=headers, json_body=body)
        except Exception as exc:
            classified = classify_error(exc)
            log.error("Request failed: %s", classified)
            return OperationResult.failure(OperationError(message=profile.failure_message, raw=classified))

        log.debug("Request succeeded status=%s data=%s", resp.status_code, redact_value(resp.data))
        return OperationResult.success(None, _body(resp.data))


async def query_payment_status(
    params: Mapping[str, Any],
    *,
    profile: OperationProfile,
    context: OperationContext,
    endpoint_for: Callable[[str], str],
) -> OperationResult[InternalStatus]:
    log = context_logger(context.logger, profile.status_name)
    reference_id = params.get("referenceId")

    with reference_id_scope(str(reference_id) if reference_id else None):
        log.debug(":start with param %s", redact_dict(params))

        try:
            parsed = validate(_with_context(params, context), STATUS_SCHEMA)
        except ValidationError as exc:
            log.error("Parameter validation failed: %s", exc.message)
            return OperationResult.failure(exc)

        token = await _acquire_token(context, log)
        if not token.ok:
            return OperationResult.failure(OperationError(message=TOKEN_FAILURE_MESSAGE, raw=token.error))

        endpoint = endpoint_for(parsed["referenceId"])
        headers = {
            "Authorization": f"Bearer {token.data}",
            "X-Target-Environment": parsed["targetEnvironment"].value,
            "Ocp-Apim-Subscription-Key": parsed["subscriptionKey"],
        }

        log.debug("Sending request... method=GET endpoint=%s headers=%s", endpoint, redact_headers(headers))
        try:
            resp = await context.transport.get(endpoint, headers=headers)
        except Exception as exc:
            classified = classify_error(exc)
            log.error("Request failed: %s", classified)
            return OperationResult.failure(OperationError(message=profile.status_failure_message, raw=classified))

        body = _body(resp.data)
        raw_status = body.get("status") if isinstance(body, Mapping) else None
        log.debug("Request succeeded status=%s raw_status=%s", resp.status_code, raw_status)
        return OperationResult.success(map_raw_status(raw_status), body)
