from __future__ import annotations

import logging
import re
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from momopay.providers.base import OperationError, OperationResult, Transport
from momopay.providers.mobile_money.constants import DEFAULT_API_VERSION
from momopay.providers.mobile_money.errors import ResponseFailure, classify_error
from momopay.providers.mobile_money.routes import sandbox_api_key_url, sandbox_api_user_url
from momopay.providers.mobile_money.validation import (
    Rule,
    Schema,
    ValidationError,
    field_rules,
    is_non_empty_string,
    is_string,
    is_uuid4,
    validate,
)
from momopay.schemas import ApiKeyResponse, SandboxKeys
from momopay.services.observability import context_logger

_HOST_RE = re.compile(r"^(https?://)?[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*(:\d+)?(/.*)?$")

is_callback_host = Rule(
    lambda v: isinstance(v, str) and bool(_HOST_RE.match(v)),
    "must be an URL address",
)

SANDBOX_SCHEMA = Schema(
    name="GenerateSandboxKeysRequest",
    fields={
        "referenceId": field_rules(is_uuid4),
        "subscriptionKey": field_rules(is_string, is_non_empty_string),
        "providerCallbackHost": field_rules(is_callback_host),
    },
)


async def generate_sandbox_keys(
    *,
    reference_id: str,
    subscription_key: str,
    provider_callback_host: str,
    transport: Transport,
    logger: Optional[logging.Logger] = None,
    version: str = DEFAULT_API_VERSION,
) -> OperationResult[SandboxKeys]:
    """
    Provision an API user (id = reference_id) and its API key on the sandbox.

    An API user that already exists (HTTP 409) is reused.
    """
    log = context_logger(logger, "generate_sandbox_keys")
    try:
        parsed = validate(
            {
                "referenceId": reference_id,
                "subscriptionKey": subscription_key,
                "providerCallbackHost": provider_callback_host,
            },
            SANDBOX_SCHEMA,
        )
    except ValidationError as exc:
        log.error("parameter validation failed: %s", exc.message)
        return OperationResult.failure(exc)

    api_user = parsed["referenceId"]
    try:
        await transport.post(
            sandbox_api_user_url(version),
            headers={
                "X-Reference-Id": api_user,
                "Ocp-Apim-Subscription-Key": parsed["subscriptionKey"],
            },
            json_body={"providerCallbackHost": parsed["providerCallbackHost"]},
        )
    except Exception as exc:
        classified = classify_error(exc)
        if isinstance(classified, ResponseFailure) and classified.status == 409:
            log.info("api user already exists api_user=%s", api_user)
        else:
            log.error("api user creation failed: %s", classified)
            return OperationResult.failure(OperationError(message="Failed to generate api user", raw=classified))

    try:
        resp = await transport.post(
            sandbox_api_key_url(api_user, version),
            headers={"Ocp-Apim-Subscription-Key": parsed["subscriptionKey"]},
            json_body=None,
        )
    except Exception as exc:
        classified = classify_error(exc)
        log.error("api key creation failed: %s", classified)
        return OperationResult.failure(OperationError(message="Failed to generate api key", raw=classified))

    try:
        payload = ApiKeyResponse.model_validate(resp.data)
    except PydanticValidationError:
        log.error("api key response invalid status=%s", resp.status_code)
        return OperationResult.failure(OperationError(message="Failed to generate api key", raw=resp.data))

    return OperationResult.success(SandboxKeys(api_user=api_user, api_key=payload.apiKey), resp.data)
