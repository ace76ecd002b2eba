from __future__ import annotations

import base64
import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from momopay.providers.base import OperationError, OperationResult, Transport
from momopay.providers.mobile_money.errors import classify_error
from momopay.schemas import TokenResponse
from momopay.services.observability import context_logger
from momopay.services.redaction import redact_headers


def basic_auth(user: str, secret: str) -> str:
    return base64.b64encode(f"{user}:{secret}".encode()).decode()


class AccessTokenProvider:
    """
    Creates a bearer token for one product (collection or disbursement).

    Tokens are not cached: every call posts to the token endpoint.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        url: str,
        api_user: str,
        api_key: str,
        subscription_key: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.transport = transport
        self.url = url
        self.api_user = api_user
        self.api_key = api_key
        self.subscription_key = subscription_key
        self.logger = context_logger(logger, "create_access_token")

    async def __call__(self) -> OperationResult[str]:
        headers = {
            "Authorization": f"Basic {basic_auth(self.api_user, self.api_key)}",
            "Ocp-Apim-Subscription-Key": self.subscription_key,
        }
        self.logger.debug("Posting... url=%s headers=%s", self.url, redact_headers(headers))

        try:
            resp = await self.transport.post(self.url, headers=headers, json_body=None)
        except Exception as exc:
            classified = classify_error(exc)
            self.logger.error("access token request failed: %s", classified)
            return OperationResult.failure(classified)

        try:
            token = TokenResponse.model_validate(resp.data)
        except PydanticValidationError as exc:
            self.logger.error("access token response invalid status=%s err=%s", resp.status_code, exc)
            return OperationResult.failure(OperationError(message="Invalid access token response", raw=resp.data))

        self.logger.debug("access token created type=%s expires_in=%s", token.token_type, token.expires_in)
        return OperationResult.success(token.access_token, resp.data)
