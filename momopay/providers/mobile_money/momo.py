from __future__ import annotations

import logging
from typing import Any, ClassVar, Optional

from momopay.providers.base import OperationResult, Transport
from momopay.providers.mobile_money.config import MomoConfig, momo_config, require_valid_config
from momopay.providers.mobile_money.constants import ApiProduct
from momopay.providers.mobile_money.http import HttpClient
from momopay.providers.mobile_money.operations import (
    REQUEST_TO_PAY,
    TRANSFER,
    OperationContext,
    initiate_payment,
    query_payment_status,
)
from momopay.providers.mobile_money.routes import MomoRoutes
from momopay.providers.mobile_money.status import InternalStatus
from momopay.providers.mobile_money.token import AccessTokenProvider
from momopay.services.observability import context_logger


def _payment_params(
    *,
    amount: Any,
    reference_id: str,
    external_id: str,
    payer_id: Any = None,
    payee_id: Any = None,
    currency: Optional[str] = None,
    payer_message: str = "",
    payee_note: str = "",
) -> dict[str, Any]:
    return {
        "amount": amount,
        "referenceId": reference_id,
        "currency": currency,
        "externalId": external_id,
        "payerId": payer_id,
        "payeeId": payee_id,
        "payerMessage": payer_message,
        "payeeNote": payee_note,
    }


class MomoApi:
    """
    Shared wiring for one MoMo product: validated config, routes, token
    provider and transport.

    Construction raises ValidationError on a bad config; the operations
    themselves always return an OperationResult.
    """

    product: ClassVar[ApiProduct]
    label: ClassVar[str] = "MomoApi"

    def __init__(
        self,
        config: MomoConfig,
        *,
        transport: Optional[Transport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = require_valid_config(config)
        self.routes = MomoRoutes(
            environment=self.config.target_environment,
            product=self.product,
            version=self.config.version,
        )
        self._owns_transport = transport is None
        self.transport = transport or HttpClient(timeout_s=self.config.timeout_s, debug=self.config.debug)
        self.logger = context_logger(logger, self.label)
        self.token_provider = AccessTokenProvider(
            self.transport,
            url=self.routes.create_access_token,
            api_user=self.config.api_user,
            api_key=self.config.api_key,
            subscription_key=self.config.subscription_key,
            logger=self.logger,
        )
        self.logger.debug(
            "Config set environment=%s product=%s version=%s",
            self.config.target_environment.value,
            self.product.value,
            self.config.version,
        )

    @classmethod
    def from_settings(cls, **kwargs: Any):
        return cls(momo_config(cls.product), **kwargs)

    @property
    def context(self) -> OperationContext:
        return OperationContext(
            transport=self.transport,
            token_provider=self.token_provider,
            target_environment=self.config.target_environment,
            subscription_key=self.config.subscription_key,
            logger=self.logger,
            callback_url=self.config.callback_url,
        )

    async def create_access_token(self) -> OperationResult[str]:
        return await self.token_provider()

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self.transport, HttpClient):
            await self.transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class CollectionApi(MomoApi):
    """Cash-in: ask a payer to approve a debit from their wallet."""

    product = ApiProduct.COLLECTION
    label = "CollectionApi"

    async def request_to_pay(
        self,
        *,
        amount: Any,
        reference_id: str,
        payer_id: Any,
        external_id: str,
        currency: Optional[str] = None,
        payer_message: str = "",
        payee_note: str = "",
    ) -> OperationResult[None]:
        """
        The request stays PENDING until the payer approves, declines, or it
        times out. Poll request_to_pay_status() with the same reference_id.
        """
        params = _payment_params(
            amount=amount,
            reference_id=reference_id,
            external_id=external_id,
            payer_id=payer_id,
            currency=currency,
            payer_message=payer_message,
            payee_note=payee_note,
        )
        return await initiate_payment(
            params,
            profile=REQUEST_TO_PAY,
            context=self.context,
            endpoint=self.routes.request_to_pay,
        )

    async def request_to_pay_status(self, reference_id: str) -> OperationResult[InternalStatus]:
        return await query_payment_status(
            {"referenceId": reference_id},
            profile=REQUEST_TO_PAY,
            context=self.context,
            endpoint_for=self.routes.request_to_pay_status,
        )


class DisbursementApi(MomoApi):
    """Cash-out: transfer an amount from the merchant account to a payee."""

    product = ApiProduct.DISBURSEMENT
    label = "DisbursementApi"

    async def transfer(
        self,
        *,
        amount: Any,
        reference_id: str,
        payee_id: Any,
        external_id: str,
        currency: Optional[str] = None,
        payer_message: str = "",
        payee_note: str = "",
    ) -> OperationResult[None]:
        params = _payment_params(
            amount=amount,
            reference_id=reference_id,
            external_id=external_id,
            payee_id=payee_id,
            currency=currency,
            payer_message=payer_message,
            payee_note=payee_note,
        )
        return await initiate_payment(
            params,
            profile=TRANSFER,
            context=self.context,
            endpoint=self.routes.transfer,
        )

    async def transfer_status(self, reference_id: str) -> OperationResult[InternalStatus]:
        return await query_payment_status(
            {"referenceId": reference_id},
            profile=TRANSFER,
            context=self.context,
            endpoint_for=self.routes.transfer_status,
        )
