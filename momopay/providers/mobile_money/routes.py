from __future__ import annotations

from dataclasses import dataclass

from momopay.providers.mobile_money.constants import (
    DEFAULT_API_VERSION,
    LIVE_HOST,
    SANDBOX_HOST,
    ApiProduct,
    TargetEnvironment,
)


@dataclass(frozen=True)
class MomoRoutes:
    environment: TargetEnvironment
    product: ApiProduct
    version: str = DEFAULT_API_VERSION

    @property
    def host(self) -> str:
        return SANDBOX_HOST if self.environment.is_sandbox else LIVE_HOST

    @property
    def product_prefix(self) -> str:
        # e.g. https://sandbox.momodeveloper.mtn.com/collection
        return f"{self.host}/{self.product.value}"

    @property
    def versioned_prefix(self) -> str:
        return f"{self.product_prefix}/{self.version}"

    @property
    def create_access_token(self) -> str:
        # trailing slash is required by the provider
        return f"{self.product_prefix}/token/"

    @property
    def request_to_pay(self) -> str:
        return f"{self.versioned_prefix}/requesttopay"

    def request_to_pay_status(self, reference_id: str) -> str:
        return f"{self.versioned_prefix}/requesttopay/{reference_id}"

    @property
    def transfer(self) -> str:
        return f"{self.versioned_prefix}/transfer"

    def transfer_status(self, reference_id: str) -> str:
        return f"{self.versioned_prefix}/transfer/{reference_id}"


def sandbox_api_user_url(version: str = DEFAULT_API_VERSION) -> str:
    return f"{SANDBOX_HOST}/{version}/apiuser"


def sandbox_api_key_url(api_user: str, version: str = DEFAULT_API_VERSION) -> str:
    return f"{SANDBOX_HOST}/{version}/apiuser/{api_user}/apikey"
