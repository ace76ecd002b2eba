from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Union

from momopay.providers.mobile_money.constants import DEFAULT_API_VERSION, ApiProduct, TargetEnvironment
from momopay.providers.mobile_money.validation import (
    Schema,
    Violation,
    collect_violations,
    field_rules,
    is_http_url,
    is_member,
    is_non_empty_string,
    is_string,
    to_enum,
    validate,
)
from momopay.settings import settings


@dataclass(frozen=True)
class MomoConfig:
    target_environment: Union[TargetEnvironment, str]
    api_user: str
    api_key: str
    subscription_key: str
    version: str = DEFAULT_API_VERSION
    callback_url: str = ""
    timeout_s: float = 20.0
    debug: bool = False


CONFIG_SCHEMA = Schema(
    name="MomoConfig",
    fields={
        "target_environment": field_rules(is_member(TargetEnvironment), normalize=to_enum(TargetEnvironment)),
        "api_user": field_rules(is_string, is_non_empty_string),
        "api_key": field_rules(is_string, is_non_empty_string),
        "subscription_key": field_rules(is_string, is_non_empty_string),
        "version": field_rules(is_string, is_non_empty_string),
        "callback_url": field_rules(is_http_url, optional=True, absent_values=(None, "")),
    },
)


def validate_momo_config(config: MomoConfig) -> list[Violation]:
    _, violations = collect_violations(asdict(config), CONFIG_SCHEMA)
    return violations


def require_valid_config(config: MomoConfig) -> MomoConfig:
    """Raises ValidationError; returns the config with its environment as an enum."""
    parsed = validate(asdict(config), CONFIG_SCHEMA)
    return replace(config, target_environment=parsed["target_environment"], callback_url=parsed["callback_url"] or "")


def _subscription_key(product: ApiProduct) -> str:
    if product is ApiProduct.DISBURSEMENT:
        return settings.MOMO_DISBURSEMENT_SUBSCRIPTION_KEY
    return settings.MOMO_COLLECTION_SUBSCRIPTION_KEY


def momo_config(product: ApiProduct) -> MomoConfig:
    # always reflect .env via pydantic settings
    return MomoConfig(
        target_environment=(settings.MOMO_TARGET_ENVIRONMENT or "sandbox").strip().lower(),
        api_user=(settings.MOMO_API_USER or "").strip(),
        api_key=(settings.MOMO_API_KEY or "").strip(),
        subscription_key=(_subscription_key(product) or "").strip(),
        version=(settings.MOMO_API_VERSION or DEFAULT_API_VERSION).strip(),
        callback_url=(settings.MOMO_CALLBACK_URL or "").strip(),
        timeout_s=float(settings.MOMO_HTTP_TIMEOUT_S),
        debug=bool(settings.MOMO_HTTP_DEBUG),
    )
