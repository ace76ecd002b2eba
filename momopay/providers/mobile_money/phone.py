from __future__ import annotations

import logging
from typing import Optional

import phonenumbers
from phonenumbers import NumberParseException

from momopay.providers.mobile_money.constants import (
    COUNTRY_CALLING_CODE,
    ENVIRONMENT_COUNTRY,
    TargetEnvironment,
)
from momopay.providers.mobile_money.errors import PhoneFormatError
from momopay.services.redaction import mask_msisdn

logger = logging.getLogger("momopay.phone")


def calling_code(environment: TargetEnvironment) -> int:
    return COUNTRY_CALLING_CODE[ENVIRONMENT_COUNTRY[environment]]


def is_valid_phone(number: str, environment: TargetEnvironment) -> bool:
    """Sandbox accepts any number; live environments need a valid number of their country."""
    if environment.is_sandbox:
        return True
    region = ENVIRONMENT_COUNTRY[environment]
    try:
        parsed = phonenumbers.parse(str(number), region)
    except NumberParseException:
        return False
    return phonenumbers.is_valid_number_for_region(parsed, region)


def check_phone(number: str, field: str, environment: TargetEnvironment) -> None:
    if not is_valid_phone(number, environment):
        raise PhoneFormatError(
            f'The provided {field}:"{number}" does not match phone number of the target environment:{environment.value}'
        )


def normalize_phone(
    number: str,
    environment: TargetEnvironment,
    log: Optional[logging.Logger] = None,
) -> str:
    """
    Prefix the country calling code unless already there. Sandbox numbers pass through.

    Only the prefix is added: a national trunk prefix is kept, so Ghana
    "0241234567" becomes "2330241234567". Callers pass numbers without it.
    """
    if environment.is_sandbox:
        return number

    code = str(calling_code(environment))
    if number.startswith(code):
        return number

    normalized = f"{code}{number}"
    (log or logger).info("Normalizing phone number from <%s> to <%s>", mask_msisdn(number), mask_msisdn(normalized))
    return normalized
