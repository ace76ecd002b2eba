from __future__ import annotations

from momopay.providers.base import OperationError, OperationResult
from momopay.providers.mobile_money.config import MomoConfig, momo_config
from momopay.providers.mobile_money.constants import ApiProduct, ErrorCode, TargetEnvironment
from momopay.providers.mobile_money.errors import (
    ConfigFailure,
    MomoError,
    NoResponseFailure,
    PhoneFormatError,
    ResponseFailure,
    TransportError,
    classify_error,
)
from momopay.providers.mobile_money.momo import CollectionApi, DisbursementApi
from momopay.providers.mobile_money.phone import normalize_phone
from momopay.providers.mobile_money.status import InternalStatus, map_raw_status
from momopay.providers.mobile_money.validation import ValidationError, Violation

__all__ = [
    "ApiProduct",
    "CollectionApi",
    "ConfigFailure",
    "DisbursementApi",
    "ErrorCode",
    "InternalStatus",
    "MomoConfig",
    "MomoError",
    "NoResponseFailure",
    "OperationError",
    "OperationResult",
    "PhoneFormatError",
    "ResponseFailure",
    "TargetEnvironment",
    "TransportError",
    "ValidationError",
    "Violation",
    "classify_error",
    "map_raw_status",
    "momo_config",
    "normalize_phone",
]
