from __future__ import annotations

from enum import Enum
from typing import Any


class InternalStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    UNKNOWN = "unknown"


RAW_STATUS_MAP: dict[str, InternalStatus] = {
    "PENDING": InternalStatus.PENDING,
    "INITIATED": InternalStatus.PENDING,
    "SUCCESSFUL": InternalStatus.SUCCEEDED,
    "SUCCESS": InternalStatus.SUCCEEDED,
    "FAILED": InternalStatus.FAILED,
    "CANCELLED": InternalStatus.FAILED,
    "EXPIRED": InternalStatus.FAILED,
}


def map_raw_status(raw: Any) -> InternalStatus:
    """Never raises; anything outside the table is UNKNOWN."""
    if not isinstance(raw, str):
        return InternalStatus.UNKNOWN
    return RAW_STATUS_MAP.get(raw.strip().upper(), InternalStatus.UNKNOWN)
