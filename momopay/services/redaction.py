from __future__ import annotations

import re
from typing import Any, Mapping


_MSISDN_RE = re.compile(r"\+?\d{8,15}")

_SENSITIVE_KEY_MARKERS = (
    "token",
    "authorization",
    "secret",
    "subscription-key",
    "apikey",
    "api_key",
    "password",
)

_MSISDN_KEYS = {"partyid", "payerid", "payeeid", "msisdn"}


def mask_msisdn(value: str) -> str:
    if len(value) <= 6:
        return value
    return f"{value[:5]}****{value[-2:]}"


def redact_text(value: str) -> str:
    masked = _MSISDN_RE.sub(lambda m: mask_msisdn(m.group(0)), value)
    if "bearer " in masked.lower() or "basic " in masked.lower():
        return "[REDACTED]"
    return masked


def _is_sensitive_key(key: str) -> bool:
    key_l = str(key or "").lower()
    return any(marker in key_l for marker in _SENSITIVE_KEY_MARKERS)


def redact_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, Mapping):
        return redact_dict(value)
    if isinstance(value, list):
        return [redact_value(v) for v in value]
    return value


def redact_dict(payload: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in payload.items():
        if _is_sensitive_key(k):
            out[k] = "[REDACTED]"
        elif str(k).lower() in _MSISDN_KEYS and v is not None:
            out[k] = mask_msisdn(str(v))
        else:
            out[k] = redact_value(v)
    return out


def redact_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    safe: dict[str, str] = {}
    for k, v in (headers or {}).items():
        safe[k] = "[REDACTED]" if _is_sensitive_key(k) else v
    return safe
