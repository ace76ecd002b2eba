from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urlparse

from momopay.providers.mobile_money.constants import ISO4217_CURRENCIES
from momopay.providers.mobile_money.errors import MomoError

_UUID4_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Violation:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class ValidationError(MomoError):
    def __init__(self, schema: str, violations: list[Violation]):
        detail = "; ".join(f"{v.field}: {v.message}" for v in violations)
        super().__init__(f"{schema} validation failed: {detail}")
        self.schema = schema
        self.violations = list(violations)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "violations": [v.to_dict() for v in self.violations]}


@dataclass(frozen=True)
class Rule:
    check: Callable[[Any], bool]
    message: str


@dataclass(frozen=True)
class FieldRules:
    rules: tuple[Rule, ...]
    optional: bool = False
    absent_values: tuple[Any, ...] = (None,)
    normalize: Optional[Callable[[Any], Any]] = None

    def is_absent(self, value: Any) -> bool:
        return any(value is a or (a is not None and value == a) for a in self.absent_values)


@dataclass(frozen=True)
class CrossRule:
    """`check` gets the candidate mapping and returns a message when violated."""

    field: str
    check: Callable[[Mapping[str, Any]], Optional[str]]


@dataclass(frozen=True)
class Schema:
    name: str
    fields: Mapping[str, FieldRules]
    cross_rules: tuple[CrossRule, ...] = ()


def field_rules(
    *rules: Rule,
    optional: bool = False,
    absent_values: tuple[Any, ...] = (None,),
    normalize: Optional[Callable[[Any], Any]] = None,
) -> FieldRules:
    return FieldRules(rules=tuple(rules), optional=optional, absent_values=absent_values, normalize=normalize)


# --- predicates ---

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_integer_amount(value: Any) -> bool:
    if not _is_number(value):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float) and not math.isfinite(value):
        return False
    if isinstance(value, Decimal) and not value.is_finite():
        return False
    return value == int(value)


def _is_numeric_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and value.isascii() and value.isdigit()


def _is_http_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


is_integer_amount = Rule(_is_integer_amount, "must be a finite number without decimals")
is_uuid4 = Rule(lambda v: isinstance(v, str) and bool(_UUID4_RE.match(v)), "must be a UUID v4")
is_iso4217 = Rule(lambda v: isinstance(v, str) and v in ISO4217_CURRENCIES, "must be a valid ISO4217 currency code")
is_string = Rule(lambda v: isinstance(v, str), "must be a string")
is_non_empty_string = Rule(lambda v: isinstance(v, str) and v.strip() != "", "should not be empty")
is_numeric_id = Rule(_is_numeric_id, "must be a number string")
is_http_url = Rule(_is_http_url, "must be an URL address")


def minimum(bound: int) -> Rule:
    return Rule(lambda v: v >= bound, f"must not be less than {bound}")


def is_member(enum_cls: type[Enum]) -> Rule:
    allowed = ", ".join(e.value for e in enum_cls)

    def check(value: Any) -> bool:
        if isinstance(value, enum_cls):
            return True
        return value in {e.value for e in enum_cls}

    return Rule(check, f"must be one of the following values: {allowed}")


# --- normalizers ---

def to_int(value: Any) -> int:
    return int(value)


def to_digits(value: Any) -> str:
    return str(value)


def to_enum(enum_cls: type[Enum]) -> Callable[[Any], Enum]:
    return lambda value: enum_cls(value)


def exactly_one_of(first: str, second: str) -> CrossRule:
    def check(candidate: Mapping[str, Any]) -> Optional[str]:
        has_first = candidate.get(first) not in (None, "")
        has_second = candidate.get(second) not in (None, "")
        if has_first and has_second:
            return f"Only one of {first} or {second} must be provided"
        if not has_first and not has_second:
            return f"One of {first} or {second} must be provided"
        return None

    return CrossRule(field=second, check=check)


def _passes(rule: Rule, value: Any) -> bool:
    try:
        return bool(rule.check(value))
    except (TypeError, ValueError, ArithmeticError):
        return False


def collect_violations(raw: Mapping[str, Any], schema: Schema) -> tuple[dict[str, Any], list[Violation]]:
    """
    Run field rules, then cross-field rules, over `raw`.

    Each field reports at most its first failing rule. Cross-field rules see
    normalized values for fields that passed and raw values otherwise.
    """
    candidate: dict[str, Any] = {}
    violations: list[Violation] = []

    for name, rules in schema.fields.items():
        value = raw.get(name)
        if rules.optional and rules.is_absent(value):
            candidate[name] = None
            continue

        failed = next((rule for rule in rules.rules if not _passes(rule, value)), None)
        if failed is not None:
            violations.append(Violation(field=name, message=f"{name} {failed.message}"))
            candidate[name] = value
            continue

        candidate[name] = rules.normalize(value) if rules.normalize else value

    for cross in schema.cross_rules:
        message = cross.check(candidate)
        if message:
            violations.append(Violation(field=cross.field, message=message))

    return candidate, violations


def validate(raw: Mapping[str, Any], schema: Schema) -> dict[str, Any]:
    candidate, violations = collect_violations(raw, schema)
    if violations:
        raise ValidationError(schema.name, violations)
    return candidate
