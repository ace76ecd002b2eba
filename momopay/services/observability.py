from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional


_reference_id: ContextVar[Optional[str]] = ContextVar("reference_id", default=None)

ROOT_LOGGER_NAME = "momopay"


def get_reference_id() -> Optional[str]:
    return _reference_id.get()


@contextmanager
def reference_id_scope(value: Optional[str]) -> Iterator[None]:
    token = _reference_id.set(value)
    try:
        yield
    finally:
        _reference_id.reset(token)


class ReferenceIdFilter(logging.Filter):
    """Stamps `record.reference_id` so handlers can format it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.reference_id = get_reference_id() or "-"
        return True


def context_logger(base: Optional[logging.Logger], label: str) -> logging.Logger:
    root = base or logging.getLogger(ROOT_LOGGER_NAME)
    return root.getChild(label) if label else root
