from __future__ import annotations

import logging
import math
from typing import Any, Iterable

from academy_dashboard.core.case_converter import to_domain_keys
from academy_dashboard.query.client import NOT_FOUND_CODE, AdapterError, QueryResult


logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Adapter-level failure surfaced to callers: constraint, not-found or connectivity."""

    def __init__(self, error: AdapterError, *, table: str | None = None):
        super().__init__(error.message)
        self.error = error
        self.table = table

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def payload(self) -> dict:
        return self.error.as_dict()

    @property
    def is_not_found(self) -> bool:
        return self.error.code == NOT_FOUND_CODE


def raise_for_error(error: AdapterError | None, *, table: str | None = None) -> None:
    if error is None:
        return
    logger.warning('storage_error table=%s code=%s message=%s', table, error.code, error.message)
    raise StorageError(error, table=table)


def wrap_response(data: Any, error: AdapterError | None = None, *, table: str | None = None) -> dict:
    raise_for_error(error, table=table)
    return {'data': to_domain_keys(data)}


def wrap_result(result: QueryResult, *, table: str | None = None) -> dict:
    return wrap_response(result.data, result.error, table=table)


def total_pages(count: int | None, page_size: int) -> int:
    if not count or page_size <= 0:
        return 0
    return math.ceil(count / page_size)


def wrap_page(result: QueryResult, page_size: int, *, rows: list | None = None, table: str | None = None) -> dict:
    wrapped = wrap_response(result.data if rows is None else rows, result.error, table=table)
    wrapped['count'] = result.count or 0
    wrapped['totalPages'] = total_pages(result.count, page_size)
    return wrapped


def clean_optional_fields(payload: dict, fields: Iterable[str], *, fill_missing: bool = True) -> dict:
    """Empty strings become ``None``; with ``fill_missing`` absent fields are set to ``None`` too."""
    cleaned = dict(payload)
    for field in fields:
        if field in cleaned:
            if cleaned[field] == '':
                cleaned[field] = None
        elif fill_missing:
            cleaned[field] = None
    return cleaned
