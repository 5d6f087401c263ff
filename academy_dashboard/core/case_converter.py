from __future__ import annotations

import re
from typing import Any

from academy_dashboard.config import settings


LEGACY_ID_ALIAS = settings.legacy_id_alias

_UPPER = re.compile(r'[A-Z]')
_UNDERSCORE_LOWER = re.compile(r'_([a-z])')


def storage_key(key: str) -> str:
    return _UPPER.sub(lambda match: f'_{match.group(0).lower()}', key)


def domain_key(key: str) -> str:
    if key == LEGACY_ID_ALIAS:
        return key
    return _UNDERSCORE_LOWER.sub(lambda match: match.group(1).upper(), key)


def to_storage_keys(value: Any) -> Any:
    """Rewrite camelCase keys to snake_case, recursing into dicts and lists."""
    if isinstance(value, list):
        return [to_storage_keys(item) for item in value]
    if not isinstance(value, dict):
        return value
    return {storage_key(str(key)): to_storage_keys(item) for key, item in value.items()}


def to_domain_keys(value: Any) -> Any:
    """Rewrite snake_case keys to camelCase, recursing into dicts and lists.

    Every dict carrying an ``id`` also exposes it under the legacy alias so
    code written against the older identifier name keeps working.
    """
    if isinstance(value, list):
        return [to_domain_keys(item) for item in value]
    if not isinstance(value, dict):
        return value
    result = {domain_key(str(key)): to_domain_keys(item) for key, item in value.items()}
    if 'id' in result:
        result[LEGACY_ID_ALIAS] = result['id']
    return result


def strip_legacy_alias(value: Any) -> Any:
    if isinstance(value, list):
        return [strip_legacy_alias(item) for item in value]
    if not isinstance(value, dict):
        return value
    return {key: strip_legacy_alias(item) for key, item in value.items() if key != LEGACY_ID_ALIAS}
