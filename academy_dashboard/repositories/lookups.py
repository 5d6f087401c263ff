from __future__ import annotations

import logging

from academy_dashboard.config import settings
from academy_dashboard.core.response import raise_for_error
from academy_dashboard.query.client import QueryClient


logger = logging.getLogger(__name__)


def fetch_name_map(client: QueryClient, table: str, *, limit: int | None = None) -> dict[str, dict]:
    """Load an ``id -> {id, name}`` table for client-side joins.

    The lookup is capped at ``settings.lookup_table_limit`` rows; ids beyond
    the cap resolve as unknown.
    """
    cap = limit or settings.lookup_table_limit
    result = client.table(table).select('id, name').order('name').limit(cap).execute()
    raise_for_error(result.error, table=table)
    rows = result.data or []
    if len(rows) >= cap:
        logger.warning('lookup_table_truncated table=%s limit=%s', table, cap)
    return {row['id']: {'id': row['id'], 'name': row['name']} for row in rows}


def resolve_refs(ids: list | None, name_map: dict[str, dict]) -> list[dict]:
    return [
        dict(name_map[ref]) if ref in name_map else {'id': ref, 'name': settings.unknown_label}
        for ref in (ids or [])
    ]
