from __future__ import annotations

from academy_dashboard.config import settings
from academy_dashboard.core.response import raise_for_error, wrap_page, wrap_response
from academy_dashboard.query.client import escape_like
from academy_dashboard.repositories.base import Repository
from academy_dashboard.repositories.lookups import fetch_name_map, resolve_refs


def search_filter(term: str) -> str:
    """Case-insensitive substring match on name or email; the term itself has no wildcards."""
    needle = escape_like((term or '').replace('"', '').strip())
    return f'name.ilike."%{needle}%",email.ilike."%{needle}%"'


class StudentRepository(Repository):
    table_name = 'students'
    order_column = 'name'
    order_desc = False

    def get_all(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        search: str = '',
        batch_id: str | None = None,
    ) -> dict:
        page_size = limit or settings.default_page_size
        query = self.ordered(count='exact')
        if search:
            query = query.or_(search_filter(search))
        if batch_id:
            query = query.contains('batch_ids', [batch_id])
        start = (max(page, 1) - 1) * page_size
        end = start + page_size - 1
        result = query.range(start, end).execute()
        raise_for_error(result.error, table=self.table_name)
        rows = self._with_batch_names(result.data or [])
        return wrap_page(result, page_size, rows=rows, table=self.table_name)

    def get_all_unpaged(
        self,
        *,
        search: str = '',
        batch_id: str | None = None,
        resolve_batches: bool = False,
    ) -> dict:
        query = self.ordered()
        if search:
            query = query.or_(search_filter(search))
        if batch_id:
            query = query.contains('batch_ids', [batch_id])
        result = query.execute()
        raise_for_error(result.error, table=self.table_name)
        rows = result.data or []
        if resolve_batches:
            rows = self._with_batch_names(rows)
        return wrap_response(rows)

    def _with_batch_names(self, rows: list[dict]) -> list[dict]:
        if not rows:
            return rows
        batch_map = fetch_name_map(self.client, 'batches')
        for row in rows:
            row['batch_ids'] = resolve_refs(row.get('batch_ids'), batch_map)
        return rows
