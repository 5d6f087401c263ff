from __future__ import annotations

from academy_dashboard.core.response import raise_for_error, wrap_response
from academy_dashboard.repositories.base import Repository
from academy_dashboard.repositories.lookups import fetch_name_map, resolve_refs


def targets_batch(row: dict, batch_id: str) -> bool:
    targets = row.get('target_batch_ids') or []
    return not targets or batch_id in targets


class AnnouncementRepository(Repository):
    table_name = 'announcements'

    def get_all(self, batch_id: str | None = None) -> dict:
        """All announcements, or only those visible to ``batch_id`` (targeted at it or global)."""
        result = self.ordered().execute()
        raise_for_error(result.error, table=self.table_name)
        rows = result.data or []
        if batch_id:
            rows = [row for row in rows if targets_batch(row, batch_id)]
        if any(row.get('target_batch_ids') for row in rows):
            batch_map = fetch_name_map(self.client, 'batches')
            for row in rows:
                row['target_batch_ids'] = resolve_refs(row.get('target_batch_ids'), batch_map)
        return wrap_response(rows)

    def toggle_viewed(self, record_id: str) -> dict:
        return self.toggle(record_id, 'viewed')
