from __future__ import annotations

from academy_dashboard.core.response import raise_for_error, wrap_response
from academy_dashboard.repositories.base import Repository


class NoteRepository(Repository):
    table_name = 'notes'
    order_column = 'updated_at'
    optional_fields = ('batchId',)

    def get_all(self) -> dict:
        result = self.ordered('*, batches(name)').execute()
        raise_for_error(result.error, table=self.table_name)
        rows = []
        for row in result.data or []:
            batch = row.pop('batches', None) or {}
            if row.get('batch_id'):
                row['batch_id'] = {'id': row['batch_id'], 'name': batch.get('name')}
            rows.append(row)
        return wrap_response(rows)
