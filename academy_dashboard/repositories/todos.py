from __future__ import annotations

from academy_dashboard.core.response import wrap_result
from academy_dashboard.repositories.base import Repository


class TodoRepository(Repository):
    table_name = 'todos'
    optional_fields = ('batchId', 'description', 'dueDate')
    update_optional_fields = ('batchId',)

    def get_all(self, batch_id: str | None = None) -> dict:
        query = self.ordered()
        if batch_id:
            query = query.eq('batch_id', batch_id)
        return wrap_result(query.execute(), table=self.table_name)
