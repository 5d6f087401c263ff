from __future__ import annotations

from academy_dashboard.core.response import raise_for_error, wrap_result
from academy_dashboard.repositories.base import Repository
from academy_dashboard.services.aggregation_service import syllabus_progress


class SyllabusRepository(Repository):
    table_name = 'syllabus'
    order_column = 'sort_order'
    order_desc = False
    optional_fields = ('description', 'dueDate')

    def get_all(self, *, batch_id: str | None = None, subject: str | None = None) -> dict:
        query = self.ordered()
        if batch_id:
            query = query.eq('batch_id', batch_id)
        if subject:
            query = query.eq('subject', subject)
        return wrap_result(query.execute(), table=self.table_name)

    def get_progress(self, batch_id: str | None = None, subject: str | None = None) -> dict:
        query = self.query().select('id, completed')
        if batch_id:
            query = query.eq('batch_id', batch_id)
        if subject:
            query = query.eq('subject', subject)
        result = query.execute()
        raise_for_error(result.error, table=self.table_name)
        return {'data': syllabus_progress(result.data or [])}
