from __future__ import annotations

from datetime import date, datetime

from academy_dashboard.core.response import wrap_result
from academy_dashboard.repositories.base import Repository


class EventRepository(Repository):
    table_name = 'events'
    order_column = 'date'
    order_desc = False
    optional_fields = ('batchId', 'description')

    def get_all(
        self,
        *,
        batch_id: str | None = None,
        start_date: date | datetime | str | None = None,
        end_date: date | datetime | str | None = None,
    ) -> dict:
        query = self.ordered()
        if batch_id:
            query = query.eq('batch_id', batch_id)
        if start_date:
            query = query.gte('date', start_date)
        if end_date:
            query = query.lte('date', end_date)
        return wrap_result(query.execute(), table=self.table_name)
