from __future__ import annotations

from academy_dashboard.core.response import wrap_result
from academy_dashboard.repositories.base import Repository


class BatchRepository(Repository):
    table_name = 'batches'

    def get_all(self, academy_id: str | None = None) -> dict:
        query = self.ordered()
        if academy_id:
            query = query.eq('academy_id', academy_id)
        return wrap_result(query.execute(), table=self.table_name)
