from __future__ import annotations

from academy_dashboard.core.response import raise_for_error
from academy_dashboard.repositories.base import Repository
from academy_dashboard.services.aggregation_service import exit_stats


class StudentExitRepository(Repository):
    # Exit rows are written once when a student is removed and never edited.
    table_name = 'student_exits'
    order_column = 'exit_date'
    order_desc = True
    optional_fields = ('reason',)

    def get_stats(self) -> dict:
        result = self.query().select('exit_type').execute()
        raise_for_error(result.error, table=self.table_name)
        return {'data': exit_stats(result.data or [])}
