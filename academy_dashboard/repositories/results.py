from __future__ import annotations

from academy_dashboard.core.response import raise_for_error, wrap_response
from academy_dashboard.repositories.attendance import flatten_student
from academy_dashboard.repositories.base import Repository
from academy_dashboard.repositories.lookups import fetch_name_map
from academy_dashboard.services.aggregation_service import rank_leaderboard


class ResultsRepository(Repository):
    # marks <= total_marks is left to data entry; bonus marks can exceed the total.
    table_name = 'test_results'
    order_column = 'test_date'
    order_desc = True
    optional_fields = ('batchId', 'testName')

    def get_all(
        self,
        *,
        batch_id: str | None = None,
        student_id: str | None = None,
        subject: str | None = None,
    ) -> dict:
        query = self.ordered('*, students(name)')
        if batch_id:
            query = query.eq('batch_id', batch_id)
        if student_id:
            query = query.eq('student_id', student_id)
        if subject:
            query = query.eq('subject', subject)
        result = query.execute()
        raise_for_error(result.error, table=self.table_name)
        return wrap_response([flatten_student(row) for row in result.data or []])

    def get_leaderboard(self, batch_id: str | None = None, subject: str | None = None) -> dict:
        query = self.query().select('student_id, marks, total_marks')
        if batch_id:
            query = query.eq('batch_id', batch_id)
        if subject:
            query = query.eq('subject', subject)
        result = query.execute()
        raise_for_error(result.error, table=self.table_name)
        rows = result.data or []
        names = fetch_name_map(self.client, 'students') if rows else {}
        return {'data': rank_leaderboard(rows, {key: value['name'] for key, value in names.items()})}
