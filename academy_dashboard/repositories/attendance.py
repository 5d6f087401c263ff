from __future__ import annotations

from datetime import date, datetime

from academy_dashboard.core.response import raise_for_error, wrap_response, wrap_result
from academy_dashboard.core.time_provider import to_date_string
from academy_dashboard.repositories.base import Repository


ATTENDANCE_CONFLICT_TARGET = 'student_id,batch_id,date'


def flatten_student(row: dict) -> dict:
    student = row.pop('students', None) or {}
    row['student_id'] = {'id': row.get('student_id'), 'name': student.get('name')}
    return row


class AttendanceRepository(Repository):
    table_name = 'attendance'
    order_column = 'date'
    order_desc = True

    def get(
        self,
        *,
        batch_id: str | None = None,
        date: date | datetime | str | None = None,
        student_id: str | None = None,
    ) -> dict:
        query = self.query().select('*, students(name)')
        if batch_id:
            query = query.eq('batch_id', batch_id)
        if student_id:
            query = query.eq('student_id', student_id)
        if date:
            query = query.eq('date', to_date_string(date))
        result = query.execute()
        raise_for_error(result.error, table=self.table_name)
        return wrap_response([flatten_student(row) for row in result.data or []])

    def get_by_student(self, student_id: str) -> dict:
        return self.get(student_id=student_id)

    def get_statuses(self, *, batch_id: str | None = None, day: date | str | None = None) -> list[dict]:
        """Bare ``(studentId, status)`` projections for roll-ups."""
        query = self.query().select('student_id, status')
        if batch_id:
            query = query.eq('batch_id', batch_id)
        if day:
            query = query.eq('date', to_date_string(day))
        return wrap_result(query.execute(), table=self.table_name)['data']

    def mark_bulk(self, *, batch_id: str, date: date | datetime | str, records: list[dict]) -> dict:
        """Replace-or-insert every record in a single upsert keyed by student, batch and date."""
        day = to_date_string(date)
        stamp = self.time_provider.utc_now_iso()
        rows = [
            {
                'student_id': record['studentId'],
                'batch_id': batch_id,
                'date': day,
                'status': record['status'],
                'updated_at': stamp,
            }
            for record in records
        ]
        result = self.query().upsert(rows, on_conflict=ATTENDANCE_CONFLICT_TARGET).execute()
        return wrap_result(result, table=self.table_name)

    def mark_single(self, *, student_id: str, batch_id: str, date: date | datetime | str, status: str) -> dict:
        row = {
            'student_id': student_id,
            'batch_id': batch_id,
            'date': to_date_string(date),
            'status': status,
            'updated_at': self.time_provider.utc_now_iso(),
        }
        result = self.query().upsert(row, on_conflict=ATTENDANCE_CONFLICT_TARGET).single().execute()
        return wrap_result(result, table=self.table_name)
