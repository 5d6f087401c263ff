from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, Sequence

from academy_dashboard.config import settings


STUDENT_COLUMNS = ('Name', 'Email', 'Phone', 'DOB', 'Guardian Name', 'Guardian Phone', 'Address', 'Batches')
ANALYTICS_COLUMNS = (
    'Name',
    'Email',
    'Phone',
    'DOB',
    'Guardian',
    'Guardian Phone',
    'Address',
    'Attendance %',
    'Total Classes',
)


def render_csv(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    """Every cell quoted; embedded quotes are doubled."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(headers)
    for row in rows:
        writer.writerow(['' if value is None else value for value in row])
    return buffer.getvalue()


def _batch_names(student: dict) -> str:
    names = []
    for ref in student.get('batchIds') or []:
        names.append(ref.get('name') if isinstance(ref, dict) else str(ref))
    return ', '.join(name or settings.unknown_label for name in names)


def students_csv(students: Iterable[dict]) -> str:
    return render_csv(
        STUDENT_COLUMNS,
        (
            (
                student.get('name'),
                student.get('email'),
                student.get('phone'),
                student.get('dob'),
                student.get('guardianName'),
                student.get('guardianPhone'),
                student.get('address'),
                _batch_names(student),
            )
            for student in students
        ),
    )


def analytics_csv(rows: Iterable[dict]) -> str:
    def attendance(row: dict) -> str:
        value = row.get('attendancePercent')
        return 'N/A' if value is None else f'{value}%'

    return render_csv(
        ANALYTICS_COLUMNS,
        (
            (
                row.get('name'),
                row.get('email'),
                row.get('phone'),
                row.get('dob'),
                row.get('guardianName'),
                row.get('guardianPhone'),
                row.get('address'),
                attendance(row),
                row.get('totalRecords', 0),
            )
            for row in rows
        ),
    )


def export_filename(prefix: str, day: date) -> str:
    return f'{prefix}_{day.isoformat()}.csv'
