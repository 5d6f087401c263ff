from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from academy_dashboard.services.aggregation_service import (
    attendance_band,
    attendance_percent,
    student_analytics_stats,
)

if TYPE_CHECKING:
    from academy_dashboard.context import AppContext


def build_student_rows(students: list[dict], statuses: list[dict]) -> list[dict]:
    by_student: dict[str, list[dict]] = defaultdict(list)
    for record in statuses:
        by_student[record.get('studentId')].append(record)
    rows = []
    for student in students:
        records = by_student.get(student.get('id'), [])
        rows.append(
            {
                **student,
                'attendancePercent': attendance_percent(records),
                'totalRecords': len(records),
            }
        )
    return rows


def filter_rows(rows: list[dict], *, search: str = '', band: str = 'all') -> list[dict]:
    needle = (search or '').strip().lower()
    if needle:
        rows = [
            row
            for row in rows
            if needle in (row.get('name') or '').lower()
            or needle in (row.get('email') or '').lower()
            or needle in (row.get('phone') or '')
        ]
    if band and band != 'all':
        rows = [row for row in rows if attendance_band(row.get('attendancePercent')) == band]
    return rows


def sort_rows(rows: list[dict], *, sort_by: str = 'name', descending: bool = False) -> list[dict]:
    if sort_by == 'attendance':
        # Students without records rank below 0 percent.
        return sorted(
            rows,
            key=lambda row: -1 if row.get('attendancePercent') is None else row['attendancePercent'],
            reverse=descending,
        )
    return sorted(rows, key=lambda row: (row.get('name') or '').lower(), reverse=descending)


def student_analytics(
    ctx: AppContext,
    *,
    search: str = '',
    batch_id: str | None = None,
    band: str = 'all',
    sort_by: str = 'name',
    descending: bool = False,
) -> dict:
    """Per-student attendance roll-up with summary stats over the unfiltered pool."""
    students = ctx.students.get_all_unpaged(batch_id=batch_id)['data']
    statuses = ctx.attendance.get_statuses(batch_id=batch_id)
    rows = build_student_rows(students, statuses)
    stats = student_analytics_stats(rows)
    rows = sort_rows(filter_rows(rows, search=search, band=band), sort_by=sort_by, descending=descending)
    return {'data': rows, 'stats': stats}
