from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable

from academy_dashboard.config import settings
from academy_dashboard.core.case_converter import LEGACY_ID_ALIAS


def _field(row: dict, snake: str, camel: str, default=None):
    if snake in row:
        return row[snake]
    return row.get(camel, default)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percent(part: float, whole: float) -> float:
    if not whole:
        return 0.0
    return part / whole * 100


def rank_leaderboard(rows: Iterable[dict], names: dict[str, str]) -> list[dict]:
    """Rank students by summed marks over summed total marks.

    The ratio of sums weights long tests more than short ones; it is not the
    mean of per-test percentages. Equal percentages keep first-seen order.
    """
    stats: dict[str, dict] = {}
    for row in rows:
        student_id = _field(row, 'student_id', 'studentId')
        entry = stats.setdefault(student_id, {'marks': 0.0, 'total': 0.0, 'tests': 0})
        entry['marks'] += row.get('marks') or 0
        entry['total'] += _field(row, 'total_marks', 'totalMarks', 0) or 0
        entry['tests'] += 1

    board = [
        {
            LEGACY_ID_ALIAS: student_id,
            'studentId': student_id,
            'studentName': names.get(student_id) or settings.unknown_label,
            'percentage': percent(entry['marks'], entry['total']),
            'testCount': entry['tests'],
            'marks': entry['marks'],
            'totalMarks': entry['total'],
        }
        for student_id, entry in stats.items()
    ]
    return sorted(board, key=lambda item: item['percentage'], reverse=True)


def summarize_attendance(records: Iterable[dict]) -> dict:
    counts = {'present': 0, 'absent': 0, 'late': 0}
    for record in records:
        status = record.get('status')
        if status in counts:
            counts[status] += 1
    total = sum(counts.values())
    return {**counts, 'total': total, 'percentage': round_half_up(percent(counts['present'], total))}


def attendance_percent(records: Iterable[dict]) -> int | None:
    """Share of sessions attended (present or late); ``None`` with no records."""
    statuses = [record.get('status') for record in records]
    if not statuses:
        return None
    attended = sum(1 for status in statuses if status in ('present', 'late'))
    return round_half_up(percent(attended, len(statuses)))


def today_attendance_summary(records: Iterable[dict]) -> dict:
    statuses = [record.get('status') for record in records]
    present = sum(1 for status in statuses if status == 'present')
    total = len(statuses)
    return {'present': present, 'total': total, 'percentage': percent(present, total)}


def attendance_band(value: int | None, *, high: int | None = None, low: int | None = None) -> str:
    high = settings.attendance_high_threshold if high is None else high
    low = settings.attendance_low_threshold if low is None else low
    if value is None:
        return 'none'
    if value >= high:
        return 'high'
    if value >= low:
        return 'medium'
    return 'low'


def exit_stats(rows: Iterable[dict]) -> dict:
    types = [_field(row, 'exit_type', 'exitType') for row in rows]
    return {
        'total': len(types),
        'kicked': sum(1 for kind in types if kind == 'kicked'),
        'left': sum(1 for kind in types if kind == 'left'),
    }


def monthly_exit_breakdown(rows: Iterable[dict]) -> list[dict]:
    months: dict[str, dict] = {}
    for row in rows:
        raw = _field(row, 'exit_date', 'exitDate')
        if not raw:
            continue
        moment = raw if isinstance(raw, datetime) else datetime.fromisoformat(str(raw).replace('Z', '+00:00'))
        label = moment.strftime('%b %Y')
        bucket = months.setdefault(label, {'month': label, 'kicked': 0, 'left': 0})
        kind = _field(row, 'exit_type', 'exitType')
        if kind in ('kicked', 'left'):
            bucket[kind] += 1
    return list(months.values())


def syllabus_progress(rows: Iterable[dict]) -> dict:
    flags = [bool(row.get('completed')) for row in rows]
    total = len(flags)
    completed = sum(flags)
    return {'total': total, 'completed': completed, 'percentage': round_half_up(percent(completed, total))}


def student_analytics_stats(students: Iterable[dict]) -> dict:
    values = [student.get('attendancePercent') for student in students]
    return {
        'total': len(values),
        'highAttendance': sum(1 for value in values if attendance_band(value) == 'high'),
        'lowAttendance': sum(1 for value in values if attendance_band(value) == 'low'),
        'noAttendance': sum(1 for value in values if value is None),
    }
