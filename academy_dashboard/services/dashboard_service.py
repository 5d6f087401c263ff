from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable

from academy_dashboard.core.response import StorageError
from academy_dashboard.services.aggregation_service import summarize_attendance

if TYPE_CHECKING:
    from academy_dashboard.context import AppContext


logger = logging.getLogger(__name__)

EMPTY_TODAY_ATTENDANCE = {'present': 0, 'total': 0, 'percentage': 0.0}


async def _isolated(branch: str, func: Callable[..., Any], *args, fallback: Any = None, **kwargs) -> Any:
    """Run ``func`` in a worker thread; a storage failure degrades to ``fallback``."""
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    except StorageError as exc:
        logger.warning('dashboard_branch_failed branch=%s code=%s', branch, exc.code)
        return fallback


async def load_dashboard(ctx: AppContext) -> dict:
    repo = ctx.dashboard
    students, batches, academies, today = await asyncio.gather(
        asyncio.to_thread(repo.count, 'students'),
        asyncio.to_thread(repo.count, 'batches'),
        asyncio.to_thread(repo.count, 'academies'),
        _isolated('today_attendance', repo.today_attendance, fallback=dict(EMPTY_TODAY_ATTENDANCE)),
    )
    return {
        'data': {
            'totalStudents': students,
            'totalBatches': batches,
            'totalAcademies': academies,
            'todayAttendance': today,
        }
    }


def weekly_topics(plan: dict | None) -> dict:
    if not plan:
        return {}
    return {day: topic for day, topic in (plan.get('dayTopics') or {}).items() if topic}


async def load_batch_overview(ctx: AppContext, batch_id: str) -> dict:
    """Batch page: the batch itself plus widgets that each fail independently."""
    day = ctx.time_provider.today()
    batch, students, syllabus, announcements, plan, statuses = await asyncio.gather(
        asyncio.to_thread(ctx.batches.get_one, batch_id),
        _isolated('students', ctx.students.get_all_unpaged, batch_id=batch_id, fallback={'data': []}),
        _isolated('syllabus', ctx.syllabus.get_progress, batch_id, fallback={'data': None}),
        _isolated('announcements', ctx.announcements.get_all, batch_id, fallback={'data': []}),
        _isolated('weekly_plan', ctx.weekly_plans.get_current, batch_id, fallback={'data': None}),
        _isolated('attendance', ctx.attendance.get_statuses, batch_id=batch_id, day=day, fallback=None),
    )
    return {
        'data': {
            'batch': batch['data'],
            'students': students['data'],
            'syllabusProgress': syllabus['data'],
            'announcements': announcements['data'],
            'weeklyPlan': plan['data'],
            'weeklyTopics': weekly_topics(plan['data']),
            'todayAttendance': summarize_attendance(statuses) if statuses is not None else None,
        }
    }
