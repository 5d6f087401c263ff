from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from academy_dashboard.core.response import StorageError

if TYPE_CHECKING:
    from academy_dashboard.context import AppContext


logger = logging.getLogger(__name__)


def remove_student(ctx: AppContext, student_id: str, *, exit_type: str, reason: str | None = None) -> dict:
    """Record an exit snapshot for the student, then delete them.

    The two writes are independent: if the delete fails the exit row stays.
    """
    student = ctx.students.get_one(student_id)['data']
    exit_row = ctx.student_exits.create(
        {
            'studentId': student['id'],
            'studentName': student.get('name'),
            'exitType': exit_type,
            'reason': reason,
            'batchIds': student.get('batchIds') or [],
            'exitDate': ctx.time_provider.utc_now_iso(),
        }
    )['data']
    try:
        ctx.students.delete(student_id)
    except StorageError as exc:
        logger.error(
            'student_remove_partial student_id=%s exit_id=%s code=%s',
            student_id,
            exit_row.get('id'),
            exc.code,
        )
        raise
    logger.info('student_removed student_id=%s exit_type=%s', student_id, exit_type)
    return {'data': {'success': True, 'exit': exit_row}}
