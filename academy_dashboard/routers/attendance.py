from datetime import date

from fastapi import APIRouter, Depends, Query

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.schemas import AttendanceBulkRequest, AttendanceSingleRequest


router = APIRouter(prefix='/api/attendance', tags=['Attendance'], route_class=EndpointNameRoute)


@router.get('')
def list_attendance(
    batch_id: str | None = Query(default=None, alias='batchId'),
    day: date | None = Query(default=None, alias='date'),
    student_id: str | None = Query(default=None, alias='studentId'),
    ctx: AppContext = Depends(require_session),
):
    return ctx.attendance.get(batch_id=batch_id, date=day, student_id=student_id)


@router.get('/student/{student_id}')
def student_attendance(student_id: str, ctx: AppContext = Depends(require_session)):
    return ctx.attendance.get_by_student(student_id)


@router.post('/bulk')
def mark_bulk(payload: AttendanceBulkRequest, ctx: AppContext = Depends(require_session)):
    records = [record.to_payload() for record in payload.records]
    return ctx.attendance.mark_bulk(batch_id=payload.batch_id, date=payload.date, records=records)


@router.post('')
def mark_single(payload: AttendanceSingleRequest, ctx: AppContext = Depends(require_session)):
    return ctx.attendance.mark_single(
        student_id=payload.student_id,
        batch_id=payload.batch_id,
        date=payload.date,
        status=payload.status,
    )


@router.delete('/{record_id}')
def delete_attendance(record_id: str, ctx: AppContext = Depends(require_session)):
    return ctx.attendance.delete(record_id)
