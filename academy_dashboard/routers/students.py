from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import StudentCreateRequest, StudentUpdateRequest
from academy_dashboard.services.export_service import export_filename, students_csv
from academy_dashboard.services.student_lifecycle_service import remove_student


router = APIRouter(prefix='/api/students', tags=['Students'], route_class=EndpointNameRoute)


def csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type='text/csv',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )


@router.get('')
def list_students(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1, le=200),
    search: str = '',
    batch_id: str | None = Query(default=None, alias='batchId'),
    ctx: AppContext = Depends(require_session),
):
    return ctx.students.get_all(page=page, limit=limit, search=search, batch_id=batch_id)


@router.get('/export')
def export_students(
    search: str = '',
    batch_id: str | None = Query(default=None, alias='batchId'),
    ctx: AppContext = Depends(require_session),
):
    students = ctx.students.get_all_unpaged(search=search, batch_id=batch_id, resolve_batches=True)['data']
    return csv_response(students_csv(students), export_filename('students', ctx.time_provider.today()))


@router.delete('/{record_id}')
def delete_student(
    record_id: str,
    exit_type: str = Query(default='left', alias='exitType', pattern='^(kicked|left)$'),
    reason: str | None = None,
    ctx: AppContext = Depends(require_session),
):
    return remove_student(ctx, record_id, exit_type=exit_type, reason=reason)


add_crud_routes(router, 'students', StudentCreateRequest, StudentUpdateRequest, include_delete=False)
