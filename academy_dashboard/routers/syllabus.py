from fastapi import APIRouter, Depends, Query

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import SyllabusCreateRequest, SyllabusUpdateRequest


router = APIRouter(prefix='/api/syllabus', tags=['Syllabus'], route_class=EndpointNameRoute)


@router.get('')
def list_topics(
    batch_id: str | None = Query(default=None, alias='batchId'),
    subject: str | None = None,
    ctx: AppContext = Depends(require_session),
):
    return ctx.syllabus.get_all(batch_id=batch_id, subject=subject)


@router.get('/progress')
def progress(
    batch_id: str | None = Query(default=None, alias='batchId'),
    subject: str | None = None,
    ctx: AppContext = Depends(require_session),
):
    return ctx.syllabus.get_progress(batch_id, subject)


@router.post('/{record_id}/toggle')
def toggle(record_id: str, ctx: AppContext = Depends(require_session)):
    return ctx.syllabus.toggle(record_id)


add_crud_routes(router, 'syllabus', SyllabusCreateRequest, SyllabusUpdateRequest)
