from fastapi import APIRouter, Depends, Query

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import ResultCreateRequest, ResultUpdateRequest


router = APIRouter(prefix='/api/results', tags=['Results'], route_class=EndpointNameRoute)


@router.get('')
def list_results(
    batch_id: str | None = Query(default=None, alias='batchId'),
    student_id: str | None = Query(default=None, alias='studentId'),
    subject: str | None = None,
    ctx: AppContext = Depends(require_session),
):
    return ctx.results.get_all(batch_id=batch_id, student_id=student_id, subject=subject)


@router.get('/leaderboard')
def leaderboard(
    batch_id: str | None = Query(default=None, alias='batchId'),
    subject: str | None = None,
    ctx: AppContext = Depends(require_session),
):
    return ctx.results.get_leaderboard(batch_id, subject)


add_crud_routes(router, 'results', ResultCreateRequest, ResultUpdateRequest)
