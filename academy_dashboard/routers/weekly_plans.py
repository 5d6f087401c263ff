from fastapi import APIRouter, Depends, Query

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import WeeklyPlanUpdateRequest, WeeklyPlanUpsertRequest


router = APIRouter(prefix='/api/weekly-plans', tags=['Weekly Plans'], route_class=EndpointNameRoute)


@router.get('')
def list_plans(
    batch_id: str | None = Query(default=None, alias='batchId'),
    ctx: AppContext = Depends(require_session),
):
    return ctx.weekly_plans.get_all(batch_id)


@router.get('/current')
def current_plan(
    batch_id: str = Query(alias='batchId'),
    ctx: AppContext = Depends(require_session),
):
    return ctx.weekly_plans.get_current(batch_id)


@router.put('')
def upsert_plan(payload: WeeklyPlanUpsertRequest, ctx: AppContext = Depends(require_session)):
    plan = payload.to_payload(partial=True)
    plan.pop('batchId', None)
    plan.pop('weekStart', None)
    return ctx.weekly_plans.upsert(payload.batch_id, payload.week_start, plan)


@router.post('/{record_id}/complete')
def mark_complete(record_id: str, ctx: AppContext = Depends(require_session)):
    return ctx.weekly_plans.mark_complete(record_id)


add_crud_routes(router, 'weekly_plans', WeeklyPlanUpsertRequest, WeeklyPlanUpdateRequest)
