from fastapi import APIRouter, Depends, Query

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import BatchCreateRequest, BatchUpdateRequest


router = APIRouter(prefix='/api/batches', tags=['Batches'], route_class=EndpointNameRoute)


@router.get('')
def list_batches(
    academy_id: str | None = Query(default=None, alias='academyId'),
    ctx: AppContext = Depends(require_session),
):
    return ctx.batches.get_all(academy_id=academy_id)


add_crud_routes(router, 'batches', BatchCreateRequest, BatchUpdateRequest)
