from datetime import date

from fastapi import APIRouter, Depends, Query

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import EventCreateRequest, EventUpdateRequest


router = APIRouter(prefix='/api/events', tags=['Events'], route_class=EndpointNameRoute)


@router.get('')
def list_events(
    batch_id: str | None = Query(default=None, alias='batchId'),
    start_date: date | None = Query(default=None, alias='startDate'),
    end_date: date | None = Query(default=None, alias='endDate'),
    ctx: AppContext = Depends(require_session),
):
    return ctx.events.get_all(
        batch_id=batch_id,
        start_date=start_date.isoformat() if start_date else None,
        end_date=end_date.isoformat() if end_date else None,
    )


add_crud_routes(router, 'events', EventCreateRequest, EventUpdateRequest)
