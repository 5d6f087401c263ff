from fastapi import APIRouter, Depends, Query

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import AnnouncementCreateRequest, AnnouncementUpdateRequest


router = APIRouter(prefix='/api/announcements', tags=['Announcements'], route_class=EndpointNameRoute)


@router.get('')
def list_announcements(
    batch_id: str | None = Query(default=None, alias='batchId'),
    ctx: AppContext = Depends(require_session),
):
    return ctx.announcements.get_all(batch_id)


@router.post('/{record_id}/viewed')
def toggle_viewed(record_id: str, ctx: AppContext = Depends(require_session)):
    return ctx.announcements.toggle_viewed(record_id)


add_crud_routes(router, 'announcements', AnnouncementCreateRequest, AnnouncementUpdateRequest)
