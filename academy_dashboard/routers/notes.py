from fastapi import APIRouter, Depends

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import NoteCreateRequest, NoteUpdateRequest


router = APIRouter(prefix='/api/notes', tags=['Notes'], route_class=EndpointNameRoute)


@router.get('')
def list_notes(ctx: AppContext = Depends(require_session)):
    return ctx.notes.get_all()


add_crud_routes(router, 'notes', NoteCreateRequest, NoteUpdateRequest)
