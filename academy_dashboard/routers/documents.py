from fastapi import APIRouter, Depends

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import DocumentCreateRequest, DocumentUpdateRequest


router = APIRouter(prefix='/api/documents', tags=['Documents'], route_class=EndpointNameRoute)


@router.get('')
def list_documents(ctx: AppContext = Depends(require_session)):
    return ctx.documents.get_all()


add_crud_routes(router, 'documents', DocumentCreateRequest, DocumentUpdateRequest)
