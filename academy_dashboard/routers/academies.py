from fastapi import APIRouter, Depends

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import AcademyCreateRequest, AcademyUpdateRequest


router = APIRouter(prefix='/api/academies', tags=['Academies'], route_class=EndpointNameRoute)


@router.get('')
def list_academies(ctx: AppContext = Depends(require_session)):
    return ctx.academies.get_all()


add_crud_routes(router, 'academies', AcademyCreateRequest, AcademyUpdateRequest)
