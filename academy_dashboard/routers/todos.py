from fastapi import APIRouter, Depends, Query

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.crud import add_crud_routes
from academy_dashboard.schemas import TodoCreateRequest, TodoUpdateRequest


router = APIRouter(prefix='/api/todos', tags=['Todos'], route_class=EndpointNameRoute)


@router.get('')
def list_todos(
    batch_id: str | None = Query(default=None, alias='batchId'),
    ctx: AppContext = Depends(require_session),
):
    return ctx.todos.get_all(batch_id)


@router.post('/{record_id}/toggle')
def toggle(record_id: str, ctx: AppContext = Depends(require_session)):
    return ctx.todos.toggle(record_id)


add_crud_routes(router, 'todos', TodoCreateRequest, TodoUpdateRequest)
