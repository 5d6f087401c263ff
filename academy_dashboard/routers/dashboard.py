from fastapi import APIRouter, Depends

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.services.dashboard_service import load_batch_overview, load_dashboard


router = APIRouter(prefix='/api/dashboard', tags=['Dashboard'], route_class=EndpointNameRoute)


@router.get('/stats')
async def stats(ctx: AppContext = Depends(require_session)):
    return await load_dashboard(ctx)


@router.get('/batches/{batch_id}')
async def batch_overview(batch_id: str, ctx: AppContext = Depends(require_session)):
    return await load_batch_overview(ctx, batch_id)
