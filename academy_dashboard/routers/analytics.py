from fastapi import APIRouter, Depends, Query

from academy_dashboard.context import AppContext, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.routers.students import csv_response
from academy_dashboard.services.aggregation_service import monthly_exit_breakdown
from academy_dashboard.services.analytics_service import student_analytics
from academy_dashboard.services.export_service import analytics_csv, export_filename


router = APIRouter(prefix='/api/analytics', tags=['Analytics'], route_class=EndpointNameRoute)

BAND_PATTERN = '^(all|high|medium|low|none)$'
SORT_PATTERN = '^(name|attendance)$'


@router.get('/exits')
def list_exits(ctx: AppContext = Depends(require_session)):
    return ctx.student_exits.get_all()


@router.get('/exits/stats')
def exit_stats(ctx: AppContext = Depends(require_session)):
    return ctx.student_exits.get_stats()


@router.get('/exits/monthly')
def monthly_exits(ctx: AppContext = Depends(require_session)):
    return {'data': monthly_exit_breakdown(ctx.student_exits.get_all()['data'])}


@router.get('/students')
def students(
    search: str = '',
    batch_id: str | None = Query(default=None, alias='batchId'),
    band: str = Query(default='all', pattern=BAND_PATTERN),
    sort_by: str = Query(default='name', alias='sortBy', pattern=SORT_PATTERN),
    order: str = Query(default='asc', pattern='^(asc|desc)$'),
    ctx: AppContext = Depends(require_session),
):
    return student_analytics(
        ctx,
        search=search,
        batch_id=batch_id,
        band=band,
        sort_by=sort_by,
        descending=order == 'desc',
    )


@router.get('/students/export')
def export_students(
    search: str = '',
    batch_id: str | None = Query(default=None, alias='batchId'),
    band: str = Query(default='all', pattern=BAND_PATTERN),
    sort_by: str = Query(default='name', alias='sortBy', pattern=SORT_PATTERN),
    order: str = Query(default='asc', pattern='^(asc|desc)$'),
    ctx: AppContext = Depends(require_session),
):
    rows = student_analytics(
        ctx,
        search=search,
        batch_id=batch_id,
        band=band,
        sort_by=sort_by,
        descending=order == 'desc',
    )['data']
    return csv_response(analytics_csv(rows), export_filename('students_analytics', ctx.time_provider.today()))
