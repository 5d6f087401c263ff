from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from sqlalchemy.engine import Engine

from academy_dashboard.config import settings
from academy_dashboard.context import AppContext
from academy_dashboard.db import Base, engine as default_engine
from academy_dashboard.routers import (
    academies,
    analytics,
    announcements,
    attendance,
    auth,
    batches,
    dashboard,
    documents,
    events,
    notes,
    results,
    students,
    syllabus,
    todos,
    weekly_plans,
)
from academy_dashboard.routers.errors import register_error_handlers
from academy_dashboard.services.session_store import MemoryStorage

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)

ROUTERS = (
    auth,
    academies,
    batches,
    students,
    attendance,
    syllabus,
    results,
    documents,
    notes,
    announcements,
    events,
    todos,
    weekly_plans,
    analytics,
    dashboard,
)


def create_app(engine: Engine | None = None, storage: MemoryStorage | None = None) -> FastAPI:
    bound_engine = engine or default_engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Base.metadata.create_all(bind=bound_engine)
        context = AppContext.build(bound_engine, storage=storage)
        context.session.restore()
        app.state.context = context
        logging.getLogger(__name__).info(
            'app_started env=%s session=%s', settings.app_env, context.session.state.value
        )
        yield

    app = FastAPI(title=settings.app_name, version='0.1.0', lifespan=lifespan)
    register_error_handlers(app)

    @app.middleware('http')
    async def slow_request_logger(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000.0
        if duration_ms >= settings.metrics_slow_ms:
            logging.getLogger('academy_dashboard.request').info(
                'request_slow path=%s method=%s status_code=%s duration_ms=%.2f',
                request.url.path,
                request.method,
                response.status_code,
                duration_ms,
            )
        return response

    @app.get('/health')
    def health():
        return {'status': 'ok'}

    for module in ROUTERS:
        app.include_router(module.router)
    return app


app = create_app()
