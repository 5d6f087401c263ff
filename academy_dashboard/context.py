from __future__ import annotations

from dataclasses import dataclass, field

from fastapi import Depends, HTTPException, Request
from sqlalchemy.engine import Engine

from academy_dashboard.config import settings
from academy_dashboard.core.time_provider import TimeProvider, default_time_provider
from academy_dashboard.query.client import QueryClient
from academy_dashboard.repositories import (
    AcademyRepository,
    AnnouncementRepository,
    AttendanceRepository,
    BatchRepository,
    DashboardRepository,
    DocumentRepository,
    EventRepository,
    NoteRepository,
    ResultsRepository,
    StudentExitRepository,
    StudentRepository,
    SyllabusRepository,
    TodoRepository,
    WeeklyPlanRepository,
)
from academy_dashboard.services.auth_service import AuthService
from academy_dashboard.services.session_store import FileStorage, MemoryStorage, SessionStore


@dataclass
class AppContext:
    """Everything a request needs: query client, session and repositories."""

    client: QueryClient
    storage: MemoryStorage
    time_provider: TimeProvider = default_time_provider
    auth: AuthService = field(init=False)
    session: SessionStore = field(init=False)

    def __post_init__(self) -> None:
        kwargs = {'time_provider': self.time_provider}
        self.auth = AuthService(self.client)
        self.session = SessionStore(self.auth, self.storage)
        self.academies = AcademyRepository(self.client, **kwargs)
        self.batches = BatchRepository(self.client, **kwargs)
        self.students = StudentRepository(self.client, **kwargs)
        self.attendance = AttendanceRepository(self.client, **kwargs)
        self.syllabus = SyllabusRepository(self.client, **kwargs)
        self.results = ResultsRepository(self.client, **kwargs)
        self.documents = DocumentRepository(self.client, **kwargs)
        self.notes = NoteRepository(self.client, **kwargs)
        self.announcements = AnnouncementRepository(self.client, **kwargs)
        self.events = EventRepository(self.client, **kwargs)
        self.todos = TodoRepository(self.client, **kwargs)
        self.weekly_plans = WeeklyPlanRepository(self.client, **kwargs)
        self.student_exits = StudentExitRepository(self.client, **kwargs)
        self.dashboard = DashboardRepository(self.client, **kwargs)

    @classmethod
    def build(
        cls,
        engine: Engine,
        *,
        storage: MemoryStorage | None = None,
        time_provider: TimeProvider = default_time_provider,
    ) -> AppContext:
        storage = storage if storage is not None else FileStorage(settings.session_storage_path)
        return cls(client=QueryClient(engine), storage=storage, time_provider=time_provider)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def require_session(context: AppContext = Depends(get_context)) -> AppContext:
    if not context.session.is_authenticated:
        raise HTTPException(status_code=401, detail='Not authenticated')
    return context
