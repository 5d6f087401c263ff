from academy_dashboard.repositories.academies import AcademyRepository
from academy_dashboard.repositories.announcements import AnnouncementRepository
from academy_dashboard.repositories.attendance import AttendanceRepository
from academy_dashboard.repositories.batches import BatchRepository
from academy_dashboard.repositories.dashboard import DashboardRepository
from academy_dashboard.repositories.documents import DocumentRepository
from academy_dashboard.repositories.events import EventRepository
from academy_dashboard.repositories.notes import NoteRepository
from academy_dashboard.repositories.results import ResultsRepository
from academy_dashboard.repositories.student_exits import StudentExitRepository
from academy_dashboard.repositories.students import StudentRepository
from academy_dashboard.repositories.syllabus import SyllabusRepository
from academy_dashboard.repositories.todos import TodoRepository
from academy_dashboard.repositories.weekly_plans import WeeklyPlanRepository

__all__ = [
    'AcademyRepository',
    'AnnouncementRepository',
    'AttendanceRepository',
    'BatchRepository',
    'DashboardRepository',
    'DocumentRepository',
    'EventRepository',
    'NoteRepository',
    'ResultsRepository',
    'StudentExitRepository',
    'StudentRepository',
    'SyllabusRepository',
    'TodoRepository',
    'WeeklyPlanRepository',
]
