from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


Status = Literal['present', 'absent', 'late']
Priority = Literal['low', 'medium', 'high']


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self, *, partial: bool = False) -> dict:
        """camelCase JSON-ready dict; ``partial`` keeps only the fields the caller sent."""
        return self.model_dump(mode='json', by_alias=True, exclude_unset=partial)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Literal['admin', 'teacher'] = 'teacher'


class AcademyCreateRequest(CamelModel):
    name: str = Field(min_length=1)
    description: str | None = None


class AcademyUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None


class BatchCreateRequest(CamelModel):
    academy_id: str
    name: str = Field(min_length=1)
    schedule: str | None = None
    subjects: list[str] = Field(default_factory=list)


class BatchUpdateRequest(CamelModel):
    academy_id: str | None = None
    name: str | None = Field(default=None, min_length=1)
    schedule: str | None = None
    subjects: list[str] | None = None


class StudentCreateRequest(CamelModel):
    name: str = Field(min_length=1)
    email: str | None = None
    phone: str | None = None
    dob: date | None = None
    guardian_name: str | None = None
    guardian_phone: str | None = None
    address: str | None = None
    aadhar_number: str | None = None
    batch_ids: list[str] = Field(default_factory=list)
    photo: str | None = None


class StudentUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    phone: str | None = None
    dob: date | None = None
    guardian_name: str | None = None
    guardian_phone: str | None = None
    address: str | None = None
    aadhar_number: str | None = None
    batch_ids: list[str] | None = None
    photo: str | None = None


class AttendanceRecordItem(CamelModel):
    student_id: str
    status: Status


class AttendanceBulkRequest(CamelModel):
    batch_id: str
    date: date
    records: list[AttendanceRecordItem] = Field(min_length=1)


class AttendanceSingleRequest(CamelModel):
    student_id: str
    batch_id: str
    date: date
    status: Status


class SyllabusCreateRequest(CamelModel):
    batch_id: str
    subject: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str | None = None
    completed: bool = False
    sort_order: int = 0
    due_date: date | None = None


class SyllabusUpdateRequest(CamelModel):
    subject: str | None = Field(default=None, min_length=1)
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    completed: bool | None = None
    sort_order: int | None = None
    due_date: date | None = None


class ResultCreateRequest(CamelModel):
    student_id: str
    batch_id: str | None = None
    subject: str = Field(min_length=1)
    test_name: str | None = None
    marks: float = Field(ge=0)
    total_marks: float = Field(ge=1)
    test_date: date


class ResultUpdateRequest(CamelModel):
    batch_id: str | None = None
    subject: str | None = Field(default=None, min_length=1)
    test_name: str | None = None
    marks: float | None = Field(default=None, ge=0)
    total_marks: float | None = Field(default=None, ge=1)
    test_date: date | None = None


class DocumentCreateRequest(CamelModel):
    title: str = Field(min_length=1)
    url: str = Field(min_length=1)
    type: Literal['document', 'image', 'video', 'link'] = 'document'
    category: str | None = None
    description: str | None = None
    batch_id: str | None = None


class DocumentUpdateRequest(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    url: str | None = Field(default=None, min_length=1)
    type: Literal['document', 'image', 'video', 'link'] | None = None
    category: str | None = None
    description: str | None = None
    batch_id: str | None = None


class NoteCreateRequest(CamelModel):
    title: str = Field(min_length=1)
    content: str | None = None
    batch_id: str | None = None
    is_public: bool = False
    tags: list[str] = Field(default_factory=list)


class NoteUpdateRequest(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    content: str | None = None
    batch_id: str | None = None
    is_public: bool | None = None
    tags: list[str] | None = None


class AnnouncementCreateRequest(CamelModel):
    title: str = Field(min_length=1)
    message: str = ''
    priority: Priority = 'medium'
    target_batch_ids: list[str] = Field(default_factory=list)


class AnnouncementUpdateRequest(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    message: str | None = None
    priority: Priority | None = None
    target_batch_ids: list[str] | None = None


class EventCreateRequest(CamelModel):
    title: str = Field(min_length=1)
    description: str | None = None
    date: datetime
    end_date: datetime | None = None
    type: Literal['exam', 'holiday', 'meeting', 'deadline', 'other'] = 'other'
    batch_id: str | None = None
    reminder_time: str | None = None


class EventUpdateRequest(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    date: datetime | None = None
    end_date: datetime | None = None
    type: Literal['exam', 'holiday', 'meeting', 'deadline', 'other'] | None = None
    batch_id: str | None = None
    reminder_time: str | None = None


class TodoCreateRequest(CamelModel):
    title: str = Field(min_length=1)
    description: str | None = None
    batch_id: str | None = None
    due_date: date | None = None
    priority: Priority = 'medium'
    completed: bool = False


class TodoUpdateRequest(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    batch_id: str | None = None
    due_date: date | None = None
    priority: Priority | None = None
    completed: bool | None = None


class WeeklyPlanUpsertRequest(CamelModel):
    batch_id: str
    week_start: date
    day_topics: dict[str, str] = Field(default_factory=dict)
    completed: bool = False


class WeeklyPlanUpdateRequest(CamelModel):
    day_topics: dict[str, str] | None = None
    completed: bool | None = None
