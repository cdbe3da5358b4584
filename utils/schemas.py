"""
Pydantic schemas for the job-application resources.

Request bodies accept camelCase keys (``companyName``) as well as
snake_case; responses use the snake_case column names.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    PHONE_SCREEN = "phone_screen"
    INTERVIEW = "interview"
    OFFER = "offer"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


SORTABLE_COLUMNS = ("applied_date", "company_name", "position_title", "status", "priority")


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_default=True,
    )


class PartialUpdate(RequestModel):
    """Base for PUT bodies: only the keys the client sent are applied."""

    non_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_null_required(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def changes(self) -> Dict[str, object]:
        return self.model_dump(exclude_unset=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Applications
# ═══════════════════════════════════════════════════════════════════════════════


class ApplicationCreate(RequestModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    position_title: str = Field(..., min_length=1, max_length=255)
    job_description: Optional[str] = None
    location: Optional[str] = None
    salary_range: Optional[str] = None
    job_url: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.APPLIED
    priority: Priority = Priority.MEDIUM
    applied_date: date
    follow_up_date: Optional[date] = None
    notes: Optional[str] = None


class ApplicationUpdate(PartialUpdate):
    non_nullable: ClassVar[Tuple[str, ...]] = ("company_name", "position_title", "status", "priority", "applied_date")

    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    position_title: Optional[str] = Field(None, min_length=1, max_length=255)
    job_description: Optional[str] = None
    location: Optional[str] = None
    salary_range: Optional[str] = None
    job_url: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    priority: Optional[Priority] = None
    applied_date: Optional[date] = None
    follow_up_date: Optional[date] = None
    notes: Optional[str] = None


class ApplicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    company_name: str
    position_title: str
    job_description: Optional[str] = None
    location: Optional[str] = None
    salary_range: Optional[str] = None
    job_url: Optional[str] = None
    status: str
    priority: str
    applied_date: date
    follow_up_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ApplicationSummary(ApplicationOut):
    interview_count: int = 0
    document_count: int = 0
    contact_count: int = 0


class StatusHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    status: str
    notes: Optional[str] = None
    changed_at: Optional[datetime] = None


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    document_type: str
    file_name: str
    file_url: str
    s3_key: str
    uploaded_at: Optional[datetime] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Contacts
# ═══════════════════════════════════════════════════════════════════════════════


class ContactCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = None


class ContactUpdate(PartialUpdate):
    non_nullable: ClassVar[Tuple[str, ...]] = ("name",)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = None


class ContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    name: str
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Interviews
# ═══════════════════════════════════════════════════════════════════════════════


class InterviewCreate(RequestModel):
    interview_type: str = Field(..., min_length=1, max_length=64)
    scheduled_at: datetime
    duration_minutes: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    interviewer_names: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("scheduled_at")
    @classmethod
    def _normalise_tz(cls, value: datetime) -> datetime:
        return _as_utc(value)


class InterviewUpdate(PartialUpdate):
    non_nullable: ClassVar[Tuple[str, ...]] = ("interview_type", "scheduled_at", "completed")

    interview_type: Optional[str] = Field(None, min_length=1, max_length=64)
    scheduled_at: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    interviewer_names: Optional[str] = None
    notes: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("scheduled_at")
    @classmethod
    def _normalise_tz(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class InterviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    interview_type: str
    scheduled_at: datetime
    duration_minutes: Optional[int] = None
    location: Optional[str] = None
    interviewer_names: Optional[str] = None
    notes: Optional[str] = None
    completed: bool = False
    created_at: Optional[datetime] = None


class UpcomingInterviewOut(InterviewOut):
    company_name: str
    position_title: str


# ═══════════════════════════════════════════════════════════════════════════════
# Dashboard
# ═══════════════════════════════════════════════════════════════════════════════


class MonthCount(BaseModel):
    month: str  # "YYYY-MM"
    count: int


class DashboardStats(BaseModel):
    total_applications: int
    by_status: Dict[str, int]
    recent_applications: List[ApplicationOut] = Field(default_factory=list)
    upcoming_interviews: List[UpcomingInterviewOut] = Field(default_factory=list)
    applications_by_month: List[MonthCount] = Field(default_factory=list)
