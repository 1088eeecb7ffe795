from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field


Role = Literal["admin", "student"]
ExamStatus = Literal["upcoming", "active", "completed"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # naive values (and anything read back from mongo) are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(_as_utc)]


class Record(BaseModel):
    """Base for everything an entity collection stores."""

    model_config = ConfigDict(populate_by_name=True)

    id: int


class NotificationPreferences(BaseModel):
    email: bool = True
    sms: bool = False
    # student-only channels
    email_exam_results: Optional[bool] = None
    email_upcoming_exams: Optional[bool] = None
    sms_exam_results: Optional[bool] = None
    sms_upcoming_exams: Optional[bool] = None


class Account(Record):
    email: EmailStr
    password: str
    name: str
    role: Role = "student"
    is_admin: bool = False
    profile_image: Optional[str] = None
    student_id: Optional[int] = None
    notification_preferences: NotificationPreferences = Field(
        default_factory=NotificationPreferences
    )


class Student(Record):
    name: str
    email: EmailStr
    class_name: str = Field(..., alias="class")
    enrollment_date: UTCDateTime = Field(default_factory=utcnow)
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[UTCDateTime] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    profile_image: Optional[str] = None


class Exam(Record):
    name: str
    subject: str
    date: UTCDateTime
    duration: int = Field(..., ge=1, description="Duration in minutes")
    total_marks: int = Field(..., ge=1)
    status: ExamStatus = "upcoming"
    description: Optional[str] = None
    start_time: Optional[UTCDateTime] = None


class Result(Record):
    student_id: int
    exam_id: int
    score: float = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)
    submitted_at: UTCDateTime = Field(default_factory=utcnow)


class ResultWithDetails(Result):
    student: Student
    exam: Exam
    rank: Optional[int] = None
    total_participants: Optional[int] = None


class Statistics(BaseModel):
    total_students: int
    active_exams: int
    completed_exams: int
    upcoming_exams: int


class RankingEntry(BaseModel):
    rank: int
    result_id: int
    student_id: int
    score: float
    percentage: float


class ExamRanking(BaseModel):
    exam_id: int
    total_participants: int
    average_percentage: float
    entries: List[RankingEntry] = []


class DashboardData(BaseModel):
    student: Student
    total_exams: int
    average_score: float
    best_rank: Optional[int] = None
    available_exams: List[Exam] = []
    exam_history: List[ResultWithDetails] = []
