from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..models.core import ExamStatus


class StudentBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=2)
    email: EmailStr
    class_name: str = Field(..., alias="class")
    enrollment_date: Optional[datetime] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    profile_image: Optional[str] = None


class StudentCreate(StudentBase):
    password: Optional[str] = Field(None, min_length=6)


class StudentUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=2)
    email: Optional[EmailStr] = None
    class_name: Optional[str] = Field(None, alias="class")
    enrollment_date: Optional[datetime] = None
    password: Optional[str] = Field(None, min_length=6)
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    profile_image: Optional[str] = None


class StudentOut(StudentBase):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    enrollment_date: datetime


class ExamBase(BaseModel):
    name: str = Field(..., min_length=2)
    subject: str
    date: datetime
    duration: int = Field(..., ge=1)
    total_marks: int = Field(..., ge=1)
    status: ExamStatus = "upcoming"
    description: Optional[str] = None
    start_time: Optional[datetime] = None


class ExamCreate(ExamBase):
    pass


class ExamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    subject: Optional[str] = None
    date: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=1)
    total_marks: Optional[int] = Field(None, ge=1)
    status: Optional[ExamStatus] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None


class ExamOut(ExamBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class ResultBase(BaseModel):
    student_id: int
    exam_id: int
    score: float = Field(..., ge=0)


class ResultCreate(ResultBase):
    percentage: Optional[float] = Field(None, ge=0, le=100)
    submitted_at: Optional[datetime] = None


class ResultUpdate(BaseModel):
    student_id: Optional[int] = None
    exam_id: Optional[int] = None
    score: Optional[float] = Field(None, ge=0)
    percentage: Optional[float] = Field(None, ge=0, le=100)
    submitted_at: Optional[datetime] = None


class ResultOut(ResultBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    percentage: float
    submitted_at: datetime


class ResultDetailsOut(ResultOut):
    student: StudentOut
    exam: ExamOut
    rank: Optional[int] = None
    total_participants: Optional[int] = None


class DashboardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student: StudentOut
    total_exams: int
    average_score: float
    best_rank: Optional[int] = None
    available_exams: List[ExamOut]
    exam_history: List[ResultDetailsOut]
