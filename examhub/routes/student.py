from fastapi import APIRouter, Depends, HTTPException

from ..auth.dependencies import get_current_student
from ..database import get_storage
from ..models.core import Student
from ..schemas.core import DashboardOut, ExamOut, ResultDetailsOut
from ..services.dashboard import AVAILABLE_STATUSES
from ..storage.base import Storage
from ..storage.errors import NotFoundError

router = APIRouter()


@router.get("/dashboard", response_model=DashboardOut)
def read_dashboard(
    student: Student = Depends(get_current_student),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.get_student_dashboard(student.id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Student not found")


@router.get("/exams", response_model=list[ExamOut])
def list_available_exams(
    _: Student = Depends(get_current_student),
    storage: Storage = Depends(get_storage),
):
    exams = [e for status in AVAILABLE_STATUSES for e in storage.get_exams_by_status(status)]
    return sorted(exams, key=lambda e: e.date)


@router.get("/results", response_model=list[ResultDetailsOut])
def list_my_results(
    student: Student = Depends(get_current_student),
    storage: Storage = Depends(get_storage),
):
    results = storage.get_results_by_student(student.id)
    return sorted(results, key=lambda r: r.submitted_at, reverse=True)
