from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.dependencies import require_admin
from ..auth.security import get_password_hash
from ..database import get_storage
from ..models.core import Account, ExamRanking, ExamStatus, Statistics
from ..schemas.core import (
    DashboardOut,
    ExamCreate,
    ExamOut,
    ExamUpdate,
    ResultCreate,
    ResultDetailsOut,
    ResultOut,
    ResultUpdate,
    StudentCreate,
    StudentOut,
    StudentUpdate,
)
from ..storage.base import Storage
from ..storage.errors import (
    DuplicateEmailError,
    InvalidReferenceError,
    NotFoundError,
    ScoreOutOfRangeError,
)

router = APIRouter()


def _student_data(payload, **dump_options) -> dict:
    data = payload.model_dump(**dump_options)
    if data.get("password"):
        data["password"] = get_password_hash(data["password"])
    return data


@router.get("/statistics", response_model=Statistics)
def read_statistics(
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return storage.get_statistics()


# ----------------------
# Students
# ----------------------
@router.get("/students", response_model=list[StudentOut])
def list_students(
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return storage.get_students()


@router.post("/students", response_model=StudentOut, status_code=201)
def create_student(
    payload: StudentCreate,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.create_student(_student_data(payload, exclude_none=True))
    except DuplicateEmailError:
        raise HTTPException(status_code=400, detail="Student with this email exists")


@router.get("/students/{student_id}", response_model=StudentOut)
def read_student(
    student_id: int,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    student = storage.get_student(student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


@router.put("/students/{student_id}", response_model=StudentOut)
def update_student(
    student_id: int,
    payload: StudentUpdate,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    try:
        student = storage.update_student(
            student_id, _student_data(payload, exclude_unset=True, exclude_none=True)
        )
    except DuplicateEmailError:
        raise HTTPException(status_code=400, detail="Student with this email exists")
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


@router.delete("/students/{student_id}", status_code=204)
def delete_student(
    student_id: int,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    if not storage.delete_student(student_id):
        raise HTTPException(status_code=404, detail="Student not found")


@router.get("/students/{student_id}/dashboard", response_model=DashboardOut)
def read_student_dashboard(
    student_id: int,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.get_student_dashboard(student_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Student not found")


# ----------------------
# Exams
# ----------------------
@router.get("/exams", response_model=list[ExamOut])
def list_exams(
    status: Optional[ExamStatus] = Query(None, description="Filter by exam status"),
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    if status:
        return storage.get_exams_by_status(status)
    return storage.get_exams()


@router.post("/exams", response_model=ExamOut, status_code=201)
def create_exam(
    payload: ExamCreate,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return storage.create_exam(payload.model_dump(exclude_none=True))


@router.get("/exams/{exam_id}", response_model=ExamOut)
def read_exam(
    exam_id: int,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    exam = storage.get_exam(exam_id)
    if not exam:
        raise HTTPException(status_code=404, detail="Exam not found")
    return exam


@router.put("/exams/{exam_id}", response_model=ExamOut)
def update_exam(
    exam_id: int,
    payload: ExamUpdate,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    exam = storage.update_exam(exam_id, payload.model_dump(exclude_unset=True, exclude_none=True))
    if not exam:
        raise HTTPException(status_code=404, detail="Exam not found")
    return exam


@router.delete("/exams/{exam_id}", status_code=204)
def delete_exam(
    exam_id: int,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    if not storage.delete_exam(exam_id):
        raise HTTPException(status_code=404, detail="Exam not found")


@router.get("/exams/{exam_id}/ranking", response_model=ExamRanking)
def read_exam_ranking(
    exam_id: int,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    ranking = storage.get_exam_ranking(exam_id)
    if ranking is None:
        raise HTTPException(status_code=404, detail="Exam not found")
    return ranking


@router.get("/exams/{exam_id}/top-performers", response_model=list[ResultDetailsOut])
def read_top_performers(
    exam_id: int,
    limit: int = Query(10, ge=1, le=100),
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    if storage.get_exam(exam_id) is None:
        raise HTTPException(status_code=404, detail="Exam not found")
    return storage.get_top_performers(exam_id, limit)


# ----------------------
# Results
# ----------------------
@router.get("/results", response_model=list[ResultDetailsOut])
def list_results(
    student_id: Optional[int] = Query(None),
    exam_id: Optional[int] = Query(None),
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    if student_id is not None:
        results = storage.get_results_by_student(student_id)
        if exam_id is not None:
            results = [r for r in results if r.exam_id == exam_id]
        return results
    if exam_id is not None:
        return storage.get_results_by_exam(exam_id)
    return storage.get_results()


@router.post("/results", response_model=ResultOut, status_code=201)
def create_result(
    payload: ResultCreate,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    try:
        return storage.create_result(payload.model_dump(exclude_none=True))
    except (InvalidReferenceError, ScoreOutOfRangeError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/results/{result_id}", response_model=ResultDetailsOut)
def read_result(
    result_id: int,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    result = storage.get_result(result_id)
    if not result:
        raise HTTPException(status_code=404, detail="Result not found")
    return result


@router.put("/results/{result_id}", response_model=ResultOut)
def update_result(
    result_id: int,
    payload: ResultUpdate,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    try:
        result = storage.update_result(
            result_id, payload.model_dump(exclude_unset=True, exclude_none=True)
        )
    except (InvalidReferenceError, ScoreOutOfRangeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not result:
        raise HTTPException(status_code=404, detail="Result not found")
    return result


@router.delete("/results/{result_id}", status_code=204)
def delete_result(
    result_id: int,
    _: Account = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    if not storage.delete_result(result_id):
        raise HTTPException(status_code=404, detail="Result not found")
