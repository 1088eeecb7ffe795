import logging
from typing import Any, Callable, List, Mapping, Optional

from ..models.core import (
    Account,
    DashboardData,
    Exam,
    ExamRanking,
    Result,
    ResultWithDetails,
    Statistics,
    Student,
)
from ..services.assembler import assemble_many, assemble_one
from ..services.dashboard import compute_student_dashboard
from ..services.ranking import compute_exam_ranking, top_performers
from ..services.statistics import compute_statistics
from .collections import EntityCollection
from .errors import DuplicateEmailError, InvalidReferenceError, ScoreOutOfRangeError


logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Emails are stored and looked up trimmed and lowercased."""
    if email is None:
        return None
    return email.strip().lower()


def _with_normalized_email(data: Mapping[str, Any]) -> dict:
    data = dict(data)
    if data.get("email") is not None:
        data["email"] = normalize_email(data["email"])
    return data


class Storage:
    """
    The store contract used by the route handlers.

    Simple CRUD goes straight to the four collections; derived views
    (results with details, statistics, rankings, dashboards) are computed
    by the services from the same collections. Subclasses only decide
    which collections back the store.
    """

    def __init__(
        self,
        accounts: EntityCollection[Account],
        students: EntityCollection[Student],
        exams: EntityCollection[Exam],
        results: EntityCollection[Result],
        verify_password: Optional[Callable[[str, str], bool]] = None,
    ):
        if verify_password is None:
            from ..auth.security import verify_password

        self.accounts = accounts
        self.students = students
        self.exams = exams
        self.results = results
        self._verify_password = verify_password

    # ----------------------
    # Accounts
    # ----------------------
    def get_account(self, account_id: int) -> Optional[Account]:
        return self.accounts.get(account_id)

    def get_account_by_email(self, email: str) -> Optional[Account]:
        return self.accounts.first_by(email=normalize_email(email))

    def create_account(self, data: Mapping[str, Any]) -> Account:
        data = _with_normalized_email(data)
        self._ensure_unique_email(self.accounts, "Account", data.get("email"))
        return self.accounts.create(data)

    def update_account(self, account_id: int, partial: Mapping[str, Any]) -> Optional[Account]:
        if self.accounts.get(account_id) is None:
            return None
        partial = _with_normalized_email(partial)
        self._ensure_unique_email(self.accounts, "Account", partial.get("email"), account_id)
        return self.accounts.update(account_id, partial)

    # ----------------------
    # Students
    # ----------------------
    def get_students(self) -> List[Student]:
        return self.students.get_all()

    def get_student(self, student_id: int) -> Optional[Student]:
        return self.students.get(student_id)

    def get_student_by_email(self, email: str) -> Optional[Student]:
        return self.students.first_by(email=normalize_email(email))

    def create_student(self, data: Mapping[str, Any]) -> Student:
        data = _with_normalized_email(data)
        self._ensure_unique_email(self.students, "Student", data.get("email"))
        return self.students.create(data)

    def update_student(self, student_id: int, partial: Mapping[str, Any]) -> Optional[Student]:
        if self.students.get(student_id) is None:
            return None
        partial = _with_normalized_email(partial)
        self._ensure_unique_email(self.students, "Student", partial.get("email"), student_id)
        return self.students.update(student_id, partial)

    def delete_student(self, student_id: int) -> bool:
        if not self.students.delete(student_id):
            return False
        self._delete_results(student_id=student_id)
        return True

    def authenticate_student(self, email: str, password: str) -> Optional[Student]:
        # unknown email and wrong password look the same to the caller
        student = self.get_student_by_email(email)
        if student is None or not student.password:
            return None
        if not self._verify_password(password, student.password):
            return None
        return student

    # ----------------------
    # Exams
    # ----------------------
    def get_exams(self) -> List[Exam]:
        return self.exams.get_all()

    def get_exam(self, exam_id: int) -> Optional[Exam]:
        return self.exams.get(exam_id)

    def get_exams_by_status(self, status: str) -> List[Exam]:
        return self.exams.find_by(status=status)

    def create_exam(self, data: Mapping[str, Any]) -> Exam:
        return self.exams.create(data)

    def update_exam(self, exam_id: int, partial: Mapping[str, Any]) -> Optional[Exam]:
        return self.exams.update(exam_id, partial)

    def delete_exam(self, exam_id: int) -> bool:
        if not self.exams.delete(exam_id):
            return False
        self._delete_results(exam_id=exam_id)
        return True

    # ----------------------
    # Results
    # ----------------------
    def get_results(self) -> List[ResultWithDetails]:
        return assemble_many(self, self.results.get_all())

    def get_result(self, result_id: int) -> Optional[ResultWithDetails]:
        result = self.results.get(result_id)
        if result is None:
            return None
        return assemble_one(self, result).details

    def get_results_by_student(self, student_id: int) -> List[ResultWithDetails]:
        return assemble_many(self, self.results.find_by(student_id=student_id))

    def get_results_by_exam(self, exam_id: int) -> List[ResultWithDetails]:
        return assemble_many(self, self.results.find_by(exam_id=exam_id))

    def create_result(self, data: Mapping[str, Any]) -> Result:
        data = dict(data)
        self._check_references(data.get("student_id"), data.get("exam_id"))
        exam = self.exams.get(data["exam_id"]) if data.get("exam_id") is not None else None
        self._check_score(data.get("score"), exam)
        if data.get("percentage") is None and data.get("score") is not None and exam:
            data["percentage"] = round(data["score"] / exam.total_marks * 100, 2)
        return self.results.create(data)

    def update_result(self, result_id: int, partial: Mapping[str, Any]) -> Optional[Result]:
        existing = self.results.get(result_id)
        if existing is None:
            return None
        self._check_references(partial.get("student_id"), partial.get("exam_id"))
        if "score" in partial or "exam_id" in partial:
            exam = self.exams.get(partial.get("exam_id", existing.exam_id))
            self._check_score(partial.get("score", existing.score), exam)
        return self.results.update(result_id, partial)

    def delete_result(self, result_id: int) -> bool:
        return self.results.delete(result_id)

    # ----------------------
    # Derived views
    # ----------------------
    def get_statistics(self) -> Statistics:
        return compute_statistics(self)

    def get_student_dashboard(self, student_id: int) -> DashboardData:
        return compute_student_dashboard(self, student_id)

    def get_exam_ranking(self, exam_id: int) -> Optional[ExamRanking]:
        if self.exams.get(exam_id) is None:
            return None
        return compute_exam_ranking(self, exam_id)

    def get_top_performers(self, exam_id: int, limit: int = 10) -> List[ResultWithDetails]:
        return top_performers(self, exam_id, limit)

    # ----------------------
    # Helpers
    # ----------------------
    def _ensure_unique_email(
        self,
        collection: EntityCollection,
        entity: str,
        email: Optional[str],
        own_id: Optional[int] = None,
    ) -> None:
        if email is None:
            return
        existing = collection.first_by(email=email)
        if existing is not None and existing.id != own_id:
            raise DuplicateEmailError(entity, email)

    def _check_references(self, student_id: Optional[int], exam_id: Optional[int]) -> None:
        if student_id is not None and self.students.get(student_id) is None:
            raise InvalidReferenceError("student_id", student_id)
        if exam_id is not None and self.exams.get(exam_id) is None:
            raise InvalidReferenceError("exam_id", exam_id)

    def _check_score(self, score: Optional[float], exam: Optional[Exam]) -> None:
        if score is not None and exam is not None and score > exam.total_marks:
            raise ScoreOutOfRangeError(score, exam.total_marks)

    def _delete_results(self, **criteria: Any) -> None:
        doomed = self.results.find_by(**criteria)
        for result in doomed:
            self.results.delete(result.id)
        if doomed:
            logger.info("Deleted %d dependent results (%s)", len(doomed), criteria)
