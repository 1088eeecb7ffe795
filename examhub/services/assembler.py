import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..models.core import Result, ResultWithDetails


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JoinOutcome:
    """
    Outcome of joining one result with its student and exam.

    Exactly one of ``details`` / ``missing`` is meaningful: either the join
    succeeded, or ``missing`` names the references that could not be
    resolved ("student", "exam").
    """

    result: Result
    details: Optional[ResultWithDetails] = None
    missing: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.details is not None


def assemble_one(storage, result: Result) -> JoinOutcome:
    student = storage.students.get(result.student_id)
    exam = storage.exams.get(result.exam_id)

    missing = []
    if student is None:
        missing.append("student")
    if exam is None:
        missing.append("exam")
    if missing:
        logger.warning(
            "Skipping result %s: missing %s (student_id=%s, exam_id=%s)",
            result.id,
            ", ".join(missing),
            result.student_id,
            result.exam_id,
        )
        return JoinOutcome(result=result, missing=tuple(missing))

    details = ResultWithDetails(**result.model_dump(), student=student, exam=exam)
    return JoinOutcome(result=result, details=details)


def assemble_many(storage, results: Iterable[Result]) -> List[ResultWithDetails]:
    """Join every result; orphans are dropped (and logged by assemble_one)."""
    outcomes = [assemble_one(storage, result) for result in results]
    return [outcome.details for outcome in outcomes if outcome.ok]
