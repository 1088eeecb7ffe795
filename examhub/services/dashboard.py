from typing import Dict

from ..models.core import DashboardData, ResultWithDetails
from ..storage.errors import NotFoundError
from .assembler import assemble_many
from .ranking import rank_results


AVAILABLE_STATUSES = ("upcoming", "active")


def compute_student_dashboard(storage, student_id: int) -> DashboardData:
    """
    Build the per-student summary shown on the student dashboard.

    Raises NotFoundError when ``student_id`` does not resolve to a student;
    unlike the plain reads, the caller asked for a view keyed on that
    student.
    """
    student = storage.students.get(student_id)
    if student is None:
        raise NotFoundError("Student", student_id)

    history = assemble_many(storage, storage.results.find_by(student_id=student_id))

    # rank every exam the student sat once, then annotate their results
    placements: Dict[int, int] = {}
    participants: Dict[int, int] = {}
    for exam_id in {r.exam_id for r in history}:
        exam_results = storage.results.find_by(exam_id=exam_id)
        participants[exam_id] = len(exam_results)
        for ranked in rank_results(exam_results):
            placements[ranked.result.id] = ranked.rank

    exam_history: list[ResultWithDetails] = [
        r.model_copy(
            update={
                "rank": placements.get(r.id),
                "total_participants": participants.get(r.exam_id),
            }
        )
        for r in history
    ]
    exam_history.sort(key=lambda r: r.submitted_at, reverse=True)

    total_exams = len(exam_history)
    average_score = (
        sum(r.percentage for r in exam_history) / total_exams if total_exams else 0.0
    )
    ranks = [r.rank for r in exam_history if r.rank is not None]

    available_exams = sorted(
        (e for e in storage.exams.get_all() if e.status in AVAILABLE_STATUSES),
        key=lambda e: e.date,
    )

    return DashboardData(
        student=student,
        total_exams=total_exams,
        average_score=average_score,
        best_rank=min(ranks) if ranks else None,
        available_exams=available_exams,
        exam_history=exam_history,
    )
