from collections import Counter

from ..models.core import Statistics


def compute_statistics(storage) -> Statistics:
    # recomputed on every call; fine for tens to low thousands of rows
    by_status = Counter(exam.status for exam in storage.exams.get_all())
    return Statistics(
        total_students=storage.students.count(),
        active_exams=by_status["active"],
        completed_exams=by_status["completed"],
        upcoming_exams=by_status["upcoming"],
    )
