import logging
from datetime import datetime, timezone

from .auth.security import get_password_hash
from .storage.base import Storage


logger = logging.getLogger(__name__)


def _at(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def load_sample_data(storage: Storage) -> None:
    """
    Two students, four exams and a handful of results, enough to click
    through both dashboards. Skipped when any student already exists.
    """
    if storage.get_students():
        logger.info("Sample data skipped: store already has students")
        return

    password = get_password_hash("student123")
    john = storage.create_student(
        {
            "name": "John Doe",
            "email": "john@example.com",
            "class_name": "Class 10A",
            "password": password,
            "enrollment_date": _at(2024, 1, 15),
        }
    )
    jane = storage.create_student(
        {
            "name": "Jane Smith",
            "email": "jane@example.com",
            "class_name": "Class 10B",
            "password": password,
            "enrollment_date": _at(2024, 1, 20),
        }
    )

    storage.create_exam(
        {
            "name": "Mathematics Final",
            "subject": "Mathematics",
            "date": _at(2024, 3, 25),
            "duration": 180,
            "total_marks": 100,
            "status": "upcoming",
        }
    )
    physics = storage.create_exam(
        {
            "name": "Physics Mid-term",
            "subject": "Physics",
            "date": _at(2024, 3, 15),
            "duration": 120,
            "total_marks": 75,
            "status": "completed",
        }
    )
    chemistry = storage.create_exam(
        {
            "name": "Chemistry Quiz",
            "subject": "Chemistry",
            "date": _at(2024, 3, 10),
            "duration": 60,
            "total_marks": 50,
            "status": "completed",
        }
    )
    storage.create_exam(
        {
            "name": "English Literature",
            "subject": "English",
            "date": _at(2024, 3, 20),
            "duration": 150,
            "total_marks": 100,
            "status": "active",
        }
    )

    for student, exam, score, submitted in (
        (john, physics, 65, _at(2024, 3, 15)),
        (jane, physics, 70, _at(2024, 3, 15)),
        (john, chemistry, 43, _at(2024, 3, 10)),
        (jane, chemistry, 40, _at(2024, 3, 10)),
    ):
        storage.create_result(
            {
                "student_id": student.id,
                "exam_id": exam.id,
                "score": score,
                "submitted_at": submitted,
            }
        )
    logger.info(
        "Loaded sample data (%d students, %d exams)",
        len(storage.get_students()),
        len(storage.get_exams()),
    )
