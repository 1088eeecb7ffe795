from datetime import datetime, timedelta, timezone

import pytest

from examhub.storage.memory import MemStorage


BASE_DATE = datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture
def make_student(storage):
    counter = iter(range(1, 10_000))

    def _make(**overrides):
        n = next(counter)
        data = {
            "name": f"Student {n}",
            "email": f"student{n}@example.com",
            "class_name": "10A",
        }
        data.update(overrides)
        return storage.create_student(data)

    return _make


@pytest.fixture
def make_exam(storage):
    counter = iter(range(1, 10_000))

    def _make(**overrides):
        n = next(counter)
        data = {
            "name": f"Exam {n}",
            "subject": "Mathematics",
            "date": BASE_DATE + timedelta(days=n),
            "duration": 60,
            "total_marks": 100,
            "status": "upcoming",
        }
        data.update(overrides)
        return storage.create_exam(data)

    return _make


@pytest.fixture
def make_result(storage):
    def _make(student, exam, score, percentage=None, **overrides):
        data = {
            "student_id": student.id,
            "exam_id": exam.id,
            "score": score,
            "percentage": score if percentage is None else percentage,
        }
        data.update(overrides)
        return storage.create_result(data)

    return _make
