from datetime import datetime, timezone

import mongomock
import pytest

from examhub.storage.mongo import MongoStorage


@pytest.fixture
def mongo_storage():
    return MongoStorage(mongomock.MongoClient()["examhub_test"])


def _exam(name, status="upcoming", day=1):
    return {
        "name": name,
        "subject": "Physics",
        "date": datetime(2024, 3, day, tzinfo=timezone.utc),
        "duration": 90,
        "total_marks": 100,
        "status": status,
    }


def test_ids_come_from_counter_and_are_not_reused(mongo_storage):
    first = mongo_storage.create_exam(_exam("A"))
    second = mongo_storage.create_exam(_exam("B"))
    assert (first.id, second.id) == (1, 2)

    assert mongo_storage.delete_exam(second.id) is True
    assert mongo_storage.delete_exam(second.id) is False
    third = mongo_storage.create_exam(_exam("C"))
    assert third.id == 3
    assert [e.name for e in mongo_storage.get_exams()] == ["A", "C"]


def test_each_collection_has_its_own_counter(mongo_storage):
    mongo_storage.create_exam(_exam("A"))
    student = mongo_storage.create_student(
        {"name": "John Doe", "email": "john@example.com", "class_name": "10A"}
    )
    assert student.id == 1


def test_round_trip_and_partial_update(mongo_storage):
    exam = mongo_storage.create_exam(_exam("Physics Mid-term", status="completed"))
    assert mongo_storage.get_exam(exam.id) == exam

    updated = mongo_storage.update_exam(exam.id, {"description": "Chapters 1-4"})
    assert updated.description == "Chapters 1-4"
    assert updated.status == "completed"
    assert mongo_storage.get_exam(exam.id) == updated
    assert mongo_storage.update_exam(404, {"name": "x"}) is None


def test_secondary_lookups_and_statistics(mongo_storage):
    john = mongo_storage.create_student(
        {"name": "John Doe", "email": "john@example.com", "class_name": "10A"}
    )
    mongo_storage.create_exam(_exam("A", status="active"))
    mongo_storage.create_exam(_exam("B", status="completed"))

    assert mongo_storage.get_student_by_email("john@example.com").id == john.id
    assert [e.name for e in mongo_storage.get_exams_by_status("active")] == ["A"]
    stats = mongo_storage.get_statistics()
    assert (stats.total_students, stats.active_exams, stats.completed_exams) == (1, 1, 1)


def test_dashboard_over_mongo(mongo_storage):
    students = [
        mongo_storage.create_student(
            {"name": f"S{i}", "email": f"s{i}@example.com", "class_name": "10A"}
        )
        for i in range(4)
    ]
    exam = mongo_storage.create_exam(_exam("Final", status="completed"))
    for student, score in zip(students, [90, 80, 80, 70]):
        mongo_storage.create_result(
            {"student_id": student.id, "exam_id": exam.id, "score": score}
        )

    dashboard = mongo_storage.get_student_dashboard(students[2].id)
    assert dashboard.best_rank == 2
    assert dashboard.average_score == 80
    assert dashboard.exam_history[0].total_participants == 4

    mongo_storage.delete_exam(exam.id)
    assert mongo_storage.get_results() == []
