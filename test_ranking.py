import itertools

import pytest

from examhub.models.core import Result
from examhub.services.ranking import rank_results


def _results(scores):
    return [
        Result(id=i, student_id=i, exam_id=1, score=s, percentage=s)
        for i, s in enumerate(scores, start=1)
    ]


def test_ties_share_rank_and_next_rank_skips():
    ranked = rank_results(_results([90, 80, 80, 70]))
    assert [r.rank for r in ranked] == [1, 2, 2, 4]
    assert [r.result.score for r in ranked] == [90, 80, 80, 70]


@pytest.mark.parametrize("order", list(itertools.permutations([90, 80, 80, 70]))[:8])
def test_ranks_do_not_depend_on_insertion_order(order):
    ranked = rank_results(_results(order))
    by_score = {}
    for r in ranked:
        by_score.setdefault(r.result.score, set()).add(r.rank)
    assert by_score == {90: {1}, 80: {2}, 70: {4}}


def test_rank_is_one_plus_number_of_strictly_better_scores():
    scores = [55, 91, 55, 78, 91, 12, 78, 78]
    ranked = rank_results(_results(scores))
    for r in ranked:
        better = sum(1 for s in scores if s > r.result.score)
        assert r.rank == better + 1


def test_everyone_tied_is_first():
    assert [r.rank for r in rank_results(_results([50, 50, 50]))] == [1, 1, 1]


def test_no_results():
    assert rank_results([]) == []


def test_exam_ranking_counts_every_result(storage, make_student, make_exam, make_result):
    exam = make_exam(status="completed")
    other = make_exam(status="completed")
    students = [make_student() for _ in range(4)]
    for student, score in zip(students, [70, 90, 80, 80]):
        make_result(student, exam, score)
    make_result(students[0], other, 99)

    ranking = storage.get_exam_ranking(exam.id)
    assert ranking.total_participants == 4
    assert ranking.average_percentage == 80
    assert [(e.student_id, e.rank) for e in ranking.entries] == [
        (students[1].id, 1),
        (students[2].id, 2),
        (students[3].id, 2),
        (students[0].id, 4),
    ]


def test_exam_ranking_for_unknown_exam(storage):
    assert storage.get_exam_ranking(12345) is None


def test_top_performers_carry_rank(storage, make_student, make_exam, make_result):
    exam = make_exam()
    students = [make_student() for _ in range(3)]
    for student, score in zip(students, [60, 95, 80]):
        make_result(student, exam, score)

    top = storage.get_top_performers(exam.id, limit=2)
    assert [(t.student.id, t.rank, t.total_participants) for t in top] == [
        (students[1].id, 1, 3),
        (students[2].id, 2, 3),
    ]
