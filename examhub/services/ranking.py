from typing import List, NamedTuple, Sequence

from ..models.core import ExamRanking, RankingEntry, Result, ResultWithDetails
from .assembler import assemble_many


class RankedResult(NamedTuple):
    rank: int
    result: Result


def rank_results(results: Sequence[Result]) -> List[RankedResult]:
    """
    Standard competition ranking ("1224"), best score first.

    A result's rank is 1 plus the number of results with a strictly
    greater score, so ties share a rank and the next rank skips ahead:
    scores [90, 80, 80, 70] rank as [1, 2, 2, 4]. Tied results keep
    their incoming order.
    """
    ordered = sorted(results, key=lambda r: r.score, reverse=True)

    ranked: List[RankedResult] = []
    for position, result in enumerate(ordered, start=1):
        if ranked and ranked[-1].result.score == result.score:
            rank = ranked[-1].rank
        else:
            rank = position
        ranked.append(RankedResult(rank, result))
    return ranked


def average_percentage(results: Sequence[Result]) -> float:
    if not results:
        return 0.0
    return sum(r.percentage for r in results) / len(results)


def compute_exam_ranking(storage, exam_id: int) -> ExamRanking:
    results = storage.results.find_by(exam_id=exam_id)
    entries = [
        RankingEntry(
            rank=ranked.rank,
            result_id=ranked.result.id,
            student_id=ranked.result.student_id,
            score=ranked.result.score,
            percentage=ranked.result.percentage,
        )
        for ranked in rank_results(results)
    ]
    return ExamRanking(
        exam_id=exam_id,
        total_participants=len(results),
        average_percentage=average_percentage(results),
        entries=entries,
    )


def top_performers(storage, exam_id: int, limit: int = 10) -> List[ResultWithDetails]:
    results = storage.results.find_by(exam_id=exam_id)
    ranked = rank_results(results)[:limit]
    performers = assemble_many(storage, [r.result for r in ranked])
    ranks = {r.result.id: r.rank for r in ranked}
    return [
        p.model_copy(update={"rank": ranks[p.id], "total_participants": len(results)})
        for p in performers
    ]
