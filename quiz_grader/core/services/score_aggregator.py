"""Service for computing submission scores and grading status."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from quiz_grader.constants.grading_constants import AUTO_GRADED_POINTS, DEFAULT_PASSING_SCORE
from quiz_grader.core.errors import IncompleteQuestionSet
from quiz_grader.core.evaluator import evaluate
from quiz_grader.core.models import (
    GradingStatus,
    LongAnswerQuestion,
    Question,
    QuestionOutcome,
    ScoreResult,
    Submission,
    Verdict,
)


def aggregate(
    questions: Sequence[Question],
    submission: Submission,
    passing_score: int = DEFAULT_PASSING_SCORE,
) -> ScoreResult:
    """Score ``submission`` against the full question set, from scratch.

    Every question counts towards ``possible_points`` whether or not it has
    been graded yet, so an interim percentage is a lower bound. There is no
    incremental variant of this function: callers re-run it whenever a manual
    score changes.
    """
    _ensure_complete(questions, submission)

    outcomes: list[QuestionOutcome] = []
    for index, question in enumerate(questions):
        verdict = evaluate(question, submission.answers.get(index))
        outcomes.append(
            QuestionOutcome(
                index=index,
                question_id=question.id,
                question_type=question.type,
                verdict=verdict,
                earned_points=_earned_points(question, verdict, submission.manual_scores.get(index)),
                possible_points=possible_points_for(question),
            )
        )

    earned = sum(outcome.earned_points for outcome in outcomes)
    possible = sum(outcome.possible_points for outcome in outcomes)
    percentage = percentage_of(earned, possible)
    return ScoreResult(
        earned_points=earned,
        possible_points=possible,
        percentage=percentage,
        passed=possible > 0 and percentage >= passing_score,
        correct_answers=sum(1 for outcome in outcomes if outcome.verdict is Verdict.CORRECT),
        total_questions=len(outcomes),
        outcomes=tuple(outcomes),
    )


def possible_points_for(question: Question) -> int:
    if isinstance(question, LongAnswerQuestion):
        return question.max_score
    return AUTO_GRADED_POINTS


def percentage_of(earned: int, possible: int) -> int:
    """Round ``100 * earned / possible`` half-up using exact integer arithmetic."""
    if possible <= 0:
        return 0
    return (200 * earned + possible) // (2 * possible)


def long_answer_indices(questions: Sequence[Question]) -> list[int]:
    return [i for i, q in enumerate(questions) if isinstance(q, LongAnswerQuestion)]


def grading_status_for(
    questions: Sequence[Question],
    manual_scores: Mapping[int, int],
) -> GradingStatus:
    """Derive the workflow state from which long-answer questions have scores."""
    pending = long_answer_indices(questions)
    if not pending:
        return GradingStatus.NO_MANUAL_GRADING_NEEDED
    graded = sum(1 for index in pending if index in manual_scores)
    if graded == 0:
        return GradingStatus.NEEDS_GRADING
    if graded == len(pending):
        return GradingStatus.GRADED
    return GradingStatus.PARTIALLY_GRADED


def _earned_points(question: Question, verdict: Verdict, manual_score: int | None) -> int:
    if verdict is Verdict.CORRECT:
        return AUTO_GRADED_POINTS
    if isinstance(question, LongAnswerQuestion) and manual_score is not None:
        # Scores written by save_grade are already in range; clamp anything
        # that came from an older persisted record.
        return max(0, min(manual_score, question.max_score))
    return 0


def _ensure_complete(questions: Sequence[Question], submission: Submission) -> None:
    referenced = set(submission.answers) | set(submission.manual_scores)
    missing = sorted(
        (index for index in referenced if not _is_valid_index(index, len(questions))),
        key=repr,
    )
    if missing:
        raise IncompleteQuestionSet(missing, len(questions))


def _is_valid_index(index: object, question_count: int) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < question_count
