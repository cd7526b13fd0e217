"""Grading workflow: creating submissions and recording manual grades.

Submissions are immutable values. Each operation here returns a new
Submission whose derived fields (``grading_status``, ``score``, ``passed``)
were recomputed from the full question set. Nothing is persisted; storing the
returned value, and serializing concurrent ``save_grade`` calls for the same
submission, is the caller's job.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
import logging
from typing import Any
from uuid import uuid4

from quiz_grader.core.errors import (
    MissingFeedback,
    NotManuallyGradable,
    OutOfRange,
    UnknownQuestion,
)
from quiz_grader.core.models import LongAnswerQuestion, Quiz, ScoreResult, Submission
from quiz_grader.core.services.score_aggregator import aggregate, grading_status_for

logger = logging.getLogger(__name__)


def create_submission(
    quiz: Quiz,
    answers: Mapping[int, Any],
    time_spent_seconds: int,
    *,
    submission_id: str | None = None,
    student_name: str | None = None,
    completed_at: datetime | None = None,
) -> Submission:
    """Freeze a finished attempt and score it for the first time."""
    if time_spent_seconds < 0:
        raise ValueError("Time spent must not be negative.")
    submission = Submission(
        id=submission_id or uuid4().hex,
        quiz_id=quiz.id,
        answers={index: answer for index, answer in answers.items() if answer is not None},
        time_spent_seconds=time_spent_seconds,
        student_name=student_name,
        completed_at=completed_at or datetime.now(timezone.utc),
    )
    return recompute(quiz, submission)


def recompute(quiz: Quiz, submission: Submission) -> Submission:
    """Re-derive status, score and pass/fail from scratch."""
    result = aggregate(quiz.questions, submission, quiz.passing_score)
    return replace(
        submission,
        grading_status=grading_status_for(quiz.questions, submission.manual_scores),
        score=result.percentage,
        passed=result.passed,
    )


def review(quiz: Quiz, submission: Submission) -> ScoreResult:
    """Read-only score breakdown for review and preview screens."""
    return aggregate(quiz.questions, submission, quiz.passing_score)


def save_grade(
    quiz: Quiz,
    submission: Submission,
    question_index: int,
    score: int,
    feedback: str,
) -> Submission:
    """Record (or revise) the manual grade of one long-answer question.

    Raises:
        UnknownQuestion: ``question_index`` is not part of the quiz.
        NotManuallyGradable: the question is graded automatically.
        OutOfRange: ``score`` is not an integer in ``[0, max_score]``.
        MissingFeedback: ``feedback`` is empty or whitespace only.

    On any failure the given submission is left exactly as it was, since all
    writes go to copies.
    """
    question = _long_answer_question(quiz, question_index)

    if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= question.max_score:
        logger.warning(
            "Rejected score %r for question %s of submission %s", score, question_index, submission.id
        )
        raise OutOfRange(
            f"Score {score!r} is outside the allowed range 0..{question.max_score}."
        )

    cleaned_feedback = (feedback or "").strip()
    if not cleaned_feedback:
        logger.warning(
            "Rejected grade without feedback for question %s of submission %s",
            question_index,
            submission.id,
        )
        raise MissingFeedback("A manual grade must include feedback.")

    manual_scores = dict(submission.manual_scores)
    manual_scores[question_index] = score
    feedback_by_question = dict(submission.feedback)
    feedback_by_question[question_index] = cleaned_feedback

    updated = recompute(
        quiz,
        replace(submission, manual_scores=manual_scores, feedback=feedback_by_question),
    )
    logger.info(
        "Saved grade %s/%s for question %s of submission %s (%s -> %s, score %s%%)",
        score,
        question.max_score,
        question_index,
        submission.id,
        submission.grading_status.value,
        updated.grading_status.value,
        updated.score,
    )
    return updated


def set_general_feedback(submission: Submission, text: str | None) -> Submission:
    """Attach submission-level feedback. Status and score are untouched."""
    return replace(submission, general_feedback=text)


def _long_answer_question(quiz: Quiz, question_index: int) -> LongAnswerQuestion:
    if isinstance(question_index, bool) or not isinstance(question_index, int):
        raise UnknownQuestion(f"Question index {question_index!r} is not an integer.")
    if not 0 <= question_index < len(quiz.questions):
        raise UnknownQuestion(f"Question index {question_index} out of range")
    question = quiz.questions[question_index]
    if not isinstance(question, LongAnswerQuestion):
        raise NotManuallyGradable(
            f"Question {question_index} ({question.type.value}) is graded automatically."
        )
    return question
