"""Exceptions raised by the grading engine.

Every error is a local validation failure reported to the immediate caller.
The engine never retries and never applies a grade partially, so a caller that
catches one of these can rely on its input values being untouched.
"""

from __future__ import annotations


class GradingError(Exception):
    """Base class for all grading engine failures."""


class InvalidQuestion(GradingError):
    """Raised when a question definition is internally inconsistent."""


class InvalidQuiz(GradingError):
    """Raised when quiz-level settings such as the passing score are invalid."""


class ShapeMismatch(GradingError):
    """Raised when a submitted answer's structure does not fit the question type."""

    def __init__(self, question_id: str, question_type: str, answer: object) -> None:
        self.question_id = question_id
        self.question_type = question_type
        self.answer = answer
        super().__init__(
            f"Answer of type {type(answer).__name__} does not match "
            f"{question_type} question '{question_id}'."
        )


class OutOfRange(GradingError):
    """Raised when a manual score falls outside [0, max_score]."""


class MissingFeedback(GradingError):
    """Raised when a manual grade is saved without rationale text."""


class IncompleteQuestionSet(GradingError):
    """Raised when a submission references question indices the quiz does not have."""

    def __init__(self, missing_indices: list[object], question_count: int) -> None:
        self.missing_indices = missing_indices
        self.question_count = question_count
        super().__init__(
            f"Submission references question indices {missing_indices} "
            f"but only {question_count} question(s) were supplied."
        )


class UnknownQuestion(GradingError):
    """Raised when a grade or preview targets a question index the quiz does not contain."""


class NotManuallyGradable(GradingError):
    """Raised when a manual grade targets an automatically graded question."""
