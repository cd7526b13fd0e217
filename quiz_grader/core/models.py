"""Domain models for the grading engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Union

from quiz_grader.constants.grading_constants import (
    DEFAULT_MAX_SCORE,
    DEFAULT_PASSING_SCORE,
    MAX_PASSING_SCORE,
    MIN_PASSING_SCORE,
)
from quiz_grader.core.errors import InvalidQuestion, InvalidQuiz


class QuestionType(str, Enum):
    """Discriminator for the six supported question variants."""

    MULTIPLE_CHOICE = "multiple-choice"
    MULTIPLE_ANSWER = "multiple-answer"
    FILL_IN_BLANK = "fill-in-blank"
    MATCHING = "matching"
    ORDERING = "ordering"
    LONG_ANSWER = "long-answer"


class Verdict(str, Enum):
    """Outcome of evaluating one question against one submitted answer."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    PENDING_MANUAL = "pending-manual"


class GradingStatus(str, Enum):
    """How much manual grading a submission still needs."""

    NO_MANUAL_GRADING_NEEDED = "NoManualGradingNeeded"
    NEEDS_GRADING = "NeedsGrading"
    PARTIALLY_GRADED = "PartiallyGraded"
    GRADED = "Graded"


def _check_options(question_id: str, options: tuple[str, ...]) -> None:
    if not options:
        raise InvalidQuestion(f"Question '{question_id}' must define at least one option.")


def _check_option_index(question_id: str, index: int, option_count: int) -> None:
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidQuestion(f"Question '{question_id}' has a non-integer answer index.")
    if not 0 <= index < option_count:
        raise InvalidQuestion(
            f"Question '{question_id}' answer index {index} is outside 0..{option_count - 1}."
        )


@dataclass(frozen=True, slots=True)
class MultipleChoiceQuestion:
    """Single correct option chosen by index."""

    type: ClassVar[QuestionType] = QuestionType.MULTIPLE_CHOICE

    id: str
    options: tuple[str, ...]
    correct_answer: int
    question_text: str = ""
    explanation: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))
        _check_options(self.id, self.options)
        _check_option_index(self.id, self.correct_answer, len(self.options))


@dataclass(frozen=True, slots=True)
class MultipleAnswerQuestion:
    """Any number of correct options; graded as an exact set."""

    type: ClassVar[QuestionType] = QuestionType.MULTIPLE_ANSWER

    id: str
    options: tuple[str, ...]
    correct_answers: frozenset[int]
    question_text: str = ""
    explanation: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))
        object.__setattr__(self, "correct_answers", frozenset(self.correct_answers))
        _check_options(self.id, self.options)
        if not self.correct_answers:
            raise InvalidQuestion(f"Question '{self.id}' needs at least one correct answer.")
        for index in self.correct_answers:
            _check_option_index(self.id, index, len(self.options))


@dataclass(frozen=True, slots=True)
class FillInBlankQuestion:
    """Free text compared case- and surrounding-whitespace-insensitively."""

    type: ClassVar[QuestionType] = QuestionType.FILL_IN_BLANK

    id: str
    correct_text: str
    question_text: str = ""
    explanation: str | None = None


@dataclass(frozen=True, slots=True)
class MatchingPair:
    left: str
    right: str


@dataclass(frozen=True, slots=True)
class MatchingQuestion:
    """Every left item must be paired with its right counterpart."""

    type: ClassVar[QuestionType] = QuestionType.MATCHING

    id: str
    matching_pairs: tuple[MatchingPair, ...]
    question_text: str = ""
    explanation: str | None = None

    def __post_init__(self) -> None:
        pairs = tuple(
            pair if isinstance(pair, MatchingPair) else MatchingPair(*pair)
            for pair in self.matching_pairs
        )
        object.__setattr__(self, "matching_pairs", pairs)
        lefts = [pair.left for pair in pairs]
        if len(set(lefts)) != len(lefts):
            raise InvalidQuestion(f"Question '{self.id}' has duplicate matching items.")


@dataclass(frozen=True, slots=True)
class OrderingQuestion:
    """Items must be placed in the canonical order."""

    type: ClassVar[QuestionType] = QuestionType.ORDERING

    id: str
    correct_order: tuple[str, ...]
    question_text: str = ""
    explanation: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "correct_order", tuple(self.correct_order))
        if len(set(self.correct_order)) != len(self.correct_order):
            raise InvalidQuestion(f"Question '{self.id}' has duplicate ordering items.")


@dataclass(frozen=True, slots=True)
class LongAnswerQuestion:
    """Free-form answer scored by a teacher against the grading criteria."""

    type: ClassVar[QuestionType] = QuestionType.LONG_ANSWER

    id: str
    grading_criteria: str = ""
    max_score: int = DEFAULT_MAX_SCORE
    question_text: str = ""
    explanation: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.max_score, bool) or not isinstance(self.max_score, int):
            raise InvalidQuestion(f"Question '{self.id}' max score must be an integer.")
        if self.max_score <= 0:
            raise InvalidQuestion(f"Question '{self.id}' max score must be positive.")


Question = Union[
    MultipleChoiceQuestion,
    MultipleAnswerQuestion,
    FillInBlankQuestion,
    MatchingQuestion,
    OrderingQuestion,
    LongAnswerQuestion,
]


@dataclass(frozen=True, slots=True)
class Quiz:
    """The authoritative question set together with its passing threshold."""

    id: str
    questions: tuple[Question, ...]
    title: str = ""
    passing_score: int = DEFAULT_PASSING_SCORE

    def __post_init__(self) -> None:
        object.__setattr__(self, "questions", tuple(self.questions))
        if isinstance(self.passing_score, bool) or not isinstance(self.passing_score, int):
            raise InvalidQuiz(f"Quiz '{self.id}' passing score must be an integer.")
        if not MIN_PASSING_SCORE <= self.passing_score <= MAX_PASSING_SCORE:
            raise InvalidQuiz(
                f"Passing score must be between {MIN_PASSING_SCORE} and {MAX_PASSING_SCORE}."
            )


@dataclass(frozen=True, slots=True)
class Submission:
    """One attempt at a quiz.

    ``answers`` and ``time_spent_seconds`` are frozen when the student submits.
    ``grading_status``, ``score`` and ``passed`` are derived by the grading
    workflow and are only ever replaced wholesale, never patched.

    The three mappings are copied into read-only views on construction, and
    every answer is frozen (lists become tuples, sets frozensets, mappings
    read-only views), so nothing the caller still holds can alter a stored
    submission.
    """

    id: str
    quiz_id: str
    answers: Mapping[int, Any]
    time_spent_seconds: int = 0
    manual_scores: Mapping[int, int] = field(default_factory=dict)
    feedback: Mapping[int, str] = field(default_factory=dict)
    general_feedback: str | None = None
    grading_status: GradingStatus = GradingStatus.NO_MANUAL_GRADING_NEEDED
    score: int = 0
    passed: bool = False
    student_name: str | None = None
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "answers",
            MappingProxyType({index: freeze_answer(answer) for index, answer in self.answers.items()}),
        )
        object.__setattr__(self, "manual_scores", MappingProxyType(dict(self.manual_scores)))
        object.__setattr__(self, "feedback", MappingProxyType(dict(self.feedback)))


def freeze_answer(answer: Any) -> Any:
    """Return an immutable copy of a submitted answer."""
    if isinstance(answer, Mapping):
        return MappingProxyType({key: freeze_answer(value) for key, value in answer.items()})
    if isinstance(answer, (set, frozenset)):
        return frozenset(answer)
    if isinstance(answer, (list, tuple)):
        return tuple(freeze_answer(item) for item in answer)
    return answer


@dataclass(frozen=True, slots=True)
class QuestionOutcome:
    """Per-question slice of a score result, used by review screens."""

    index: int
    question_id: str
    question_type: QuestionType
    verdict: Verdict
    earned_points: int
    possible_points: int


@dataclass(frozen=True, slots=True)
class ScoreResult:
    """Submission-level score computed from scratch by the aggregator."""

    earned_points: int
    possible_points: int
    percentage: int
    passed: bool
    correct_answers: int
    total_questions: int
    outcomes: tuple[QuestionOutcome, ...] = ()
