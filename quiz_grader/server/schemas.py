"""Request payloads and response serializers for the grading API.

Wire names use camelCase (``correctAnswer``, ``manualScores``) to match the
web front-end that talks to this service.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from quiz_grader.constants.grading_constants import (
    DEFAULT_MAX_SCORE,
    DEFAULT_PASSING_SCORE,
    MAX_PASSING_SCORE,
    MIN_PASSING_SCORE,
)
from quiz_grader.core.models import (
    FillInBlankQuestion,
    LongAnswerQuestion,
    MatchingPair,
    MatchingQuestion,
    MultipleAnswerQuestion,
    MultipleChoiceQuestion,
    OrderingQuestion,
    Question,
    Quiz,
    ScoreResult,
    Submission,
)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _QuestionPayloadBase(WireModel):
    id: str
    question_text: str = ""
    explanation: str | None = None


class MultipleChoicePayload(_QuestionPayloadBase):
    type: Literal["multiple-choice"]
    options: list[str]
    correct_answer: int

    def to_question(self) -> Question:
        return MultipleChoiceQuestion(
            id=self.id,
            options=tuple(self.options),
            correct_answer=self.correct_answer,
            question_text=self.question_text,
            explanation=self.explanation,
        )


class MultipleAnswerPayload(_QuestionPayloadBase):
    type: Literal["multiple-answer"]
    options: list[str]
    correct_answers: list[int]

    def to_question(self) -> Question:
        return MultipleAnswerQuestion(
            id=self.id,
            options=tuple(self.options),
            correct_answers=frozenset(self.correct_answers),
            question_text=self.question_text,
            explanation=self.explanation,
        )


class FillInBlankPayload(_QuestionPayloadBase):
    type: Literal["fill-in-blank"]
    correct_text: str

    def to_question(self) -> Question:
        return FillInBlankQuestion(
            id=self.id,
            correct_text=self.correct_text,
            question_text=self.question_text,
            explanation=self.explanation,
        )


class MatchingPairPayload(WireModel):
    left: str
    right: str


class MatchingPayload(_QuestionPayloadBase):
    type: Literal["matching"]
    matching_pairs: list[MatchingPairPayload]

    def to_question(self) -> Question:
        return MatchingQuestion(
            id=self.id,
            matching_pairs=tuple(MatchingPair(pair.left, pair.right) for pair in self.matching_pairs),
            question_text=self.question_text,
            explanation=self.explanation,
        )


class OrderingPayload(_QuestionPayloadBase):
    type: Literal["ordering"]
    correct_order: list[str]

    def to_question(self) -> Question:
        return OrderingQuestion(
            id=self.id,
            correct_order=tuple(self.correct_order),
            question_text=self.question_text,
            explanation=self.explanation,
        )


class LongAnswerPayload(_QuestionPayloadBase):
    type: Literal["long-answer"]
    grading_criteria: str = ""
    max_score: int = Field(DEFAULT_MAX_SCORE, gt=0)

    def to_question(self) -> Question:
        return LongAnswerQuestion(
            id=self.id,
            grading_criteria=self.grading_criteria,
            max_score=self.max_score,
            question_text=self.question_text,
            explanation=self.explanation,
        )


QuestionPayload = Annotated[
    Union[
        MultipleChoicePayload,
        MultipleAnswerPayload,
        FillInBlankPayload,
        MatchingPayload,
        OrderingPayload,
        LongAnswerPayload,
    ],
    Field(discriminator="type"),
]


class QuizPayload(WireModel):
    """Payload schema for registering a quiz."""

    id: str
    title: str = ""
    passing_score: int = Field(DEFAULT_PASSING_SCORE, ge=MIN_PASSING_SCORE, le=MAX_PASSING_SCORE)
    questions: list[QuestionPayload]

    def to_quiz(self) -> Quiz:
        return Quiz(
            id=self.id,
            title=self.title,
            passing_score=self.passing_score,
            questions=tuple(payload.to_question() for payload in self.questions),
        )


class SubmissionPayload(WireModel):
    """Payload schema for a finished quiz attempt."""

    answers: dict[int, Any] = Field(default_factory=dict)
    time_spent_seconds: int = Field(0, ge=0)
    student_name: str | None = None


class EvaluatePayload(WireModel):
    """Payload schema for previewing a single answer."""

    question_index: int
    answer: Any = None


class GradePayload(WireModel):
    """Payload schema for a manual grade."""

    question_index: int
    score: int
    feedback: str = ""


class GeneralFeedbackPayload(WireModel):
    """Payload schema for submission-level feedback."""

    general_feedback: str | None = None


def quiz_to_payload(quiz: Quiz) -> dict[str, object]:
    return {
        "id": quiz.id,
        "title": quiz.title,
        "passingScore": quiz.passing_score,
        "questions": [_question_to_payload(question) for question in quiz.questions],
    }


def submission_to_payload(submission: Submission) -> dict[str, object]:
    completed_at = submission.completed_at.isoformat() if submission.completed_at else None
    return {
        "id": submission.id,
        "quizId": submission.quiz_id,
        "studentName": submission.student_name,
        "answers": {
            str(index): _jsonable_answer(answer) for index, answer in submission.answers.items()
        },
        "timeSpentSeconds": submission.time_spent_seconds,
        "manualScores": {str(index): value for index, value in submission.manual_scores.items()},
        "feedback": {str(index): text for index, text in submission.feedback.items()},
        "generalFeedback": submission.general_feedback,
        "gradingStatus": submission.grading_status.value,
        "score": submission.score,
        "passed": submission.passed,
        "completedAt": completed_at,
    }


def result_to_payload(result: ScoreResult) -> dict[str, object]:
    return {
        "earnedPoints": result.earned_points,
        "possiblePoints": result.possible_points,
        "percentage": result.percentage,
        "passed": result.passed,
        "correctAnswers": result.correct_answers,
        "totalQuestions": result.total_questions,
        "outcomes": [
            {
                "index": outcome.index,
                "questionId": outcome.question_id,
                "type": outcome.question_type.value,
                "verdict": outcome.verdict.value,
                "earnedPoints": outcome.earned_points,
                "possiblePoints": outcome.possible_points,
            }
            for outcome in result.outcomes
        ],
    }


def _question_to_payload(question: Question) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": question.id,
        "type": question.type.value,
        "questionText": question.question_text,
        "explanation": question.explanation,
    }
    match question:
        case MultipleChoiceQuestion():
            payload.update(options=list(question.options), correctAnswer=question.correct_answer)
        case MultipleAnswerQuestion():
            payload.update(
                options=list(question.options),
                correctAnswers=sorted(question.correct_answers),
            )
        case FillInBlankQuestion():
            payload.update(correctText=question.correct_text)
        case MatchingQuestion():
            payload.update(
                matchingPairs=[
                    {"left": pair.left, "right": pair.right} for pair in question.matching_pairs
                ]
            )
        case OrderingQuestion():
            payload.update(correctOrder=list(question.correct_order))
        case LongAnswerQuestion():
            payload.update(gradingCriteria=question.grading_criteria, maxScore=question.max_score)
    return payload


def _jsonable_answer(answer: Any) -> Any:
    if isinstance(answer, Mapping):
        return {key: _jsonable_answer(value) for key, value in answer.items()}
    if isinstance(answer, (set, frozenset)):
        return sorted(answer)
    if isinstance(answer, tuple):
        return [_jsonable_answer(item) for item in answer]
    return answer
