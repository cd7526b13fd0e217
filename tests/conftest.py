from __future__ import annotations

import pytest

from quiz_grader.core.models import (
    FillInBlankQuestion,
    LongAnswerQuestion,
    MatchingPair,
    MatchingQuestion,
    MultipleAnswerQuestion,
    MultipleChoiceQuestion,
    OrderingQuestion,
    Quiz,
)


@pytest.fixture()
def multiple_choice() -> MultipleChoiceQuestion:
    return MultipleChoiceQuestion(
        id="mc-1",
        question_text="What is 2 + 2?",
        options=("3", "4", "5", "6"),
        correct_answer=1,
    )


@pytest.fixture()
def multiple_answer() -> MultipleAnswerQuestion:
    return MultipleAnswerQuestion(
        id="ma-1",
        question_text="Which numbers are prime?",
        options=("2", "4", "5", "9"),
        correct_answers=frozenset({0, 2}),
    )


@pytest.fixture()
def fill_in_blank() -> FillInBlankQuestion:
    return FillInBlankQuestion(id="fib-1", question_text="Capital of France?", correct_text="Paris")


@pytest.fixture()
def matching() -> MatchingQuestion:
    return MatchingQuestion(
        id="match-1",
        question_text="Match countries to capitals.",
        matching_pairs=(MatchingPair("France", "Paris"), MatchingPair("Norway", "Oslo")),
    )


@pytest.fixture()
def ordering() -> OrderingQuestion:
    return OrderingQuestion(
        id="order-1",
        question_text="Order the planets from the sun.",
        correct_order=("Mercury", "Venus", "Earth"),
    )


@pytest.fixture()
def long_answer() -> LongAnswerQuestion:
    return LongAnswerQuestion(
        id="long-1",
        question_text="Explain photosynthesis.",
        grading_criteria="Mentions light, water and carbon dioxide.",
    )


@pytest.fixture()
def mixed_quiz(multiple_choice, fill_in_blank, ordering, long_answer) -> Quiz:
    """Three auto-graded questions and one long answer worth 5 points."""
    return Quiz(
        id="quiz-mixed",
        title="Mixed",
        passing_score=70,
        questions=(multiple_choice, fill_in_blank, ordering, long_answer),
    )


@pytest.fixture()
def mixed_answers() -> dict[int, object]:
    # Two correct, one incorrect, long answer awaiting a grade.
    return {
        0: 1,
        1: " paris ",
        2: ["Venus", "Mercury", "Earth"],
        3: "Plants turn light into sugar.",
    }


@pytest.fixture()
def two_essay_quiz(multiple_choice) -> Quiz:
    return Quiz(
        id="quiz-essays",
        questions=(
            multiple_choice,
            LongAnswerQuestion(id="essay-1", max_score=5),
            LongAnswerQuestion(id="essay-2", max_score=10),
        ),
        passing_score=50,
    )
