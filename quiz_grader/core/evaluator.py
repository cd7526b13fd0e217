"""Per-question correctness rules.

``evaluate`` is the single place that decides whether an answer is correct.
Preview screens, review screens and the score aggregator all call it, so the
rules below must stay exact:

* multiple-choice: the submitted index equals ``correct_answer``.
* multiple-answer: the submitted indices equal ``correct_answers`` as a set,
  with the same cardinality (duplicates make an answer incorrect).
* fill-in-blank: texts match after stripping and lower-casing both sides.
* matching: every pair is matched and there are no extra entries.
* ordering: same length and equal at every position.
* long-answer: never auto-graded, always ``pending-manual``.

An unanswered question (``None``) is incorrect. An answer of the wrong shape
raises ``ShapeMismatch`` instead of being coerced.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from quiz_grader.core.errors import ShapeMismatch
from quiz_grader.core.models import (
    FillInBlankQuestion,
    LongAnswerQuestion,
    MatchingQuestion,
    MultipleAnswerQuestion,
    MultipleChoiceQuestion,
    OrderingQuestion,
    Question,
    Verdict,
)

_INDEX_COLLECTIONS = (set, frozenset, list, tuple)
_SEQUENCE_TYPES = (list, tuple)


def evaluate(question: Question, answer: Any) -> Verdict:
    """Return the verdict for ``answer`` submitted against ``question``."""
    match question:
        case LongAnswerQuestion():
            if answer is not None and not isinstance(answer, str):
                raise ShapeMismatch(question.id, question.type.value, answer)
            return Verdict.PENDING_MANUAL
        case MultipleChoiceQuestion():
            if answer is None:
                return Verdict.INCORRECT
            if not _is_index(answer):
                raise ShapeMismatch(question.id, question.type.value, answer)
            return _verdict(answer == question.correct_answer)
        case MultipleAnswerQuestion():
            if answer is None:
                return Verdict.INCORRECT
            if not isinstance(answer, _INDEX_COLLECTIONS) or not all(_is_index(i) for i in answer):
                raise ShapeMismatch(question.id, question.type.value, answer)
            return _verdict(
                len(answer) == len(question.correct_answers)
                and all(index in question.correct_answers for index in answer)
                and len(set(answer)) == len(answer)
            )
        case FillInBlankQuestion():
            if answer is None:
                return Verdict.INCORRECT
            if not isinstance(answer, str):
                raise ShapeMismatch(question.id, question.type.value, answer)
            return _verdict(_normalize_text(answer) == _normalize_text(question.correct_text))
        case MatchingQuestion():
            if answer is None:
                return Verdict.INCORRECT
            if not _is_string_mapping(answer):
                raise ShapeMismatch(question.id, question.type.value, answer)
            return _verdict(
                len(answer) == len(question.matching_pairs)
                and all(answer.get(pair.left) == pair.right for pair in question.matching_pairs)
            )
        case OrderingQuestion():
            if answer is None:
                return Verdict.INCORRECT
            if not isinstance(answer, _SEQUENCE_TYPES) or not all(isinstance(i, str) for i in answer):
                raise ShapeMismatch(question.id, question.type.value, answer)
            return _verdict(tuple(answer) == question.correct_order)
        case _:
            raise TypeError(f"Unsupported question variant: {type(question).__name__}")


def _verdict(is_correct: bool) -> Verdict:
    return Verdict.CORRECT if is_correct else Verdict.INCORRECT


def _is_index(value: Any) -> bool:
    # bool is an int subclass; True must not select option 1.
    return isinstance(value, int) and not isinstance(value, bool)


def _is_string_mapping(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    return all(isinstance(k, str) and isinstance(v, str) for k, v in value.items())


def _normalize_text(text: str) -> str:
    return text.lower().strip()
