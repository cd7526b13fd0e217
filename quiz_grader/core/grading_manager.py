"""Business logic for managing grading state shared between callers and the API."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from threading import Lock
from typing import Any

from quiz_grader.core.errors import UnknownQuestion
from quiz_grader.core.evaluator import evaluate
from quiz_grader.core.models import Quiz, ScoreResult, Submission, Verdict
from quiz_grader.core.services import grading_workflow
from quiz_grader.core.services.submission_repository import SubmissionRepository

logger = logging.getLogger(__name__)


class GradingManager:
    """Facade over the repository and the grading workflow.

    ``save_grade`` reads, regrades and writes back a submission while holding
    that submission's lock, so at most one grade save per submission is in
    flight. Evaluation and reads only take the registry lock briefly.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._repository = SubmissionRepository()
        self._submission_locks: dict[str, Lock] = {}

    # --- Quiz Delegation ---

    def register_quiz(self, quiz: Quiz) -> Quiz:
        with self._lock:
            self._repository.add_quiz(quiz)
        logger.info("Registered quiz %s with %d question(s)", quiz.id, len(quiz.questions))
        return quiz

    def get_quiz(self, quiz_id: str) -> Quiz:
        with self._lock:
            return self._repository.get_quiz(quiz_id)

    def evaluate_answer(self, quiz_id: str, question_index: int, answer: Any) -> Verdict:
        quiz = self.get_quiz(quiz_id)
        if not 0 <= question_index < len(quiz.questions):
            raise UnknownQuestion(f"Question index {question_index} out of range")
        return evaluate(quiz.questions[question_index], answer)

    # --- Submission Delegation ---

    def submit_quiz(
        self,
        quiz_id: str,
        answers: Mapping[int, Any],
        time_spent_seconds: int,
        student_name: str | None = None,
    ) -> Submission:
        quiz = self.get_quiz(quiz_id)
        submission = grading_workflow.create_submission(
            quiz,
            answers,
            time_spent_seconds,
            student_name=student_name,
        )
        with self._lock:
            self._repository.add_submission(submission)
            self._submission_locks[submission.id] = Lock()
        logger.info(
            "Created submission %s for quiz %s (%s, score %s%%)",
            submission.id,
            quiz_id,
            submission.grading_status.value,
            submission.score,
        )
        return submission

    def get_submission(self, submission_id: str) -> Submission:
        with self._lock:
            return self._repository.get_submission(submission_id)

    def get_result(self, submission_id: str) -> ScoreResult:
        with self._lock:
            submission = self._repository.get_submission(submission_id)
            quiz = self._repository.get_quiz(submission.quiz_id)
        return grading_workflow.review(quiz, submission)

    def get_submission_count(self) -> int:
        with self._lock:
            return self._repository.get_submission_count()

    # --- Grading ---

    def save_grade(
        self,
        submission_id: str,
        question_index: int,
        score: int,
        feedback: str,
    ) -> Submission:
        with self._submission_lock(submission_id):
            with self._lock:
                submission = self._repository.get_submission(submission_id)
                quiz = self._repository.get_quiz(submission.quiz_id)
            updated = grading_workflow.save_grade(quiz, submission, question_index, score, feedback)
            with self._lock:
                self._repository.replace_submission(updated)
            return updated

    def set_general_feedback(self, submission_id: str, text: str | None) -> Submission:
        with self._submission_lock(submission_id):
            with self._lock:
                submission = self._repository.get_submission(submission_id)
            updated = grading_workflow.set_general_feedback(submission, text)
            with self._lock:
                self._repository.replace_submission(updated)
            return updated

    def reset(self) -> None:
        with self._lock:
            self._repository.clear()
            self._submission_locks.clear()

    def _submission_lock(self, submission_id: str) -> Lock:
        with self._lock:
            lock = self._submission_locks.get(submission_id)
            if lock is None:
                # Raises KeyError for unknown ids before any lock is created.
                self._repository.get_submission(submission_id)
                lock = self._submission_locks.setdefault(submission_id, Lock())
            return lock
