"""In-memory store for quizzes and their submissions."""

from __future__ import annotations

from quiz_grader.core.models import Quiz, Submission


class SubmissionRepository:
    """Holds quiz definitions and the latest value of each submission.

    This is process-local storage for the bundled API server. Durable
    persistence belongs to whatever system embeds the engine.
    """

    def __init__(self) -> None:
        self._quizzes: dict[str, Quiz] = {}
        self._submissions: dict[str, Submission] = {}

    def add_quiz(self, quiz: Quiz) -> None:
        if quiz.id in self._quizzes:
            raise ValueError(f"Quiz '{quiz.id}' is already registered.")
        self._quizzes[quiz.id] = quiz

    def get_quiz(self, quiz_id: str) -> Quiz:
        try:
            return self._quizzes[quiz_id]
        except KeyError:
            raise KeyError(f"Unknown quiz '{quiz_id}'") from None

    def add_submission(self, submission: Submission) -> None:
        if submission.quiz_id not in self._quizzes:
            raise KeyError(f"Unknown quiz '{submission.quiz_id}'")
        if submission.id in self._submissions:
            raise ValueError(f"Submission '{submission.id}' already exists.")
        self._submissions[submission.id] = submission

    def get_submission(self, submission_id: str) -> Submission:
        try:
            return self._submissions[submission_id]
        except KeyError:
            raise KeyError(f"Unknown submission '{submission_id}'") from None

    def replace_submission(self, submission: Submission) -> None:
        if submission.id not in self._submissions:
            raise KeyError(f"Unknown submission '{submission.id}'")
        self._submissions[submission.id] = submission

    def get_submission_count(self) -> int:
        return len(self._submissions)

    def clear(self) -> None:
        self._quizzes.clear()
        self._submissions.clear()
