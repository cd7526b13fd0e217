"""FastAPI server that exposes the grading engine over HTTP."""

from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException
import uvicorn

from quiz_grader.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from quiz_grader.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_grader.core.errors import (
    GradingError,
    IncompleteQuestionSet,
    InvalidQuestion,
    InvalidQuiz,
    MissingFeedback,
    NotManuallyGradable,
    OutOfRange,
    ShapeMismatch,
    UnknownQuestion,
)
from quiz_grader.core.grading_manager import GradingManager
from quiz_grader.server.schemas import (
    EvaluatePayload,
    GeneralFeedbackPayload,
    GradePayload,
    QuizPayload,
    SubmissionPayload,
    quiz_to_payload,
    result_to_payload,
    submission_to_payload,
)

_ERROR_STATUS: dict[type[GradingError], int] = {
    ShapeMismatch: 422,
    InvalidQuestion: 422,
    InvalidQuiz: 422,
    OutOfRange: 400,
    MissingFeedback: 400,
    NotManuallyGradable: 400,
    UnknownQuestion: 404,
    IncompleteQuestionSet: 409,
}


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, KeyError):
        return HTTPException(status_code=404, detail=str(exc.args[0]) if exc.args else "Not found")
    status_code = _ERROR_STATUS.get(type(exc), 500)
    return HTTPException(status_code=status_code, detail=str(exc))


def _get_grading_manager_dependency(grading_manager: GradingManager):
    def dependency() -> GradingManager:
        return grading_manager

    return dependency


def create_api_app(grading_manager: GradingManager) -> FastAPI:
    """Create a FastAPI application wired to the provided grading manager."""
    app = FastAPI(title=f"{APP_NAME} API", description=APP_ABOUT_TEXT, version=APP_VERSION)
    manager_dep = _get_grading_manager_dependency(grading_manager)

    @app.post("/quizzes", status_code=201)
    def register_quiz(
        payload: QuizPayload,
        manager: GradingManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            quiz = manager.register_quiz(payload.to_quiz())
        except (InvalidQuestion, InvalidQuiz) as exc:
            raise _http_error(exc) from exc
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return quiz_to_payload(quiz)

    @app.get("/quizzes/{quiz_id}")
    def get_quiz(quiz_id: str, manager: GradingManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            return quiz_to_payload(manager.get_quiz(quiz_id))
        except KeyError as exc:
            raise _http_error(exc) from exc

    @app.post("/quizzes/{quiz_id}/evaluate")
    def evaluate_answer(
        quiz_id: str,
        payload: EvaluatePayload,
        manager: GradingManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            verdict = manager.evaluate_answer(quiz_id, payload.question_index, payload.answer)
        except (KeyError, GradingError) as exc:
            raise _http_error(exc) from exc
        return {"questionIndex": payload.question_index, "verdict": verdict.value}

    @app.post("/quizzes/{quiz_id}/submissions", status_code=201)
    def submit_quiz(
        quiz_id: str,
        payload: SubmissionPayload,
        manager: GradingManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            submission = manager.submit_quiz(
                quiz_id,
                payload.answers,
                payload.time_spent_seconds,
                student_name=payload.student_name,
            )
        except (KeyError, GradingError) as exc:
            raise _http_error(exc) from exc
        return submission_to_payload(submission)

    @app.get("/submissions/{submission_id}")
    def get_submission(
        submission_id: str,
        manager: GradingManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            return submission_to_payload(manager.get_submission(submission_id))
        except KeyError as exc:
            raise _http_error(exc) from exc

    @app.get("/submissions/{submission_id}/result")
    def get_result(
        submission_id: str,
        manager: GradingManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            return result_to_payload(manager.get_result(submission_id))
        except (KeyError, GradingError) as exc:
            raise _http_error(exc) from exc

    @app.post("/submissions/{submission_id}/grades")
    def save_grade(
        submission_id: str,
        payload: GradePayload,
        manager: GradingManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            submission = manager.save_grade(
                submission_id,
                payload.question_index,
                payload.score,
                payload.feedback,
            )
        except (KeyError, GradingError) as exc:
            raise _http_error(exc) from exc
        return submission_to_payload(submission)

    @app.put("/submissions/{submission_id}/general-feedback")
    def set_general_feedback(
        submission_id: str,
        payload: GeneralFeedbackPayload,
        manager: GradingManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            submission = manager.set_general_feedback(submission_id, payload.general_feedback)
        except KeyError as exc:
            raise _http_error(exc) from exc
        return submission_to_payload(submission)

    return app


def run_api_server(
    grading_manager: GradingManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(grading_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    server.run()
