"""Application entry point for the QuizGrader service."""

from __future__ import annotations

from quiz_grader.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_grader.core.grading_manager import GradingManager
from quiz_grader.server.api_server import run_api_server
from quiz_grader.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging and serve the grading API."""
    logger = configure_logging()
    logger.info("Starting QuizGrader on %s:%s", DEFAULT_HOST, DEFAULT_PORT)

    grading_manager = GradingManager()
    run_api_server(grading_manager=grading_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)


if __name__ == "__main__":
    main()
