"""Static metadata describing QuizGrader."""

APP_NAME = "QuizGrader"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "QuizGrader evaluates quiz submissions across six question types, aggregates "
    "weighted scores, and tracks manual grading of long-answer questions."
)
