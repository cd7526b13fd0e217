"""Grading-related constants shared across the engine and the API layer."""

DEFAULT_MAX_SCORE: int = 5
DEFAULT_PASSING_SCORE: int = 70
MIN_PASSING_SCORE: int = 1
MAX_PASSING_SCORE: int = 100
AUTO_GRADED_POINTS: int = 1
