from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from quiz_grader.core.grading_manager import GradingManager
from quiz_grader.server.api_server import create_api_app

QUIZ_PAYLOAD = {
    "id": "geo-101",
    "title": "Geography",
    "passingScore": 70,
    "questions": [
        {"id": "q1", "type": "multiple-choice", "options": ["3", "4", "5", "6"], "correctAnswer": 1},
        {"id": "q2", "type": "fill-in-blank", "correctText": "Paris"},
        {"id": "q3", "type": "ordering", "correctOrder": ["A", "B", "C"]},
        {"id": "q4", "type": "long-answer", "gradingCriteria": "Explain clearly."},
    ],
}


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_api_app(GradingManager()))


@pytest.fixture()
def submission_id(client) -> str:
    assert client.post("/quizzes", json=QUIZ_PAYLOAD).status_code == 201
    response = client.post(
        "/quizzes/geo-101/submissions",
        json={
            "answers": {"0": 1, "1": " paris ", "2": ["B", "A", "C"], "3": "An essay."},
            "timeSpentSeconds": 240,
            "studentName": "Ada",
        },
    )
    assert response.status_code == 201
    return response.json()["id"]


def test_register_and_fetch_quiz(client) -> None:
    created = client.post("/quizzes", json=QUIZ_PAYLOAD)
    assert created.status_code == 201

    fetched = client.get("/quizzes/geo-101").json()
    assert fetched["passingScore"] == 70
    assert fetched["questions"][0]["correctAnswer"] == 1
    assert fetched["questions"][3]["maxScore"] == 5


def test_duplicate_quiz_conflicts(client) -> None:
    client.post("/quizzes", json=QUIZ_PAYLOAD)
    assert client.post("/quizzes", json=QUIZ_PAYLOAD).status_code == 409


def test_invalid_question_definition(client) -> None:
    payload = {
        "id": "bad",
        "questions": [{"id": "q", "type": "multiple-choice", "options": ["a"], "correctAnswer": 4}],
    }
    assert client.post("/quizzes", json=payload).status_code == 422


def test_unknown_question_type_is_rejected(client) -> None:
    payload = {"id": "bad", "questions": [{"id": "q", "type": "essay"}]}
    assert client.post("/quizzes", json=payload).status_code == 422


def test_submission_starts_needing_grading(client, submission_id) -> None:
    body = client.get(f"/submissions/{submission_id}").json()
    assert body["gradingStatus"] == "NeedsGrading"
    assert body["score"] == 25
    assert body["passed"] is False
    assert body["answers"]["2"] == ["B", "A", "C"]


def test_result_breakdown(client, submission_id) -> None:
    body = client.get(f"/submissions/{submission_id}/result").json()
    assert body["possiblePoints"] == 8
    assert body["earnedPoints"] == 2
    assert [o["verdict"] for o in body["outcomes"]] == [
        "correct",
        "correct",
        "incorrect",
        "pending-manual",
    ]


def test_save_grade(client, submission_id) -> None:
    response = client.post(
        f"/submissions/{submission_id}/grades",
        json={"questionIndex": 3, "score": 4, "feedback": "Good"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["gradingStatus"] == "Graded"
    assert body["score"] == 75
    assert body["passed"] is True
    assert body["manualScores"] == {"3": 4}
    assert body["feedback"] == {"3": "Good"}


@pytest.mark.parametrize(
    ("grade", "status_code"),
    [
        ({"questionIndex": 3, "score": 6, "feedback": "Too much"}, 400),
        ({"questionIndex": 3, "score": 4, "feedback": "  "}, 400),
        ({"questionIndex": 0, "score": 1, "feedback": "Auto"}, 400),
        ({"questionIndex": 12, "score": 1, "feedback": "Where"}, 404),
    ],
)
def test_rejected_grades(client, submission_id, grade, status_code) -> None:
    response = client.post(f"/submissions/{submission_id}/grades", json=grade)
    assert response.status_code == status_code
    assert client.get(f"/submissions/{submission_id}").json()["gradingStatus"] == "NeedsGrading"


def test_shape_mismatch_on_submit(client) -> None:
    client.post("/quizzes", json=QUIZ_PAYLOAD)
    response = client.post("/quizzes/geo-101/submissions", json={"answers": {"2": "A B C"}})
    assert response.status_code == 422


def test_evaluate_preview(client) -> None:
    client.post("/quizzes", json=QUIZ_PAYLOAD)
    response = client.post("/quizzes/geo-101/evaluate", json={"questionIndex": 1, "answer": "PARIS"})
    assert response.json() == {"questionIndex": 1, "verdict": "correct"}
    missing = client.post("/quizzes/geo-101/evaluate", json={"questionIndex": 9, "answer": 1})
    assert missing.status_code == 404


def test_general_feedback(client, submission_id) -> None:
    response = client.put(
        f"/submissions/{submission_id}/general-feedback",
        json={"generalFeedback": "Keep practicing."},
    )
    assert response.status_code == 200
    assert response.json()["generalFeedback"] == "Keep practicing."
    assert response.json()["gradingStatus"] == "NeedsGrading"


def test_unknown_submission(client) -> None:
    assert client.get("/submissions/nope").status_code == 404
    assert client.get("/quizzes/nope").status_code == 404


def test_answer_for_missing_question_conflicts(client) -> None:
    client.post("/quizzes", json=QUIZ_PAYLOAD)
    response = client.post("/quizzes/geo-101/submissions", json={"answers": {"9": 1}})
    assert response.status_code == 409
    assert "[9]" in response.json()["detail"]


def test_evaluate_rejects_wrong_shape(client) -> None:
    client.post("/quizzes", json=QUIZ_PAYLOAD)
    response = client.post("/quizzes/geo-101/evaluate", json={"questionIndex": 0, "answer": "1"})
    assert response.status_code == 422


def test_matching_answer_round_trips_after_submit(client) -> None:
    payload = {
        "id": "capitals",
        "questions": [
            {
                "id": "m1",
                "type": "matching",
                "matchingPairs": [
                    {"left": "France", "right": "Paris"},
                    {"left": "Norway", "right": "Oslo"},
                ],
            }
        ],
    }
    assert client.post("/quizzes", json=payload).status_code == 201
    answer = {"France": "Paris", "Norway": "Oslo"}
    response = client.post("/quizzes/capitals/submissions", json={"answers": {"0": answer}})
    assert response.status_code == 201
    assert response.json()["answers"]["0"] == answer
    assert response.json()["score"] == 100


def test_openapi_describes_service(client) -> None:
    info = client.get("/openapi.json").json()["info"]
    assert info["title"] == "QuizGrader API"
    assert info["description"].startswith("QuizGrader evaluates quiz submissions")
