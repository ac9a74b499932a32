"""Quiz API 통합 테스트"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError
from unittest.mock import AsyncMock, patch

from app.crud import quiz as quiz_crud
from app.schemas import quiz as quiz_schema

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

QUESTIONS = [
    {"question": "2 + 2 = ?", "answers": [{"id": "a", "answer": "3"}, {"id": "b", "answer": "4"}], "correct": "b"},
    {"text": "Capital of Indonesia?", "options": ["Jakarta", "Bandung"], "correct_answer": 0},
]


@pytest.mark.asyncio
async def test_list_quizzes_paginates_and_enriches_creator(client, make_profile, make_quiz):
    """카테고리 필터 2페이지 조회와 작성자 보강"""
    creator = await make_profile(fullname="Siti Rahma")
    for i in range(20):
        await make_quiz(
            title=f"Science {i:02d}",
            category="science",
            creator_id=creator.id,
            created_at=NOW - timedelta(minutes=i),
        )
    await make_quiz(title="Sejarah", category="history")

    response = await client.get("/api/v1/quizzes", params={"category": "science", "page": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["total_count"] == 20
    assert data["total_pages"] == 2
    assert data["current_page"] == 2
    assert len(data["data"]) == 5
    assert data["filters"]["category"] == "science"
    assert data["categories"] == ["history", "science"]
    assert data["data"][0]["creator"]["fullname"] == "Siti Rahma"
    assert data["error"] is None


@pytest.mark.asyncio
async def test_list_quizzes_search_and_sort(client, make_quiz):
    """퀴즈 목록 검색과 정렬"""
    await make_quiz(title="Photosynthesis", category="biology", created_at=NOW - timedelta(days=1))
    await make_quiz(title="Cell Biology", category="science", created_at=NOW)

    response = await client.get("/api/v1/quizzes", params={"search": "BIO", "sort": "oldest"})

    titles = [row["title"] for row in response.json()["data"]]
    assert titles == ["Photosynthesis", "Cell Biology"]


@pytest.mark.asyncio
async def test_get_quiz_detail_normalizes_questions(client, make_quiz):
    """퀴즈 상세 문항 정규화와 정답 표시"""
    quiz = await make_quiz(title="Mixed", questions=QUESTIONS)

    response = await client.get(f"/api/v1/quizzes/{quiz.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["question_count"] == 2
    assert data["questions"][0]["question"] == "2 + 2 = ?"
    assert data["questions"][0]["options"][1] == {"id": "b", "text": "4", "is_correct": True}
    assert data["questions"][0]["options"][0]["is_correct"] is False
    assert data["questions"][1]["question"] == "Capital of Indonesia?"
    assert data["questions"][1]["options"][0]["text"] == "Jakarta"
    assert [o["is_correct"] for o in data["questions"][1]["options"]] == [True, False]


@pytest.mark.asyncio
async def test_get_quiz_not_found(client):
    """없는 퀴즈는 404"""
    response = await client.get("/api/v1/quizzes/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error"] == "Quiz not found: does-not-exist"


@pytest.mark.asyncio
async def test_quiz_sessions_include_stats(client, make_quiz, make_game_session):
    """퀴즈 세션 목록에 참가 통계 포함"""
    quiz = await make_quiz()
    await make_game_session(
        quiz_id=quiz.id,
        status="finished",
        participants=[{"nickname": "a", "score": 80}, {"nickname": "b", "score": 60}, {"nickname": "c", "score": 100}],
        started_at=NOW,
        ended_at=NOW + timedelta(seconds=30),
    )

    response = await client.get(f"/api/v1/quizzes/{quiz.id}/sessions")

    session = response.json()[0]
    assert session["participant_count"] == 3
    assert session["avg_score"] == 80
    assert session["max_score"] == 100
    assert session["duration_minutes"] == 1


@pytest.mark.asyncio
async def test_toggle_visibility(client, make_quiz):
    """퀴즈 공개 여부 전환"""
    quiz = await make_quiz(is_public=True)

    response = await client.patch(f"/api/v1/quizzes/{quiz.id}/visibility", json={"is_public": False})
    assert response.json() == {"error": None}

    listed = await client.get("/api/v1/quizzes", params={"visibility": "private"})
    assert [row["id"] for row in listed.json()["data"]] == [quiz.id]


@pytest.mark.asyncio
async def test_block_requires_exact_confirmation(client, make_quiz):
    """차단은 정확한 확인 문구 필요"""
    quiz = await make_quiz()

    rejected = await client.post(f"/api/v1/quizzes/{quiz.id}/block", json={"confirmation": "block"})
    assert rejected.status_code == 400

    accepted = await client.post(f"/api/v1/quizzes/{quiz.id}/block", json={"confirmation": "Block"})
    assert accepted.json() == {"error": None}

    blocked = await client.get("/api/v1/quizzes", params={"status": "block"})
    assert [row["id"] for row in blocked.json()["data"]] == [quiz.id]

    await client.post(f"/api/v1/quizzes/{quiz.id}/unblock")
    active = await client.get("/api/v1/quizzes", params={"status": "active"})
    assert [row["id"] for row in active.json()["data"]] == [quiz.id]


@pytest.mark.asyncio
async def test_move_to_trash_hides_quiz(client, make_quiz):
    """휴지통으로 옮긴 퀴즈는 목록에서 숨김"""
    quiz = await make_quiz()

    response = await client.post(f"/api/v1/quizzes/{quiz.id}/trash", json={"confirmation": "Move to Trash"})

    assert response.json() == {"error": None}
    assert (await client.get("/api/v1/quizzes")).json()["total_count"] == 0
    assert (await client.get(f"/api/v1/quizzes/{quiz.id}")).status_code == 404


@pytest.mark.asyncio
async def test_mutation_on_missing_quiz_returns_error(client):
    """없는 퀴즈 변경은 error"""
    response = await client.post("/api/v1/quizzes/missing/unblock")

    assert response.status_code == 200
    assert response.json() == {"error": "Quiz not found"}


@pytest.mark.asyncio
async def test_get_all_quizzes(client, make_quiz):
    """전체 퀴즈 목록"""
    await make_quiz(title="one")
    await make_quiz(title="two", deleted_at=NOW)

    response = await client.get("/api/v1/quizzes/all")

    assert [row["title"] for row in response.json()] == ["one"]


@pytest.mark.asyncio
async def test_get_quiz_detail_hides_database_error(client):
    """상세 조회 DB 오류는 일반 메시지로 응답 (SQL 노출 없음)"""
    failing = AsyncMock(side_effect=OperationalError("SELECT secret_table", {}, Exception("conn refused")))

    with patch.object(quiz_crud, "get_quiz_by_id", failing):
        response = await client.get("/api/v1/quizzes/abc")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch quiz", "detail": "Failed to fetch quiz"}
    assert "secret_table" not in response.text


def test_question_marks_correct_option_by_index_or_id():
    """정답 표시는 인덱스 또는 선택지 id로 판단"""
    by_id = quiz_schema.QuizQuestion.model_validate(QUESTIONS[0])
    by_index = quiz_schema.QuizQuestion.model_validate({"question": "?", "options": ["x", "y"], "correct": 1})
    no_answer = quiz_schema.QuizQuestion.model_validate({"question": "?", "options": ["x", "y"]})

    assert by_id.is_correct(1) is True
    assert by_id.is_correct(5) is False
    assert [o.is_correct for o in by_index.options] == [False, True]
    assert [o.is_correct for o in no_answer.options] == [False, False]
