"""목록 쿼리 빌더/페이지네이션 테스트 (SQLite)"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from app.crud import quiz as quiz_crud
from app.crud.query_builder import apply_search, apply_sort, is_unset, paginate
from app.models.quiz import Quiz
from app.schemas.quiz import QuizListParams

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


async def seed_science_quizzes(make_quiz, count: int) -> None:
    for i in range(count):
        await make_quiz(title=f"Science {i:02d}", category="science", created_at=NOW - timedelta(minutes=i))


def test_is_unset():
    """빈 값/전체 선택은 필터 미적용"""
    assert is_unset(None)
    assert is_unset("")
    assert is_unset("  ")
    assert is_unset("all")
    assert not is_unset("science")


@pytest.mark.asyncio
async def test_second_page_has_remaining_rows(test_db_session, make_quiz):
    """20개 중 2페이지(크기 15)는 5개, 전체 페이지 2"""
    await seed_science_quizzes(make_quiz, 20)
    await make_quiz(title="History 1", category="history")

    params = QuizListParams(category="science", page=2, page_size=15)
    rows, total_count = await quiz_crud.list_quizzes(test_db_session, params)

    assert total_count == 20
    assert len(rows) == 5
    assert all(row.category == "science" for row in rows)


@pytest.mark.asyncio
async def test_page_past_end_is_empty_with_total(test_db_session, make_quiz):
    """마지막 페이지 이후는 빈 데이터와 전체 수"""
    await seed_science_quizzes(make_quiz, 3)

    rows, total_count = await quiz_crud.list_quizzes(test_db_session, QuizListParams(page=5, page_size=15))

    assert rows == []
    assert total_count == 3


@pytest.mark.asyncio
async def test_search_is_case_insensitive_over_columns(test_db_session, make_quiz):
    """여러 컬럼 대소문자 무시 검색"""
    await make_quiz(title="Photosynthesis Basics", category="biology")
    await make_quiz(title="World Capitals", category="Geography")
    await make_quiz(title="Algebra", category="math")

    stmt = apply_search(select(Quiz), "GEOG", Quiz.title, Quiz.category)
    rows, total_count = await paginate(test_db_session, stmt, 1, 10)

    assert total_count == 1
    assert rows[0].title == "World Capitals"


@pytest.mark.asyncio
async def test_unknown_sort_falls_back_to_newest(test_db_session, make_quiz):
    """알 수 없는 정렬은 최신순"""
    await make_quiz(title="old", created_at=NOW - timedelta(days=1))
    await make_quiz(title="new", created_at=NOW)

    stmt = apply_sort(select(Quiz), "bogus", quiz_crud.QUIZ_SORTS)
    rows, _ = await paginate(test_db_session, stmt, 1, 10)

    assert [row.title for row in rows] == ["new", "old"]


@pytest.mark.asyncio
async def test_quiz_filters(test_db_session, make_quiz):
    """퀴즈 목록 필터"""
    await make_quiz(title="public active", is_public=True)
    await make_quiz(title="private blocked", is_public=False, status="block")
    await make_quiz(title="trashed", deleted_at=NOW)

    public_rows, _ = await quiz_crud.list_quizzes(test_db_session, QuizListParams(visibility="publik"))
    blocked_rows, _ = await quiz_crud.list_quizzes(test_db_session, QuizListParams(status="block"))
    active_rows, _ = await quiz_crud.list_quizzes(test_db_session, QuizListParams(status="active"))

    assert [row.title for row in public_rows] == ["public active"]
    assert [row.title for row in blocked_rows] == ["private blocked"]
    assert [row.title for row in active_rows] == ["public active"]
