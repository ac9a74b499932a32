from typing import Sequence

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.crud.query_builder import apply_equals, apply_search, apply_sort, is_unset, paginate
from app.models.quiz import Quiz
from app.schemas.quiz import QuizListParams

QUIZ_SORTS = {
    "newest": [Quiz.created_at.desc(), Quiz.id],
    "oldest": [Quiz.created_at.asc(), Quiz.id],
}

# 레거시 데이터의 인도네시아어 표기 포함
PUBLIC_VISIBILITY = {"public", "publik"}
PRIVATE_VISIBILITY = {"private"}


def build_quiz_list_query(params: QuizListParams) -> Select:
    """퀴즈 목록 필터/정렬 쿼리"""
    stmt = select(Quiz).where(Quiz.deleted_at.is_(None))
    stmt = apply_search(stmt, params.search, Quiz.title, Quiz.category)
    stmt = apply_equals(stmt, Quiz.category, params.category)

    visibility = params.visibility.lower()
    if visibility in PUBLIC_VISIBILITY:
        stmt = stmt.where(Quiz.is_public.is_(True))
    elif visibility in PRIVATE_VISIBILITY:
        stmt = stmt.where(Quiz.is_public.is_(False))

    if params.status == "active":
        stmt = stmt.where(or_(Quiz.status.is_(None), Quiz.status != "block"))
    elif not is_unset(params.status):
        stmt = stmt.where(Quiz.status == params.status)

    return apply_sort(stmt, params.sort, QUIZ_SORTS)


async def list_quizzes(session: AsyncSession, params: QuizListParams) -> tuple[list[Quiz], int]:
    """퀴즈 목록 한 페이지와 전체 개수 조회"""
    return await paginate(session, build_quiz_list_query(params), params.page, params.page_size)


async def get_quiz_categories(session: AsyncSession) -> list[str]:
    """휴지통에 없는 퀴즈의 카테고리 목록 (중복 제거, 정렬)"""
    stmt = (
        select(Quiz.category)
        .where(Quiz.deleted_at.is_(None), Quiz.category.is_not(None), Quiz.category != "")
        .distinct()
        .order_by(Quiz.category)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_quiz_by_id(
    session: AsyncSession,
    quiz_id: str,
    include_deleted: bool = False,
) -> Quiz | None:
    """ID로 퀴즈 조회 (작성자 프로필 포함)"""
    stmt = select(Quiz).options(joinedload(Quiz.creator)).where(Quiz.id == quiz_id)
    if not include_deleted:
        stmt = stmt.where(Quiz.deleted_at.is_(None))
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_active_quizzes(session: AsyncSession, limit: int) -> Sequence[Quiz]:
    """휴지통에 없는 퀴즈 최신순 일괄 조회"""
    stmt = (
        select(Quiz)
        .where(Quiz.deleted_at.is_(None))
        .order_by(Quiz.created_at.desc(), Quiz.id)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_quizzes_by_creator(session: AsyncSession, creator_id: str, limit: int = 10) -> Sequence[Quiz]:
    """사용자가 만든 최근 퀴즈"""
    stmt = (
        select(Quiz)
        .where(Quiz.creator_id == creator_id, Quiz.deleted_at.is_(None))
        .order_by(Quiz.created_at.desc(), Quiz.id)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_deleted_quizzes(session: AsyncSession) -> Sequence[Quiz]:
    """휴지통의 퀴즈 (최근 삭제순)"""
    stmt = select(Quiz).where(Quiz.deleted_at.is_not(None)).order_by(Quiz.deleted_at.desc())
    result = await session.execute(stmt)
    return result.scalars().all()
