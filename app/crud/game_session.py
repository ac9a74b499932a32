from datetime import datetime
from typing import Sequence

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.query_builder import apply_equals, apply_search, apply_sort, is_unset, paginate
from app.models.game_session import GameSession
from app.schemas.game_session import GameSessionListParams

GAME_SESSION_SORTS = {
    "newest": [GameSession.created_at.desc(), GameSession.id],
    "oldest": [GameSession.created_at.asc(), GameSession.id],
    "duration_desc": [GameSession.total_time_minutes.desc().nulls_last(), GameSession.created_at.desc()],
    "duration_asc": [GameSession.total_time_minutes.asc().nulls_last(), GameSession.created_at.desc()],
    "questions_desc": [GameSession.total_questions.desc(), GameSession.created_at.desc()],
}


def _exact_int(value: str) -> int | None:
    """'all'/빈 값/숫자가 아닌 값은 필터 미적용"""
    if is_unset(value) or not value.strip().isdigit():
        return None
    return int(value)


def build_game_session_list_query(params: GameSessionListParams) -> Select:
    """게임 세션 목록 필터/정렬 쿼리"""
    stmt = select(GameSession)
    stmt = apply_search(stmt, params.search, GameSession.game_pin)
    stmt = apply_equals(stmt, GameSession.status, params.status)
    if not is_unset(params.application):
        stmt = stmt.where(GameSession.application.ilike(f"%{params.application.strip()}%"))
    stmt = apply_equals(stmt, GameSession.total_questions, _exact_int(params.questions))
    stmt = apply_equals(stmt, GameSession.total_time_minutes, _exact_int(params.duration))
    return apply_sort(stmt, params.sort, GAME_SESSION_SORTS)


async def list_game_sessions(
    session: AsyncSession,
    params: GameSessionListParams,
) -> tuple[list[GameSession], int]:
    """게임 세션 목록 한 페이지와 전체 개수 조회"""
    return await paginate(session, build_game_session_list_query(params), params.page, params.page_size)


async def get_game_session_by_id(session: AsyncSession, session_id: str) -> GameSession | None:
    """ID로 게임 세션 조회"""
    result = await session.execute(select(GameSession).where(GameSession.id == session_id))
    return result.scalar_one_or_none()


async def get_sessions_by_quiz(session: AsyncSession, quiz_id: str) -> Sequence[GameSession]:
    """퀴즈를 사용한 게임 세션 (최신순)"""
    stmt = (
        select(GameSession)
        .where(GameSession.quiz_id == quiz_id)
        .order_by(GameSession.created_at.desc())
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_stale_waiting_sessions(session: AsyncSession, created_before: datetime) -> Sequence[GameSession]:
    """기준 시각 이전에 만들어져 아직 대기 중인 세션 (오래된 순)"""
    stmt = (
        select(GameSession)
        .where(GameSession.status == "waiting", GameSession.created_at <= created_before)
        .order_by(GameSession.created_at.asc())
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def delete_waiting_sessions(session: AsyncSession, session_ids: list[str]) -> int:
    """대기 중인 세션 삭제 (삭제된 행 수 반환)"""
    stmt = delete(GameSession).where(GameSession.id.in_(session_ids), GameSession.status == "waiting")
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount


async def get_finished_sessions(
    session: AsyncSession,
    start: datetime | None = None,
    end: datetime | None = None,
) -> Sequence[GameSession]:
    """기간 내 종료된 세션 (최신순)"""
    stmt = select(GameSession).where(GameSession.status == "finished")
    if start is not None:
        stmt = stmt.where(GameSession.created_at >= start)
    if end is not None:
        stmt = stmt.where(GameSession.created_at < end)
    result = await session.execute(stmt.order_by(GameSession.created_at.desc()))
    return result.scalars().all()


async def get_sessions_hosted_by(session: AsyncSession, host_id: str) -> Sequence[GameSession]:
    """사용자가 진행한 세션 (최신순)"""
    stmt = (
        select(GameSession)
        .where(GameSession.host_id == host_id)
        .order_by(GameSession.created_at.desc())
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_all_participations(session: AsyncSession) -> Sequence[tuple]:
    """참가 기록 집계용 (quiz_id, application, participants) 전체 조회"""
    stmt = select(GameSession.quiz_id, GameSession.application, GameSession.participants)
    result = await session.execute(stmt)
    return result.all()


async def get_application_sessions(
    session: AsyncSession,
    application: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> Sequence[GameSession]:
    """앱별 통계용 세션 (application을 주지 않으면 앱이 기록된 모든 세션, 최신순)

    start/end는 created_at 기준 양 끝 포함 구간이다.
    """
    stmt = select(GameSession)
    if application is None:
        stmt = stmt.where(GameSession.application.is_not(None))
    else:
        stmt = stmt.where(GameSession.application == application)
    if start is not None:
        stmt = stmt.where(GameSession.created_at >= start)
    if end is not None:
        stmt = stmt.where(GameSession.created_at <= end)
    result = await session.execute(stmt.order_by(GameSession.created_at.desc()))
    return result.scalars().all()
