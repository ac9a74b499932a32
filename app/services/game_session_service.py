import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.crud import game_session as game_session_crud
from app.exceptions import DataFetchError, GameSessionNotFoundError
from app.models.game_session import GameSession
from app.models.profile import Profile
from app.models.quiz import Quiz
from app.schemas import game_session as game_session_schema
from app.schemas.common import Page
from app.schemas.game_session import Participant
from app.services import aggregation, enrichment
from app.services.assets import avatar_url, resolve_asset_url
from app.services.decoding import decode_list, decode_rows
from app.services.table import empty_page, page_fields

logger = logging.getLogger(__name__)

UNTITLED_QUIZ = "Untitled Quiz"


def resolve_quiz_title(row: GameSession, quiz: Quiz | None) -> str:
    """세션에 저장된 퀴즈 제목 → 퀴즈 테이블 제목 → 기본 제목"""
    detail = row.quiz_detail if isinstance(row.quiz_detail, dict) else {}
    return detail.get("title") or (quiz.title if quiz is not None else None) or UNTITLED_QUIZ


def resolve_category(row: GameSession, quiz: Quiz | None) -> str | None:
    """퀴즈 테이블의 카테고리 (없으면 세션에 저장된 값)"""
    if quiz is not None and quiz.category:
        return quiz.category
    detail = row.quiz_detail if isinstance(row.quiz_detail, dict) else {}
    return detail.get("category")


def with_avatars(participants: list[Participant], profiles: dict[str, Profile]) -> list[Participant]:
    """참가자 아바타: 프로필 아바타 → 저장된 아바타 → 닉네임 기반 대체 이미지"""
    enriched = []
    for participant in participants:
        profile = profiles.get(participant.user_id) if participant.user_id else None
        path = (profile.avatar_url if profile is not None else None) or participant.avatar_url
        enriched.append(participant.model_copy(update={"avatar_url": avatar_url(path, participant.nickname)}))
    return enriched


def build_session_response(
    row: GameSession,
    hosts: dict[str, Profile],
    participant_profiles: dict[str, Profile],
    quizzes: dict[str, Quiz],
) -> game_session_schema.GameSessionResponse:
    """세션 행 + 보강 맵 → 응답 (참가자 배열 형식이 잘못되면 ValidationError)"""
    participants = decode_list(Participant, row.participants)
    stats = aggregation.participant_stats(participants)
    quiz = quizzes.get(row.quiz_id) if row.quiz_id else None
    return game_session_schema.GameSessionResponse(
        id=row.id,
        game_pin=row.game_pin,
        host_id=row.host_id,
        quiz_id=row.quiz_id,
        quiz_title=resolve_quiz_title(row, quiz),
        category=resolve_category(row, quiz),
        status=row.status or "waiting",
        created_at=row.created_at,
        started_at=row.started_at,
        ended_at=row.ended_at,
        participants=with_avatars(participants, participant_profiles),
        participant_count=stats.count,
        avg_score=stats.avg_score,
        max_score=stats.max_score,
        host=enrichment.profile_summary(hosts.get(row.host_id)) if row.host_id else None,
        duration_minutes=aggregation.session_duration(row.started_at, row.ended_at, row.total_time_minutes),
        total_questions=row.total_questions or 0,
        application=row.application,
    )


def _participant_user_ids(row: GameSession) -> list[str]:
    participants = row.participants if isinstance(row.participants, list) else []
    return [p.get("user_id") for p in participants if isinstance(p, dict)]


async def enrich_sessions(
    session: AsyncSession,
    rows: list[GameSession],
) -> list[game_session_schema.GameSessionResponse]:
    """호스트/참가자 프로필과 퀴즈를 일괄 조회해 세션 행에 결합"""
    hosts = await enrichment.profiles_by_id(session, (row.host_id for row in rows))
    participant_profiles = await enrichment.profiles_by_id(
        session, enrichment.collect_ids(rows, _participant_user_ids)
    )
    quizzes = await enrichment.quizzes_by_id(session, (row.quiz_id for row in rows))
    return decode_rows(
        rows,
        lambda row: build_session_response(row, hosts.value, participant_profiles.value, quizzes.value),
        "game_sessions",
    )


async def list_game_sessions(
    session: AsyncSession,
    params: game_session_schema.GameSessionListParams,
) -> Page[game_session_schema.GameSessionResponse]:
    """게임 세션 목록 조회"""
    try:
        rows, total_count = await game_session_crud.list_game_sessions(session, params)
    except SQLAlchemyError as e:
        logger.error(f"게임 세션 목록 조회 실패: {e.__class__.__name__}", exc_info=True)
        return Page[game_session_schema.GameSessionResponse](**empty_page(params, "Failed to fetch game sessions"))

    data = await enrich_sessions(session, rows)
    return Page[game_session_schema.GameSessionResponse](**page_fields(params, data, total_count))


async def get_game_session_detail(
    session: AsyncSession,
    session_id: str,
) -> game_session_schema.GameSessionDetailResponse:
    """게임 세션 상세 조회 (리더보드 포함)"""
    try:
        row = await game_session_crud.get_game_session_by_id(session, session_id)
    except SQLAlchemyError as e:
        logger.error(f"게임 세션 상세 조회 실패: session_id={session_id}, {e.__class__.__name__}", exc_info=True)
        raise DataFetchError("game session") from e
    if row is None:
        raise GameSessionNotFoundError(session_id)

    enriched = await enrich_sessions(session, [row])
    if not enriched:
        # 참가자 배열 형식 오류: 참가자 없이 기본 정보만 반환
        base = game_session_schema.GameSessionResponse(
            id=row.id,
            game_pin=row.game_pin,
            host_id=row.host_id,
            quiz_id=row.quiz_id,
            quiz_title=resolve_quiz_title(row, None),
            status=row.status or "waiting",
            created_at=row.created_at,
            total_questions=row.total_questions or 0,
            application=row.application,
        )
        return game_session_schema.GameSessionDetailResponse(**base.model_dump())

    base = enriched[0]
    return game_session_schema.GameSessionDetailResponse(
        **base.model_dump(),
        leaderboard=aggregation.leaderboard(base.participants),
    )


async def get_stale_sessions(
    session: AsyncSession,
    now: datetime | None = None,
) -> game_session_schema.StaleSessionListResponse:
    """오래 대기 중인 세션 조회"""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(minutes=settings.stale_session_minutes)
    try:
        rows = list(await game_session_crud.get_stale_waiting_sessions(session, cutoff))
    except SQLAlchemyError as e:
        logger.error(f"대기 세션 조회 실패: {e.__class__.__name__}", exc_info=True)
        return game_session_schema.StaleSessionListResponse(data=[], error="Failed to fetch stale sessions")

    hosts = await enrichment.profiles_by_id(session, (row.host_id for row in rows))
    quizzes = await enrichment.quizzes_by_id(session, (row.quiz_id for row in rows))

    def build(row: GameSession) -> game_session_schema.StaleSessionResponse:
        host = hosts.value.get(row.host_id) if row.host_id else None
        participants = decode_list(Participant, row.participants)
        return game_session_schema.StaleSessionResponse(
            id=row.id,
            game_pin=row.game_pin,
            quiz_title=resolve_quiz_title(row, quizzes.value.get(row.quiz_id) if row.quiz_id else None),
            host_name=(host.fullname or host.username or "Unknown") if host is not None else "Unknown",
            host_id=row.host_id,
            created_at=row.created_at,
            waiting_duration_minutes=aggregation.waiting_minutes(row.created_at, now),
            participant_count=len(participants),
            application=row.application or "-",
            avatar_url=resolve_asset_url(host.avatar_url) if host is not None else None,
        )

    return game_session_schema.StaleSessionListResponse(data=decode_rows(rows, build, "game_sessions"))


async def clear_sessions(
    session: AsyncSession,
    session_ids: list[str],
) -> game_session_schema.ClearSessionsResponse:
    """대기 중인 세션 일괄 삭제"""
    if not session_ids:
        return game_session_schema.ClearSessionsResponse(cleared=0)
    try:
        cleared = await game_session_crud.delete_waiting_sessions(session, session_ids)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"대기 세션 삭제 실패: {e.__class__.__name__}", exc_info=True)
        return game_session_schema.ClearSessionsResponse(cleared=0, error="Failed to clear sessions")

    logger.info(f"대기 세션 삭제: requested={len(session_ids)}, cleared={cleared}")
    return game_session_schema.ClearSessionsResponse(cleared=cleared)
