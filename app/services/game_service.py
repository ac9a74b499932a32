"""게임 앱(application)별 세션 통계와 플레이어 분포"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import game_session as game_session_crud
from app.models.game_session import GameSession
from app.models.location import Country
from app.schemas import game as game_schema
from app.schemas.common import CountItem
from app.services import aggregation, enrichment
from app.services.dashboard_service import TOP_LIMIT, build_top_hosts

logger = logging.getLogger(__name__)

UNKNOWN_QUIZ = "Unknown Quiz"
UNKNOWN_DIFFICULTY = "unknown"
# 이 시간(분) 이상은 종료 처리가 누락된 세션으로 보고 평균에서 제외
MAX_DURATION_MINUTES = 600


@dataclass
class ApplicationTotals:
    total_sessions: int = 0
    finished_sessions: int = 0
    active_sessions: int = 0
    hosts: set[str] = field(default_factory=set)
    total_players: int = 0
    first_session: datetime | None = None
    last_session: datetime | None = None


def participant_count(row: GameSession) -> int:
    """participants 배열 길이 (항목 형식은 따지지 않음)"""
    return len(row.participants) if isinstance(row.participants, list) else 0


def participant_user_ids(row: GameSession) -> list[str]:
    if not isinstance(row.participants, list):
        return []
    return [
        p["user_id"] for p in row.participants
        if isinstance(p, dict) and isinstance(p.get("user_id"), str)
    ]


def elapsed_minutes(row: GameSession) -> float | None:
    if row.started_at is None or row.ended_at is None:
        return None
    return (aggregation.as_utc(row.ended_at) - aggregation.as_utc(row.started_at)).total_seconds() / 60


def quiz_identity(row: GameSession) -> tuple[str, str, str | None]:
    """(집계 키, 제목, 카테고리): quiz_detail 기준, quiz_id가 없으면 제목으로 묶음"""
    detail = row.quiz_detail if isinstance(row.quiz_detail, dict) else {}
    title = str(detail.get("title") or UNKNOWN_QUIZ)
    category = detail.get("category") or None
    return row.quiz_id or title, title, str(category) if category else None


def summarize_applications(rows: list[GameSession]) -> list[game_schema.GameApplication]:
    """앱별 세션/진행자/플레이어 수와 첫/마지막 세션 시각 (세션 수 내림차순)"""
    totals: dict[str, ApplicationTotals] = {}
    for row in rows:
        if not row.application:
            continue
        app = totals.setdefault(row.application, ApplicationTotals())
        app.total_sessions += 1
        if row.status == "finished":
            app.finished_sessions += 1
        elif row.status == "active":
            app.active_sessions += 1
        if row.host_id:
            app.hosts.add(row.host_id)
        app.total_players += participant_count(row)
        if row.created_at is not None:
            created = aggregation.as_utc(row.created_at)
            if app.first_session is None or created < app.first_session:
                app.first_session = created
            if app.last_session is None or created > app.last_session:
                app.last_session = created

    ranked = aggregation.top_n({name: app.total_sessions for name, app in totals.items()}, len(totals))
    return [
        game_schema.GameApplication(
            name=name,
            total_sessions=totals[name].total_sessions,
            finished_sessions=totals[name].finished_sessions,
            active_sessions=totals[name].active_sessions,
            unique_hosts=len(totals[name].hosts),
            total_players=totals[name].total_players,
            first_session=totals[name].first_session,
            last_session=totals[name].last_session,
        )
        for name, _ in ranked
    ]


async def list_game_applications(
    session: AsyncSession,
    date_range: game_schema.GameDateRange,
) -> game_schema.GameApplicationListResponse:
    """게임 앱 목록과 앱별 요약"""
    try:
        rows = list(await game_session_crud.get_application_sessions(
            session, None, date_range.start_date, date_range.end_date
        ))
    except SQLAlchemyError as e:
        logger.error(f"게임 앱 목록 조회 실패: {e.__class__.__name__}", exc_info=True)
        return game_schema.GameApplicationListResponse(error="Failed to fetch game applications")
    return game_schema.GameApplicationListResponse(data=summarize_applications(rows))


async def get_game_detail(
    session: AsyncSession,
    name: str,
    date_range: game_schema.GameDateRange,
) -> game_schema.GameDetailResponse:
    """앱 상세 통계: 상태별 세션 수, 평균 인원/진행 시간, 상위 퀴즈/진행자, 난이도 분포

    Args:
        session: 데이터베이스 세션
        name: 앱 이름 (game_sessions.application과 정확히 일치)
        date_range: created_at 기준 기간

    Returns:
        조회 실패 시 빈 통계와 error
    """
    try:
        rows = list(await game_session_crud.get_application_sessions(
            session, name, date_range.start_date, date_range.end_date
        ))
    except SQLAlchemyError as e:
        logger.error(f"게임 앱 상세 조회 실패: name={name}, {e.__class__.__name__}", exc_info=True)
        return game_schema.GameDetailResponse(name=name, error="Failed to fetch game detail")

    quiz_counts: Counter = Counter()
    quiz_labels: dict[str, tuple[str, str | None]] = {}
    host_counts: Counter = Counter()
    difficulties: Counter = Counter()
    durations: list[float] = []
    sessions = []
    for row in rows:
        key, title, category = quiz_identity(row)
        quiz_counts[key] += 1
        quiz_labels.setdefault(key, (title, category))
        if row.host_id:
            host_counts[row.host_id] += 1
        difficulties[row.difficulty or UNKNOWN_DIFFICULTY] += 1
        minutes = elapsed_minutes(row)
        if minutes is not None and 0 < minutes < MAX_DURATION_MINUTES:
            durations.append(minutes)
        sessions.append(game_schema.GameDetailSession(
            id=row.id,
            quiz_id=row.quiz_id,
            quiz_title=title,
            quiz_category=category,
            host_id=row.host_id,
            game_pin=row.game_pin,
            status=row.status,
            difficulty=row.difficulty,
            total_time_minutes=row.total_time_minutes,
            participant_count=participant_count(row),
            created_at=row.created_at,
            started_at=row.started_at,
            ended_at=row.ended_at,
        ))

    total = len(rows)
    total_players = sum(item.participant_count for item in sessions)
    statuses = Counter(row.status for row in rows)
    hosts = await enrichment.profiles_by_id(session, host_counts)

    stats = game_schema.GameDetailStats(
        total_sessions=total,
        total_players=total_players,
        unique_hosts=len(host_counts),
        finished_sessions=statuses["finished"],
        active_sessions=statuses["active"],
        waiting_sessions=statuses["waiting"],
        avg_players_per_session=aggregation.js_round(total_players / total) if total else 0,
        avg_duration_minutes=aggregation.js_round(sum(durations) / len(durations)) if durations else 0,
        top_quizzes=[
            game_schema.TopQuiz(title=quiz_labels[key][0], category=quiz_labels[key][1], count=count)
            for key, count in aggregation.top_n(quiz_counts, TOP_LIMIT)
        ],
        top_hosts=build_top_hosts(host_counts, hosts.value),
        difficulty_breakdown=[
            game_schema.DifficultyCount(difficulty=difficulty, count=count)
            for difficulty, count in aggregation.top_n(difficulties, len(difficulties))
        ],
    )
    return game_schema.GameDetailResponse(name=name, stats=stats, sessions=sessions, error=hosts.error)


async def get_player_demographics(
    session: AsyncSession,
    name: str,
    date_range: game_schema.GameDateRange,
) -> game_schema.PlayerDemographics:
    """앱에 참가한 회원의 국가/학년/성별 분포 (회원마다 한 번씩)"""
    try:
        rows = list(await game_session_crud.get_application_sessions(
            session, name, date_range.start_date, date_range.end_date
        ))
    except SQLAlchemyError as e:
        logger.error(f"플레이어 분포 조회 실패: name={name}, {e.__class__.__name__}", exc_info=True)
        return game_schema.PlayerDemographics(error="Failed to fetch player demographics")

    user_ids = enrichment.collect_ids(rows, participant_user_ids)
    if not user_ids:
        return game_schema.PlayerDemographics()

    profiles = await enrichment.profiles_by_id(session, user_ids)
    players = list(profiles.value.values())
    countries = await enrichment.fetch_by_ids(session, Country, (p.country_id for p in players))

    country_counts = Counter(p.country_id for p in players if p.country_id)
    grades = Counter(p.grade or "Unknown" for p in players)
    genders = Counter(p.gender or "Unknown" for p in players)

    locations = []
    for country_id, count in aggregation.top_n(country_counts, len(country_counts)):
        country = countries.value.get(country_id)
        if country is None:
            continue
        locations.append(game_schema.PlayerLocation(
            country=country.name,
            iso3=country.iso3,
            numeric_code=country.numeric_code.zfill(3) if country.numeric_code else None,
            latitude=country.latitude,
            longitude=country.longitude,
            count=count,
        ))

    errors = [r.error for r in (profiles, countries) if not r.ok]
    return game_schema.PlayerDemographics(
        locations=locations,
        grades=[CountItem(name=grade, count=count) for grade, count in aggregation.top_n(grades, len(grades))],
        genders=[CountItem(name=gender, count=count) for gender, count in aggregation.top_n(genders, len(genders))],
        error="; ".join(errors) if errors else None,
    )
