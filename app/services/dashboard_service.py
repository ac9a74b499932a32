"""게임 대시보드 통계 (종료된 세션 기준)"""
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Literal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import game_session as game_session_crud
from app.exceptions import InvalidRequestError
from app.models.game_session import GameSession
from app.models.profile import Profile
from app.schemas import game_session as game_session_schema
from app.schemas.common import CountItem
from app.schemas.game_session import Participant
from app.services import aggregation, enrichment
from app.services.decoding import decode_list, decode_rows
from app.services.game_session_service import resolve_category, resolve_quiz_title

logger = logging.getLogger(__name__)

TimeRange = Literal["this-year", "last-year", "all-time"]

TOP_LIMIT = 5
TREND_DAYS = 7


@dataclass
class FinishedSession:
    row: GameSession
    participant_count: int
    question_count: int


def time_range_bounds(time_range: str, now: datetime) -> tuple[datetime | None, datetime | None]:
    """기간 이름 → [start, end) 구간 (UTC)"""
    year = now.year
    if time_range == "this-year":
        return datetime(year, 1, 1, tzinfo=timezone.utc), datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    if time_range == "last-year":
        return datetime(year - 1, 1, 1, tzinfo=timezone.utc), datetime(year, 1, 1, tzinfo=timezone.utc)
    if time_range == "all-time":
        return None, None
    raise InvalidRequestError(f"Unknown time range: {time_range}")


def application_label(application: str | None) -> str:
    """'.com' 제거 후 대문자"""
    if not application:
        return "UNKNOWN"
    return application.replace(".com", "").upper()


def category_label(category: str | None) -> str:
    return category.strip().capitalize() if category and category.strip() else "Uncategorized"


def to_count_items(counts: Counter, limit: int | None = None) -> list[CountItem]:
    ranked = aggregation.top_n(counts, limit if limit is not None else len(counts))
    return [CountItem(name=str(name), count=count) for name, count in ranked]


def build_top_hosts(
    host_counts: Counter,
    profiles: dict[str, Profile],
    limit: int = TOP_LIMIT,
) -> list[game_session_schema.TopHost]:
    """세션 수 상위 진행자 (프로필이 없으면 id와 개수만)"""
    top_hosts = []
    for host_id, count in aggregation.top_n(host_counts, limit):
        summary = enrichment.profile_summary(profiles.get(host_id))
        if summary is None:
            top_hosts.append(game_session_schema.TopHost(id=host_id, count=count))
        else:
            top_hosts.append(game_session_schema.TopHost(**summary.model_dump(), count=count))
    return top_hosts


def daily_trend(rows: list[GameSession], today: date) -> list[game_session_schema.TrendPoint]:
    """최근 7일 일별 세션 수 (오래된 날짜부터)"""
    counts = Counter(aggregation.as_utc(row.created_at).date() for row in rows if row.created_at)
    days = [today - timedelta(days=offset) for offset in range(TREND_DAYS - 1, -1, -1)]
    return [game_session_schema.TrendPoint(date=day.isoformat(), count=counts.get(day, 0)) for day in days]


async def get_game_dashboard_stats(
    session: AsyncSession,
    time_range: str = "this-year",
    now: datetime | None = None,
) -> game_session_schema.GameDashboardResponse:
    """게임 대시보드 KPI와 차트 데이터

    Args:
        session: 데이터베이스 세션
        time_range: 'this-year', 'last-year', 'all-time'
        now: 기준 시각 (기본값: 현재 UTC)

    Returns:
        조회 실패 시 error가 채워진 빈 통계
    """
    now = aggregation.as_utc(now) if now is not None else datetime.now(timezone.utc)
    start, end = time_range_bounds(time_range, now)

    try:
        rows = list(await game_session_crud.get_finished_sessions(session, start, end))
    except SQLAlchemyError as e:
        logger.error(f"대시보드 세션 조회 실패: {e.__class__.__name__}", exc_info=True)
        return game_session_schema.GameDashboardResponse(
            time_range=time_range, error="Failed to fetch dashboard statistics"
        )

    finished = decode_rows(
        rows,
        lambda row: FinishedSession(
            row=row,
            participant_count=len(decode_list(Participant, row.participants)),
            question_count=len(row.current_questions) if isinstance(row.current_questions, list) else 0,
        ),
        "game_sessions",
    )
    rows = [item.row for item in finished]
    total = len(finished)

    kpi = game_session_schema.DashboardKpi(
        total_sessions=total,
        total_participants=sum(item.participant_count for item in finished),
        avg_duration=aggregation.js_round(sum(row.total_time_minutes or 0 for row in rows) / total) if total else 0,
        avg_questions=aggregation.js_round(sum(item.question_count for item in finished) / total) if total else 0,
    )

    hosts = await enrichment.profiles_by_id(session, (row.host_id for row in rows))
    quizzes = await enrichment.quizzes_by_id(session, (row.quiz_id for row in rows))
    locations = await enrichment.locations_for_profiles(session, hosts.value.values())

    apps = Counter(application_label(row.application) for row in rows)
    categories = Counter(
        category_label(resolve_category(row, quizzes.value.get(row.quiz_id) if row.quiz_id else None))
        for row in rows
    )

    host_counts = Counter(row.host_id for row in rows if row.host_id)

    states: Counter = Counter()
    cities: Counter = Counter()
    countries: Counter = Counter()
    for row in rows:
        host = hosts.value.get(row.host_id) if row.host_id else None
        if host is None:
            continue
        if host.state_id in locations.value.states:
            states[locations.value.states[host.state_id]] += 1
        if host.city_id in locations.value.cities:
            cities[locations.value.cities[host.city_id]] += 1
        if host.country_id in locations.value.countries:
            countries[locations.value.countries[host.country_id]] += 1

    recent_activity = [
        game_session_schema.RecentActivity(
            id=row.id,
            created_at=row.created_at,
            quiz_title=resolve_quiz_title(row, quizzes.value.get(row.quiz_id) if row.quiz_id else None),
            total_questions=row.total_questions or 0,
            host=enrichment.profile_summary(hosts.value.get(row.host_id)) if row.host_id else None,
        )
        for row in rows[:TOP_LIMIT]
    ]

    charts = game_session_schema.DashboardCharts(
        trend=daily_trend(rows, now.date()),
        apps=to_count_items(apps),
        top_hosts=build_top_hosts(host_counts, hosts.value),
        recent_activity=recent_activity,
        top_categories=to_count_items(categories, TOP_LIMIT),
        top_states=to_count_items(states, TOP_LIMIT),
        top_cities=to_count_items(cities, TOP_LIMIT),
        top_countries=to_count_items(countries, TOP_LIMIT),
    )
    return game_session_schema.GameDashboardResponse(time_range=time_range, kpi=kpi, charts=charts)
