import logging
from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.crud import common as common_crud, game_session as game_session_crud, profile as profile_crud
from app.crud import quiz as quiz_crud
from app.exceptions import DataFetchError, ProfileNotFoundError
from app.models.location import City, Country, State
from app.models.profile import Profile
from app.schemas import profile as profile_schema
from app.schemas.common import CountItem, MutationResponse, Page
from app.schemas.game_session import Participant
from app.services import aggregation, enrichment
from app.services.assets import resolve_asset_url
from app.services.decoding import decode_list, decode_rows
from app.services.game_session_service import UNTITLED_QUIZ
from app.services.mutations import run_mutation
from app.services.table import empty_page, page_fields

logger = logging.getLogger(__name__)

PLAYED_QUIZ_LIMIT = 10
CREATED_QUIZ_LIMIT = 10
TOP_APPLICATION_LIMIT = 5
RECENT_SESSION_LIMIT = 5


def to_profile_response(
    profile: Profile,
    locations: enrichment.ProfileLocations,
) -> profile_schema.ProfileResponse:
    return profile_schema.ProfileResponse(
        id=profile.id,
        username=profile.username,
        email=profile.email,
        fullname=profile.fullname,
        avatar_url=resolve_asset_url(profile.avatar_url),
        role=profile.role,
        last_active=profile.last_active,
        is_blocked=profile.is_blocked,
        blocked_at=profile.blocked_at,
        organization=profile.organization,
        phone=profile.phone,
        country_id=profile.country_id,
        state_id=profile.state_id,
        city_id=profile.city_id,
        state=locations.states.get(profile.state_id),
        city=locations.cities.get(profile.city_id),
        created_at=profile.created_at,
    )


async def list_profiles(
    session: AsyncSession,
    params: profile_schema.ProfileListParams,
) -> Page[profile_schema.ProfileResponse]:
    """사용자 목록 조회 (주/도시 이름 보강)"""
    try:
        rows, total_count = await profile_crud.list_profiles(session, params)
    except SQLAlchemyError as e:
        logger.error(f"사용자 목록 조회 실패: {e.__class__.__name__}", exc_info=True)
        return Page[profile_schema.ProfileResponse](**empty_page(params, "Failed to fetch users"))

    locations = await enrichment.locations_for_profiles(session, rows)
    data = decode_rows(rows, lambda profile: to_profile_response(profile, locations.value), "profiles")
    return Page[profile_schema.ProfileResponse](**page_fields(params, data, total_count))


async def get_all_profiles(session: AsyncSession) -> list[profile_schema.ProfileResponse]:
    """클라이언트 측 테이블용 사용자 일괄 조회 (실패 시 빈 목록)"""
    try:
        rows = list(await profile_crud.get_active_profiles(session, settings.bulk_fetch_limit))
    except SQLAlchemyError as e:
        logger.error(f"사용자 일괄 조회 실패: {e.__class__.__name__}", exc_info=True)
        return []
    locations = await enrichment.locations_for_profiles(session, rows)
    return decode_rows(rows, lambda profile: to_profile_response(profile, locations.value), "profiles")


async def _fallback_count(session: AsyncSession, label: str, counter, profile_id: str, stored: int) -> int:
    """관계 테이블에서 다시 센 값 (실패하면 저장된 값 유지)"""
    try:
        return await counter(session, profile_id)
    except SQLAlchemyError as e:
        logger.warning(f"{label} 재집계 실패: profile_id={profile_id}, error={e.__class__.__name__}")
        return stored


async def _location_ref(session: AsyncSession, model: type, location_id: int | None) -> profile_schema.LocationRef | None:
    if location_id is None:
        return None
    result = await enrichment.fetch_by_ids(session, model, [location_id])
    row = result.value.get(location_id)
    return profile_schema.LocationRef.model_validate(row) if row is not None else None


async def get_profile_detail(session: AsyncSession, profile_id: str) -> profile_schema.ProfileDetailResponse:
    """사용자 상세 조회

    저장된 팔로잉/팔로워 수가 모두 0이면 follows에서, 친구 수가 0이면
    수락된 friendships에서 다시 센다.
    """
    try:
        profile = await profile_crud.get_profile_by_id(session, profile_id)
    except SQLAlchemyError as e:
        logger.error(f"사용자 상세 조회 실패: profile_id={profile_id}, {e.__class__.__name__}", exc_info=True)
        raise DataFetchError("user") from e
    if profile is None:
        raise ProfileNotFoundError(profile_id)

    following = profile.following_count or 0
    followers = profile.followers_count or 0
    friends = profile.friends_count or 0
    if following == 0 and followers == 0:
        following = await _fallback_count(session, "팔로잉", profile_crud.count_following, profile_id, following)
        followers = await _fallback_count(session, "팔로워", profile_crud.count_followers, profile_id, followers)
    if friends == 0:
        friends = await _fallback_count(session, "친구", profile_crud.count_friends, profile_id, friends)

    country = await _location_ref(session, Country, profile.country_id)
    state = await _location_ref(session, State, profile.state_id)
    city = await _location_ref(session, City, profile.city_id)
    locations = enrichment.ProfileLocations(
        states={state.id: state.name} if state else {},
        cities={city.id: city.name} if city else {},
    )

    base = to_profile_response(profile, locations)
    return profile_schema.ProfileDetailResponse(
        **base.model_dump(),
        following_count=following,
        followers_count=followers,
        friends_count=friends,
        country_ref=country,
        state_ref=state,
        city_ref=city,
    )


def _participations(rows: list[tuple], user_id: str) -> list[tuple[Any, str | None, Participant]]:
    """세션마다 사용자의 첫 참가 기록 하나씩 (quiz_id, application, 참가 기록)"""
    decoded = decode_rows(
        rows,
        lambda row: (row[0], row[1], decode_list(Participant, row[2])),
        "game_sessions",
    )
    played = []
    for quiz_id, application, participants in decoded:
        participant = next((p for p in participants if p.user_id == user_id), None)
        if participant is not None:
            played.append((quiz_id, application, participant))
    return played


async def get_played_quizzes(session: AsyncSession, user_id: str) -> profile_schema.PlayedQuizListResponse:
    """사용자가 가장 많이 플레이한 퀴즈 (평균 점수 포함)"""
    try:
        rows = list(await game_session_crud.get_all_participations(session))
    except SQLAlchemyError as e:
        logger.error(f"플레이 기록 조회 실패: user_id={user_id}, {e.__class__.__name__}", exc_info=True)
        return profile_schema.PlayedQuizListResponse(error="Failed to fetch played quizzes")

    scores: dict[str, list[int | float]] = defaultdict(list)
    for quiz_id, _, participant in _participations(rows, user_id):
        if quiz_id:
            scores[quiz_id].append(participant.score or 0)

    play_counts = Counter({quiz_id: len(values) for quiz_id, values in scores.items()})
    top = aggregation.top_n(play_counts, PLAYED_QUIZ_LIMIT)
    quizzes = await enrichment.quizzes_by_id(session, (quiz_id for quiz_id, _ in top))
    data = [
        profile_schema.PlayedQuiz(
            id=quiz_id,
            title=quizzes.value[quiz_id].title if quiz_id in quizzes.value else UNTITLED_QUIZ,
            play_count=count,
            avg_score=aggregation.js_round(sum(scores[quiz_id]) / count),
        )
        for quiz_id, count in top
    ]
    return profile_schema.PlayedQuizListResponse(data=data, error=quizzes.error)


async def get_created_quizzes(session: AsyncSession, user_id: str) -> profile_schema.CreatedQuizListResponse:
    """사용자가 만든 최근 퀴즈"""
    try:
        rows = await quiz_crud.get_quizzes_by_creator(session, user_id, CREATED_QUIZ_LIMIT)
    except SQLAlchemyError as e:
        logger.error(f"작성 퀴즈 조회 실패: user_id={user_id}, {e.__class__.__name__}", exc_info=True)
        return profile_schema.CreatedQuizListResponse(error="Failed to fetch created quizzes")

    data = [
        profile_schema.CreatedQuiz(
            id=quiz.id,
            title=quiz.title,
            category=quiz.category,
            question_count=len(quiz.questions) if isinstance(quiz.questions, list) else 0,
            created_at=quiz.created_at,
        )
        for quiz in rows
    ]
    return profile_schema.CreatedQuizListResponse(data=data)


async def get_game_activity(session: AsyncSession, user_id: str) -> profile_schema.GameActivityResponse:
    """진행한 세션 수, 참가한 게임 수, 자주 쓴 앱, 최근 진행 세션"""
    try:
        hosted = list(await game_session_crud.get_sessions_hosted_by(session, user_id))
        rows = list(await game_session_crud.get_all_participations(session))
    except SQLAlchemyError as e:
        logger.error(f"게임 활동 조회 실패: user_id={user_id}, {e.__class__.__name__}", exc_info=True)
        return profile_schema.GameActivityResponse(error="Failed to fetch game activity")

    played = _participations(rows, user_id)
    applications = Counter(application or "Unknown" for _, application, _ in played)
    recent = decode_rows(
        hosted[:RECENT_SESSION_LIMIT],
        lambda row: profile_schema.RecentHostedSession(
            id=row.id,
            game_pin=row.game_pin,
            status=row.status,
            application=row.application,
            created_at=row.created_at,
            participant_count=len(decode_list(Participant, row.participants)),
        ),
        "game_sessions",
    )
    activity = profile_schema.GameActivity(
        total_sessions_hosted=len(hosted),
        total_games_played=len(played),
        top_applications=[
            CountItem(name=name, count=count)
            for name, count in aggregation.top_n(applications, TOP_APPLICATION_LIMIT)
        ],
        recent_sessions=recent,
    )
    return profile_schema.GameActivityResponse(data=activity)


async def update_profile(
    session: AsyncSession,
    profile_id: str,
    request: profile_schema.ProfileUpdateRequest,
) -> MutationResponse:
    """사용자 역할/이름 수정"""
    values = request.model_dump(exclude_unset=True)
    if not values:
        return MutationResponse()
    return await run_mutation(
        session,
        "update user",
        lambda: common_crud.update_by_id(session, Profile, profile_id, values, active_only=True),
        not_found="User not found",
    )


async def block_profile(session: AsyncSession, profile_id: str) -> MutationResponse:
    """사용자 차단"""
    values = {"is_blocked": True, "blocked_at": datetime.now(timezone.utc)}
    return await run_mutation(
        session,
        "block user",
        lambda: common_crud.update_by_id(session, Profile, profile_id, values, active_only=True),
        not_found="User not found",
    )


async def unblock_profile(session: AsyncSession, profile_id: str) -> MutationResponse:
    """사용자 차단 해제"""
    values = {"is_blocked": False, "blocked_at": None}
    return await run_mutation(
        session,
        "unblock user",
        lambda: common_crud.update_by_id(session, Profile, profile_id, values, active_only=True),
        not_found="User not found",
    )


async def soft_delete_profile(session: AsyncSession, profile_id: str) -> MutationResponse:
    """사용자를 휴지통으로 이동"""
    return await run_mutation(
        session,
        "move user to trash",
        lambda: common_crud.soft_delete(session, Profile, profile_id),
        not_found="User not found",
    )
