from typing import Sequence

from sqlalchemy import Select, false, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.query_builder import apply_ilike_equals, apply_search, paginate
from app.models.profile import Profile
from app.models.social import Follow, Friendship
from app.schemas.profile import ProfileListParams


def build_profile_list_query(params: ProfileListParams) -> Select:
    """사용자 목록 필터/정렬 쿼리 (최근 활동순, 활동 기록 없음은 뒤로)"""
    stmt = select(Profile).where(Profile.deleted_at.is_(None))
    stmt = apply_search(stmt, params.search, Profile.username, Profile.email, Profile.fullname)
    stmt = apply_ilike_equals(stmt, Profile.role, params.role)
    if params.status == "blocked":
        stmt = stmt.where(Profile.is_blocked.is_(True))
    elif params.status == "active":
        stmt = stmt.where(or_(Profile.is_blocked.is_(None), Profile.is_blocked == false()))
    return stmt.order_by(Profile.last_active.desc().nulls_last(), Profile.id)


async def list_profiles(session: AsyncSession, params: ProfileListParams) -> tuple[list[Profile], int]:
    """사용자 목록 한 페이지와 전체 개수 조회"""
    return await paginate(session, build_profile_list_query(params), params.page, params.page_size)


async def get_profile_by_id(session: AsyncSession, profile_id: str, include_deleted: bool = False) -> Profile | None:
    """ID로 사용자 조회"""
    stmt = select(Profile).where(Profile.id == profile_id)
    if not include_deleted:
        stmt = stmt.where(Profile.deleted_at.is_(None))
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_active_profiles(session: AsyncSession, limit: int) -> Sequence[Profile]:
    """휴지통에 없는 사용자 일괄 조회"""
    stmt = (
        select(Profile)
        .where(Profile.deleted_at.is_(None))
        .order_by(Profile.last_active.desc().nulls_last(), Profile.id)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_deleted_profiles(session: AsyncSession) -> Sequence[Profile]:
    """휴지통의 사용자 (최근 삭제순)"""
    stmt = select(Profile).where(Profile.deleted_at.is_not(None)).order_by(Profile.deleted_at.desc())
    result = await session.execute(stmt)
    return result.scalars().all()


async def count_following(session: AsyncSession, profile_id: str) -> int:
    stmt = select(func.count()).select_from(Follow).where(Follow.follower_id == profile_id)
    return await session.scalar(stmt) or 0


async def count_followers(session: AsyncSession, profile_id: str) -> int:
    stmt = select(func.count()).select_from(Follow).where(Follow.following_id == profile_id)
    return await session.scalar(stmt) or 0


async def count_friends(session: AsyncSession, profile_id: str) -> int:
    """수락된 친구 관계 수 (요청/수신 양방향)"""
    stmt = (
        select(func.count())
        .select_from(Friendship)
        .where(
            Friendship.status == "accepted",
            or_(Friendship.user_id == profile_id, Friendship.friend_id == profile_id),
        )
    )
    return await session.scalar(stmt) or 0
