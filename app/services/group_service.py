import logging
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import common as common_crud, group as group_crud
from app.exceptions import DataFetchError, GroupNotFoundError
from app.models.group import Group
from app.models.profile import Profile
from app.schemas import group as group_schema
from app.schemas.common import CountItem, MutationResponse, Page
from app.services import aggregation, enrichment
from app.services.assets import resolve_asset_url
from app.services.decoding import decode_list, decode_rows
from app.services.mutations import run_mutation
from app.services.table import empty_page, filter_in_memory, page_fields, paginate_in_memory

logger = logging.getLogger(__name__)

MembersTransform = Callable[[list[dict[str, Any]]], list[dict[str, Any]] | None]


def to_group_creator(profile: Profile | None, locations: enrichment.ProfileLocations) -> group_schema.GroupCreator | None:
    if profile is None:
        return None
    return group_schema.GroupCreator(
        fullname=profile.fullname,
        email=profile.email,
        avatar_url=resolve_asset_url(profile.avatar_url),
        username=profile.username,
        state=locations.states.get(profile.state_id),
        city=locations.cities.get(profile.city_id),
    )


def to_group_response(
    group: Group,
    creator: Profile | None,
    locations: enrichment.ProfileLocations,
) -> group_schema.GroupResponse:
    """그룹 행 → 목록 응답 (멤버 배열은 개수만)"""
    if group.members is not None and not isinstance(group.members, list):
        raise ValueError("members must be a JSON array")
    return group_schema.GroupResponse(
        id=group.id,
        name=group.name,
        description=group.description,
        avatar_url=resolve_asset_url(group.avatar_url),
        cover_url=resolve_asset_url(group.cover_url),
        creator_id=group.creator_id,
        invite_code=group.invite_code,
        category=group.category,
        settings=group.settings or {},
        member_count=len(group.members or []),
        created_at=group.created_at,
        creator=to_group_creator(creator, locations),
    )


async def _creators_with_locations(
    session: AsyncSession,
    groups: list[Group],
) -> tuple[dict[str, Profile], enrichment.ProfileLocations]:
    creators = await enrichment.profiles_by_id(session, (group.creator_id for group in groups))
    locations = await enrichment.locations_for_profiles(session, creators.value.values())
    return creators.value, locations.value


async def list_groups(
    session: AsyncSession,
    params: group_schema.GroupListParams,
) -> Page[group_schema.GroupResponse]:
    """그룹 목록 조회 (작성자와 작성자 지역 보강)"""
    try:
        rows, total_count = await group_crud.list_groups(session, params)
    except SQLAlchemyError as e:
        logger.error(f"그룹 목록 조회 실패: {e.__class__.__name__}", exc_info=True)
        return Page[group_schema.GroupResponse](**empty_page(params, "Failed to fetch groups"))

    creators, locations = await _creators_with_locations(session, rows)
    data = decode_rows(
        rows,
        lambda group: to_group_response(group, creators.get(group.creator_id), locations),
        "groups",
    )
    return Page[group_schema.GroupResponse](**page_fields(params, data, total_count))


def enrich_members(
    members: list[group_schema.GroupMember],
    profiles: dict[str, Profile],
) -> list[group_schema.GroupMember]:
    """멤버 항목에 프로필 이름/아바타 결합"""
    enriched = []
    for member in members:
        profile = profiles.get(member.user_id)
        if profile is None:
            enriched.append(member)
            continue
        enriched.append(member.model_copy(update={
            "username": profile.username,
            "fullname": profile.fullname,
            "avatar_url": resolve_asset_url(profile.avatar_url),
        }))
    return enriched


async def get_group_detail(session: AsyncSession, group_id: str) -> group_schema.GroupDetailResponse:
    """그룹 상세 조회 (멤버 프로필 보강)"""
    try:
        group = await group_crud.get_group_by_id(session, group_id)
    except SQLAlchemyError as e:
        logger.error(f"그룹 상세 조회 실패: group_id={group_id}, {e.__class__.__name__}", exc_info=True)
        raise DataFetchError("group") from e
    if group is None:
        raise GroupNotFoundError(group_id)

    creators, locations = await _creators_with_locations(session, [group])
    try:
        members = decode_list(group_schema.GroupMember, group.members)
    except (ValidationError, ValueError) as e:
        logger.warning(f"그룹 멤버 형식 오류: group_id={group_id}, error={e.__class__.__name__}")
        members = []
    profiles = await enrichment.profiles_by_id(session, (member.user_id for member in members))

    base = to_group_response(group, creators.get(group.creator_id), locations)
    return group_schema.GroupDetailResponse(
        **base.model_dump(),
        members=enrich_members(members, profiles.value),
    )


async def list_group_members(
    session: AsyncSession,
    group_id: str,
    params: group_schema.GroupMemberListParams,
) -> Page[group_schema.GroupMember]:
    """그룹 멤버 목록 (역할/검색 필터, 가입일 최신순, 메모리 내 페이지네이션)"""
    detail = await get_group_detail(session, group_id)
    members = detail.members
    if params.role and params.role != "all":
        members = [member for member in members if member.role == params.role]
    members = filter_in_memory(members, params.search, ["fullname", "username"])
    min_time = datetime.min.replace(tzinfo=timezone.utc)
    members.sort(
        key=lambda member: aggregation.as_utc(member.joined_at) if member.joined_at else min_time,
        reverse=True,
    )
    return paginate_in_memory(members, params.page, params.page_size, params.model_dump())


async def update_group(
    session: AsyncSession,
    group_id: str,
    request: group_schema.GroupUpdateRequest,
) -> MutationResponse:
    """그룹 이름/설명/카테고리/공개 상태 수정"""
    values: dict[str, Any] = request.model_dump(exclude_unset=True, exclude={"status"})
    try:
        group = await group_crud.get_group_by_id(session, group_id)
    except SQLAlchemyError as e:
        logger.error(f"그룹 조회 실패: group_id={group_id}, {e.__class__.__name__}", exc_info=True)
        return MutationResponse(error="Failed to update group")
    if group is None:
        return MutationResponse(error="Group not found")
    if request.status is not None:
        values["settings"] = {**(group.settings or {}), "status": request.status}
    if not values:
        return MutationResponse()

    return await run_mutation(
        session,
        "update group",
        lambda: common_crud.update_by_id(session, Group, group_id, values, active_only=True),
        not_found="Group not found",
    )


async def soft_delete_group(session: AsyncSession, group_id: str) -> MutationResponse:
    """그룹을 휴지통으로 이동"""
    return await run_mutation(
        session,
        "move group to trash",
        lambda: common_crud.soft_delete(session, Group, group_id),
        not_found="Group not found",
    )


async def _rewrite_members(
    session: AsyncSession,
    group_id: str,
    label: str,
    transform: MembersTransform,
) -> MutationResponse:
    """멤버 배열을 읽고 변환한 뒤 version이 그대로일 때만 저장"""
    try:
        snapshot = await group_crud.get_members_snapshot(session, group_id)
        if snapshot is None:
            return MutationResponse(error="Group not found")
        members, version = snapshot
        updated = transform(members)
        if updated is None:
            return MutationResponse(error="Member not found")
        swapped = await common_crud.compare_and_swap(session, Group, group_id, version, {"members": updated})
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"{label} 실패: group_id={group_id}, {e.__class__.__name__}", exc_info=True)
        return MutationResponse(error=f"Failed to {label}")

    if not swapped:
        logger.warning(f"{label} 충돌: group_id={group_id}, version={version}")
        return MutationResponse(error="Group was modified concurrently, please retry")
    logger.info(f"{label} 성공: group_id={group_id}")
    return MutationResponse()


async def remove_member(session: AsyncSession, group_id: str, user_id: str) -> MutationResponse:
    """그룹에서 멤버 제거"""

    def transform(members: list[dict[str, Any]]) -> list[dict[str, Any]] | None:
        remaining = [m for m in members if not (isinstance(m, dict) and m.get("user_id") == user_id)]
        return remaining if len(remaining) < len(members) else None

    return await _rewrite_members(session, group_id, "remove group member", transform)


async def update_member_role(
    session: AsyncSession,
    group_id: str,
    user_id: str,
    role: group_schema.MemberRole,
) -> MutationResponse:
    """멤버 역할 변경 (owner/admin/member)"""

    def transform(members: list[dict[str, Any]]) -> list[dict[str, Any]] | None:
        found = False
        updated = []
        for member in members:
            if isinstance(member, dict) and member.get("user_id") == user_id:
                member = {**member, "role": role}
                found = True
            updated.append(member)
        return updated if found else None

    return await _rewrite_members(session, group_id, "update member role", transform)


async def get_category_counts(session: AsyncSession) -> list[CountItem]:
    """휴지통에 없는 그룹의 카테고리별 개수 (영문 카테고리로 정규화)"""
    try:
        categories = await group_crud.get_active_group_categories(session)
    except SQLAlchemyError as e:
        logger.error(f"그룹 카테고리 집계 실패: {e.__class__.__name__}", exc_info=True)
        return []
    counts = Counter(group_crud.normalize_category(category) for category in categories)
    return [CountItem(name=name, count=count) for name, count in aggregation.top_n(counts, len(counts))]
