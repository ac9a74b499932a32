from typing import Any, Sequence

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.query_builder import apply_search, apply_sort, is_unset, paginate
from app.models.group import Group
from app.schemas.group import GroupListParams

GROUP_SORTS = {
    "newest": [Group.created_at.desc(), Group.id],
    "oldest": [Group.created_at.asc(), Group.id],
    "name": [Group.name.asc(), Group.id],
}

# 영문 카테고리 → 저장된 값의 표기 (레거시 인도네시아어 포함)
CATEGORY_SYNONYMS: dict[str, list[str]] = {
    "Campus": ["Kampus", "Campus"],
    "Office": ["Kantor", "Office"],
    "Family": ["Keluarga", "Family"],
    "Community": ["Komunitas", "Community"],
    "Mosque": ["Masjid/Musholla", "Masjid", "Musholla", "Mosque"],
    "Islamic Boarding School": ["Pesantren", "Islamic Boarding School"],
    "School": ["Sekolah", "School"],
    "General": ["Umum", "General"],
    "TPA/TPQ": ["TPA/TPQ"],
    "Other": ["Lainnya", "Other"],
}


def normalize_category(value: str | None) -> str:
    """저장된 카테고리 표기를 영문 카테고리로 정규화 (알 수 없으면 원래 값)"""
    if not value:
        return "Other"
    lowered = value.strip().lower()
    for category, synonyms in CATEGORY_SYNONYMS.items():
        if any(lowered == synonym.lower() for synonym in synonyms):
            return category
    return value


def build_group_list_query(params: GroupListParams) -> Select:
    """그룹 목록 필터/정렬 쿼리"""
    stmt = select(Group).where(Group.deleted_at.is_(None))
    stmt = apply_search(stmt, params.search, Group.name, Group.description)
    if not is_unset(params.status):
        stmt = stmt.where(Group.settings["status"].as_string() == params.status)
    if not is_unset(params.category):
        synonyms = CATEGORY_SYNONYMS.get(params.category, [params.category])
        stmt = stmt.where(or_(*(Group.category.ilike(synonym) for synonym in synonyms)))
    return apply_sort(stmt, params.sort, GROUP_SORTS)


async def list_groups(session: AsyncSession, params: GroupListParams) -> tuple[list[Group], int]:
    """그룹 목록 한 페이지와 전체 개수 조회"""
    return await paginate(session, build_group_list_query(params), params.page, params.page_size)


async def get_group_by_id(session: AsyncSession, group_id: str, include_deleted: bool = False) -> Group | None:
    """ID로 그룹 조회"""
    stmt = select(Group).where(Group.id == group_id)
    if not include_deleted:
        stmt = stmt.where(Group.deleted_at.is_(None))
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_members_snapshot(session: AsyncSession, group_id: str) -> tuple[list[dict[str, Any]], int] | None:
    """멤버 배열과 현재 version (compare-and-swap 기준값)"""
    stmt = select(Group.members, Group.version).where(Group.id == group_id, Group.deleted_at.is_(None))
    row = (await session.execute(stmt)).one_or_none()
    if row is None:
        return None
    members, version = row
    return list(members or []), version


async def get_active_group_categories(session: AsyncSession) -> Sequence[str | None]:
    """휴지통에 없는 그룹의 카테고리 값"""
    result = await session.execute(select(Group.category).where(Group.deleted_at.is_(None)))
    return result.scalars().all()


async def get_deleted_groups(session: AsyncSession) -> Sequence[Group]:
    """휴지통의 그룹 (최근 삭제순)"""
    stmt = select(Group).where(Group.deleted_at.is_not(None)).order_by(Group.deleted_at.desc())
    result = await session.execute(stmt)
    return result.scalars().all()
