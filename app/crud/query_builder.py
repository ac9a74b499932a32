"""목록 화면 공통 쿼리 빌더 (검색, 필터, 정렬, 페이지네이션)"""
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

ALL = "all"

SortMap = Mapping[str, Sequence[ColumnElement[Any]]]


def is_unset(value: str | None) -> bool:
    """필터 미적용 값인지 (빈 값 또는 'all')"""
    return value is None or value.strip() == "" or value == ALL


def apply_search(stmt: Select, search: str | None, *columns) -> Select:
    """여러 텍스트 컬럼에 대한 대소문자 무시 부분 일치 (OR)"""
    if not search or not search.strip():
        return stmt
    pattern = f"%{search.strip()}%"
    return stmt.where(or_(*(column.ilike(pattern) for column in columns)))


def apply_equals(stmt: Select, column, value: Any) -> Select:
    """'all'이 아닐 때 동등 비교 필터"""
    if isinstance(value, str) and is_unset(value):
        return stmt
    if value is None:
        return stmt
    return stmt.where(column == value)


def apply_ilike_equals(stmt: Select, column, value: str | None) -> Select:
    """'all'이 아닐 때 대소문자 무시 동등 비교 필터"""
    if is_unset(value):
        return stmt
    return stmt.where(column.ilike(value))


def apply_sort(stmt: Select, sort: str | None, sort_map: SortMap, default: str = "newest") -> Select:
    """정해진 정렬 키 중 하나를 적용 (알 수 없는 키는 기본 정렬)"""
    order_by = sort_map.get(sort or default) or sort_map[default]
    return stmt.order_by(*order_by)


async def paginate(
    session: AsyncSession,
    stmt: Select,
    page: int,
    page_size: int,
) -> tuple[list[Any], int]:
    """필터된 쿼리의 한 페이지와 전체 개수 조회

    Args:
        session: 데이터베이스 세션
        stmt: 필터/정렬이 적용된 select 문
        page: 페이지 번호 (1 미만은 1로 처리)
        page_size: 페이지 크기

    Returns:
        (페이지 행 목록, 전체 개수)
    """
    page = max(page, 1)
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total_count = await session.scalar(count_stmt) or 0

    offset = (page - 1) * page_size
    result = await session.execute(stmt.limit(page_size).offset(offset))
    return list(result.unique().scalars().all()), total_count
