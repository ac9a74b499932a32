from typing import Any, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.query_builder import apply_ilike_equals, apply_search, apply_sort, paginate
from app.models.report import Report
from app.schemas.report import ReportListParams

REPORT_SORTS = {
    "newest": [Report.created_at.desc(), Report.id],
    "oldest": [Report.created_at.asc(), Report.id],
}


def build_report_list_query(params: ReportListParams) -> Select:
    """신고 목록 필터/정렬 쿼리"""
    stmt = select(Report)
    stmt = apply_search(stmt, params.search, Report.title, Report.description)
    stmt = apply_ilike_equals(stmt, Report.status, params.status)
    stmt = apply_ilike_equals(stmt, Report.report_type, params.type)
    return apply_sort(stmt, params.sort, REPORT_SORTS)


async def list_reports(session: AsyncSession, params: ReportListParams) -> tuple[list[Report], int]:
    """신고 목록 한 페이지와 전체 개수 조회"""
    return await paginate(session, build_report_list_query(params), params.page, params.page_size)


async def count_reports_by_status(session: AsyncSession) -> dict[str, int]:
    """상태별 신고 수 (상태 값은 소문자, 공백은 '_'로 정규화)"""
    status = func.lower(func.coalesce(Report.status, "pending"))
    stmt = select(status, func.count()).group_by(status)
    counts: dict[str, int] = {}
    for value, count in (await session.execute(stmt)).all():
        key = value.replace(" ", "_")
        counts[key] = counts.get(key, 0) + count
    return counts


async def get_report_by_id(session: AsyncSession, report_id: str) -> Report | None:
    """ID로 신고 조회"""
    result = await session.execute(select(Report).where(Report.id == report_id))
    return result.scalar_one_or_none()


async def get_all_reports(session: AsyncSession, limit: int) -> Sequence[Report]:
    """신고 최신순 일괄 조회"""
    stmt = select(Report).order_by(Report.created_at.desc(), Report.id).limit(limit)
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_messages_snapshot(session: AsyncSession, report_id: str) -> tuple[list[dict[str, Any]], int] | None:
    """메시지 배열과 현재 version (compare-and-swap 기준값)"""
    stmt = select(Report.messages, Report.version).where(Report.id == report_id)
    row = (await session.execute(stmt)).one_or_none()
    if row is None:
        return None
    messages, version = row
    return list(messages or []), version
