"""여러 테이블에 공통인 단일 행 변경 쿼리"""
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession


async def update_by_id(
    session: AsyncSession,
    model: type,
    row_id: Any,
    values: dict[str, Any],
    active_only: bool = False,
) -> bool:
    """ID로 한 행 업데이트 (대상 행이 있었으면 True)"""
    stmt = update(model).where(model.id == row_id).values(**values)
    if active_only:
        stmt = stmt.where(model.deleted_at.is_(None))
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount > 0


async def soft_delete(session: AsyncSession, model: type, row_id: Any) -> bool:
    """deleted_at 기록 (이미 휴지통에 있으면 False)"""
    stmt = (
        update(model)
        .where(model.id == row_id, model.deleted_at.is_(None))
        .values(deleted_at=datetime.now(timezone.utc))
    )
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount > 0


async def restore(session: AsyncSession, model: type, row_id: Any) -> bool:
    """휴지통 항목 복원 (deleted_at을 다시 NULL로)"""
    stmt = (
        update(model)
        .where(model.id == row_id, model.deleted_at.is_not(None))
        .values(deleted_at=None)
    )
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount > 0


async def purge(session: AsyncSession, model: type, row_id: Any) -> bool:
    """휴지통 항목 영구 삭제"""
    stmt = delete(model).where(model.id == row_id, model.deleted_at.is_not(None))
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount > 0


async def delete_by_id(session: AsyncSession, model: type, row_id: Any) -> bool:
    """ID로 한 행 삭제 (휴지통을 거치지 않는 테이블용)"""
    result = await session.execute(delete(model).where(model.id == row_id))
    await session.commit()
    return result.rowcount > 0


async def compare_and_swap(
    session: AsyncSession,
    model: type,
    row_id: Any,
    expected_version: int,
    values: dict[str, Any],
) -> bool:
    """version이 읽은 값과 같을 때만 업데이트하고 version 증가 (다른 쓰기가 먼저 끝났으면 False)"""
    stmt = (
        update(model)
        .where(model.id == row_id, model.version == expected_version)
        .values(**values, version=expected_version + 1)
    )
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount > 0
