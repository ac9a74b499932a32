"""단일 행 변경 작업 실행 (예외를 밖으로 던지지 않고 {error} 반환)"""
import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.common import MutationResponse

logger = logging.getLogger(__name__)


async def run_mutation(
    session: AsyncSession,
    label: str,
    operation: Callable[[], Awaitable[bool]],
    not_found: str,
) -> MutationResponse:
    """변경 작업 실행

    Args:
        session: 데이터베이스 세션
        label: 로그/오류 메시지용 작업 이름 (예: "block quiz")
        operation: 대상 행이 있었으면 True를 반환하는 작업
        not_found: 대상 행이 없을 때 반환할 오류 메시지
    """
    try:
        found = await operation()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"{label} 실패: {e.__class__.__name__}", exc_info=True)
        return MutationResponse(error=f"Failed to {label}")

    if not found:
        logger.warning(f"{label} 대상 없음: {not_found}")
        return MutationResponse(error=not_found)

    logger.info(f"{label} 성공")
    return MutationResponse()
