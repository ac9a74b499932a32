"""목록 테이블 상태: 필터 파라미터, 메모리 내 필터/페이지네이션, 재조회 순서 보장"""
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, Generic, TypeVar

from app.schemas.common import ListParams, MutationResponse, Page
from app.services.aggregation import total_pages

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = TypeVar("P", bound=ListParams)


def filter_in_memory(rows: Iterable[T], search: str | None, fields: Sequence[str]) -> list[T]:
    """지정한 필드 중 하나라도 검색어를 포함하는 행 (대소문자 무시)"""
    rows = list(rows)
    if not search or not search.strip():
        return rows
    needle = search.strip().lower()

    def matches(row: Any) -> bool:
        for name in fields:
            value = row.get(name) if isinstance(row, dict) else getattr(row, name, None)
            if value and needle in str(value).lower():
                return True
        return False

    return [row for row in rows if matches(row)]


def paginate_in_memory(
    rows: Sequence[T],
    page: int,
    page_size: int,
    filters: dict[str, Any] | None = None,
) -> Page[T]:
    """이미 조회한 행을 메모리에서 페이지 단위로 자름"""
    page = max(page, 1)
    offset = (page - 1) * page_size
    return Page(
        data=list(rows[offset:offset + page_size]),
        total_count=len(rows),
        total_pages=total_pages(len(rows), page_size),
        current_page=page,
        filters=filters or {},
    )


class TableView(Generic[P, T]):
    """목록 화면 상태 보관 및 재조회

    조회마다 세대(generation) 번호를 붙여, 더 늦게 시작된 조회가 이미 있으면
    먼저 시작된 조회의 응답은 버린다.
    """

    def __init__(self, fetcher: Callable[[P], Awaitable[Page[T]]], params: P):
        self._fetcher = fetcher
        self.params = params
        self.page: Page[T] | None = None
        self._generation = 0

    async def load(self, params: P | None = None) -> Page[T] | None:
        """조회 후 최신 요청의 응답일 때만 상태 반영"""
        if params is not None:
            self.params = params
        self._generation += 1
        generation = self._generation
        requested = self.params

        page = await self._fetcher(requested)
        if generation != self._generation:
            logger.debug(f"오래된 응답 무시: generation={generation}, latest={self._generation}")
            return None
        self.page = page
        return page

    async def after_mutation(self, result: MutationResponse) -> Page[T] | None:
        """변경 성공 시 현재 필터로 재조회 (로컬 패치 없음)"""
        if result.error:
            return None
        return await self.load()

    def query_string(self) -> dict[str, str]:
        return self.params.to_query()


def empty_page(params: ListParams, error: str | None = None) -> dict[str, Any]:
    """조회 실패 시 반환하는 빈 페이지 필드"""
    return {
        "data": [],
        "total_count": 0,
        "total_pages": 0,
        "current_page": params.page,
        "filters": params.model_dump(),
        "error": error,
    }


def page_fields(params: ListParams, data: list[Any], total_count: int) -> dict[str, Any]:
    """조회 결과 페이지 필드"""
    return {
        "data": data,
        "total_count": total_count,
        "total_pages": total_pages(total_count, params.page_size),
        "current_page": params.page,
        "filters": params.model_dump(),
        "error": None,
    }
