from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ListParams(BaseModel):
    """목록 화면 공통 필터 상태 (URL 쿼리 파라미터와 1:1 대응)"""
    page: int = Field(1, ge=1, description="페이지 번호 (1부터 시작)")
    page_size: int = Field(15, ge=1, le=100, description="페이지 크기")
    search: str = Field("", description="대소문자 무시 부분 일치 검색어")
    sort: str = Field("newest", description="정렬 키")

    def to_query(self) -> dict[str, str]:
        """기본값과 다른 필터만 쿼리 문자열 dict로 변환 (북마크/공유 URL 재현용)"""
        defaults = type(self)()
        query = {}
        for name, value in self.model_dump().items():
            if value != getattr(defaults, name):
                query[name] = str(value)
        return query


class Page(BaseModel, Generic[T]):
    """목록 조회 응답 스키마 (테이블 컴포넌트 읽기 계약)"""
    data: list[T]
    total_count: int
    total_pages: int
    current_page: int
    filters: dict[str, Any] = Field(default_factory=dict, description="이 결과를 만든 필터 값")
    error: str | None = None


class MutationResponse(BaseModel):
    """변경 작업 응답 스키마 (error가 None이면 성공)"""
    error: str | None = None


class ConfirmRequest(BaseModel):
    """파괴적 작업 확인 문구 요청 스키마"""
    confirmation: str = Field(..., description='정확히 입력해야 하는 확인 문구 (예: "Move to Trash")')


class ProfileSummary(BaseModel):
    """보강(enrichment)용 프로필 요약"""
    id: str
    username: str | None = None
    email: str | None = None
    fullname: str | None = None
    avatar_url: str | None = None

    model_config = {"from_attributes": True}


class CountItem(BaseModel):
    """이름별 집계 항목"""
    name: str
    count: int


class CreatorSummary(BaseModel):
    fullname: str | None = None
    email: str | None = None
