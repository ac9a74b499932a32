from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import ListParams, Page, ProfileSummary

ReportStatus = Literal["pending", "in_progress", "resolved"]
SenderType = Literal["admin", "user"]


class ReportMessage(BaseModel):
    """신고 대화 메시지 (messages JSON 배열 항목)"""
    id: str
    sender_id: str | None = None
    sender_type: SenderType
    content: str
    created_at: datetime


class ReportListParams(ListParams):
    """신고 목록 필터"""
    status: str = "all"
    type: str = "all"


class ReportResponse(BaseModel):
    """신고 목록 행 응답 스키마"""
    id: str
    title: str | None = None
    description: str | None = None
    report_type: str | None = None
    reported_content_type: str | None = None
    reported_content_id: str | None = None
    reporter_id: str | None = None
    reported_user_id: str | None = None
    status: str | None = None
    priority: str | None = None
    admin_notes: str | None = None
    evidence_url: str | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    reporter: ProfileSummary | None = None
    reported_user: ProfileSummary | None = None


class ReportDetailResponse(ReportResponse):
    messages: list[ReportMessage] = Field(default_factory=list)


class ReportStats(BaseModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    resolved: int = 0


class ReportListResponse(Page[ReportResponse]):
    """신고 목록 응답 스키마 (상태별 통계 포함)"""
    stats: ReportStats = Field(default_factory=ReportStats)


class ReportUpdateRequest(BaseModel):
    status: ReportStatus | None = None
    admin_notes: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def reject_null_status(cls, value: Any) -> Any:
        """상태는 생략할 수 있지만 null로 지울 수는 없음"""
        if value is None:
            raise ValueError("status cannot be null")
        return value


class MessageCreateRequest(BaseModel):
    content: str = Field(..., min_length=1)
    sender_type: SenderType = "admin"


class MessageSendResponse(BaseModel):
    error: str | None = None
    message: ReportMessage | None = None
