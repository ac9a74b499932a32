from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from app.schemas.common import ListParams

MemberRole = Literal["owner", "admin", "member"]


class GroupMember(BaseModel):
    """그룹 멤버 (members JSON 배열 항목)"""
    user_id: str
    role: str = "member"
    joined_at: datetime | None = None
    username: str | None = None
    fullname: str | None = None
    avatar_url: str | None = None


class GroupCreator(BaseModel):
    fullname: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    username: str | None = None
    state: str | None = None
    city: str | None = None


class GroupListParams(ListParams):
    """그룹 목록 필터"""
    page_size: int = Field(12, ge=1, le=100)
    status: str = "all"  # settings.status: 'public', 'private'
    category: str = ""


class GroupResponse(BaseModel):
    """그룹 목록 행 응답 스키마"""
    id: str
    name: str
    description: str | None = None
    avatar_url: str | None = None
    cover_url: str | None = None
    creator_id: str | None = None
    invite_code: str | None = None
    category: str | None = None
    settings: dict[str, Any] = Field(default_factory=dict)
    member_count: int = 0
    created_at: datetime | None = None
    creator: GroupCreator | None = None


class GroupDetailResponse(GroupResponse):
    """그룹 상세 응답 스키마 (멤버 보강 포함)"""
    members: list[GroupMember] = Field(default_factory=list)


class GroupMemberListParams(ListParams):
    """그룹 멤버 목록 필터 (메모리 내 처리)"""
    page_size: int = Field(10, ge=1, le=100)
    role: str = "all"


class GroupUpdateRequest(BaseModel):
    """그룹 수정 요청 스키마"""
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    status: Literal["public", "private"] | None = Field(None, description="settings.status 값")
    category: str | None = None


class MemberRoleUpdateRequest(BaseModel):
    role: MemberRole
