from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.common import CountItem, ListParams


class LocationRef(BaseModel):
    id: int
    name: str
    latitude: float | None = None
    longitude: float | None = None

    model_config = {"from_attributes": True}


class ProfileListParams(ListParams):
    """사용자 목록 필터"""
    role: str = "all"
    status: str = "all"  # 'active', 'blocked'


class ProfileResponse(BaseModel):
    """사용자 목록 행 응답 스키마"""
    id: str
    username: str | None = None
    email: str | None = None
    fullname: str | None = None
    avatar_url: str | None = None
    role: str | None = None
    last_active: datetime | None = None
    is_blocked: bool | None = None
    blocked_at: datetime | None = None
    organization: str | None = None
    phone: str | None = None
    country_id: int | None = None
    state_id: int | None = None
    city_id: int | None = None
    state: str | None = None
    city: str | None = None
    created_at: datetime | None = None


class ProfileDetailResponse(ProfileResponse):
    """사용자 상세 응답 스키마"""
    following_count: int = 0
    followers_count: int = 0
    friends_count: int = 0
    country_ref: LocationRef | None = None
    state_ref: LocationRef | None = None
    city_ref: LocationRef | None = None


class PlayedQuiz(BaseModel):
    id: str
    title: str
    play_count: int
    avg_score: int


class CreatedQuiz(BaseModel):
    id: str
    title: str
    category: str | None = None
    question_count: int = 0
    created_at: datetime | None = None


class RecentHostedSession(BaseModel):
    id: str
    game_pin: str
    status: str | None = None
    application: str | None = None
    created_at: datetime | None = None
    participant_count: int = 0


class GameActivity(BaseModel):
    total_sessions_hosted: int = 0
    total_games_played: int = 0
    top_applications: list[CountItem] = Field(default_factory=list)
    recent_sessions: list[RecentHostedSession] = Field(default_factory=list)


class ListResponse(BaseModel):
    error: str | None = None


class PlayedQuizListResponse(ListResponse):
    data: list[PlayedQuiz] = Field(default_factory=list)


class CreatedQuizListResponse(ListResponse):
    data: list[CreatedQuiz] = Field(default_factory=list)


class GameActivityResponse(ListResponse):
    data: GameActivity = Field(default_factory=GameActivity)


class ProfileUpdateRequest(BaseModel):
    """사용자 수정 요청 스키마"""
    role: Literal["user", "admin"] | None = None
    fullname: str | None = None
    username: str | None = None
