from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import CountItem, ListParams, ProfileSummary


class Participant(BaseModel):
    """게임 세션 참가자 (participants JSON 배열 항목)"""
    user_id: str | None = None
    nickname: str | None = None
    score: int | float | None = None
    avatar_url: str | None = None
    started: datetime | None = None
    ended: datetime | None = None


class GameSessionListParams(ListParams):
    """게임 세션 목록 필터"""
    page_size: int = Field(10, ge=1, le=100)
    status: str = "all"
    application: str = "all"
    questions: str = "all"  # 정확한 문항 수
    duration: str = "all"  # 정확한 진행 시간(분)


class GameSessionResponse(BaseModel):
    """게임 세션 목록 행 응답 스키마"""
    id: str
    game_pin: str
    host_id: str | None = None
    quiz_id: str | None = None
    quiz_title: str
    category: str | None = None
    status: str
    created_at: datetime | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    participants: list[Participant] = Field(default_factory=list)
    participant_count: int = 0
    avg_score: int = 0
    max_score: int | float = 0
    host: ProfileSummary | None = None
    duration_minutes: int | None = None
    total_questions: int = 0
    application: str | None = None


class LeaderboardEntry(Participant):
    rank: int
    duration_ms: int | None = None


class GameSessionDetailResponse(GameSessionResponse):
    """게임 세션 상세 응답 스키마 (리더보드 포함)"""
    leaderboard: list[LeaderboardEntry] = Field(default_factory=list)


class StaleSessionResponse(BaseModel):
    """오래 대기 중인 세션 응답 스키마"""
    id: str
    game_pin: str
    quiz_title: str
    host_name: str
    host_id: str | None = None
    created_at: datetime | None = None
    waiting_duration_minutes: int
    participant_count: int
    application: str
    avatar_url: str | None = None


class StaleSessionListResponse(BaseModel):
    data: list[StaleSessionResponse]
    error: str | None = None


class ClearSessionsRequest(BaseModel):
    session_ids: list[str] = Field(..., description="삭제할 세션 ID 목록")


class ClearSessionsResponse(BaseModel):
    cleared: int
    error: str | None = None


class TrendPoint(BaseModel):
    date: str
    count: int


class TopHost(ProfileSummary):
    count: int


class RecentActivity(BaseModel):
    id: str
    created_at: datetime | None = None
    quiz_title: str
    total_questions: int = 0
    host: ProfileSummary | None = None


class DashboardKpi(BaseModel):
    total_sessions: int = 0
    total_participants: int = 0
    avg_duration: int = 0
    avg_questions: int = 0


class DashboardCharts(BaseModel):
    trend: list[TrendPoint] = Field(default_factory=list)
    apps: list[CountItem] = Field(default_factory=list)
    top_hosts: list[TopHost] = Field(default_factory=list)
    recent_activity: list[RecentActivity] = Field(default_factory=list)
    top_categories: list[CountItem] = Field(default_factory=list)
    top_states: list[CountItem] = Field(default_factory=list)
    top_cities: list[CountItem] = Field(default_factory=list)
    top_countries: list[CountItem] = Field(default_factory=list)


class GameDashboardResponse(BaseModel):
    """게임 대시보드 통계 응답 스키마"""
    time_range: str
    kpi: DashboardKpi = Field(default_factory=DashboardKpi)
    charts: DashboardCharts = Field(default_factory=DashboardCharts)
    error: str | None = None
