from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from app.schemas.common import CountItem
from app.schemas.game_session import TopHost


class GameDateRange(BaseModel):
    """앱별 통계 기간 (created_at 기준, 양 끝 포함)"""
    start_date: datetime | None = None
    end_date: datetime | None = None

    @model_validator(mode="after")
    def check_order(self) -> "GameDateRange":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class GameApplication(BaseModel):
    """앱(application)별 세션 요약"""
    name: str
    total_sessions: int = 0
    finished_sessions: int = 0
    active_sessions: int = 0
    unique_hosts: int = 0
    total_players: int = 0
    first_session: datetime | None = None
    last_session: datetime | None = None


class GameApplicationListResponse(BaseModel):
    data: list[GameApplication] = Field(default_factory=list)
    error: str | None = None


class GameDetailSession(BaseModel):
    id: str
    quiz_id: str | None = None
    quiz_title: str
    quiz_category: str | None = None
    host_id: str | None = None
    game_pin: str | None = None
    status: str | None = None
    difficulty: str | None = None
    total_time_minutes: int | None = None
    participant_count: int = 0
    created_at: datetime | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None


class TopQuiz(BaseModel):
    title: str
    category: str | None = None
    count: int


class DifficultyCount(BaseModel):
    difficulty: str
    count: int


class GameDetailStats(BaseModel):
    total_sessions: int = 0
    total_players: int = 0
    unique_hosts: int = 0
    finished_sessions: int = 0
    active_sessions: int = 0
    waiting_sessions: int = 0
    avg_players_per_session: int = 0
    avg_duration_minutes: int = 0
    top_quizzes: list[TopQuiz] = Field(default_factory=list)
    top_hosts: list[TopHost] = Field(default_factory=list)
    difficulty_breakdown: list[DifficultyCount] = Field(default_factory=list)


class GameDetailResponse(BaseModel):
    """앱 상세 통계 응답 스키마"""
    name: str
    stats: GameDetailStats = Field(default_factory=GameDetailStats)
    sessions: list[GameDetailSession] = Field(default_factory=list)
    error: str | None = None


class PlayerLocation(BaseModel):
    country: str
    iso3: str | None = None
    numeric_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    count: int


class PlayerDemographics(BaseModel):
    """앱 플레이어의 국가/학년/성별 분포"""
    locations: list[PlayerLocation] = Field(default_factory=list)
    grades: list[CountItem] = Field(default_factory=list)
    genders: list[CountItem] = Field(default_factory=list)
    error: str | None = None
