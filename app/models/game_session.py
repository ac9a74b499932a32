from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, JSONType, TimestampMixin, uuid_pk


class GameSession(Base, TimestampMixin):
    __tablename__ = "game_sessions"

    id: Mapped[str] = uuid_pk()
    game_pin: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    host_id: Mapped[str | None] = mapped_column(ForeignKey("profiles.id", ondelete="SET NULL"), default=None, index=True)
    quiz_id: Mapped[str | None] = mapped_column(ForeignKey("quizzes.id", ondelete="SET NULL"), default=None, index=True)
    status: Mapped[str | None] = mapped_column(String(20), default="waiting", index=True)  # 'waiting', 'active', 'playing', 'finished'
    participants: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, default=list)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    total_time_minutes: Mapped[int | None] = mapped_column(Integer, default=None)
    total_questions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    current_questions: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, default=list)
    quiz_detail: Mapped[dict[str, Any] | None] = mapped_column(JSONType, default=None)
    application: Mapped[str | None] = mapped_column(String(100), default=None, index=True)
    difficulty: Mapped[str | None] = mapped_column(String(20), default=None)
