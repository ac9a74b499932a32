from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, JSONType, TimestampMixin, uuid_pk


class Report(Base, TimestampMixin):
    __tablename__ = "reports"

    id: Mapped[str] = uuid_pk()
    title: Mapped[str | None] = mapped_column(String(255), default=None)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    report_type: Mapped[str | None] = mapped_column(String(50), default=None)
    reported_content_type: Mapped[str | None] = mapped_column(String(50), default=None)
    reported_content_id: Mapped[str | None] = mapped_column(String(36), default=None)
    reporter_id: Mapped[str | None] = mapped_column(ForeignKey("profiles.id", ondelete="SET NULL"), default=None, index=True)
    reported_user_id: Mapped[str | None] = mapped_column(ForeignKey("profiles.id", ondelete="SET NULL"), default=None, index=True)
    status: Mapped[str | None] = mapped_column(String(20), default="pending", index=True)  # 'pending', 'in_progress', 'resolved'
    priority: Mapped[str | None] = mapped_column(String(20), default=None)
    admin_notes: Mapped[str | None] = mapped_column(Text, default=None)
    evidence_url: Mapped[str | None] = mapped_column(default=None)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    messages: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, default=list)
    # messages 배열 갱신용 낙관적 잠금 버전
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
