from typing import Any

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, JSONType, SoftDeleteMixin, TimestampMixin, uuid_pk


class Group(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "groups"

    id: Mapped[str] = uuid_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    avatar_url: Mapped[str | None] = mapped_column(default=None)
    cover_url: Mapped[str | None] = mapped_column(default=None)
    creator_id: Mapped[str | None] = mapped_column(ForeignKey("profiles.id", ondelete="SET NULL"), default=None, index=True)
    invite_code: Mapped[str | None] = mapped_column(String(32), default=None)
    category: Mapped[str | None] = mapped_column(String(100), default=None)
    members: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, default=list)
    settings: Mapped[dict[str, Any] | None] = mapped_column(JSONType, default=dict)
    # members 배열 갱신용 낙관적 잠금 버전
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
