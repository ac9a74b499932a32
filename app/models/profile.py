from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, SoftDeleteMixin, TimestampMixin, uuid_pk


class Profile(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "profiles"

    id: Mapped[str] = uuid_pk()
    username: Mapped[str | None] = mapped_column(String(100), default=None, index=True)
    email: Mapped[str | None] = mapped_column(String(255), default=None, index=True)
    fullname: Mapped[str | None] = mapped_column(String(255), default=None)
    avatar_url: Mapped[str | None] = mapped_column(default=None)
    role: Mapped[str | None] = mapped_column(String(20), default="user")  # 'user', 'admin'
    last_active: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    is_blocked: Mapped[bool | None] = mapped_column(Boolean, default=False)
    blocked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    organization: Mapped[str | None] = mapped_column(default=None)
    phone: Mapped[str | None] = mapped_column(String(50), default=None)
    grade: Mapped[str | None] = mapped_column(String(50), default=None)
    gender: Mapped[str | None] = mapped_column(String(20), default=None)
    following_count: Mapped[int | None] = mapped_column(Integer, default=0)
    followers_count: Mapped[int | None] = mapped_column(Integer, default=0)
    friends_count: Mapped[int | None] = mapped_column(Integer, default=0)
    country_id: Mapped[int | None] = mapped_column(ForeignKey("countries.id"), default=None)
    state_id: Mapped[int | None] = mapped_column(ForeignKey("states.id"), default=None)
    city_id: Mapped[int | None] = mapped_column(ForeignKey("cities.id"), default=None)
