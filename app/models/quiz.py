from typing import Any

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, JSONType, SoftDeleteMixin, TimestampMixin, uuid_pk
from app.models.profile import Profile


class Quiz(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "quizzes"

    id: Mapped[str] = uuid_pk()
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    category: Mapped[str | None] = mapped_column(String(100), default=None, index=True)
    language: Mapped[str | None] = mapped_column(String(10), default=None)
    questions: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, default=list)
    is_hidden: Mapped[bool | None] = mapped_column(Boolean, default=False)
    is_public: Mapped[bool | None] = mapped_column(Boolean, default=True)
    status: Mapped[str | None] = mapped_column(String(20), default=None)  # None 또는 'block'
    request: Mapped[bool | None] = mapped_column(Boolean, default=False)
    creator_id: Mapped[str | None] = mapped_column(
        ForeignKey("profiles.id", ondelete="SET NULL"), default=None, index=True
    )

    creator: Mapped[Profile | None] = relationship("Profile", lazy="raise")
