from datetime import datetime

from pydantic import BaseModel

from app.schemas.common import CreatorSummary


class DeletedQuiz(BaseModel):
    id: str
    title: str
    category: str | None = None
    questions_count: int = 0
    deleted_at: datetime
    days_left: int
    creator: CreatorSummary | None = None


class DeletedUser(BaseModel):
    id: str
    username: str | None = None
    fullname: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    role: str | None = None
    deleted_at: datetime
    days_left: int


class DeletedGroup(BaseModel):
    id: str
    name: str
    description: str | None = None
    avatar_url: str | None = None
    member_count: int = 0
    deleted_at: datetime
    days_left: int
    creator: CreatorSummary | None = None
