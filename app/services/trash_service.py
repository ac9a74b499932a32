"""휴지통: 삭제된 퀴즈/사용자/그룹 조회, 복원, 영구 삭제"""
import logging
from datetime import datetime
from typing import Literal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.crud import common as common_crud, group as group_crud, profile as profile_crud, quiz as quiz_crud
from app.models.group import Group
from app.models.profile import Profile
from app.models.quiz import Quiz
from app.schemas import trash as trash_schema
from app.schemas.common import CreatorSummary, MutationResponse
from app.services import aggregation, enrichment
from app.services.assets import resolve_asset_url
from app.services.decoding import decode_rows
from app.services.mutations import run_mutation

logger = logging.getLogger(__name__)

TrashEntity = Literal["quizzes", "users", "groups"]

TRASH_MODELS: dict[str, type] = {
    "quizzes": Quiz,
    "users": Profile,
    "groups": Group,
}


def days_left(deleted_at: datetime, now: datetime | None = None) -> int:
    return aggregation.days_until_purge(deleted_at, now, settings.trash_retention_days)


def to_creator(profile: Profile | None) -> CreatorSummary | None:
    if profile is None:
        return None
    return CreatorSummary(fullname=profile.fullname, email=profile.email)


async def get_deleted_quizzes(session: AsyncSession, now: datetime | None = None) -> list[trash_schema.DeletedQuiz]:
    """휴지통의 퀴즈 (최근 삭제순, 영구 삭제까지 남은 일수 포함)"""
    try:
        rows = list(await quiz_crud.get_deleted_quizzes(session))
    except SQLAlchemyError as e:
        logger.error(f"삭제된 퀴즈 조회 실패: {e.__class__.__name__}", exc_info=True)
        return []

    creators = await enrichment.profiles_by_id(session, (quiz.creator_id for quiz in rows))
    return decode_rows(
        rows,
        lambda quiz: trash_schema.DeletedQuiz(
            id=quiz.id,
            title=quiz.title,
            category=quiz.category,
            questions_count=len(quiz.questions) if isinstance(quiz.questions, list) else 0,
            deleted_at=quiz.deleted_at,
            days_left=days_left(quiz.deleted_at, now),
            creator=to_creator(creators.value.get(quiz.creator_id)),
        ),
        "quizzes",
    )


async def get_deleted_users(session: AsyncSession, now: datetime | None = None) -> list[trash_schema.DeletedUser]:
    """휴지통의 사용자"""
    try:
        rows = list(await profile_crud.get_deleted_profiles(session))
    except SQLAlchemyError as e:
        logger.error(f"삭제된 사용자 조회 실패: {e.__class__.__name__}", exc_info=True)
        return []

    return decode_rows(
        rows,
        lambda profile: trash_schema.DeletedUser(
            id=profile.id,
            username=profile.username,
            fullname=profile.fullname,
            email=profile.email,
            avatar_url=resolve_asset_url(profile.avatar_url),
            role=profile.role,
            deleted_at=profile.deleted_at,
            days_left=days_left(profile.deleted_at, now),
        ),
        "profiles",
    )


async def get_deleted_groups(session: AsyncSession, now: datetime | None = None) -> list[trash_schema.DeletedGroup]:
    """휴지통의 그룹"""
    try:
        rows = list(await group_crud.get_deleted_groups(session))
    except SQLAlchemyError as e:
        logger.error(f"삭제된 그룹 조회 실패: {e.__class__.__name__}", exc_info=True)
        return []

    creators = await enrichment.profiles_by_id(session, (group.creator_id for group in rows))
    return decode_rows(
        rows,
        lambda group: trash_schema.DeletedGroup(
            id=group.id,
            name=group.name,
            description=group.description,
            avatar_url=resolve_asset_url(group.avatar_url),
            member_count=len(group.members) if isinstance(group.members, list) else 0,
            deleted_at=group.deleted_at,
            days_left=days_left(group.deleted_at, now),
            creator=to_creator(creators.value.get(group.creator_id)),
        ),
        "groups",
    )


async def restore_item(session: AsyncSession, entity: TrashEntity, item_id: str) -> MutationResponse:
    """휴지통 항목 복원"""
    model = TRASH_MODELS[entity]
    return await run_mutation(
        session,
        f"restore {entity}",
        lambda: common_crud.restore(session, model, item_id),
        not_found="Item not found in trash",
    )


async def delete_permanently(session: AsyncSession, entity: TrashEntity, item_id: str) -> MutationResponse:
    """휴지통 항목 영구 삭제"""
    model = TRASH_MODELS[entity]
    return await run_mutation(
        session,
        f"permanently delete {entity}",
        lambda: common_crud.purge(session, model, item_id),
        not_found="Item not found in trash",
    )
