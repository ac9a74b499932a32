from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.schemas import trash as trash_schema
from app.schemas.common import ConfirmRequest, MutationResponse
from app.services import trash_service
from app.services.confirmation import ConfirmAction, require_confirmation
from app.services.trash_service import TrashEntity

router = APIRouter(prefix="/trash", tags=["trash"])


@router.get("/quizzes", response_model=list[trash_schema.DeletedQuiz])
async def get_deleted_quizzes(db: AsyncSession = Depends(get_db)):
    """휴지통 퀴즈 목록 API"""
    return await trash_service.get_deleted_quizzes(db)


@router.get("/users", response_model=list[trash_schema.DeletedUser])
async def get_deleted_users(db: AsyncSession = Depends(get_db)):
    """휴지통 사용자 목록 API"""
    return await trash_service.get_deleted_users(db)


@router.get("/groups", response_model=list[trash_schema.DeletedGroup])
async def get_deleted_groups(db: AsyncSession = Depends(get_db)):
    """휴지통 그룹 목록 API"""
    return await trash_service.get_deleted_groups(db)


@router.post("/{entity}/{item_id}/restore", response_model=MutationResponse)
async def restore_item(entity: TrashEntity, item_id: str, db: AsyncSession = Depends(get_db)):
    """휴지통 항목 복원 API"""
    return await trash_service.restore_item(db, entity, item_id)


@router.post("/{entity}/{item_id}/purge", response_model=MutationResponse)
async def delete_permanently(
    entity: TrashEntity,
    item_id: str,
    request: ConfirmRequest,
    db: AsyncSession = Depends(get_db),
):
    """휴지통 항목 영구 삭제 API ("Delete Permanently" 입력 필요)"""
    require_confirmation(ConfirmAction.PERMANENT_DELETE, request.confirmation)
    return await trash_service.delete_permanently(db, entity, item_id)
