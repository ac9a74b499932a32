from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.schemas import profile as profile_schema
from app.schemas.common import ConfirmRequest, MutationResponse, Page
from app.services import profile_service
from app.services.confirmation import ConfirmAction, require_confirmation

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("", response_model=Page[profile_schema.ProfileResponse])
async def list_profiles(
    params: Annotated[profile_schema.ProfileListParams, Query()],
    db: AsyncSession = Depends(get_db),
):
    """사용자 목록 조회 API"""
    return await profile_service.list_profiles(db, params)


@router.get("/all", response_model=list[profile_schema.ProfileResponse])
async def get_all_profiles(db: AsyncSession = Depends(get_db)):
    """사용자 일괄 조회 API"""
    return await profile_service.get_all_profiles(db)


@router.get("/{profile_id}", response_model=profile_schema.ProfileDetailResponse)
async def get_profile(profile_id: str, db: AsyncSession = Depends(get_db)):
    """사용자 상세 조회 API"""
    return await profile_service.get_profile_detail(db, profile_id)


@router.get("/{profile_id}/played-quizzes", response_model=profile_schema.PlayedQuizListResponse)
async def get_played_quizzes(profile_id: str, db: AsyncSession = Depends(get_db)):
    """사용자가 플레이한 퀴즈 API"""
    return await profile_service.get_played_quizzes(db, profile_id)


@router.get("/{profile_id}/created-quizzes", response_model=profile_schema.CreatedQuizListResponse)
async def get_created_quizzes(profile_id: str, db: AsyncSession = Depends(get_db)):
    """사용자가 만든 퀴즈 API"""
    return await profile_service.get_created_quizzes(db, profile_id)


@router.get("/{profile_id}/game-activity", response_model=profile_schema.GameActivityResponse)
async def get_game_activity(profile_id: str, db: AsyncSession = Depends(get_db)):
    """사용자 게임 활동 API"""
    return await profile_service.get_game_activity(db, profile_id)


@router.patch("/{profile_id}", response_model=MutationResponse)
async def update_profile(
    profile_id: str,
    request: profile_schema.ProfileUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    """사용자 역할/이름 수정 API"""
    return await profile_service.update_profile(db, profile_id, request)


@router.post("/{profile_id}/block", response_model=MutationResponse)
async def block_profile(profile_id: str, request: ConfirmRequest, db: AsyncSession = Depends(get_db)):
    """사용자 차단 API ("Block" 입력 필요)"""
    require_confirmation(ConfirmAction.BLOCK, request.confirmation)
    return await profile_service.block_profile(db, profile_id)


@router.post("/{profile_id}/unblock", response_model=MutationResponse)
async def unblock_profile(profile_id: str, db: AsyncSession = Depends(get_db)):
    """사용자 차단 해제 API"""
    return await profile_service.unblock_profile(db, profile_id)


@router.post("/{profile_id}/trash", response_model=MutationResponse)
async def move_profile_to_trash(profile_id: str, request: ConfirmRequest, db: AsyncSession = Depends(get_db)):
    """사용자 휴지통 이동 API ("Move to Trash" 입력 필요)"""
    require_confirmation(ConfirmAction.SOFT_DELETE, request.confirmation)
    return await profile_service.soft_delete_profile(db, profile_id)
