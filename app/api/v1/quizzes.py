from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.schemas import quiz as quiz_schema
from app.schemas.common import ConfirmRequest, MutationResponse
from app.services import quiz_service
from app.services.confirmation import ConfirmAction, require_confirmation

router = APIRouter(prefix="/quizzes", tags=["quizzes"])


@router.get("", response_model=quiz_schema.QuizListResponse)
async def list_quizzes(
    params: Annotated[quiz_schema.QuizListParams, Query()],
    db: AsyncSession = Depends(get_db),
):
    """퀴즈 목록 조회 API"""
    return await quiz_service.list_quizzes(db, params)


@router.get("/all", response_model=list[quiz_schema.QuizResponse])
async def get_all_quizzes(db: AsyncSession = Depends(get_db)):
    """퀴즈 일괄 조회 API"""
    return await quiz_service.get_all_quizzes(db)


@router.get("/{quiz_id}", response_model=quiz_schema.QuizDetailResponse)
async def get_quiz(quiz_id: str, db: AsyncSession = Depends(get_db)):
    """퀴즈 상세 조회 API"""
    return await quiz_service.get_quiz_detail(db, quiz_id)


@router.get("/{quiz_id}/sessions", response_model=list[quiz_schema.QuizSessionResponse])
async def get_quiz_sessions(quiz_id: str, db: AsyncSession = Depends(get_db)):
    """퀴즈를 사용한 게임 세션 조회 API"""
    return await quiz_service.get_quiz_sessions(db, quiz_id)


@router.patch("/{quiz_id}/visibility", response_model=MutationResponse)
async def update_visibility(
    quiz_id: str,
    request: quiz_schema.QuizVisibilityUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    """퀴즈 공개 여부 변경 API"""
    return await quiz_service.update_visibility(db, quiz_id, request)


@router.post("/{quiz_id}/block", response_model=MutationResponse)
async def block_quiz(quiz_id: str, request: ConfirmRequest, db: AsyncSession = Depends(get_db)):
    """퀴즈 차단 API ("Block" 입력 필요)"""
    require_confirmation(ConfirmAction.BLOCK, request.confirmation)
    return await quiz_service.block_quiz(db, quiz_id)


@router.post("/{quiz_id}/unblock", response_model=MutationResponse)
async def unblock_quiz(quiz_id: str, db: AsyncSession = Depends(get_db)):
    """퀴즈 차단 해제 API"""
    return await quiz_service.unblock_quiz(db, quiz_id)


@router.post("/{quiz_id}/trash", response_model=MutationResponse)
async def move_quiz_to_trash(quiz_id: str, request: ConfirmRequest, db: AsyncSession = Depends(get_db)):
    """퀴즈 휴지통 이동 API ("Move to Trash" 입력 필요)"""
    require_confirmation(ConfirmAction.SOFT_DELETE, request.confirmation)
    return await quiz_service.soft_delete_quiz(db, quiz_id)
