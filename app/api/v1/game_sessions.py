from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.schemas import game_session as game_session_schema
from app.schemas.common import Page
from app.services import dashboard_service, game_session_service
from app.services.dashboard_service import TimeRange

router = APIRouter(prefix="/game-sessions", tags=["game-sessions"])


@router.get("", response_model=Page[game_session_schema.GameSessionResponse])
async def list_game_sessions(
    params: Annotated[game_session_schema.GameSessionListParams, Query()],
    db: AsyncSession = Depends(get_db),
):
    """게임 세션 목록 조회 API"""
    return await game_session_service.list_game_sessions(db, params)


@router.get("/dashboard", response_model=game_session_schema.GameDashboardResponse)
async def get_dashboard(
    time_range: TimeRange = "this-year",
    db: AsyncSession = Depends(get_db),
):
    """게임 대시보드 통계 API"""
    return await dashboard_service.get_game_dashboard_stats(db, time_range)


@router.get("/stale", response_model=game_session_schema.StaleSessionListResponse)
async def get_stale_sessions(db: AsyncSession = Depends(get_db)):
    """오래 대기 중인 세션 조회 API"""
    return await game_session_service.get_stale_sessions(db)


@router.post("/clear", response_model=game_session_schema.ClearSessionsResponse)
async def clear_sessions(
    request: game_session_schema.ClearSessionsRequest,
    db: AsyncSession = Depends(get_db),
):
    """대기 중인 세션 일괄 삭제 API"""
    return await game_session_service.clear_sessions(db, request.session_ids)


@router.get("/{session_id}", response_model=game_session_schema.GameSessionDetailResponse)
async def get_game_session(session_id: str, db: AsyncSession = Depends(get_db)):
    """게임 세션 상세 조회 API (리더보드 포함)"""
    return await game_session_service.get_game_session_detail(db, session_id)
