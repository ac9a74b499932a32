from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.schemas import game as game_schema
from app.services import game_service

router = APIRouter(prefix="/games", tags=["games"])


@router.get("", response_model=game_schema.GameApplicationListResponse)
async def list_game_applications(
    date_range: Annotated[game_schema.GameDateRange, Query()],
    db: AsyncSession = Depends(get_db),
):
    """게임 앱 목록 API"""
    return await game_service.list_game_applications(db, date_range)


@router.get("/{name}", response_model=game_schema.GameDetailResponse)
async def get_game_detail(
    name: str,
    date_range: Annotated[game_schema.GameDateRange, Query()],
    db: AsyncSession = Depends(get_db),
):
    """게임 앱 상세 통계 API"""
    return await game_service.get_game_detail(db, name, date_range)


@router.get("/{name}/demographics", response_model=game_schema.PlayerDemographics)
async def get_player_demographics(
    name: str,
    date_range: Annotated[game_schema.GameDateRange, Query()],
    db: AsyncSession = Depends(get_db),
):
    """게임 앱 플레이어 분포 API"""
    return await game_service.get_player_demographics(db, name, date_range)
