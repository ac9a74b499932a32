from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.schemas import location as location_schema
from app.services import location_service

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("/stats", response_model=location_schema.LocationStatsResponse)
async def get_location_stats(db: AsyncSession = Depends(get_db)):
    """지역 마스터 대시보드 통계 API"""
    return await location_service.get_location_stats(db)


@router.get("/countries", response_model=list[location_schema.CountryResponse])
async def get_countries(db: AsyncSession = Depends(get_db)):
    """국가 목록 API"""
    return await location_service.get_countries(db)


@router.get("/countries/{country_id}/states", response_model=list[location_schema.StateResponse])
async def get_states(country_id: int, db: AsyncSession = Depends(get_db)):
    """국가별 주/도 목록 API"""
    return await location_service.get_states(db, country_id)


@router.get("/states/{state_id}/cities", response_model=list[location_schema.CityResponse])
async def get_cities(state_id: int, db: AsyncSession = Depends(get_db)):
    """주/도별 도시 목록 API"""
    return await location_service.get_cities(db, state_id)
