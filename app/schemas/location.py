from pydantic import BaseModel, Field

from app.schemas.common import CountItem


class CountryResponse(BaseModel):
    id: int
    name: str
    iso2: str | None = None
    iso3: str | None = None
    emoji: str | None = None

    model_config = {"from_attributes": True}


class StateResponse(BaseModel):
    id: int
    name: str
    country_id: int

    model_config = {"from_attributes": True}


class CityResponse(BaseModel):
    id: int
    name: str
    state_id: int

    model_config = {"from_attributes": True}


class LocationKpi(BaseModel):
    total_countries: int = 0
    total_states: int = 0
    total_cities: int = 0
    users_with_location: int = 0


class LocationCharts(BaseModel):
    top_states: list[CountItem] = Field(default_factory=list)
    top_cities: list[CountItem] = Field(default_factory=list)


class LocationStatsResponse(BaseModel):
    """지역 마스터 대시보드 통계 응답 스키마"""
    kpi: LocationKpi = Field(default_factory=LocationKpi)
    charts: LocationCharts = Field(default_factory=LocationCharts)
    error: str | None = None
