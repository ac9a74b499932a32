import logging
from collections import Counter

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import location as location_crud
from app.models.location import City, Country, State
from app.schemas import location as location_schema
from app.schemas.common import CountItem
from app.services import aggregation, enrichment

logger = logging.getLogger(__name__)

TOP_LOCATION_LIMIT = 5


async def get_countries(session: AsyncSession) -> list[location_schema.CountryResponse]:
    try:
        rows = await location_crud.get_countries(session)
    except SQLAlchemyError as e:
        logger.error(f"국가 목록 조회 실패: {e.__class__.__name__}", exc_info=True)
        return []
    return [location_schema.CountryResponse.model_validate(row) for row in rows]


async def get_states(session: AsyncSession, country_id: int) -> list[location_schema.StateResponse]:
    try:
        rows = await location_crud.get_states_by_country(session, country_id)
    except SQLAlchemyError as e:
        logger.error(f"주/도 목록 조회 실패: country_id={country_id}, {e.__class__.__name__}", exc_info=True)
        return []
    return [location_schema.StateResponse.model_validate(row) for row in rows]


async def get_cities(session: AsyncSession, state_id: int) -> list[location_schema.CityResponse]:
    try:
        rows = await location_crud.get_cities_by_state(session, state_id)
    except SQLAlchemyError as e:
        logger.error(f"도시 목록 조회 실패: state_id={state_id}, {e.__class__.__name__}", exc_info=True)
        return []
    return [location_schema.CityResponse.model_validate(row) for row in rows]


async def _top_named(session: AsyncSession, model: type, counts: Counter) -> list[CountItem]:
    """개수 상위 ID를 이름으로 (이름을 못 찾으면 "Unknown")"""
    top = aggregation.top_n(counts, TOP_LOCATION_LIMIT)
    names = await enrichment.fetch_by_ids(session, model, (location_id for location_id, _ in top))
    return [
        CountItem(name=names.value[location_id].name if location_id in names.value else "Unknown", count=count)
        for location_id, count in top
    ]


async def get_location_stats(session: AsyncSession) -> location_schema.LocationStatsResponse:
    """지역 마스터 데이터 수와 사용자 수 상위 주/도시"""
    try:
        total_countries = await location_crud.count_rows(session, Country)
        total_states = await location_crud.count_rows(session, State)
        total_cities = await location_crud.count_rows(session, City)
        profile_locations = list(await location_crud.get_active_profile_locations(session))
    except SQLAlchemyError as e:
        logger.error(f"지역 통계 조회 실패: {e.__class__.__name__}", exc_info=True)
        return location_schema.LocationStatsResponse(error="Failed to fetch location statistics")

    state_counts = Counter(state_id for state_id, _ in profile_locations if state_id)
    city_counts = Counter(city_id for _, city_id in profile_locations if city_id)
    kpi = location_schema.LocationKpi(
        total_countries=total_countries,
        total_states=total_states,
        total_cities=total_cities,
        users_with_location=sum(1 for state_id, city_id in profile_locations if state_id or city_id),
    )
    charts = location_schema.LocationCharts(
        top_states=await _top_named(session, State, state_counts),
        top_cities=await _top_named(session, City, city_counts),
    )
    return location_schema.LocationStatsResponse(kpi=kpi, charts=charts)
