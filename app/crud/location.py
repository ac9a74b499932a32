from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.location import City, Country, State
from app.models.profile import Profile


async def get_countries(session: AsyncSession) -> Sequence[Country]:
    """국가 목록 (이름순)"""
    result = await session.execute(select(Country).order_by(Country.name))
    return result.scalars().all()


async def get_states_by_country(session: AsyncSession, country_id: int) -> Sequence[State]:
    """국가의 주/도 목록 (이름순)"""
    stmt = select(State).where(State.country_id == country_id).order_by(State.name)
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_cities_by_state(session: AsyncSession, state_id: int) -> Sequence[City]:
    """주/도의 도시 목록 (이름순)"""
    stmt = select(City).where(City.state_id == state_id).order_by(City.name)
    result = await session.execute(stmt)
    return result.scalars().all()


async def count_rows(session: AsyncSession, model: type) -> int:
    return await session.scalar(select(func.count()).select_from(model)) or 0


async def get_active_profile_locations(session: AsyncSession) -> Sequence[tuple[int | None, int | None]]:
    """휴지통에 없는 사용자의 (state_id, city_id)"""
    stmt = select(Profile.state_id, Profile.city_id).where(Profile.deleted_at.is_(None))
    result = await session.execute(stmt)
    return result.all()
