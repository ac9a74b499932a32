"""보조 테이블 일괄 조회 후 메모리에서 주 행에 결합하는 보강(enrichment) 헬퍼"""
import logging
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.location import City, Country, State
from app.models.profile import Profile
from app.models.quiz import Quiz
from app.schemas.common import ProfileSummary
from app.services.assets import resolve_asset_url

logger = logging.getLogger(__name__)

T = TypeVar("T")
IdGetter = Callable[[Any], Any]


@dataclass
class EnrichmentResult(Generic[T]):
    """보강 조회 결과 (정상적으로 비어 있음과 조회 실패를 구분)"""
    value: T
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ProfileLocations:
    """프로필별 지역 이름"""
    states: dict[int, str] = field(default_factory=dict)
    cities: dict[int, str] = field(default_factory=dict)
    countries: dict[int, str] = field(default_factory=dict)


def collect_ids(rows: Iterable[Any], *getters: IdGetter) -> list[Hashable]:
    """주 행에서 외래 키 ID를 중복 없이 수집 (getter가 리스트를 반환하면 펼침)"""
    seen: dict[Hashable, None] = {}
    for row in rows:
        for getter in getters:
            value = getter(row)
            values = value if isinstance(value, (list, tuple, set)) else [value]
            for item in values:
                if item:
                    seen.setdefault(item, None)
    return list(seen)


def chunked(items: list[Any], size: int) -> Iterable[list[Any]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


async def fetch_by_ids(
    session: AsyncSession,
    model: type,
    ids: Iterable[Any],
    chunk_size: int | None = None,
) -> EnrichmentResult[dict[Any, Any]]:
    """ID 목록을 청크 단위 IN 쿼리로 조회하여 id → 행 맵 반환

    Args:
        session: 데이터베이스 세션
        model: 조회할 ORM 모델 (id 컬럼 필요)
        ids: 조회할 ID (빈 값/중복은 제거)
        chunk_size: 한 번의 IN 쿼리에 넣을 최대 ID 수

    Returns:
        실패 시 빈 맵과 error가 채워진 결과
    """
    unique_ids = collect_ids(ids, lambda value: value)
    if not unique_ids:
        return EnrichmentResult(value={})

    size = chunk_size or settings.enrichment_chunk_size
    rows_by_id: dict[Any, Any] = {}
    try:
        for chunk in chunked(unique_ids, size):
            result = await session.execute(select(model).where(model.id.in_(chunk)))
            for row in result.scalars().all():
                rows_by_id[row.id] = row
    except SQLAlchemyError as e:
        logger.warning(
            f"보강 조회 실패: table={model.__tablename__}, ids={len(unique_ids)}, "
            f"error={e.__class__.__name__}"
        )
        return EnrichmentResult(value={}, error=f"Failed to fetch {model.__tablename__}")
    return EnrichmentResult(value=rows_by_id)


async def profiles_by_id(session: AsyncSession, ids: Iterable[Any]) -> EnrichmentResult[dict[str, Profile]]:
    """프로필 일괄 조회"""
    return await fetch_by_ids(session, Profile, ids)


async def quizzes_by_id(session: AsyncSession, ids: Iterable[Any]) -> EnrichmentResult[dict[str, Quiz]]:
    """퀴즈 일괄 조회"""
    return await fetch_by_ids(session, Quiz, ids)


async def locations_for_profiles(
    session: AsyncSession,
    profiles: Iterable[Profile],
) -> EnrichmentResult[ProfileLocations]:
    """프로필들의 주/도시/국가 이름 일괄 조회 (부분 실패는 해당 맵만 비움)"""
    profiles = list(profiles)
    states = await fetch_by_ids(session, State, (p.state_id for p in profiles))
    cities = await fetch_by_ids(session, City, (p.city_id for p in profiles))
    countries = await fetch_by_ids(session, Country, (p.country_id for p in profiles))

    locations = ProfileLocations(
        states={key: row.name for key, row in states.value.items()},
        cities={key: row.name for key, row in cities.value.items()},
        countries={key: row.name for key, row in countries.value.items()},
    )
    errors = [r.error for r in (states, cities, countries) if not r.ok]
    return EnrichmentResult(value=locations, error="; ".join(errors) if errors else None)


def profile_summary(profile: Profile | None) -> ProfileSummary | None:
    """보강용 프로필 요약 (아바타 경로는 공개 URL로 변환)"""
    if profile is None:
        return None
    return ProfileSummary(
        id=profile.id,
        username=profile.username,
        email=profile.email,
        fullname=profile.fullname,
        avatar_url=resolve_asset_url(profile.avatar_url),
    )
