"""보강(enrichment) 일괄 조회 테스트"""
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile
from app.services import enrichment
from app.services.assets import avatar_url, resolve_asset_url


def test_collect_ids_flattens_and_dedupes():
    """ID 수집 시 리스트 펼침과 중복 제거"""
    rows = [
        SimpleNamespace(host_id="h1", participants=["u1", "u2"]),
        SimpleNamespace(host_id=None, participants=["u2", None]),
        SimpleNamespace(host_id="h1", participants=[]),
    ]

    ids = enrichment.collect_ids(rows, lambda r: r.host_id, lambda r: r.participants)

    assert ids == ["h1", "u1", "u2"]


@pytest.mark.asyncio
async def test_fetch_by_ids_empty_input_skips_query():
    """빈 ID 목록은 쿼리 생략"""
    session = AsyncMock(spec=AsyncSession)

    result = await enrichment.fetch_by_ids(session, Profile, [None, ""])

    assert result.ok
    assert result.value == {}
    session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_fetch_by_ids_queries_in_chunks(test_db_session, make_profile):
    """ID를 청크 단위로 조회"""
    for i in range(5):
        await make_profile(id=f"user-{i}")
    execute = AsyncMock(wraps=test_db_session.execute)
    test_db_session.execute = execute

    result = await enrichment.fetch_by_ids(
        test_db_session, Profile, [f"user-{i}" for i in range(5)] + ["missing"], chunk_size=2
    )

    assert result.ok
    assert sorted(result.value) == [f"user-{i}" for i in range(5)]
    assert execute.await_count == 3


@pytest.mark.asyncio
async def test_fetch_by_ids_failure_is_distinguishable_from_empty():
    """조회 실패와 빈 결과 구분"""
    session = AsyncMock(spec=AsyncSession)
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))

    result = await enrichment.fetch_by_ids(session, Profile, ["user-1"])

    assert not result.ok
    assert result.value == {}
    assert "profiles" in result.error


@pytest.mark.asyncio
async def test_locations_partial_failure_keeps_other_maps(monkeypatch):
    """일부 지역 조회 실패 시 나머지 유지"""
    profile = MagicMock(state_id=1, city_id=2, country_id=3)
    state = SimpleNamespace(id=1, name="Jawa Barat")
    country = SimpleNamespace(id=3, name="Indonesia")

    async def fake_fetch(session, model, ids, chunk_size=None):
        if model.__tablename__ == "cities":
            return enrichment.EnrichmentResult(value={}, error="Failed to fetch cities")
        if model.__tablename__ == "states":
            return enrichment.EnrichmentResult(value={1: state})
        return enrichment.EnrichmentResult(value={3: country})

    monkeypatch.setattr(enrichment, "fetch_by_ids", fake_fetch)
    result = await enrichment.locations_for_profiles(AsyncMock(spec=AsyncSession), [profile])

    assert not result.ok
    assert result.value.states == {1: "Jawa Barat"}
    assert result.value.cities == {}
    assert result.value.countries == {3: "Indonesia"}


def test_resolve_asset_url(monkeypatch):
    """저장소 경로를 공개 URL로 변환"""
    from app.core.config import settings

    monkeypatch.setattr(settings, "storage_public_url", "https://cdn.example.com/")

    assert resolve_asset_url("avatars/u1.png") == "https://cdn.example.com/storage/v1/object/public/avatars/u1.png"
    assert resolve_asset_url("https://img.example.com/a.png") == "https://img.example.com/a.png"
    assert resolve_asset_url(None) is None


def test_avatar_url_falls_back_to_placeholder():
    """아바타가 없으면 기본 이미지"""
    url = avatar_url(None, "Budi Santoso")
    assert url.startswith("https://api.dicebear.com/9.x/avataaars/svg?seed=")
    assert "Budi%20Santoso" in url
