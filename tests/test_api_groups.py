"""Group API 통합 테스트"""
from datetime import datetime, timezone

import pytest
from unittest.mock import AsyncMock, patch

from app.crud import group as group_crud
from app.models.location import City, Country, State
from app.services import group_service


def members(*entries):
    return [
        {"user_id": user_id, "role": role, "joined_at": f"2026-10-{day:02d}T10:00:00Z"}
        for user_id, role, day in entries
    ]


@pytest.mark.asyncio
async def test_list_groups_filters_and_creator_location(client, test_db_session, make_profile, make_group):
    """그룹 목록 필터와 생성자 지역 보강"""
    test_db_session.add_all([
        Country(id=1, name="Indonesia"),
        State(id=10, name="Jawa Barat", country_id=1),
        City(id=100, name="Bandung", state_id=10),
    ])
    await test_db_session.commit()
    creator = await make_profile(fullname="Ahmad", state_id=10, city_id=100, country_id=1)
    await make_group(name="Masjid Al-Ikhlas", category="Masjid/Musholla", creator_id=creator.id,
                     members=members(("u1", "owner", 1), ("u2", "member", 2)))
    await make_group(name="Kantor Pusat", category="Kantor", settings={"status": "private"})
    await make_group(name="Deleted Mosque", category="Mosque", deleted_at=datetime(2026, 10, 1, tzinfo=timezone.utc))

    by_category = await client.get("/api/v1/groups", params={"category": "Mosque"})
    by_status = await client.get("/api/v1/groups", params={"status": "private"})
    by_search = await client.get("/api/v1/groups", params={"search": "ikhlas"})

    rows = by_category.json()["data"]
    assert [row["name"] for row in rows] == ["Masjid Al-Ikhlas"]
    assert rows[0]["member_count"] == 2
    assert rows[0]["creator"] == {
        "fullname": "Ahmad",
        "email": creator.email,
        "avatar_url": None,
        "username": creator.username,
        "state": "Jawa Barat",
        "city": "Bandung",
    }
    assert [row["name"] for row in by_status.json()["data"]] == ["Kantor Pusat"]
    assert by_search.json()["total_count"] == 1
    assert by_category.json()["filters"]["page_size"] == 12


@pytest.mark.asyncio
async def test_group_detail_enriches_members(client, make_profile, make_group):
    """그룹 상세 멤버 프로필 보강"""
    user = await make_profile(fullname="Dewi", username="dewi")
    group = await make_group(members=members((user.id, "admin", 3)))

    response = await client.get(f"/api/v1/groups/{group.id}")

    member = response.json()["members"][0]
    assert member["fullname"] == "Dewi"
    assert member["role"] == "admin"


@pytest.mark.asyncio
async def test_group_detail_not_found(client):
    """없는 그룹은 404"""
    response = await client.get("/api/v1/groups/missing")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_members_role_search_and_order(client, make_profile, make_group):
    """멤버 목록 역할 필터, 검색, 정렬"""
    alice = await make_profile(fullname="Alice", username="alice")
    bob = await make_profile(fullname="Bob", username="bob")
    carol = await make_profile(fullname="Carol", username="carol")
    group = await make_group(members=members((alice.id, "member", 1), (bob.id, "member", 5), (carol.id, "admin", 3)))

    all_members = await client.get(f"/api/v1/groups/{group.id}/members")
    only_members = await client.get(f"/api/v1/groups/{group.id}/members", params={"role": "member"})
    searched = await client.get(f"/api/v1/groups/{group.id}/members", params={"search": "CAR"})

    assert [m["fullname"] for m in all_members.json()["data"]] == ["Bob", "Carol", "Alice"]
    assert [m["fullname"] for m in only_members.json()["data"]] == ["Bob", "Alice"]
    assert [m["fullname"] for m in searched.json()["data"]] == ["Carol"]


@pytest.mark.asyncio
async def test_remove_member_decrements_count(client, make_group):
    """멤버 제거 시 멤버 수 감소"""
    group = await make_group(members=members(("u1", "owner", 1), ("u2", "member", 2), ("u3", "member", 3)))

    response = await client.delete(f"/api/v1/groups/{group.id}/members/u2")

    assert response.json() == {"error": None}
    detail = (await client.get(f"/api/v1/groups/{group.id}")).json()
    assert detail["member_count"] == 2
    assert [m["user_id"] for m in detail["members"]] == ["u1", "u3"]


@pytest.mark.asyncio
async def test_remove_unknown_member(client, make_group):
    """없는 멤버 제거는 error"""
    group = await make_group(members=members(("u1", "owner", 1)))

    response = await client.delete(f"/api/v1/groups/{group.id}/members/nobody")

    assert response.json() == {"error": "Member not found"}


@pytest.mark.asyncio
async def test_update_member_role(client, make_group):
    """멤버 역할 변경"""
    group = await make_group(members=members(("u1", "owner", 1), ("u2", "member", 2)))

    response = await client.patch(f"/api/v1/groups/{group.id}/members/u2/role", json={"role": "admin"})

    assert response.json() == {"error": None}
    detail = (await client.get(f"/api/v1/groups/{group.id}")).json()
    assert {m["user_id"]: m["role"] for m in detail["members"]} == {"u1": "owner", "u2": "admin"}


@pytest.mark.asyncio
async def test_update_member_role_rejects_unknown_role(client, make_group):
    """허용되지 않은 역할은 422"""
    group = await make_group(members=members(("u1", "owner", 1)))

    response = await client.patch(f"/api/v1/groups/{group.id}/members/u1/role", json={"role": "superuser"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_concurrent_member_write_is_rejected(test_db_session, make_group):
    """다른 쓰기가 먼저 끝나 version이 바뀌었으면 덮어쓰지 않음"""
    group = await make_group(members=members(("u1", "owner", 1), ("u2", "member", 2)), version=3)
    stale_snapshot = (members(("u1", "owner", 1), ("u2", "member", 2)), 2)

    with patch.object(group_crud, "get_members_snapshot", new_callable=AsyncMock, return_value=stale_snapshot):
        result = await group_service.remove_member(test_db_session, group.id, "u2")

    assert result.error == "Group was modified concurrently, please retry"
    await test_db_session.refresh(group)
    assert len(group.members) == 2


@pytest.mark.asyncio
async def test_update_group_status(client, make_group):
    """그룹 공개 상태 변경"""
    group = await make_group(settings={"status": "public", "location": "Bandung"})

    response = await client.patch(f"/api/v1/groups/{group.id}", json={"name": "Renamed", "status": "private"})

    assert response.json() == {"error": None}
    detail = (await client.get(f"/api/v1/groups/{group.id}")).json()
    assert detail["name"] == "Renamed"
    assert detail["settings"] == {"status": "private", "location": "Bandung"}


@pytest.mark.asyncio
async def test_move_group_to_trash_requires_confirmation(client, make_group):
    """그룹 휴지통 이동은 확인 문구 필요"""
    group = await make_group()

    rejected = await client.post(f"/api/v1/groups/{group.id}/trash", json={"confirmation": "Move to trash"})
    accepted = await client.post(f"/api/v1/groups/{group.id}/trash", json={"confirmation": "Move to Trash"})

    assert rejected.status_code == 400
    assert accepted.json() == {"error": None}
    assert (await client.get("/api/v1/groups")).json()["total_count"] == 0


@pytest.mark.asyncio
async def test_category_counts_are_normalized(client, make_group):
    """카테고리별 그룹 수 (이름 정규화)"""
    await make_group(category="Sekolah")
    await make_group(category="School")
    await make_group(category="Keluarga")
    await make_group(category=None)

    response = await client.get("/api/v1/groups/categories")

    assert response.json() == [
        {"name": "School", "count": 2},
        {"name": "Family", "count": 1},
        {"name": "Other", "count": 1},
    ]
