"""Game Session API 통합 테스트"""
from datetime import datetime, timedelta, timezone

import pytest

from app.services import dashboard_service

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_list_sessions_enriches_host_quiz_and_participants(client, make_profile, make_quiz, make_game_session):
    """세션 목록에 진행자/퀴즈/참가자 정보 보강"""
    host = await make_profile(fullname="Host One", avatar_url="https://img.example.com/host.png")
    player = await make_profile(avatar_url="https://img.example.com/player.png")
    quiz = await make_quiz(title="Fractions", category="math")
    await make_game_session(
        host_id=host.id,
        quiz_id=quiz.id,
        status="finished",
        participants=[
            {"user_id": player.id, "nickname": "Player", "score": 90},
            {"nickname": "Guest", "score": 70},
        ],
        total_time_minutes=12,
        total_questions=10,
        application="quizizz.com",
    )

    response = await client.get("/api/v1/game-sessions")

    assert response.status_code == 200
    row = response.json()["data"][0]
    assert row["quiz_title"] == "Fractions"
    assert row["category"] == "math"
    assert row["host"]["fullname"] == "Host One"
    assert row["participant_count"] == 2
    assert row["avg_score"] == 80
    assert row["max_score"] == 90
    assert row["duration_minutes"] == 12
    assert row["participants"][0]["avatar_url"] == "https://img.example.com/player.png"
    assert "seed=Guest" in row["participants"][1]["avatar_url"]


@pytest.mark.asyncio
async def test_quiz_title_fallbacks(client, make_quiz, make_game_session):
    """퀴즈 제목 우선순위 (저장된 제목, 퀴즈 테이블, 기본값)"""
    quiz = await make_quiz(title="From Quiz Table")
    await make_game_session(game_pin="111111", quiz_id=quiz.id, quiz_detail={"title": "Stored Title"})
    await make_game_session(game_pin="222222", quiz_id=quiz.id)
    await make_game_session(game_pin="333333")

    response = await client.get("/api/v1/game-sessions")

    titles = {row["game_pin"]: row["quiz_title"] for row in response.json()["data"]}
    assert titles == {"111111": "Stored Title", "222222": "From Quiz Table", "333333": "Untitled Quiz"}


@pytest.mark.asyncio
async def test_list_sessions_filters_and_sort(client, make_game_session):
    """세션 목록 필터와 정렬"""
    await make_game_session(game_pin="100001", status="finished", total_time_minutes=15, total_questions=10, application="kahoot.com")
    await make_game_session(game_pin="100002", status="finished", total_time_minutes=30, total_questions=5, application="quizizz.com")
    await make_game_session(game_pin="200003", status="waiting", total_questions=20)

    by_duration = await client.get("/api/v1/game-sessions", params={"duration": "15"})
    by_questions = await client.get("/api/v1/game-sessions", params={"questions": "5"})
    by_app = await client.get("/api/v1/game-sessions", params={"application": "KAHOOT"})
    by_pin = await client.get("/api/v1/game-sessions", params={"search": "1000"})
    sorted_rows = await client.get("/api/v1/game-sessions", params={"sort": "questions_desc"})

    assert [row["game_pin"] for row in by_duration.json()["data"]] == ["100001"]
    assert [row["game_pin"] for row in by_questions.json()["data"]] == ["100002"]
    assert [row["game_pin"] for row in by_app.json()["data"]] == ["100001"]
    assert by_pin.json()["total_count"] == 2
    assert [row["game_pin"] for row in sorted_rows.json()["data"]] == ["200003", "100001", "100002"]


@pytest.mark.asyncio
async def test_malformed_participants_row_is_dropped(client, make_game_session):
    """participants 형식이 잘못된 세션은 목록에서 제외"""
    await make_game_session(game_pin="123456", participants=[{"nickname": "ok", "score": 10}])
    await make_game_session(game_pin="654321", participants=[{"nickname": "bad", "score": "not-a-number"}])

    response = await client.get("/api/v1/game-sessions")

    data = response.json()
    assert [row["game_pin"] for row in data["data"]] == ["123456"]
    assert data["total_count"] == 2


@pytest.mark.asyncio
async def test_session_detail_has_leaderboard(client, make_game_session):
    """세션 상세 리더보드 순위"""
    row = await make_game_session(
        participants=[
            {"nickname": "b", "score": 50},
            {"nickname": "a", "score": 90, "started": "2026-10-17T12:00:00Z", "ended": "2026-10-17T12:01:00Z"},
        ],
    )

    response = await client.get(f"/api/v1/game-sessions/{row.id}")

    board = response.json()["leaderboard"]
    assert [entry["nickname"] for entry in board] == ["a", "b"]
    assert board[0]["rank"] == 1
    assert board[0]["duration_ms"] == 60000


@pytest.mark.asyncio
async def test_session_detail_not_found(client):
    """없는 세션은 404"""
    response = await client.get("/api/v1/game-sessions/missing")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stale_sessions_and_clear(client, make_profile, make_game_session):
    """오래 대기 중인 세션 조회 후 정리"""
    host = await make_profile(fullname=None, username="budi")
    now = datetime.now(timezone.utc)
    stale = await make_game_session(host_id=host.id, status="waiting", created_at=now - timedelta(minutes=90))
    await make_game_session(status="waiting", created_at=now - timedelta(minutes=10))
    await make_game_session(status="finished", created_at=now - timedelta(minutes=180))

    response = await client.get("/api/v1/game-sessions/stale")

    data = response.json()["data"]
    assert [row["id"] for row in data] == [stale.id]
    assert data[0]["host_name"] == "budi"
    assert data[0]["application"] == "-"
    assert 89 <= data[0]["waiting_duration_minutes"] <= 91

    cleared = await client.post("/api/v1/game-sessions/clear", json={"session_ids": [stale.id]})
    assert cleared.json() == {"cleared": 1, "error": None}
    assert (await client.get("/api/v1/game-sessions/stale")).json()["data"] == []


@pytest.mark.asyncio
async def test_dashboard_statistics(test_db_session, make_profile, make_quiz, make_game_session):
    """대시보드 KPI와 차트 집계"""
    host = await make_profile(fullname="Top Host")
    quiz = await make_quiz(category="science")
    await make_game_session(
        host_id=host.id,
        quiz_id=quiz.id,
        status="finished",
        participants=[{"nickname": "a"}, {"nickname": "b"}],
        total_time_minutes=10,
        current_questions=[{}, {}, {}],
        application="quizizz.com",
        created_at=NOW - timedelta(days=1),
    )
    await make_game_session(
        host_id=host.id,
        status="finished",
        participants=[{"nickname": "c"}],
        total_time_minutes=5,
        current_questions=[{}],
        application="kahoot.com",
        created_at=NOW,
    )
    await make_game_session(status="finished", created_at=NOW - timedelta(days=400))
    await make_game_session(status="waiting", created_at=NOW)

    stats = await dashboard_service.get_game_dashboard_stats(test_db_session, "this-year", now=NOW)

    assert stats.error is None
    assert stats.kpi.total_sessions == 2
    assert stats.kpi.total_participants == 3
    assert stats.kpi.avg_duration == 8  # 7.5 → 8
    assert stats.kpi.avg_questions == 2
    assert {item.name for item in stats.charts.apps} == {"QUIZIZZ", "KAHOOT"}
    assert stats.charts.top_hosts[0].fullname == "Top Host"
    assert stats.charts.top_hosts[0].count == 2
    assert sorted((item.name, item.count) for item in stats.charts.top_categories) == [("Science", 1), ("Uncategorized", 1)]
    assert len(stats.charts.trend) == 7
    assert stats.charts.trend[-1].date == "2026-10-17"
    assert stats.charts.trend[-1].count == 1
    assert stats.charts.trend[-2].count == 1
    assert len(stats.charts.recent_activity) == 2


@pytest.mark.asyncio
async def test_dashboard_endpoint_rejects_unknown_range(client):
    """알 수 없는 기간은 422"""
    response = await client.get("/api/v1/game-sessions/dashboard", params={"time_range": "forever"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_fractional_scores_keep_the_row(client, make_game_session):
    """소수 점수도 유효: 평균은 반올림, 최고 점수는 저장된 값 그대로"""
    row = await make_game_session(
        participants=[{"nickname": "a", "score": 85.5}, {"nickname": "b", "score": 60}],
    )

    listed = (await client.get("/api/v1/game-sessions")).json()
    detail = (await client.get(f"/api/v1/game-sessions/{row.id}")).json()

    assert listed["total_count"] == 1
    assert len(listed["data"]) == 1
    assert listed["data"][0]["avg_score"] == 73
    assert listed["data"][0]["max_score"] == 85.5
    assert [entry["score"] for entry in detail["leaderboard"]] == [85.5, 60]
