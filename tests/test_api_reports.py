"""Report API 통합 테스트"""
import pytest
from unittest.mock import AsyncMock, patch

from app.crud import report as report_crud
from app.schemas.report import MessageCreateRequest
from app.services import report_service

USER_MESSAGE = {
    "id": "m-user",
    "sender_id": "u1",
    "sender_type": "user",
    "content": "Please check this quiz",
    "created_at": "2026-10-16T08:00:00Z",
}


@pytest.mark.asyncio
async def test_list_reports_with_stats_and_profiles(client, make_profile, make_report):
    """신고 목록 통계와 프로필 보강"""
    reporter = await make_profile(fullname="Reporter")
    reported = await make_profile(fullname="Reported")
    await make_report(title="Spam quiz", report_type="Spam", status="pending",
                      reporter_id=reporter.id, reported_user_id=reported.id)
    await make_report(title="Abuse", report_type="harassment", status="In Progress")
    await make_report(title="Done", report_type="spam", status="resolved")

    response = await client.get("/api/v1/reports", params={"type": "spam"})

    data = response.json()
    assert data["total_count"] == 2
    assert data["stats"] == {"total": 3, "pending": 1, "in_progress": 1, "resolved": 1}
    spam = next(row for row in data["data"] if row["title"] == "Spam quiz")
    assert spam["reporter"]["fullname"] == "Reporter"
    assert spam["reported_user"]["fullname"] == "Reported"


@pytest.mark.asyncio
async def test_list_reports_status_is_case_insensitive(client, make_report):
    """상태 필터는 대소문자 무시"""
    await make_report(title="A", status="PENDING")
    await make_report(title="B", status="resolved")

    response = await client.get("/api/v1/reports", params={"status": "pending", "search": "a"})

    assert [row["title"] for row in response.json()["data"]] == ["A"]


@pytest.mark.asyncio
async def test_resolving_report_stamps_resolved_at(client, make_report):
    """해결 처리 시 resolved_at 기록"""
    report = await make_report()

    response = await client.patch(
        f"/api/v1/reports/{report.id}", json={"status": "resolved", "admin_notes": "Quiz removed"}
    )

    assert response.json() == {"error": None}
    detail = (await client.get(f"/api/v1/reports/{report.id}")).json()
    assert detail["status"] == "resolved"
    assert detail["admin_notes"] == "Quiz removed"
    assert detail["resolved_at"] is not None


@pytest.mark.asyncio
async def test_update_report_rejects_unknown_status(client, make_report):
    """알 수 없는 상태는 422"""
    report = await make_report()

    response = await client.patch(f"/api/v1/reports/{report.id}", json={"status": "closed"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_send_and_delete_admin_message(client, make_report):
    """관리자 메시지 전송과 삭제"""
    report = await make_report(messages=[USER_MESSAGE])

    sent = await client.post(f"/api/v1/reports/{report.id}/messages", json={"content": "We are on it"})

    body = sent.json()
    assert body["error"] is None
    assert body["message"]["sender_type"] == "admin"
    assert body["message"]["sender_id"] == "admin"
    messages = (await client.get(f"/api/v1/reports/{report.id}")).json()["messages"]
    assert [m["content"] for m in messages] == ["Please check this quiz", "We are on it"]

    deleted = await client.delete(f"/api/v1/reports/{report.id}/messages/{body['message']['id']}")
    assert deleted.json() == {"error": None}
    messages = (await client.get(f"/api/v1/reports/{report.id}")).json()["messages"]
    assert [m["id"] for m in messages] == ["m-user"]


@pytest.mark.asyncio
async def test_cannot_delete_user_message(client, make_report):
    """사용자 메시지는 삭제 불가"""
    report = await make_report(messages=[USER_MESSAGE])

    response = await client.delete(f"/api/v1/reports/{report.id}/messages/m-user")

    assert response.json() == {"error": "You can only delete your own messages"}


@pytest.mark.asyncio
async def test_concurrent_message_write_is_rejected(test_db_session, make_report):
    """동시 수정된 메시지 쓰기는 거부"""
    report = await make_report(messages=[USER_MESSAGE], version=5)

    with patch.object(report_crud, "get_messages_snapshot", new_callable=AsyncMock, return_value=([USER_MESSAGE], 4)):
        result = await report_service.send_message(test_db_session, report.id, MessageCreateRequest(content="hi"))

    assert result.error == "Report was modified concurrently, please retry"
    assert result.message is None


@pytest.mark.asyncio
async def test_delete_report(client, make_report):
    """신고 삭제"""
    report = await make_report()

    assert (await client.delete(f"/api/v1/reports/{report.id}")).json() == {"error": None}
    assert (await client.get(f"/api/v1/reports/{report.id}")).status_code == 404


@pytest.mark.asyncio
async def test_get_all_reports(client, make_report):
    """전체 신고 목록"""
    await make_report(title="one")
    await make_report(title="two")

    response = await client.get("/api/v1/reports/all")

    assert sorted(row["title"] for row in response.json()) == ["one", "two"]


@pytest.mark.asyncio
async def test_update_report_rejects_null_status(client, make_report):
    """status를 null로 보내면 422, 기존 상태 유지"""
    report = await make_report(status="in_progress")

    response = await client.patch(f"/api/v1/reports/{report.id}", json={"status": None})

    assert response.status_code == 422
    assert (await client.get(f"/api/v1/reports/{report.id}")).json()["status"] == "in_progress"
