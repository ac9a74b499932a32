import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.crud import common as common_crud, report as report_crud
from app.exceptions import DataFetchError, ReportNotFoundError
from app.models.profile import Profile
from app.models.report import Report
from app.schemas import report as report_schema
from app.schemas.common import MutationResponse
from app.services import enrichment
from app.services.decoding import decode_list, decode_rows
from app.services.mutations import run_mutation
from app.services.table import empty_page, page_fields

logger = logging.getLogger(__name__)

ADMIN_SENDER_ID = "admin"

MessagesTransform = Callable[[list[dict[str, Any]]], list[dict[str, Any]] | str]


def to_report_response(report: Report, profiles: dict[str, Profile]) -> report_schema.ReportResponse:
    return report_schema.ReportResponse(
        id=report.id,
        title=report.title,
        description=report.description,
        report_type=report.report_type,
        reported_content_type=report.reported_content_type,
        reported_content_id=report.reported_content_id,
        reporter_id=report.reporter_id,
        reported_user_id=report.reported_user_id,
        status=report.status,
        priority=report.priority,
        admin_notes=report.admin_notes,
        evidence_url=report.evidence_url,
        resolved_at=report.resolved_at,
        created_at=report.created_at,
        updated_at=report.updated_at,
        reporter=enrichment.profile_summary(profiles.get(report.reporter_id)) if report.reporter_id else None,
        reported_user=(
            enrichment.profile_summary(profiles.get(report.reported_user_id)) if report.reported_user_id else None
        ),
    )


async def _report_profiles(session: AsyncSession, reports: list[Report]) -> dict[str, Profile]:
    """신고자/피신고자 프로필 일괄 조회"""
    profiles = await enrichment.profiles_by_id(
        session,
        enrichment.collect_ids(reports, lambda r: r.reporter_id, lambda r: r.reported_user_id),
    )
    return profiles.value


def build_stats(counts: dict[str, int]) -> report_schema.ReportStats:
    return report_schema.ReportStats(
        total=sum(counts.values()),
        pending=counts.get("pending", 0),
        in_progress=counts.get("in_progress", 0),
        resolved=counts.get("resolved", 0),
    )


async def list_reports(
    session: AsyncSession,
    params: report_schema.ReportListParams,
) -> report_schema.ReportListResponse:
    """신고 목록 조회 (상태별 통계 포함)"""
    try:
        rows, total_count = await report_crud.list_reports(session, params)
        counts = await report_crud.count_reports_by_status(session)
    except SQLAlchemyError as e:
        logger.error(f"신고 목록 조회 실패: {e.__class__.__name__}", exc_info=True)
        return report_schema.ReportListResponse(**empty_page(params, "Failed to fetch reports"))

    profiles = await _report_profiles(session, rows)
    data = decode_rows(rows, lambda report: to_report_response(report, profiles), "reports")
    return report_schema.ReportListResponse(**page_fields(params, data, total_count), stats=build_stats(counts))


async def get_all_reports(session: AsyncSession) -> list[report_schema.ReportResponse]:
    """클라이언트 측 테이블용 신고 일괄 조회 (실패 시 빈 목록)"""
    try:
        rows = list(await report_crud.get_all_reports(session, settings.bulk_fetch_limit))
    except SQLAlchemyError as e:
        logger.error(f"신고 일괄 조회 실패: {e.__class__.__name__}", exc_info=True)
        return []
    profiles = await _report_profiles(session, rows)
    return decode_rows(rows, lambda report: to_report_response(report, profiles), "reports")


async def get_report_detail(session: AsyncSession, report_id: str) -> report_schema.ReportDetailResponse:
    """신고 상세 조회 (메시지 포함)"""
    try:
        report = await report_crud.get_report_by_id(session, report_id)
    except SQLAlchemyError as e:
        logger.error(f"신고 상세 조회 실패: report_id={report_id}, {e.__class__.__name__}", exc_info=True)
        raise DataFetchError("report") from e
    if report is None:
        raise ReportNotFoundError(report_id)

    profiles = await _report_profiles(session, [report])
    try:
        messages = decode_list(report_schema.ReportMessage, report.messages)
    except (ValidationError, ValueError) as e:
        logger.warning(f"신고 메시지 형식 오류: report_id={report_id}, error={e.__class__.__name__}")
        messages = []
    base = to_report_response(report, profiles)
    return report_schema.ReportDetailResponse(**base.model_dump(), messages=messages)


async def update_report(
    session: AsyncSession,
    report_id: str,
    request: report_schema.ReportUpdateRequest,
) -> MutationResponse:
    """신고 상태/관리자 메모 수정 (resolved로 바꾸면 resolved_at 기록)"""
    values: dict[str, Any] = request.model_dump(exclude_unset=True)
    if not values:
        return MutationResponse()
    if "status" in values:
        values["resolved_at"] = datetime.now(timezone.utc) if values["status"] == "resolved" else None

    return await run_mutation(
        session,
        "update report",
        lambda: common_crud.update_by_id(session, Report, report_id, values),
        not_found="Report not found",
    )


async def delete_report(session: AsyncSession, report_id: str) -> MutationResponse:
    """신고 삭제"""
    return await run_mutation(
        session,
        "delete report",
        lambda: common_crud.delete_by_id(session, Report, report_id),
        not_found="Report not found",
    )


async def _rewrite_messages(
    session: AsyncSession,
    report_id: str,
    label: str,
    transform: MessagesTransform,
) -> MutationResponse:
    """메시지 배열을 읽고 변환한 뒤 version이 그대로일 때만 저장 (transform이 문자열을 반환하면 오류)"""
    try:
        snapshot = await report_crud.get_messages_snapshot(session, report_id)
        if snapshot is None:
            return MutationResponse(error="Report not found")
        messages, version = snapshot
        updated = transform(messages)
        if isinstance(updated, str):
            return MutationResponse(error=updated)
        swapped = await common_crud.compare_and_swap(
            session,
            Report,
            report_id,
            version,
            {"messages": updated, "updated_at": datetime.now(timezone.utc)},
        )
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"{label} 실패: report_id={report_id}, {e.__class__.__name__}", exc_info=True)
        return MutationResponse(error=f"Failed to {label}")

    if not swapped:
        logger.warning(f"{label} 충돌: report_id={report_id}, version={version}")
        return MutationResponse(error="Report was modified concurrently, please retry")
    logger.info(f"{label} 성공: report_id={report_id}")
    return MutationResponse()


async def send_message(
    session: AsyncSession,
    report_id: str,
    request: report_schema.MessageCreateRequest,
) -> report_schema.MessageSendResponse:
    """신고 대화에 메시지 추가"""
    message = report_schema.ReportMessage(
        id=str(uuid.uuid4()),
        sender_id=ADMIN_SENDER_ID if request.sender_type == "admin" else None,
        sender_type=request.sender_type,
        content=request.content,
        created_at=datetime.now(timezone.utc),
    )
    result = await _rewrite_messages(
        session,
        report_id,
        "send report message",
        lambda messages: [*messages, message.model_dump(mode="json")],
    )
    if result.error:
        return report_schema.MessageSendResponse(error=result.error)
    return report_schema.MessageSendResponse(message=message)


async def delete_message(
    session: AsyncSession,
    report_id: str,
    message_id: str,
    sender_type: report_schema.SenderType = "admin",
) -> MutationResponse:
    """관리자가 보낸 메시지 삭제"""
    if sender_type != "admin":
        return MutationResponse(error="You can only delete your own messages")

    def transform(messages: list[dict[str, Any]]) -> list[dict[str, Any]] | str:
        target = next((m for m in messages if isinstance(m, dict) and m.get("id") == message_id), None)
        if target is None:
            return "Message not found"
        if target.get("sender_type") != "admin":
            return "You can only delete your own messages"
        return [m for m in messages if m is not target]

    return await _rewrite_messages(session, report_id, "delete report message", transform)
