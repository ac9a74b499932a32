from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.schemas import report as report_schema
from app.schemas.common import MutationResponse
from app.services import report_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("", response_model=report_schema.ReportListResponse)
async def list_reports(
    params: Annotated[report_schema.ReportListParams, Query()],
    db: AsyncSession = Depends(get_db),
):
    """신고 목록 조회 API"""
    return await report_service.list_reports(db, params)


@router.get("/all", response_model=list[report_schema.ReportResponse])
async def get_all_reports(db: AsyncSession = Depends(get_db)):
    """신고 일괄 조회 API"""
    return await report_service.get_all_reports(db)


@router.get("/{report_id}", response_model=report_schema.ReportDetailResponse)
async def get_report(report_id: str, db: AsyncSession = Depends(get_db)):
    """신고 상세 조회 API"""
    return await report_service.get_report_detail(db, report_id)


@router.patch("/{report_id}", response_model=MutationResponse)
async def update_report(
    report_id: str,
    request: report_schema.ReportUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    """신고 상태/메모 수정 API"""
    return await report_service.update_report(db, report_id, request)


@router.delete("/{report_id}", response_model=MutationResponse)
async def delete_report(report_id: str, db: AsyncSession = Depends(get_db)):
    """신고 삭제 API"""
    return await report_service.delete_report(db, report_id)


@router.post("/{report_id}/messages", response_model=report_schema.MessageSendResponse)
async def send_message(
    report_id: str,
    request: report_schema.MessageCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    """신고 메시지 전송 API"""
    return await report_service.send_message(db, report_id, request)


@router.delete("/{report_id}/messages/{message_id}", response_model=MutationResponse)
async def delete_message(
    report_id: str,
    message_id: str,
    sender_type: report_schema.SenderType = "admin",
    db: AsyncSession = Depends(get_db),
):
    """신고 메시지 삭제 API (관리자 메시지만)"""
    return await report_service.delete_message(db, report_id, message_id, sender_type)
