from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.schemas import group as group_schema
from app.schemas.common import ConfirmRequest, CountItem, MutationResponse, Page
from app.services import group_service
from app.services.confirmation import ConfirmAction, require_confirmation

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=Page[group_schema.GroupResponse])
async def list_groups(
    params: Annotated[group_schema.GroupListParams, Query()],
    db: AsyncSession = Depends(get_db),
):
    """그룹 목록 조회 API"""
    return await group_service.list_groups(db, params)


@router.get("/categories", response_model=list[CountItem])
async def get_category_counts(db: AsyncSession = Depends(get_db)):
    """카테고리별 그룹 수 API"""
    return await group_service.get_category_counts(db)


@router.get("/{group_id}", response_model=group_schema.GroupDetailResponse)
async def get_group(group_id: str, db: AsyncSession = Depends(get_db)):
    """그룹 상세 조회 API"""
    return await group_service.get_group_detail(db, group_id)


@router.get("/{group_id}/members", response_model=Page[group_schema.GroupMember])
async def list_group_members(
    group_id: str,
    params: Annotated[group_schema.GroupMemberListParams, Query()],
    db: AsyncSession = Depends(get_db),
):
    """그룹 멤버 목록 API"""
    return await group_service.list_group_members(db, group_id, params)


@router.patch("/{group_id}", response_model=MutationResponse)
async def update_group(
    group_id: str,
    request: group_schema.GroupUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    """그룹 수정 API"""
    return await group_service.update_group(db, group_id, request)


@router.post("/{group_id}/trash", response_model=MutationResponse)
async def move_group_to_trash(group_id: str, request: ConfirmRequest, db: AsyncSession = Depends(get_db)):
    """그룹 휴지통 이동 API ("Move to Trash" 입력 필요)"""
    require_confirmation(ConfirmAction.SOFT_DELETE, request.confirmation)
    return await group_service.soft_delete_group(db, group_id)


@router.delete("/{group_id}/members/{user_id}", response_model=MutationResponse)
async def remove_member(group_id: str, user_id: str, db: AsyncSession = Depends(get_db)):
    """그룹 멤버 제거 API"""
    return await group_service.remove_member(db, group_id, user_id)


@router.patch("/{group_id}/members/{user_id}/role", response_model=MutationResponse)
async def update_member_role(
    group_id: str,
    user_id: str,
    request: group_schema.MemberRoleUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    """그룹 멤버 역할 변경 API"""
    return await group_service.update_member_role(db, group_id, user_id, request.role)
