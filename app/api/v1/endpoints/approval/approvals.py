import logging
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.api.dependencies import get_current_actor, require_roles
from app.core.database import get_async_session
from app.models.shared.enums import ApprovalStatus, UserRole
from app.schemas.approval.approval_request_schema import (
    ApprovalRequestCreate,
    ApprovalRequestResponse,
    ApprovalResolveRequest,
    ApprovalStats
)
from app.schemas.auth.actor_schema import Actor
from app.schemas.common.pagination import PaginatedResponse
from app.services.governance.approval_service import ApprovalService

router = APIRouter()
logger = logging.getLogger(__name__)

# region ========== Approval Requests ==========

@router.get("", response_model=PaginatedResponse[ApprovalRequestResponse])
async def get_approval_requests(
    status: Optional[ApprovalStatus] = Query(None, description="Filter by status (admins only)"),
    request_type: Optional[str] = Query(None, description="Filter by request type"),
    page_index: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1),
    session: AsyncSession = Depends(get_async_session),
    actor: Actor = Depends(require_roles(UserRole.ADMIN, UserRole.PLANNER))
):
    """Approval queue: a planner's open work, or every request for admins"""
    service = ApprovalService(session)
    return await service.list(
        actor,
        status=status,
        request_type=request_type,
        page_index=page_index,
        page_size=page_size
    )

@router.post("", response_model=ApprovalRequestResponse, status_code=201)
async def create_approval_request(
    request_data: ApprovalRequestCreate,
    session: AsyncSession = Depends(get_async_session),
    actor: Actor = Depends(get_current_actor)
):
    """Create an approval request for a change, deletion or new record"""
    service = ApprovalService(session)
    return await service.submit(actor, request_data)

@router.get("/mine", response_model=List[ApprovalRequestResponse])
async def get_my_approval_requests(
    session: AsyncSession = Depends(get_async_session),
    actor: Actor = Depends(get_current_actor)
):
    """Requests raised by the current user"""
    service = ApprovalService(session)
    return await service.list_mine(actor)

@router.get("/stats", response_model=ApprovalStats)
async def get_approval_stats(
    session: AsyncSession = Depends(get_async_session),
    actor: Actor = Depends(get_current_actor)
):
    """Request counts by status, scoped to what the user can see"""
    service = ApprovalService(session)
    return await service.stats(actor)

@router.get("/{request_id}", response_model=ApprovalRequestResponse)
async def get_approval_request(
    request_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session),
    actor: Actor = Depends(get_current_actor)
):
    service = ApprovalService(session)
    return await service.get(request_id, actor)

@router.put("/{request_id}", response_model=ApprovalRequestResponse)
async def resolve_approval_request(
    decision: ApprovalResolveRequest,
    request_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session),
    actor: Actor = Depends(get_current_actor)
):
    """Approve or reject a request; approval applies the change"""
    service = ApprovalService(session)
    return await service.resolve(request_id, actor, decision.status)

# endregion
