import logging
from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_actor, require_roles
from app.core.database import get_async_session
from app.models.shared.enums import UserRole
from app.schemas.auth.actor_schema import Actor
from app.schemas.manage_data.manage_data_schema import ManageDataRecord, ManageDataUpdate
from app.services.governance.data_management_service import DataManagementService

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/{entity_kind}/{record_id}", response_model=ManageDataRecord)
async def get_record(
    entity_kind: str = Path(..., description="Entity kind, e.g. operational_report"),
    record_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session),
    actor: Actor = Depends(get_current_actor)
):
    """Get the editable fields of a record"""
    service = DataManagementService(session)
    return await service.get_record(entity_kind, record_id)

@router.put("/{entity_kind}/{record_id}")
async def update_record(
    payload: ManageDataUpdate,
    entity_kind: str = Path(..., description="Entity kind, e.g. operational_report"),
    record_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session),
    actor: Actor = Depends(get_current_actor)
):
    """
    Update a record.

    Planners and admins change the record immediately; inputters get an
    approval request instead and the record stays as it is.
    """
    service = DataManagementService(session)
    return await service.update(
        actor,
        entity_kind,
        record_id,
        payload.fields,
        reason=payload.reason,
        request_type=payload.request_type,
    )

@router.delete("/{entity_kind}/{record_id}")
async def delete_record(
    entity_kind: str = Path(..., description="Entity kind, e.g. operational_report"),
    record_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session),
    actor: Actor = Depends(require_roles(UserRole.ADMIN, UserRole.PLANNER))
):
    """Delete a record (planners and admins only)"""
    service = DataManagementService(session)
    return await service.delete(actor, entity_kind, record_id)
