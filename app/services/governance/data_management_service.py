import logging
from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.core.exceptions import ForbiddenError, ValidationError
from app.models.shared.enums import (
    ApprovalRequestType, AuditAction, MutationClass, MutationOperation
)
from app.schemas.auth.actor_schema import Actor
from app.schemas.manage_data.manage_data_schema import ManageDataRecord
from app.services.governance.approval_service import ApprovalService
from app.services.governance.audit_trail import record_audit
from app.services.governance.authorization_policy import classify
from app.services.governance.change_capture import capture
from app.services.governance.entity_registry import resolve
from app.services.governance.mutation_applier import MutationApplier

logger = logging.getLogger(__name__)


class DataManagementService:
    """Entry point for edits to operational records: apply now, or queue for approval"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.applier = MutationApplier(session)
        self.approval_service = ApprovalService(session)

    async def get_record(self, entity_kind: str, record_id: int) -> ManageDataRecord:
        kind = resolve(entity_kind)
        data = await kind.lookup(self.session, record_id)
        department_id = await kind.department_of(self.session, record_id)
        return ManageDataRecord(
            entity_kind=kind.name,
            record_id=record_id,
            department_id=department_id,
            data=data,
        )

    async def update(
        self,
        actor: Actor,
        entity_kind: str,
        record_id: int,
        fields: Dict[str, Any],
        reason: Optional[str] = None,
        request_type: str = ApprovalRequestType.DATA_CHANGE.value,
    ) -> Dict[str, Any]:
        kind = resolve(entity_kind)
        decision = classify(actor.role, actor.department_id, kind.name, MutationOperation.UPDATE)
        logger.info(
            f"Update of {kind.name}#{record_id} by user {actor.actor_id} "
            f"({actor.role.value}) classified {decision.value}"
        )

        if decision == MutationClass.DENIED:
            raise ForbiddenError(f"Your role cannot modify {kind.label.lower()} records")

        proposed = {key: value for key, value in (fields or {}).items() if key in kind.field_names}
        if not proposed:
            raise ValidationError(
                f"no editable fields supplied; expected any of: {', '.join(kind.field_names)}",
                field="fields"
            )

        if decision == MutationClass.VIA_REQUEST:
            change_set = await capture(self.session, kind.name, record_id, proposed)
            approval_request = await self.approval_service.create(
                actor,
                kind.name,
                record_id,
                change_set.old_data,
                change_set.new_data,
                reason,
                request_type,
            )
            return {
                "message": f"{kind.label} change queued for approval",
                "approval_request_id": approval_request.id,
                "status": "pending_approval",
                "approval_request": approval_request,
            }

        try:
            current = await kind.lookup(self.session, record_id)
            old_data = {key: current[key] for key in proposed}

            row = await self.applier.apply(kind.name, record_id, proposed, actor.actor_id)
            new_data = {key: value for key, value in kind.snapshot(row).items() if key in proposed}

            record_audit(
                self.session,
                actor.actor_id,
                AuditAction.DIRECT_UPDATE,
                kind.table_name,
                record_id,
                {"old_data": old_data, "new_data": new_data, "reason": reason},
            )
            data = kind.to_dict(row)
            await self.session.commit()

            logger.info(f"{kind.label} {record_id} updated directly by user {actor.actor_id}")
            return {
                "message": f"{kind.label} updated",
                "status": "updated",
                "data": data,
            }

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating {kind.name}#{record_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error updating {kind.label.lower()}"
            )

    async def delete(self, actor: Actor, entity_kind: str, record_id: int) -> Dict[str, Any]:
        kind = resolve(entity_kind)
        decision = classify(actor.role, actor.department_id, kind.name, MutationOperation.DELETE)
        logger.info(
            f"Delete of {kind.name}#{record_id} by user {actor.actor_id} "
            f"({actor.role.value}) classified {decision.value}"
        )

        if decision != MutationClass.DIRECT:
            raise ForbiddenError(f"Only planners and admins can delete {kind.label.lower()} records")

        try:
            old_data = await kind.lookup(self.session, record_id)
            await self.applier.apply_delete(kind.name, record_id)

            record_audit(
                self.session,
                actor.actor_id,
                AuditAction.DIRECT_DELETE,
                kind.table_name,
                record_id,
                {"old_data": old_data},
            )
            await self.session.commit()

            logger.info(f"{kind.label} {record_id} deleted by user {actor.actor_id}")
            return {
                "message": f"{kind.label} deleted",
                "status": "deleted",
                "record_id": record_id,
            }

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error deleting {kind.name}#{record_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error deleting {kind.label.lower()}"
            )
