"""
Mutation applier
Performs governed writes through the entity registry, for direct edits and
for approved requests. Writes are flushed, never committed: the caller owns
the transaction.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.db.base import BaseModel
from app.models.approval.approval_request import ApprovalRequest
from app.models.shared.enums import ApprovalRequestType
from app.services.governance.change_capture import RoutingContext
from app.services.governance.entity_registry import resolve

logger = logging.getLogger(__name__)


class MutationApplier:
    """
    Executes mutations without re-checking authorization.
    Callers decide whether a mutation is allowed; this class only performs it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def apply(
        self,
        entity_kind: str,
        record_id: int,
        fields: Dict[str, Any],
        actor_id: Optional[int] = None,
    ) -> BaseModel:
        kind = resolve(entity_kind)
        row = await kind.apply_update(self.session, record_id, fields, actor_id)
        logger.info(f"Applied update to {entity_kind}#{record_id}: {sorted((fields or {}).keys())}")
        return row

    async def apply_delete(self, entity_kind: str, record_id: int) -> None:
        kind = resolve(entity_kind)
        await kind.apply_delete(self.session, record_id)
        logger.info(f"Deleted {entity_kind}#{record_id}")

    async def apply_create(
        self,
        entity_kind: str,
        fields: Dict[str, Any],
        routing: Optional[RoutingContext] = None,
        actor_id: Optional[int] = None,
    ) -> BaseModel:
        kind = resolve(entity_kind)
        department_id = routing.department_id if routing else None
        row = await kind.create(self.session, fields, department_id, actor_id)
        logger.info(f"Created {entity_kind}#{row.id} from approved request")
        return row

    # region ============== Approved Request Execution ==============

    async def apply_request(self, request: ApprovalRequest, actor_id: Optional[int] = None) -> Optional[BaseModel]:
        """Execute the stored change of an approved request"""
        if request.request_type == ApprovalRequestType.DATA_DELETION.value:
            if request.record_id is None:
                raise ValidationError("a deletion request needs a record", field="record_id")
            await self.apply_delete(request.entity_kind, request.record_id)
            return None

        if request.record_id is None:
            routing = RoutingContext(
                department_id=request.department_id,
                approver_role=request.approver_role,
            )
            row = await self.apply_create(request.entity_kind, request.new_data or {}, routing, actor_id)
            # Net-new records are linked back to the request that created them
            request.record_id = row.id
            return row

        return await self.apply(request.entity_kind, request.record_id, request.new_data or {}, actor_id)

    # endregion
