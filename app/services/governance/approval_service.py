import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import select, func, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError
from fastapi import HTTPException, status

from app.core.config import settings
from app.core.exceptions import (
    ForbiddenError, InvalidTransitionError, NotFoundError, ValidationError
)
from app.db.base import utcnow
from app.models.approval.approval_request import ApprovalRequest
from app.models.auth.user import User
from app.models.shared.enums import (
    ApprovalDecision, ApprovalRequestType, ApprovalStatus, AuditAction, UserRole
)
from app.schemas.approval.approval_request_schema import (
    ApprovalRequestCreate, ApprovalRequestResponse, ApprovalStats
)
from app.schemas.auth.actor_schema import Actor
from app.services.governance.audit_trail import record_audit
from app.services.governance.authorization_policy import (
    ROLE_RANK, RoutingDecision, can_resolve, can_view_queue, route_approver
)
from app.services.governance.change_capture import RoutingContext, capture, capture_deletion
from app.services.governance.entity_registry import resolve
from app.services.governance.mutation_applier import MutationApplier

logger = logging.getLogger(__name__)


class ApprovalService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.applier = MutationApplier(session)

    # region ========== Request Creation ==========

    async def create(
        self,
        requester: Actor,
        entity_kind: str,
        record_id: Optional[int],
        old_data: Optional[Dict[str, Any]],
        new_data: Optional[Dict[str, Any]],
        reason: Optional[str],
        request_type: str,
        department_id: Optional[int] = None,
    ) -> ApprovalRequestResponse:
        """
        Persist an open approval request routed to the right approver.

        The department is inferred from the target record when the kind has
        one; ``department_id`` is only a fallback for records that do not
        exist yet.
        """
        try:
            kind = resolve(entity_kind)
            request_type = (request_type or "").strip()
            if not request_type:
                raise ValidationError("must not be blank", field="request_type")

            if record_id is None:
                if request_type == ApprovalRequestType.DATA_DELETION.value:
                    raise ValidationError("a deletion request needs a record", field="record_id")
                if not kind.supports_create:
                    raise ValidationError(
                        f"{kind.label} requests must target an existing record", field="record_id"
                    )
                inferred_department = department_id if department_id is not None else requester.department_id
            elif kind.has_department:
                inferred_department = await kind.department_of(self.session, record_id)
            else:
                inferred_department = None

            routing = route_approver(
                requester.role, inferred_department, request_type, requester.department_id
            )
            approver_id = await self._pick_approver(routing, requester.actor_id)

            approval_request = ApprovalRequest(
                requester_id=requester.actor_id,
                approver_id=approver_id,
                status=routing.initial_status,
                request_type=request_type,
                entity_kind=kind.name,
                table_name=kind.table_name,
                record_id=record_id,
                old_data=old_data,
                new_data=new_data,
                reason=reason,
                department_id=routing.department_id,
                approver_role=routing.approver_role,
                created_by=requester.actor_id,
            )
            self.session.add(approval_request)
            await self.session.flush()

            record_audit(
                self.session,
                requester.actor_id,
                AuditAction.REQUEST_CREATED,
                kind.table_name,
                record_id,
                {
                    "approval_request_id": approval_request.id,
                    "request_type": request_type,
                    "old_data": old_data,
                    "new_data": new_data,
                },
            )
            await self.session.commit()

            logger.info(
                f"Approval request created: ID={approval_request.id}, Type={request_type}, "
                f"Kind={kind.name}, Record={record_id}, Status={approval_request.status.value}, "
                f"Department={routing.department_id}, Approver={approver_id or routing.approver_role.value}"
            )
            return ApprovalRequestResponse.model_validate(approval_request, from_attributes=True)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating approval request: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creating approval request"
            )

    async def submit(self, requester: Actor, data: ApprovalRequestCreate) -> ApprovalRequestResponse:
        """Create a request directly, snapshotting the current values first"""
        if ROLE_RANK[requester.role] < ROLE_RANK[UserRole.INPUTTER]:
            raise ForbiddenError("Your role cannot request data changes")
        kind = resolve(data.entity_kind)

        if data.request_type == ApprovalRequestType.DATA_DELETION.value:
            if data.record_id is None:
                raise ValidationError("a deletion request needs a record", field="record_id")
            change_set = await capture_deletion(self.session, kind.name, data.record_id)
        else:
            proposed = data.new_data or {}
            if not any(key in kind.field_names for key in proposed):
                raise ValidationError(
                    f"no editable fields supplied; expected any of: {', '.join(kind.field_names)}",
                    field="new_data"
                )
            change_set = await capture(
                self.session, kind.name, data.record_id, proposed,
                RoutingContext(department_id=data.department_id)
            )

        return await self.create(
            requester,
            kind.name,
            data.record_id,
            change_set.old_data,
            change_set.new_data,
            data.reason,
            data.request_type,
            department_id=change_set.routing.department_id,
        )

    async def _pick_approver(self, routing: RoutingDecision, requester_id: int) -> Optional[int]:
        """Name an approver only when exactly one active user other than the requester fits the routing"""
        conditions = [
            User.role == routing.approver_role,
            User.is_active == True,
            User.id != requester_id,
        ]
        if routing.approver_role == UserRole.PLANNER and routing.department_id is not None:
            conditions.append(User.department_id == routing.department_id)

        result = await self.session.execute(select(User.id).where(*conditions).limit(2))
        candidates = result.scalars().all()
        return candidates[0] if len(candidates) == 1 else None

    # endregion

    # region ========== Resolution ==========

    async def resolve(
        self,
        request_id: int,
        actor: Actor,
        decision: ApprovalDecision,
    ) -> ApprovalRequestResponse:
        """
        Approve or reject an open request in one transaction.

        The request row is locked and re-read, checked, moved to its terminal
        state and, on approval, the stored change is applied before commit.
        A concurrent resolver loses on the version check and gets
        InvalidTransitionError; nothing it did is kept.
        """
        try:
            result = await self.session.execute(
                select(ApprovalRequest)
                .where(ApprovalRequest.id == request_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            request = result.scalar_one_or_none()

            if not request:
                raise NotFoundError(f"Approval request {request_id} not found")

            if not request.is_open:
                raise InvalidTransitionError(
                    f"Approval request {request_id} is already resolved ({request.status.value})"
                )

            if request.status == ApprovalStatus.PENDING_ADMIN_APPROVAL and not actor.is_admin:
                raise ForbiddenError("Only an admin can resolve an escalated request")

            if request.requester_id == actor.actor_id and not actor.is_admin:
                raise ForbiddenError("You cannot resolve your own request")

            if not can_resolve(
                actor.actor_id, actor.role, actor.department_id, request.status,
                request.requester_id, request.approver_id, request.department_id
            ):
                raise ForbiddenError("You are not authorized to resolve this request")

            request.status = ApprovalStatus(decision.value)
            if request.approver_id is None:
                request.approver_id = actor.actor_id
            request.approved_at = utcnow()
            request.updated_by = actor.actor_id

            if decision == ApprovalDecision.APPROVED:
                await self.applier.apply_request(request, actor.actor_id)

            record_audit(
                self.session,
                actor.actor_id,
                AuditAction.REQUEST_APPROVED if decision == ApprovalDecision.APPROVED
                else AuditAction.REQUEST_REJECTED,
                request.table_name,
                request.record_id,
                {
                    "approval_request_id": request.id,
                    "old_data": request.old_data,
                    "new_data": request.new_data,
                },
            )
            await self.session.commit()

            logger.info(
                f"Approval request {request_id} {decision.value.lower()} by user {actor.actor_id} "
                f"({actor.role.value})"
            )
            return ApprovalRequestResponse.model_validate(request, from_attributes=True)

        except HTTPException:
            await self.session.rollback()
            raise
        except StaleDataError:
            await self.session.rollback()
            logger.warning(f"Approval request {request_id} was resolved concurrently")
            raise InvalidTransitionError(f"Approval request {request_id} is already resolved")
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error resolving approval request {request_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error resolving approval request"
            )

    # endregion

    # region ========== Queries ==========

    def _scope_conditions(self, actor: Actor) -> List[Any]:
        """Rows an actor may see in queue-style views"""
        if actor.is_admin:
            return []
        if actor.role == UserRole.PLANNER:
            # Own requests are tracked through list_mine, never resolved here
            return [
                ApprovalRequest.requester_id != actor.actor_id,
                or_(
                    ApprovalRequest.approver_id == actor.actor_id,
                    and_(
                        ApprovalRequest.approver_id.is_(None),
                        ApprovalRequest.approver_role == UserRole.PLANNER,
                        or_(
                            ApprovalRequest.department_id == actor.department_id,
                            ApprovalRequest.department_id.is_(None),
                        ),
                    ),
                )
            ]
        return [ApprovalRequest.requester_id == actor.actor_id]

    async def list(
        self,
        actor: Actor,
        status: Optional[ApprovalStatus] = None,
        request_type: Optional[str] = None,
        page_index: int = 1,
        page_size: int = 20,
    ) -> Dict[str, Any]:
        """Approval queue: planners get their open PENDING work, admins everything"""
        if not can_view_queue(actor.role):
            raise ForbiddenError("Only planners and admins can view the approval queue")

        page_index = max(page_index, 1)
        page_size = min(max(page_size, 1), settings.APPROVAL_PAGE_SIZE_MAX)

        conditions = self._scope_conditions(actor)
        if actor.role == UserRole.PLANNER:
            conditions.append(ApprovalRequest.status == ApprovalStatus.PENDING)
        elif status:
            conditions.append(ApprovalRequest.status == status)
        if request_type:
            conditions.append(ApprovalRequest.request_type == request_type)

        total_count = await self.session.scalar(
            select(func.count(ApprovalRequest.id)).where(*conditions)
        )

        skip = (page_index - 1) * page_size
        result = await self.session.execute(
            select(ApprovalRequest)
            .where(*conditions)
            .order_by(ApprovalRequest.created_at.desc(), ApprovalRequest.id.desc())
            .offset(skip)
            .limit(page_size)
        )
        requests = result.scalars().all()

        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total_count or 0,
            "data": [
                ApprovalRequestResponse.model_validate(req, from_attributes=True)
                for req in requests
            ]
        }

    async def get(self, request_id: int, actor: Actor) -> ApprovalRequestResponse:
        request = await self.session.get(ApprovalRequest, request_id)
        if not request:
            raise NotFoundError(f"Approval request {request_id} not found")

        visible = (
            actor.is_admin
            or request.requester_id == actor.actor_id
            or request.approver_id == actor.actor_id
            or (
                actor.role == UserRole.PLANNER
                and request.approver_id is None
                and request.department_id in (None, actor.department_id)
            )
        )
        if not visible:
            raise ForbiddenError("You are not allowed to view this approval request")

        return ApprovalRequestResponse.model_validate(request, from_attributes=True)

    async def list_mine(self, requester: Actor) -> List[ApprovalRequestResponse]:
        result = await self.session.execute(
            select(ApprovalRequest)
            .where(ApprovalRequest.requester_id == requester.actor_id)
            .order_by(ApprovalRequest.created_at.desc(), ApprovalRequest.id.desc())
        )
        return [
            ApprovalRequestResponse.model_validate(req, from_attributes=True)
            for req in result.scalars().all()
        ]

    async def stats(self, actor: Actor) -> ApprovalStats:
        result = await self.session.execute(
            select(ApprovalRequest.status, func.count(ApprovalRequest.id))
            .where(*self._scope_conditions(actor))
            .group_by(ApprovalRequest.status)
        )
        counts = {row[0]: row[1] for row in result.all()}

        return ApprovalStats(
            total=sum(counts.values()),
            pending=counts.get(ApprovalStatus.PENDING, 0),
            pending_admin=counts.get(ApprovalStatus.PENDING_ADMIN_APPROVAL, 0),
            approved=counts.get(ApprovalStatus.APPROVED, 0),
            rejected=counts.get(ApprovalStatus.REJECTED, 0),
        )

    # endregion
