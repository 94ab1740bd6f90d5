"""
Authorization policy for governed mutations.

Pure decisions only: nothing here touches the database or the clock.
Role ranking is admin > planner > inputter > viewer.
"""
from dataclasses import dataclass
from typing import Optional, Union

from app.core.config import settings
from app.models.shared.enums import (
    ApprovalStatus, MutationClass, MutationOperation, UserRole
)

ROLE_RANK = {
    UserRole.VIEWER: 0,
    UserRole.INPUTTER: 1,
    UserRole.PLANNER: 2,
    UserRole.ADMIN: 3,
}

_DIRECT_ROLES = (UserRole.ADMIN, UserRole.PLANNER)


@dataclass(frozen=True)
class RoutingDecision:
    approver_role: UserRole
    department_id: Optional[int]
    escalate: bool

    @property
    def initial_status(self) -> ApprovalStatus:
        return ApprovalStatus.PENDING_ADMIN_APPROVAL if self.escalate else ApprovalStatus.PENDING


def _role(value: Union[UserRole, str, None]) -> Optional[UserRole]:
    if value is None or isinstance(value, UserRole):
        return value
    try:
        return UserRole(str(value).upper())
    except ValueError:
        return None


def classify(
    actor_role: Union[UserRole, str],
    actor_department: Optional[int],
    entity_kind: str,
    operation: MutationOperation,
) -> MutationClass:
    """Decide whether a mutation is applied now, queued for approval, or refused"""
    role = _role(actor_role)
    if role in _DIRECT_ROLES:
        return MutationClass.DIRECT
    if operation == MutationOperation.UPDATE and role == UserRole.INPUTTER:
        return MutationClass.VIA_REQUEST
    return MutationClass.DENIED


def route_approver(
    actor_role: Union[UserRole, str],
    inferred_department: Optional[int],
    request_type: str,
    actor_department: Optional[int] = None,
) -> RoutingDecision:
    """Pick who approves a request: the owning department's planner, or an admin"""
    role = _role(actor_role)
    escalate = False

    if request_type in settings.CROSS_DEPARTMENT_REQUEST_TYPES:
        escalate = True
    elif role == UserRole.PLANNER and request_type in settings.SCHEDULE_IMPACTING_REQUEST_TYPES:
        escalate = True
    elif (
        role == UserRole.PLANNER
        and inferred_department is not None
        and inferred_department != actor_department
    ):
        escalate = True

    return RoutingDecision(
        approver_role=UserRole.ADMIN if escalate else UserRole.PLANNER,
        department_id=inferred_department,
        escalate=escalate,
    )


def can_view_queue(actor_role: Union[UserRole, str]) -> bool:
    return _role(actor_role) in _DIRECT_ROLES


def can_resolve(
    actor_id: int,
    actor_role: Union[UserRole, str],
    actor_department: Optional[int],
    status: ApprovalStatus,
    requester_id: int,
    approver_id: Optional[int],
    request_department: Optional[int],
) -> bool:
    """
    Whether the actor may resolve an open request.

    Admins resolve anything. Escalated requests are admin-only. A named
    approver resolves their own queue; an unnamed request falls to any
    planner of its department (any planner when it has none). Nobody but an
    admin resolves their own request.
    """
    role = _role(actor_role)
    if role == UserRole.ADMIN:
        return True
    if status == ApprovalStatus.PENDING_ADMIN_APPROVAL:
        return False
    if actor_id == requester_id:
        return False
    if approver_id is not None:
        return approver_id == actor_id
    if role != UserRole.PLANNER:
        return False
    return request_department is None or request_department == actor_department
