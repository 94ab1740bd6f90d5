import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.shared.enums import UserRole
from app.services.governance.entity_registry import resolve
from app.utils.date_time_serializer import serialize_dates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoutingContext:
    """Where a request should go; stored next to, never inside, new_data"""
    department_id: Optional[int] = None
    approver_role: UserRole = UserRole.PLANNER


@dataclass(frozen=True)
class ChangeSet:
    old_data: Optional[Dict[str, Any]]
    new_data: Optional[Dict[str, Any]]
    routing: RoutingContext = field(default_factory=RoutingContext)


async def capture(
    session: AsyncSession,
    entity_kind: str,
    record_id: Optional[int],
    proposed_fields: Optional[Dict[str, Any]],
    routing: Optional[RoutingContext] = None,
) -> ChangeSet:
    """
    Snapshot a proposed change before it becomes an approval request.

    old_data holds the current values of the proposed keys only, or None
    when the record does not exist yet. Proposed values are coerced once
    here and discarded, so bad input is rejected before any request row is
    written. The returned maps are copies, so later edits to the caller's
    dict or to the record never leak into the request.
    """
    kind = resolve(entity_kind)
    proposed = dict(proposed_fields or {})

    # Dry run; raises ValidationError naming the field
    kind.coerce(proposed)

    old_data = None
    if record_id is not None:
        current = await kind.lookup(session, record_id)
        old_data = {key: current[key] for key in proposed if key in current}

    new_data = serialize_dates(deepcopy(proposed))

    logger.debug(
        f"Captured change for {entity_kind}#{record_id}: "
        f"{len(proposed)} proposed field(s)"
    )
    return ChangeSet(old_data=old_data, new_data=new_data, routing=routing or RoutingContext())


async def capture_deletion(
    session: AsyncSession,
    entity_kind: str,
    record_id: int,
    routing: Optional[RoutingContext] = None,
) -> ChangeSet:
    """Deletion requests keep the whole mutable view as old_data and carry no new_data"""
    kind = resolve(entity_kind)
    old_data = await kind.lookup(session, record_id)
    return ChangeSet(old_data=old_data, new_data=None, routing=routing or RoutingContext())
