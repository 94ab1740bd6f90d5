from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.auth.audit_log import AuditLog
from app.models.shared.enums import AuditAction


def record_audit(
    session: AsyncSession,
    user_id: Optional[int],
    action: AuditAction,
    resource: str,
    resource_id: Optional[int],
    details: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Stage an audit entry in the caller's transaction"""
    entry = AuditLog(
        user_id=user_id,
        action=action.value,
        resource=resource,
        resource_id=resource_id,
        details=details,
        created_by=user_id,
    )
    session.add(entry)
    return entry
