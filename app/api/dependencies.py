from typing import Optional
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.auth.jwt_handler import decode_access_token
from app.models.shared.enums import UserRole
from app.schemas.auth.actor_schema import Actor
import logging

security = HTTPBearer()
logger = logging.getLogger(__name__)

def _unauthorized(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

async def get_current_actor(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Actor:
    """
    Build the caller identity from the bearer token.

    Role, user id and department come from the identity provider and are
    trusted as-is; no directory lookup is made here.
    """
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise _unauthorized()

    try:
        actor_id = int(payload.get("sub"))
        role = UserRole(str(payload.get("role", "")).upper())
        department_id: Optional[int] = payload.get("department_id")
        if department_id is not None:
            department_id = int(department_id)
    except (TypeError, ValueError):
        logger.warning("Rejected token with malformed identity claims")
        raise _unauthorized()

    actor = Actor(actor_id=actor_id, role=role, department_id=department_id)
    request.state.current_actor = actor
    return actor

def require_roles(*roles: UserRole):
    """
    Dependency to require one of the given roles for an endpoint

    Examples:
        require_roles(UserRole.ADMIN, UserRole.PLANNER)
    """
    async def role_dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient role. Required one of: {', '.join(r.value for r in roles)}"
            )
        return actor

    return role_dependency
