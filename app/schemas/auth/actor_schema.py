from typing import Optional
from pydantic import BaseModel
from app.models.shared.enums import UserRole

class Actor(BaseModel):
    """Caller identity as asserted by the identity provider's token"""
    actor_id: int
    role: UserRole
    department_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
