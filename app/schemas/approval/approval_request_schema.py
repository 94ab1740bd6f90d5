from pydantic import BaseModel, validator
from typing import Optional, Any, Dict
from datetime import datetime
from app.models.shared.enums import ApprovalDecision, ApprovalStatus, UserRole

class ApprovalRequestBase(BaseModel):
    request_type: str
    entity_kind: str
    record_id: Optional[int] = None
    reason: Optional[str] = None

class ApprovalRequestCreate(ApprovalRequestBase):
    new_data: Optional[Dict[str, Any]] = None
    department_id: Optional[int] = None  # Only used for records that do not exist yet

    @validator("request_type", "entity_kind")
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

class ApprovalRequestResponse(ApprovalRequestBase):
    id: int
    requester_id: int
    approver_id: Optional[int] = None
    status: ApprovalStatus
    table_name: str
    old_data: Optional[Dict[str, Any]] = None
    new_data: Optional[Dict[str, Any]] = None
    department_id: Optional[int] = None
    approver_role: UserRole
    approved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ApprovalResolveRequest(BaseModel):
    status: ApprovalDecision

class ApprovalStats(BaseModel):
    total: int = 0
    pending: int = 0
    pending_admin: int = 0
    approved: int = 0
    rejected: int = 0
