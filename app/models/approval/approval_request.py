from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum as SQLEnum, JSON, DateTime
from app.db.base import BaseModel
from app.models.shared.enums import ApprovalStatus, OPEN_APPROVAL_STATUSES, UserRole

class ApprovalRequest(BaseModel):
    __tablename__ = 'approval_requests'

    requester_id = Column(Integer, nullable=False, index=True)  # User ID from identity provider
    approver_id = Column(Integer, nullable=True, index=True)    # Named approver, or resolver once resolved
    status = Column(SQLEnum(ApprovalStatus), nullable=False, default=ApprovalStatus.PENDING, index=True)
    request_type = Column(String(50), nullable=False)  # data_change, data_deletion, ...
    entity_kind = Column(String(50), nullable=False, index=True)  # Registry key, e.g. operational_report
    table_name = Column(String(50), nullable=False)    # Backing table of the entity kind
    record_id = Column(Integer, nullable=True)          # None for requests about a record that does not exist yet
    old_data = Column(JSON, nullable=True)
    new_data = Column(JSON, nullable=True)              # Domain fields only
    reason = Column(Text)
    approved_at = Column(DateTime(timezone=True))       # Resolved at, for either outcome

    # Routing context, kept out of new_data
    department_id = Column(Integer, ForeignKey('departments.id'), nullable=True, index=True)
    approver_role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.PLANNER)

    # Optimistic concurrency for resolution
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_APPROVAL_STATUSES

    def __repr__(self):
        return f"<ApprovalRequest {self.id} {self.entity_kind}#{self.record_id} {self.status}>"
