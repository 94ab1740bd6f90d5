from sqlalchemy import Column, Integer, String, DateTime, JSON
from app.db.base import BaseModel, utcnow

class AuditLog(BaseModel):
    __tablename__ = "audit_logs"

    user_id = Column(Integer, nullable=True)
    action = Column(String(100), nullable=False)
    resource = Column(String(100), nullable=False)
    resource_id = Column(Integer, nullable=True)
    details = Column(JSON, nullable=True)  # {"old_data": ..., "new_data": ..., "approval_request_id": ...}
    timestamp = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<AuditLog {self.action} on {self.resource}>"
