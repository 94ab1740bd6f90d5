from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import CriticalIssueStatus

class CriticalIssue(BaseModel):
    __tablename__ = 'critical_issues'

    issue_name = Column(String(255), nullable=False)
    department_id = Column(Integer, ForeignKey('departments.id'), nullable=False, index=True)
    status = Column(SQLEnum(CriticalIssueStatus), nullable=False, default=CriticalIssueStatus.INVESTIGASI)
    description = Column(Text)
