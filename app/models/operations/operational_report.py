from sqlalchemy import Column, Integer, String, Float, Boolean, Text, Date, ForeignKey, UniqueConstraint
from app.db.base import BaseModel

class OperationalReport(BaseModel):
    __tablename__ = 'operational_reports'
    __table_args__ = (
        UniqueConstraint('report_date', 'equipment_id', name='uq_operational_report_date_equipment'),
    )

    report_date = Column(Date, nullable=False, index=True)
    equipment_id = Column(Integer, nullable=False)
    department_id = Column(Integer, ForeignKey('departments.id'), nullable=False, index=True)
    total_working = Column(Float, nullable=False, default=0)     # Hours
    total_standby = Column(Float, nullable=False, default=0)
    total_breakdown = Column(Float, nullable=False, default=0)
    shift_type = Column(String(20))
    notes = Column(Text)
    is_complete = Column(Boolean, default=False)
