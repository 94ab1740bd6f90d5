from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import MaintenanceType

class MaintenanceRoutine(BaseModel):
    __tablename__ = 'maintenance_routine'

    unique_number = Column(String(50), nullable=False, unique=True)  # e.g. MMTC-21072025-001
    job_name = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    description = Column(Text)
    type = Column(SQLEnum(MaintenanceType), nullable=False, default=MaintenanceType.PREM)
    department_id = Column(Integer, ForeignKey('departments.id'), nullable=False, index=True)
