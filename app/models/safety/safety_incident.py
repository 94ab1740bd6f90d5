from sqlalchemy import Column, Integer, UniqueConstraint
from app.db.base import BaseModel

class SafetyIncident(BaseModel):
    """Monthly site-wide safety statistics."""
    __tablename__ = 'safety_incidents'
    __table_args__ = (
        UniqueConstraint('month', 'year', name='uq_safety_incident_month_year'),
    )

    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    nearmiss = Column(Integer, nullable=False, default=0)
    kec_alat = Column(Integer, nullable=False, default=0)     # Equipment damage
    kec_kecil = Column(Integer, nullable=False, default=0)    # Minor injury
    kec_ringan = Column(Integer, nullable=False, default=0)   # Light injury
    kec_berat = Column(Integer, nullable=False, default=0)    # Serious injury
    fatality = Column(Integer, nullable=False, default=0)
