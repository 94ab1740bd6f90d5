from sqlalchemy import Column, Integer, Float, UniqueConstraint
from app.db.base import BaseModel

class EnergyRealization(BaseModel):
    __tablename__ = 'energy_realizations'
    __table_args__ = (
        UniqueConstraint('year', 'month', name='uq_energy_realization_year_month'),
    )

    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    ikes_realization = Column(Float, nullable=False, default=0)
    emission_realization = Column(Float, nullable=False, default=0)
