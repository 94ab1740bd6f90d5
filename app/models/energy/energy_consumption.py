from sqlalchemy import Column, Integer, Float, UniqueConstraint
from app.db.base import BaseModel

class EnergyConsumption(BaseModel):
    __tablename__ = 'energy_consumption'
    __table_args__ = (
        UniqueConstraint('year', 'month', name='uq_energy_consumption_year_month'),
    )

    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    tambang_consumption = Column(Float, nullable=False, default=0)      # Mine
    pabrik_consumption = Column(Float, nullable=False, default=0)       # Plant
    supporting_consumption = Column(Float, nullable=False, default=0)
