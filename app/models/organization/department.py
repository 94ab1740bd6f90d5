from sqlalchemy import Column, String, Boolean, Text
from app.db.base import BaseModel

class Department(BaseModel):
    __tablename__ = 'departments'

    name = Column(String(100), nullable=False, unique=True)
    code = Column(String(20), nullable=False, unique=True, index=True)  # MTCENG, MMTC, PMTC, ECDC, HETU
    description = Column(Text)
    is_active = Column(Boolean, default=True)

    def __repr__(self):
        return f"<Department {self.code}>"
