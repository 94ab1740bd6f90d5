from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import UserRole

class User(BaseModel):
    """Directory copy of identity-provider users, used for approver routing."""
    __tablename__ = "users"

    username = Column(String(100), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.VIEWER)
    department_id = Column(Integer, ForeignKey('departments.id'), nullable=True)
    is_active = Column(Boolean, default=True)

    def __repr__(self):
        return f"<User {self.username}>"
