# app/models/auth/__init__.py

from .user import User
from .audit_log import AuditLog

__all__ = [
    "User",
    "AuditLog",
]
