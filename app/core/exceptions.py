from typing import Optional
from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class ConfigurationError(BaseAppException):
    """Unknown entity kind or broken registry entry. Not retried."""
    def __init__(self, detail: str = "Governance configuration error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class ValidationError(BaseAppException):
    def __init__(self, detail: str = "Validation error", field: Optional[str] = None):
        self.field = field
        if field:
            detail = f"{field}: {detail}"
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)

class NotFoundError(BaseAppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class ForbiddenError(BaseAppException):
    def __init__(self, detail: str = "You are not allowed to perform this action"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class InvalidTransitionError(BaseAppException):
    def __init__(self, detail: str = "Approval request is already resolved"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
