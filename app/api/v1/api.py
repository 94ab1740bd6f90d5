from fastapi import APIRouter
from app.api.v1.endpoints.approval import approvals
from app.api.v1.endpoints.manage_data import manage_data

api_router = APIRouter()

# Data governance routes
api_router.include_router(manage_data.router, prefix="/manage-data", tags=["Manage Data"])
api_router.include_router(approvals.router, prefix="/approvals", tags=["Approvals"])
