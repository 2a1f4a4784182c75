from fastapi import APIRouter

from volunteer_api.modules.applicants import router as applicants_router
from volunteer_api.modules.auth import router as auth_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/admin", tags=["Admin - Authentication"])

api_router.include_router(applicants_router, prefix="/applicants", tags=["Applicants"])
