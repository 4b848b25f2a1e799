from fastapi import APIRouter

from app.presentation.routers.v1.ai import router as ai_router
from app.presentation.routers.v1.auth import router as auth_router
from app.presentation.routers.v1.maintenance import router as maintenance_router

api = APIRouter()

# Add all v1 routers here
routers = (auth_router, ai_router, maintenance_router)
for router in routers:
    api.include_router(router, prefix="/v1")
