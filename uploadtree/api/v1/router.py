from fastapi import APIRouter

from uploadtree.api.v1.endpoints import health, uploads

api_router = APIRouter()

# Include endpoint routers with specific prefixes
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(uploads.router, prefix="/uploads", tags=["uploads"])
