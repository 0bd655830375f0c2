"""
Health check endpoints
"""

from fastapi import APIRouter, Request

router = APIRouter()

@router.get("/")
async def health_check():
    return {"status": "healthy"}

@router.get("/detailed")
async def detailed_health(request: Request):
    service = request.app.state.upload_service
    return {
        "status": "healthy",
        "storage": type(service.storage).__name__,
        "versions": [spec.definition.name_path for spec in service.definition.walk()]
    }
