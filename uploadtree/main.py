"""
UploadTree - derived file versions as a service
Main FastAPI application entry point
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from uploadtree.api.v1.router import api_router
from uploadtree.core.config import Settings, settings
from uploadtree.core.exceptions import UploadTreeError
from uploadtree.models.definition import UploaderDefinition
from uploadtree.services.uploader import FileUploadService, Uploader, UploadServiceBuilder

logging.basicConfig(level=settings.log_level, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def build_default_service(app_settings: Settings = settings) -> FileUploadService:
    """Service for the definition named by UPLOADTREE_UPLOADER_DEFINITION"""
    definition = app_settings.uploader_definition
    if definition is None:
        logger.warning("No uploader definition configured, uploads will have no versions")
        definition = UploaderDefinition()
    uploader_class = app_settings.uploader_class or Uploader
    return UploadServiceBuilder.build(definition, uploader_class, app_settings)


def create_app(service: Optional[FileUploadService] = None, app_settings: Settings = settings) -> FastAPI:
    """
    Build the application

    Args:
        service: Upload service to serve; built from `app_settings` when omitted
        app_settings: Settings used for the app and the default service
    """
    app = FastAPI(
        title=app_settings.app_name,
        description="Derived file versions as a service",
        version="0.1.0",
        debug=app_settings.debug,
    )
    app.state.upload_service = service or build_default_service(app_settings)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure properly for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(UploadTreeError)
    async def _upload_tree_error_handler(_: Request, exc: UploadTreeError) -> JSONResponse:
        logger.warning("upload_error code=%s message=%s", exc.code, exc.message)
        return JSONResponse(
            status_code=exc.http_status,
            content={"code": exc.code, "message": exc.message},
        )

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {"message": f"Welcome to {app_settings.app_name}"}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "uploadtree"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
