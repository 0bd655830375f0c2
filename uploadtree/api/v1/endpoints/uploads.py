"""
Upload endpoints: store a file with all of its versions, look up version
URLs, regenerate versions and remove uploads
"""

import tempfile
from pathlib import Path
from typing import Dict, List, Optional

import aiofiles
from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from uploadtree.services.uploader import FileUploadService, Uploader

router = APIRouter()

CHUNK_SIZE = 1024 * 1024

class UploadResponse(BaseModel):
    identifier: str
    url: Optional[str] = None
    versions: Dict[str, Optional[str]]

class VersionUrlResponse(BaseModel):
    identifier: str
    version: Optional[str] = None
    url: Optional[str] = None

def get_upload_service(request: Request) -> FileUploadService:
    return request.app.state.upload_service

def build_upload_response(service: FileUploadService, uploader: Uploader) -> UploadResponse:
    urls = service.version_urls(uploader)
    return UploadResponse(
        identifier=uploader.identifier,
        url=urls.pop(service.ORIGINAL),
        versions=urls
    )

@router.post("/", response_model=UploadResponse, status_code=201)
async def upload_file(file: UploadFile = File(...),
                      service: FileUploadService = Depends(get_upload_service)):
    """Store an uploaded file and every active version derived from it"""
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir) / "upload"
        async with aiofiles.open(temp_path, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                await out.write(chunk)

        uploader = await run_in_threadpool(service.execute_upload, temp_path, file.filename)

    return build_upload_response(service, uploader)

@router.get("/{identifier}/url", response_model=VersionUrlResponse)
async def get_version_url(identifier: str,
                          version: List[str] = Query(default=[]),
                          service: FileUploadService = Depends(get_upload_service)):
    """Resolve the URL of an upload or of a nested version, e.g. ?version=thumb&version=small"""
    uploader = await run_in_threadpool(service.retrieve, identifier)
    return VersionUrlResponse(
        identifier=uploader.identifier,
        version="_".join(version) or None,
        url=uploader.url(*version)
    )

@router.post("/{identifier}/recreate", response_model=UploadResponse)
async def recreate_versions(identifier: str,
                            service: FileUploadService = Depends(get_upload_service)):
    """Reprocess every active version from the stored original"""
    uploader = await run_in_threadpool(service.recreate, identifier)
    return build_upload_response(service, uploader)

@router.delete("/{identifier}", status_code=204)
async def delete_upload(identifier: str,
                        service: FileUploadService = Depends(get_upload_service)):
    """Remove an upload together with all of its versions"""
    await run_in_threadpool(service.delete, identifier)
    return Response(status_code=204)
