"""
Uploader Service Package

Builds, caches, stores, retrieves and removes trees of file versions
(thumbnails, previews, ...) derived from a single uploaded file.

Key Components:
- Uploader: One node of a version tree, bound to a model attribute
- VersionLifecycleCoordinator: Drives lifecycle operations through the versions
- NamingResolver: Version filenames and nested version lookup
- FileUploader: Abstract base class for storage backends
- LocalFileUploader: Local disk implementation
- R2Uploader: Cloudflare R2 implementation
- FileUploadService: Main orchestration service
- UploadServiceBuilder: Dependency injection helper
"""

from .interfaces import FileUploader
from .versions import NamingResolver, VersionLifecycleCoordinator
from .base import Uploader, generate_cache_id
from .local_uploader import LocalFileUploader
from .upload_service import FileUploadService
from .r2_uploader import R2Config, R2Uploader, UploadServiceBuilder

__all__ = [
    # Interfaces
    'FileUploader',

    # Version tree
    'Uploader',
    'NamingResolver',
    'VersionLifecycleCoordinator',
    'generate_cache_id',

    # Implementations
    'R2Config',
    'R2Uploader',
    'LocalFileUploader',

    # Services
    'FileUploadService',
    'UploadServiceBuilder'
]

# Package version
__version__ = "1.0.0"
