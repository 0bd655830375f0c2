"""
Core configuration settings
"""

from typing import Optional

from pydantic import ImportString
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="UPLOADTREE_", extra="ignore")

    # Basic settings
    app_name: str = "UploadTree"
    debug: bool = False
    log_level: str = "INFO"

    # Storage
    storage_backend: str = "local"  # local, r2
    storage_path: str = "./storage"
    base_url: str = "/uploads"
    store_dir: str = "uploads"

    # Cache
    cache_dir: str = "./storage/tmp"
    cache_url: str = "/uploads/tmp"
    delete_tmp_file_after_storage: bool = True

    # Processing
    enable_processing: bool = True

    # Served by uploadtree.main, e.g. "myapp.uploads:photo_definition"
    uploader_definition: Optional[ImportString] = None
    uploader_class: Optional[ImportString] = None

    # Cloudflare R2
    r2_bucket: Optional[str] = None
    r2_endpoint: Optional[str] = None
    r2_access_key: Optional[str] = None
    r2_secret_key: Optional[str] = None
    r2_public_url: Optional[str] = None


settings = Settings()
