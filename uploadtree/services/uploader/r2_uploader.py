import logging
from typing import Optional, Type

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from uploadtree.core.config import Settings, settings as default_settings
from uploadtree.core.exceptions import StorageError
from uploadtree.models.definition import UploaderDefinition
from uploadtree.services.uploader.base import Uploader
from uploadtree.services.uploader.interfaces import FileUploader
from uploadtree.services.uploader.local_uploader import LocalFileUploader
from uploadtree.services.uploader.upload_service import FileUploadService

logger = logging.getLogger(__name__)


class R2Uploader(FileUploader):
    """R2 Bucket storage implementation"""
    def __init__(self, bucket_name: str, endpoint_url: str, access_key: str, secret_key: str,
                 public_url: Optional[str] = None, presign_expires_in: int = 3600):
        self.bucket_name = bucket_name
        self.endpoint_url = endpoint_url
        self.access_key = access_key
        self.secret_key = secret_key
        self.public_url = public_url.rstrip("/") if public_url else None
        self.presign_expires_in = presign_expires_in
        self.boto_client = boto3.client(
                's3',
                endpoint_url=self.endpoint_url,
                aws_access_key_id=self.access_key,
                aws_secret_access_key=self.secret_key,
                config=Config(
                    region_name='auto',
                    signature_version='s3v4'
                )
            )

    def upload(self, local_path: str, object_key: str) -> None:
        try:
            self.boto_client.upload_file(local_path, self.bucket_name, object_key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Upload failed for {object_key}: {str(e)}")
            raise StorageError(f"Upload failed for {object_key}: {str(e)}") from e
        logger.info(f"Uploaded {object_key} to {self.bucket_name}")

    def download(self, object_key: str, local_path: str) -> None:
        try:
            self.boto_client.download_file(self.bucket_name, object_key, local_path)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Download failed for {object_key}: {str(e)}")
            raise StorageError(f"Download failed for {object_key}: {str(e)}") from e

    def object_exists(self, object_key: str) -> bool:
        try:
            self.boto_client.head_object(
                Bucket=self.bucket_name,
                Key=object_key
            )
            return True
        except ClientError:
            return False

    def delete_object(self, object_key: str) -> None:
        try:
            self.boto_client.delete_object(
                Bucket=self.bucket_name,
                Key=object_key
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete {object_key}: {str(e)}")
            raise StorageError(f"Failed to delete {object_key}: {str(e)}") from e
        logger.info(f"Successfully deleted {object_key}")

    def url_for(self, object_key: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{object_key}"
        return self.boto_client.generate_presigned_url(
            'get_object',
            Params={'Bucket': self.bucket_name, 'Key': object_key},
            ExpiresIn=self.presign_expires_in
        )


class R2Config:
    """Immutable configuration object"""
    def __init__(self, bucket: str, endpoint: str, access_key: str, secret_key: str,
                 public_url: Optional[str] = None):
        self.bucket = bucket
        self.endpoint = endpoint
        self.access_key = access_key
        self.secret_key = secret_key
        self.public_url = public_url


class UploadServiceBuilder:
    """Constructs service with dependencies"""
    @staticmethod
    def build_storage(settings: Settings = default_settings) -> FileUploader:
        if settings.storage_backend == "r2":
            config = R2Config(
                bucket=settings.r2_bucket,
                endpoint=settings.r2_endpoint,
                access_key=settings.r2_access_key,
                secret_key=settings.r2_secret_key,
                public_url=settings.r2_public_url
            )
            return R2Uploader(
                bucket_name=config.bucket,
                endpoint_url=config.endpoint,
                access_key=config.access_key,
                secret_key=config.secret_key,
                public_url=config.public_url
            )
        if settings.storage_backend == "local":
            return LocalFileUploader(settings.storage_path, settings.base_url)
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")

    @staticmethod
    def build(definition: UploaderDefinition,
              uploader_class: Type[Uploader] = Uploader,
              settings: Settings = default_settings) -> FileUploadService:
        storage = UploadServiceBuilder.build_storage(settings)
        return FileUploadService(definition, storage, uploader_class, settings)
