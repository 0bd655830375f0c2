import logging
from typing import Any, Dict, Optional, Type

from uploadtree.core.config import Settings, settings as default_settings
from uploadtree.core.exceptions import EmptyFileError, UploadNotFoundError
from uploadtree.models.definition import UploaderDefinition
from uploadtree.models.files import SanitizedFile, sanitize_filename
from uploadtree.services.uploader.base import Uploader
from uploadtree.services.uploader.interfaces import FileUploader

logger = logging.getLogger(__name__)


class FileUploadService:
    """Orchestrates version tree uploads with dependency injection"""

    ORIGINAL = "original"

    def __init__(self,
                 definition: UploaderDefinition,
                 storage: FileUploader,
                 uploader_class: Type[Uploader] = Uploader,
                 settings: Settings = default_settings):
        self.definition = definition
        self.storage = storage
        self.uploader_class = uploader_class
        self.settings = settings

    def new_uploader(self, model: Any = None, mounted_as: Optional[str] = None) -> Uploader:
        return self.uploader_class(
            self.definition,
            model=model,
            mounted_as=mounted_as,
            storage=self.storage,
            settings=self.settings
        )

    def execute_upload(self, source: Any, original_filename: Optional[str] = None,
                       model: Any = None, mounted_as: Optional[str] = None) -> Uploader:
        """Main workflow execution: cache and store the file and all its versions"""
        uploader = self.new_uploader(model, mounted_as)
        uploader.store(SanitizedFile.wrap(source, original_filename))
        if uploader.identifier is None:
            raise EmptyFileError()
        logger.info(f"Uploaded {uploader.identifier} with {sum(1 for _ in uploader.walk()) - 1} versions")
        return uploader

    def retrieve(self, identifier: str, model: Any = None, mounted_as: Optional[str] = None) -> Uploader:
        identifier = sanitize_filename(identifier)
        uploader = self.new_uploader(model, mounted_as)
        uploader.retrieve_from_store(identifier)
        if not uploader.file.exists():
            raise UploadNotFoundError(f"Upload {identifier} not found")
        return uploader

    def delete(self, identifier: str, model: Any = None, mounted_as: Optional[str] = None) -> None:
        uploader = self.retrieve(identifier, model, mounted_as)
        uploader.remove()
        logger.info(f"Removed {identifier} and its versions")

    def recreate(self, identifier: str, model: Any = None, mounted_as: Optional[str] = None) -> Uploader:
        uploader = self.retrieve(identifier, model, mounted_as)
        uploader.recreate_versions()
        logger.info(f"Recreated versions of {identifier}")
        return uploader

    def version_urls(self, uploader: Uploader) -> Dict[str, Optional[str]]:
        """URL of every node in the tree, keyed by version name"""
        return {
            node.version_name or self.ORIGINAL: node.url()
            for node in uploader.walk()
        }
