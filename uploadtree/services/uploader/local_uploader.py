import logging
import shutil
from pathlib import Path

from uploadtree.core.exceptions import StorageError
from uploadtree.services.uploader.interfaces import FileUploader

logger = logging.getLogger(__name__)


class LocalFileUploader(FileUploader):
    """Stores objects as files below a root directory"""
    def __init__(self, root: str, base_url: str = "/uploads"):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _path(self, object_key: str) -> Path:
        path = (self.root / object_key).resolve()
        if self.root.resolve() not in path.parents:
            raise StorageError(f"Object key {object_key} escapes the storage root")
        return path

    def upload(self, local_path: str, object_key: str) -> None:
        target = self._path(object_key)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copyfile(local_path, target)
        except OSError as e:
            logger.error(f"Upload failed for {object_key}: {e}")
            raise StorageError(f"Upload failed for {object_key}: {e}") from e
        logger.info(f"Stored {object_key}")

    def download(self, object_key: str, local_path: str) -> None:
        try:
            shutil.copyfile(self._path(object_key), local_path)
        except OSError as e:
            logger.error(f"Download failed for {object_key}: {e}")
            raise StorageError(f"Download failed for {object_key}: {e}") from e

    def object_exists(self, object_key: str) -> bool:
        return self._path(object_key).is_file()

    def delete_object(self, object_key: str) -> None:
        path = self._path(object_key)
        if path.exists():
            path.unlink()
            logger.info(f"Deleted {object_key}")

    def url_for(self, object_key: str) -> str:
        return f"{self.base_url}/{object_key}"
