"""
Uploader instances

An Uploader is bound to a model attribute and holds the current file of one
node in a version tree. The root uploader is created by the caller; every
version below it is created lazily from the definition's VersionSpecs.
Subclasses provide the predicate and processor methods named in a definition.
"""

import logging
import os
import random
import re
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from uploadtree.core.config import Settings, settings as default_settings
from uploadtree.core.exceptions import InvalidCacheNameError, StorageError, UploadNotFoundError
from uploadtree.models.definition import ResolvedOptions, UploaderDefinition, VersionSpec
from uploadtree.models.files import SanitizedFile, StoredFile
from uploadtree.services.uploader.interfaces import FileUploader
from uploadtree.services.uploader.versions import NamingResolver, VersionLifecycleCoordinator

logger = logging.getLogger(__name__)

CACHE_ID_PATTERN = re.compile(r"\A\d{8}-\d{4}-\d+-\d{4}\Z")
ORIGINAL_FILENAME_PATTERN = re.compile(r"\A[a-zA-Z0-9\.\-\+_]+\Z")


def generate_cache_id() -> str:
    return f"{datetime.now():%Y%m%d-%H%M}-{os.getpid()}-{random.randint(0, 9999):04d}"


class Uploader:
    def __init__(self,
                 definition: UploaderDefinition,
                 model: Any = None,
                 mounted_as: Optional[str] = None,
                 storage: Optional[FileUploader] = None,
                 parent_options: Optional[ResolvedOptions] = None,
                 settings: Optional[Settings] = None):
        self.settings = settings if settings is not None else default_settings
        self.definition = definition
        self.model = model
        self.mounted_as = mounted_as
        self.storage = storage
        self.options = definition.resolve(parent_options or ResolvedOptions.from_settings(self.settings))

        self.file = None
        self.cache_id: Optional[str] = None
        self.parent_cache_id: Optional[str] = None
        self.original_filename: Optional[str] = None
        self.identifier: Optional[str] = None
        self.coordinator = VersionLifecycleCoordinator(self)

    def __getattr__(self, name: str) -> "Uploader":
        # Declared versions are reachable as attributes, e.g. uploader.thumb
        definition = self.__dict__.get("definition")
        if definition is not None and name in definition.versions:
            return self.versions[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(version={self.version_name!r}, file={self.file!r})"

    # Versions

    @property
    def versions(self) -> Dict[str, "Uploader"]:
        return self.coordinator.instances

    @property
    def version_name_path(self):
        return self.definition.name_path

    @property
    def version_name(self) -> Optional[str]:
        return NamingResolver.version_name(self.version_name_path)

    def build_version(self, spec: VersionSpec) -> "Uploader":
        return type(self)(
            spec.definition,
            model=self.model,
            mounted_as=self.mounted_as,
            storage=self.storage,
            parent_options=self.options,
            settings=self.settings,
        )

    def walk(self) -> Iterator["Uploader"]:
        """This uploader followed by every version below it, pre-order"""
        yield self
        yield from self.coordinator.walk()

    def recreate_versions(self) -> None:
        """Reprocess and store every active version from this uploader's file"""
        self.coordinator.recreate_versions()

    # Naming

    @property
    def filename(self) -> Optional[str]:
        return self.original_filename

    def full_filename(self, for_file: Optional[str]) -> Optional[str]:
        return NamingResolver.storage_filename(self.version_name_path, for_file)

    def store_path(self, for_file: Optional[str] = None) -> str:
        return f"{self.options.store_dir}/{self.full_filename(for_file or self.filename)}"

    def cache_path(self) -> Path:
        return Path(self.settings.cache_dir) / self.cache_id / self.full_filename(self.original_filename)

    @property
    def cache_name(self) -> Optional[str]:
        if not self.cached or not self.original_filename:
            return None
        return f"{self.cache_id}/{self.original_filename}"

    @property
    def cached(self) -> bool:
        return self.cache_id is not None

    @property
    def current_path(self) -> Optional[str]:
        path = getattr(self.file, "path", None)
        return str(path) if path is not None else None

    def url(self, *names: Any) -> Optional[str]:
        """
        URL of this file, or of a nested version

        Example:
            uploader.url()                  # /uploads/photo.gif
            uploader.url("thumb")           # /uploads/thumb_photo.gif
            uploader.url("thumb", "small")  # /uploads/thumb_small_photo.gif
        """
        if names:
            return NamingResolver.resolve(self, names).url()
        if isinstance(self.file, StoredFile):
            return self.file.url()
        if self.cached and self.file is not None:
            return f"{self.settings.cache_url.rstrip('/')}/{self.cache_id}/{self.full_filename(self.original_filename)}"
        return None

    # Lifecycle

    def process(self) -> None:
        if not self.options.enable_processing:
            return
        for processor in self.definition.processors:
            logger.debug(f"Running {processor.name} on {self.current_path}")
            processor(self)

    def cache(self, new_file: Any) -> None:
        new_file = SanitizedFile.wrap(new_file)
        if new_file.empty:
            logger.debug(f"Nothing to cache for {self!r}")
            return

        if self.cache_id is None:
            self.cache_id = generate_cache_id()
        previous_file = self.file
        self.original_filename = new_file.filename
        self.file = new_file.copy_to(self.cache_path())
        if isinstance(previous_file, SanitizedFile) and previous_file.path != self.file.path:
            previous_file.delete()
        self.process()

        self.coordinator.cache_versions(new_file)

    def cache_stored_file(self) -> None:
        """Download the stored file into the cache, which also caches the versions"""
        if not isinstance(self.file, StoredFile):
            raise UploadNotFoundError("There is no stored file to cache")

        filename = self.original_filename or self.file.filename
        with tempfile.TemporaryDirectory() as temp_dir:
            local_file = self.file.download_to(Path(temp_dir) / filename)
            self.cache(local_file)

    def store(self, new_file: Any = None) -> None:
        if new_file is not None:
            new_file = SanitizedFile.wrap(new_file)
            # Versions cached by their parent share its cache id, anything else is re-cached
            if self.cache_id is None or self.cache_id != self.parent_cache_id:
                self.cache(new_file)

        if self.file is None or not self.cached:
            logger.debug(f"Nothing cached for {self!r}, skipping store")
            return
        if self.storage is None:
            raise StorageError("No storage backend configured")

        key = self.store_path(self.original_filename)
        self.storage.upload(str(self.file.path), key)
        if self.settings.delete_tmp_file_after_storage:
            self.file.delete()
        self.file = StoredFile(self.storage, key)
        self.identifier = self.original_filename
        self.cache_id = None

        self.coordinator.store_versions(new_file)

    def remove(self) -> None:
        if self.file is not None:
            self.file.delete()
        self.file = None
        self.cache_id = None
        self.identifier = None

        self.coordinator.remove_versions()

    def retrieve_from_cache(self, cache_name: str) -> None:
        cache_id, _, original_filename = (cache_name or "").partition("/")
        if not CACHE_ID_PATTERN.match(cache_id):
            raise InvalidCacheNameError(f"Cache id {cache_id!r} is invalid")
        if not ORIGINAL_FILENAME_PATTERN.match(original_filename):
            raise InvalidCacheNameError(f"Original filename {original_filename!r} is invalid")

        self.cache_id = cache_id
        self.original_filename = original_filename
        self.file = SanitizedFile(self.cache_path())

        self.coordinator.retrieve_versions_from_cache(cache_name)

    def retrieve_from_store(self, identifier: str) -> None:
        if self.storage is None:
            raise StorageError("No storage backend configured")
        self.identifier = identifier
        self.original_filename = identifier
        self.file = StoredFile(self.storage, self.store_path(identifier))

        self.coordinator.retrieve_versions_from_store(identifier)
