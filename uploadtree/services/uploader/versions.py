"""
Version lifecycle propagation and naming

Every lifecycle operation of an Uploader first completes on the uploader
itself and then calls into its VersionLifecycleCoordinator, which repeats the
operation on each child version in declaration order. Each child does the
same for its own versions, so a whole subtree finishes before the next
sibling starts.

Caching and storing only reach versions whose `if` condition holds for the
current file. Removing and retrieving reach every declared version, so stale
artifacts are still cleaned up and previously produced files can still be
served.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Sequence, Tuple

from uploadtree.core.exceptions import VersionNotFoundError
from uploadtree.models.files import SanitizedFile

if TYPE_CHECKING:
    from uploadtree.services.uploader.base import Uploader

logger = logging.getLogger(__name__)


class NamingResolver:
    """Filenames and lookups derived from a version's name path"""

    SEPARATOR = "_"

    @classmethod
    def version_name(cls, name_path: Sequence[str]) -> Optional[str]:
        if not name_path:
            return None
        return cls.SEPARATOR.join(name_path)

    @classmethod
    def storage_filename(cls, name_path: Sequence[str], base: Optional[str]) -> Optional[str]:
        """Prefix `base` with the version name; the root adds no prefix"""
        parts = [part for part in (cls.version_name(name_path), base) if part]
        return cls.SEPARATOR.join(parts) if parts else None

    @staticmethod
    def resolve(uploader: "Uploader", names: Sequence[Any]) -> "Uploader":
        """Walk down the version tree one name at a time"""
        node = uploader
        for name in names:
            child = node.versions.get(str(name))
            if child is None:
                raise VersionNotFoundError(str(name))
            node = child
        return node


class VersionLifecycleCoordinator:
    def __init__(self, uploader: "Uploader"):
        self.uploader = uploader
        self._instances: Optional[Dict[str, "Uploader"]] = None

    @property
    def instances(self) -> Dict[str, "Uploader"]:
        """One uploader per declared version, built on first access"""
        if self._instances is None:
            self._instances = {
                name: self.uploader.build_version(spec)
                for name, spec in self.uploader.definition.versions.items()
            }
        return self._instances

    def active_versions(self, file) -> List[Tuple[str, "Uploader"]]:
        specs = self.uploader.definition.versions
        return [
            (name, version) for name, version in self.instances.items()
            if specs[name].is_active(self.uploader, file)
        ]

    def cache_versions(self, new_file: SanitizedFile) -> None:
        # Versions derive from the parent's processed file, under the upload's name
        processed_parent = SanitizedFile(self.uploader.file.path, original_filename=new_file.original_filename)

        for name, version in self.active_versions(processed_parent):
            logger.debug(f"Caching version {version.version_name}")
            version.cache_id = self.uploader.cache_id
            version.parent_cache_id = self.uploader.cache_id
            version.cache(processed_parent)

    def store_versions(self, new_file: Optional[SanitizedFile]) -> None:
        current_file = new_file if new_file is not None else self.uploader.file
        for name, version in self.active_versions(current_file):
            logger.debug(f"Storing version {version.version_name}")
            version.store(new_file)

    def remove_versions(self) -> None:
        for version in self.instances.values():
            version.remove()

    def retrieve_versions_from_cache(self, cache_name: str) -> None:
        for version in self.instances.values():
            version.retrieve_from_cache(cache_name)

    def retrieve_versions_from_store(self, identifier: str) -> None:
        for version in self.instances.values():
            version.retrieve_from_store(identifier)

    def recreate_versions(self) -> None:
        # Processing needs a local file, and store() regenerates every active version
        if not self.uploader.cached:
            self.uploader.cache_stored_file()
        self.uploader.store()

    def walk(self) -> Iterator["Uploader"]:
        """Yield every descendant uploader, depth-first, pre-order"""
        for version in self.instances.values():
            yield version
            yield from version.coordinator.walk()
