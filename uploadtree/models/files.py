"""
File references passed through the uploader lifecycle
"""

import mimetypes
import os
import re
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Optional, Union

if TYPE_CHECKING:
    from uploadtree.services.uploader.interfaces import FileUploader

SANITIZE_PATTERN = re.compile(r"[^a-zA-Z0-9\.\-\+_]")


def sanitize_filename(name: str) -> str:
    """Reduce a client supplied filename to a safe basename"""
    name = name.replace("\\", "/").rsplit("/", 1)[-1]
    name = SANITIZE_PATTERN.sub("_", name)
    if name and not name.strip("."):
        name = "_" + name
    return name


def _extension(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


class SanitizedFile:
    """A local file, or an open stream, with a sanitized filename"""

    def __init__(self,
                 path: Optional[Union[str, os.PathLike]] = None,
                 original_filename: Optional[str] = None,
                 stream: Optional[BinaryIO] = None,
                 content_type: Optional[str] = None):
        self.path = Path(path) if path is not None else None
        self.stream = stream
        self._original_filename = original_filename
        self._content_type = content_type

    @classmethod
    def wrap(cls, obj: Any, filename: Optional[str] = None) -> "SanitizedFile":
        """
        Normalize whatever was handed to an uploader

        Args:
            obj: A SanitizedFile, a filesystem path, or a binary file object
            filename: Overrides the filename derived from `obj`

        Returns:
            A SanitizedFile
        """
        if isinstance(obj, SanitizedFile):
            if filename is None:
                return obj
            return cls(obj.path, filename, obj.stream, obj._content_type)
        if isinstance(obj, (str, os.PathLike)):
            return cls(path=obj, original_filename=filename)
        if hasattr(obj, "read"):
            name = filename or getattr(obj, "filename", None) or getattr(obj, "name", None)
            return cls(stream=obj, original_filename=os.path.basename(str(name)) if name else None)
        raise TypeError(f"Cannot build an uploadable file from {type(obj).__name__}")

    def __repr__(self) -> str:
        return f"SanitizedFile(path={self.path!r}, filename={self.filename!r})"

    @property
    def original_filename(self) -> Optional[str]:
        if self._original_filename:
            return self._original_filename
        if self.path is not None:
            return self.path.name
        return None

    @property
    def filename(self) -> Optional[str]:
        if not self.original_filename:
            return None
        return sanitize_filename(self.original_filename)

    @property
    def extension(self) -> str:
        return _extension(self.filename)

    @property
    def content_type(self) -> Optional[str]:
        if self._content_type:
            return self._content_type
        return mimetypes.guess_type(self.filename or "")[0]

    def exists(self) -> bool:
        if self.path is not None:
            return self.path.exists()
        return self.stream is not None

    @property
    def size(self) -> int:
        if self.path is not None:
            return self.path.stat().st_size if self.path.exists() else 0
        if self.stream is not None and hasattr(self.stream, "seek"):
            position = self.stream.tell()
            self.stream.seek(0, os.SEEK_END)
            size = self.stream.tell()
            self.stream.seek(position)
            return size
        return 0

    @property
    def empty(self) -> bool:
        return not self.exists() or self.size == 0

    def read(self) -> bytes:
        if self.path is not None:
            return self.path.read_bytes()
        if self.stream is not None:
            if hasattr(self.stream, "seek"):
                self.stream.seek(0)
            return self.stream.read()
        return b""

    def copy_to(self, destination: Union[str, os.PathLike]) -> "SanitizedFile":
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        if self.path is not None:
            if self.path.resolve() != destination.resolve():
                shutil.copyfile(self.path, destination)
        elif self.stream is not None:
            if hasattr(self.stream, "seek"):
                self.stream.seek(0)
            with open(destination, "wb") as out:
                shutil.copyfileobj(self.stream, out)
        else:
            raise ValueError("Cannot copy an empty file")
        return SanitizedFile(destination, content_type=self._content_type)

    def delete(self) -> None:
        if self.path is not None and self.path.exists():
            self.path.unlink()


class StoredFile:
    """A file living in a storage backend, addressed by its object key"""

    path = None

    def __init__(self, storage: "FileUploader", key: str):
        self.storage = storage
        self.key = key

    def __repr__(self) -> str:
        return f"StoredFile(key={self.key!r})"

    @property
    def filename(self) -> str:
        return self.key.rsplit("/", 1)[-1]

    original_filename = filename

    @property
    def extension(self) -> str:
        return _extension(self.filename)

    @property
    def content_type(self) -> Optional[str]:
        return mimetypes.guess_type(self.filename)[0]

    def exists(self) -> bool:
        return self.storage.object_exists(self.key)

    def url(self) -> str:
        return self.storage.url_for(self.key)

    def download_to(self, destination: Union[str, os.PathLike]) -> SanitizedFile:
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        self.storage.download(self.key, str(destination))
        return SanitizedFile(destination)

    def delete(self) -> None:
        self.storage.delete_object(self.key)
