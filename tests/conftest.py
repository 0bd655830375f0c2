"""
Pytest configuration for UploadTree tests
"""

import tempfile
from pathlib import Path

import pytest

from uploadtree.core.config import Settings
from uploadtree.models.definition import UploaderDefinition
from uploadtree.services.uploader import FileUploadService, LocalFileUploader, Uploader


class Photo:
    """Stand-in for a model object; collects lifecycle events of the whole tree"""
    def __init__(self):
        self.events = []


class PhotoUploader(Uploader):
    """Uploader with predicates and processors used across the tests"""

    def is_image(self, file):
        return file is not None and file.extension in ("gif", "png", "jpg", "jpeg")

    def never(self, file):
        return False

    def record(self, label="process"):
        # Uploaders built by FileUploadService have no model unless one is given
        if self.model is not None:
            self.model.events.append((label, self.version_name))

    def append(self, text):
        with open(self.current_path, "ab") as f:
            f.write(text.encode())

    def store(self, new_file=None):
        if self.cached or new_file is not None:
            self.record("store")
        super().store(new_file)

    def remove(self):
        self.record("remove")
        super().remove()

    def retrieve_from_cache(self, cache_name):
        self.record("retrieve_from_cache")
        super().retrieve_from_cache(cache_name)

    def retrieve_from_store(self, identifier):
        self.record("retrieve_from_store")
        super().retrieve_from_store(identifier)


@pytest.fixture
def temp_dir():
    """Temporary directory for test outputs"""
    with tempfile.TemporaryDirectory() as tmpdirname:
        yield Path(tmpdirname)


@pytest.fixture
def settings(temp_dir):
    return Settings(
        _env_file=None,
        cache_dir=str(temp_dir / "cache"),
        storage_path=str(temp_dir / "store"),
        base_url="/files",
        store_dir="uploads",
    )


@pytest.fixture
def storage(settings):
    return LocalFileUploader(settings.storage_path, settings.base_url)


@pytest.fixture
def photo():
    return Photo()


@pytest.fixture
def source_file(temp_dir):
    path = temp_dir / "source" / "photo.gif"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"GIF89a")
    return path


@pytest.fixture
def definition():
    """
    Root with a thumb version nesting a small version, and a preview version
    that only applies to images
    """
    root = UploaderDefinition()
    root.process("append", "-root")
    root.version("thumb", block=lambda thumb: thumb.process("append", "-thumb"))
    root.versions["thumb"].definition.version(
        "small", block=lambda small: small.process("append", "-small")
    )
    root.version("preview", if_="is_image")
    return root


@pytest.fixture
def make_uploader(definition, photo, storage, settings):
    def _make(model=None, definition_=None):
        return PhotoUploader(
            definition_ or definition,
            model=model or photo,
            mounted_as="image",
            storage=storage,
            settings=settings,
        )
    return _make


@pytest.fixture
def service(definition, storage, settings):
    return FileUploadService(definition, storage, PhotoUploader, settings)
