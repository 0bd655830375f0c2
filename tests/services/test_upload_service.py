"""
Tests for the upload orchestration service
"""

import io
from pathlib import Path
from unittest.mock import patch

import pytest

from uploadtree.core.exceptions import EmptyFileError, UploadNotFoundError
from uploadtree.services.uploader import FileUploadService, LocalFileUploader, UploadServiceBuilder
from uploadtree.models.definition import UploaderDefinition


class TestFileUploadService:

    def test_execute_upload_stores_the_tree(self, service, source_file):
        uploader = service.execute_upload(source_file)

        assert uploader.identifier == "photo.gif"
        assert service.version_urls(uploader) == {
            "original": "/files/uploads/photo.gif",
            "thumb": "/files/uploads/thumb_photo.gif",
            "thumb_small": "/files/uploads/thumb_small_photo.gif",
            "preview": "/files/uploads/preview_photo.gif",
        }

    def test_execute_upload_binds_the_model_to_every_version(self, service, source_file, photo):
        uploader = service.execute_upload(source_file, model=photo, mounted_as="image")

        assert [node.model for node in uploader.walk()] == [photo] * 4
        assert [name for event, name in photo.events if event == "store"] == [
            None, "thumb", "thumb_small", "preview"
        ]

    def test_execute_upload_does_not_build_urls(self, service, source_file):
        with patch.object(service.storage, "url_for") as url_for:
            service.execute_upload(source_file)

        url_for.assert_not_called()

    def test_execute_upload_without_model(self, service, source_file):
        uploader = service.execute_upload(source_file)

        assert uploader.model is None
        assert uploader.thumb.small.model is None

    def test_execute_upload_from_stream(self, service):
        uploader = service.execute_upload(io.BytesIO(b"plain text"), "Meeting Notes.txt")

        assert uploader.identifier == "Meeting_Notes.txt"
        assert service.version_urls(uploader)["preview"] is None

    def test_execute_upload_rejects_empty_file(self, service):
        with pytest.raises(EmptyFileError):
            service.execute_upload(io.BytesIO(b""), "empty.gif")

    def test_retrieve(self, service, source_file):
        service.execute_upload(source_file)

        uploader = service.retrieve("photo.gif")
        assert uploader.url("thumb", "small") == "/files/uploads/thumb_small_photo.gif"

    def test_retrieve_unknown_identifier(self, service):
        with pytest.raises(UploadNotFoundError):
            service.retrieve("missing.gif")

    def test_delete_removes_stale_inactive_versions(self, service, settings):
        service.execute_upload(io.BytesIO(b"plain text"), "notes.txt")
        store_dir = Path(settings.storage_path) / "uploads"
        # Left behind by an earlier definition where preview applied to every file
        (store_dir / "preview_notes.txt").write_text("stale")

        service.delete("notes.txt")

        assert list(store_dir.iterdir()) == []

    def test_recreate(self, service, source_file, settings):
        service.execute_upload(source_file)
        thumb = Path(settings.storage_path) / "uploads" / "thumb_photo.gif"
        thumb.unlink()

        uploader = service.recreate("photo.gif")

        assert thumb.exists()
        assert uploader.identifier == "photo.gif"


class TestUploadServiceBuilder:

    def test_builds_local_storage(self, settings):
        service = UploadServiceBuilder.build(UploaderDefinition(), settings=settings)

        assert isinstance(service, FileUploadService)
        assert isinstance(service.storage, LocalFileUploader)
        assert service.storage.base_url == "/files"

    def test_unknown_backend(self, settings):
        settings.storage_backend = "floppy"
        with pytest.raises(ValueError):
            UploadServiceBuilder.build_storage(settings)
