"""
Tests for file references
"""

import io
from unittest.mock import Mock

import pytest

from uploadtree.models.files import SanitizedFile, StoredFile, sanitize_filename


class TestSanitizeFilename:

    @pytest.mark.parametrize("raw, expected", [
        ("photo.gif", "photo.gif"),
        ("my photo (1).gif", "my_photo__1_.gif"),
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\me\\photo.png", "photo.png"),
        ("..", "_.."),
    ])
    def test_sanitize(self, raw, expected):
        assert sanitize_filename(raw) == expected


class TestSanitizedFile:

    def test_wrap_path(self, source_file):
        file = SanitizedFile.wrap(source_file)

        assert file.path == source_file
        assert file.filename == "photo.gif"
        assert file.extension == "gif"
        assert file.content_type == "image/gif"
        assert not file.empty

    def test_wrap_path_with_filename_override(self, source_file):
        file = SanitizedFile.wrap(str(source_file), "Holiday Pic.PNG")

        assert file.original_filename == "Holiday Pic.PNG"
        assert file.filename == "Holiday_Pic.PNG"
        assert file.extension == "png"

    def test_wrap_stream(self, temp_dir):
        stream = io.BytesIO(b"hello")
        file = SanitizedFile.wrap(stream, "notes.txt")

        assert file.size == 5
        copy = file.copy_to(temp_dir / "out" / "notes.txt")
        assert copy.read() == b"hello"
        assert copy.filename == "notes.txt"

    def test_wrap_returns_existing_instance(self, source_file):
        file = SanitizedFile(source_file)
        assert SanitizedFile.wrap(file) is file

    def test_wrap_rejects_unknown_objects(self):
        with pytest.raises(TypeError):
            SanitizedFile.wrap(42)

    def test_missing_file_is_empty(self, temp_dir):
        assert SanitizedFile(temp_dir / "missing.gif").empty

    def test_copy_and_delete(self, source_file, temp_dir):
        file = SanitizedFile(source_file).copy_to(temp_dir / "copied" / "photo.gif")

        assert file.read() == b"GIF89a"
        assert source_file.exists()
        file.delete()
        assert not file.path.exists()
        # Deleting twice is harmless
        file.delete()


class TestStoredFile:

    def test_delegates_to_storage(self):
        storage = Mock()
        storage.url_for.return_value = "https://cdn/uploads/thumb_photo.gif"
        storage.object_exists.return_value = True
        file = StoredFile(storage, "uploads/thumb_photo.gif")

        assert file.filename == "thumb_photo.gif"
        assert file.original_filename == "thumb_photo.gif"
        assert file.extension == "gif"
        assert file.url() == "https://cdn/uploads/thumb_photo.gif"
        assert file.exists()

        file.delete()
        storage.delete_object.assert_called_once_with("uploads/thumb_photo.gif")
