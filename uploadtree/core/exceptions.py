from __future__ import annotations


class UploadTreeError(Exception):
    def __init__(self, http_status: int, code: str, message: str):
        super().__init__(message)
        self.http_status = http_status
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class VersionNotFoundError(UploadTreeError, LookupError):
    def __init__(self, name: str):
        super().__init__(http_status=404, code="VERSION_NOT_FOUND", message=f"Version {name} doesn't exist!")
        self.name = name


class InvalidCacheNameError(UploadTreeError):
    def __init__(self, message: str = "Cache name is invalid"):
        super().__init__(http_status=400, code="INVALID_CACHE_NAME", message=message)


class UploadNotFoundError(UploadTreeError):
    def __init__(self, message: str = "Upload not found"):
        super().__init__(http_status=404, code="UPLOAD_NOT_FOUND", message=message)


class StorageError(UploadTreeError):
    def __init__(self, message: str = "Storage backend failed"):
        super().__init__(http_status=502, code="STORAGE_ERROR", message=message)


class EmptyFileError(UploadTreeError):
    def __init__(self, message: str = "Uploaded file is empty"):
        super().__init__(http_status=400, code="EMPTY_FILE", message=message)
