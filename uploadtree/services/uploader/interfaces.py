from abc import ABC, abstractmethod


class FileUploader(ABC):
    """Abstract storage backend interface"""
    @abstractmethod
    def upload(self, local_path: str, object_key: str) -> None:
        pass

    @abstractmethod
    def download(self, object_key: str, local_path: str) -> None:
        pass

    @abstractmethod
    def object_exists(self, object_key: str) -> bool:
        pass

    @abstractmethod
    def delete_object(self, object_key: str) -> None:
        pass

    @abstractmethod
    def url_for(self, object_key: str) -> str:
        pass
