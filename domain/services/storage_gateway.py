from abc import ABC, abstractmethod
from typing import BinaryIO, List

from domain.entities.stored_file import StoredFile


class StorageError(Exception):
    """A storage operation failed; the caller may retry"""
    pass


class GatewayInitError(StorageError):
    """The storage backend could not be reached at startup"""
    pass


class IStorageGateway(ABC):
    """Interface for the folder that keeps uploaded mods"""

    @abstractmethod
    async def store(self, file_name: str, reader: BinaryIO) -> StoredFile:
        """
        Create a file in the folder.

        Raises:
            StorageError: If the file could not be stored
        """
        pass

    @abstractmethod
    async def list_children(self) -> List[StoredFile]:
        """
        List files in the folder, oldest first.

        Raises:
            StorageError: If the listing could not be fetched
        """
        pass
