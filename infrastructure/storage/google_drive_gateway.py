"""
Google Drive storage gateway.

Keeps uploaded mods in one Drive folder. Uploads go through the write
identity (OAuth user); listings go through the read identity, which is a
service account when configured and the write identity otherwise.

The Google API client is blocking, so every call runs in a worker thread.
"""

import asyncio
import logging
from typing import BinaryIO, List, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from domain.entities.stored_file import StoredFile
from domain.services.storage_gateway import IStorageGateway, StorageError

logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
JAR_MIME_TYPE = "application/java-archive"
LIST_PAGE_SIZE = 1000
FILE_FIELDS = "id,name,mimeType"

# Failures of the Drive client and its transport
DRIVE_ERRORS = (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError)


def _quote(value: str) -> str:
    """Escape a string literal for a Drive search query"""
    return value.replace("\\", "\\\\").replace("'", "\\'")


class GoogleDriveGateway(IStorageGateway):
    """IStorageGateway backed by a Google Drive folder"""

    def __init__(
        self,
        write_service,
        folder_id: str,
        read_service=None,
        mime_type: str = JAR_MIME_TYPE,
    ):
        if not folder_id:
            raise ValueError("folder_id is required")
        self.write_service = write_service
        self.read_service = read_service or write_service
        self.folder_id = folder_id
        self.mime_type = mime_type

    # === IStorageGateway ===

    async def store(self, file_name: str, reader: BinaryIO) -> StoredFile:
        return await asyncio.to_thread(self._store_sync, file_name, reader)

    async def list_children(self) -> List[StoredFile]:
        return await asyncio.to_thread(self._list_children_sync)

    # === Blocking calls ===

    def _store_sync(self, file_name: str, reader: BinaryIO) -> StoredFile:
        metadata = {"name": file_name, "parents": [self.folder_id]}
        media = MediaIoBaseUpload(reader, mimetype=self.mime_type, resumable=True)
        try:
            created = (
                self.write_service.files()
                .create(
                    body=metadata,
                    media_body=media,
                    supportsAllDrives=True,
                    fields=FILE_FIELDS,
                )
                .execute()
            )
        except DRIVE_ERRORS as e:
            raise StorageError(f"Google Drive upload error: {e}") from e
        return StoredFile.from_api(created)

    def _list_children_sync(self) -> List[StoredFile]:
        query = f"'{_quote(self.folder_id)}' in parents and trashed=false"
        files: List[StoredFile] = []
        page_token: Optional[str] = None
        try:
            while True:
                response = (
                    self.read_service.files()
                    .list(
                        q=query,
                        pageSize=LIST_PAGE_SIZE,
                        pageToken=page_token,
                        orderBy="createdTime",
                        supportsAllDrives=True,
                        includeItemsFromAllDrives=True,
                        corpora="allDrives",
                        fields=f"nextPageToken, files({FILE_FIELDS})",
                    )
                    .execute()
                )
                files.extend(StoredFile.from_api(item) for item in response.get("files", []))
                page_token = response.get("nextPageToken")
                if not page_token:
                    break
        except DRIVE_ERRORS as e:
            raise StorageError(f"Google Drive listing error: {e}") from e
        return files

    # === Folder resolution ===

    @staticmethod
    def find_or_create_folder(service, folder_name: str) -> str:
        """
        Return the id of a non-trashed folder with this name, creating it if
        none exists. Searches all drives and takes the first match.

        Raises:
            HttpError: If the Drive API call fails
        """
        query = (
            f"name='{_quote(folder_name)}' and mimeType='{FOLDER_MIME_TYPE}' and trashed=false"
        )
        response = (
            service.files()
            .list(
                q=query,
                pageSize=LIST_PAGE_SIZE,
                supportsAllDrives=True,
                includeItemsFromAllDrives=True,
                corpora="allDrives",
                fields=f"files({FILE_FIELDS})",
            )
            .execute()
        )
        found = response.get("files", [])
        if found:
            folder = found[0]
            logger.info(f"Found existing folder: {folder['name']} (ID: {folder['id']})")
            return folder["id"]

        logger.info(f"Creating new folder: {folder_name}")
        folder = (
            service.files()
            .create(
                body={"name": folder_name, "mimeType": FOLDER_MIME_TYPE},
                supportsAllDrives=True,
                fields=FILE_FIELDS,
            )
            .execute()
        )
        logger.info(f"Created new folder: {folder['name']} (ID: {folder['id']})")
        return folder["id"]
