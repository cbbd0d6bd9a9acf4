"""
Google Drive credential loading and gateway construction.

Write identity (required): OAuth user credentials. A cached token is reused
and refreshed when possible; otherwise the installed-app flow runs once and
the token is saved for the next start.

Read identity (optional): service account with read-only scope. Any problem
loading it falls back to the write identity with a warning.
"""

import logging
import os
from typing import Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from domain.services.storage_gateway import GatewayInitError
from infrastructure.storage.google_drive_gateway import DRIVE_ERRORS, GoogleDriveGateway
from shared.config.settings import DriveConfig

logger = logging.getLogger(__name__)

DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"
DRIVE_READONLY_SCOPE = "https://www.googleapis.com/auth/drive.readonly"


def load_write_credentials(oauth_credentials_path: str, token_path: str) -> Credentials:
    """
    Load OAuth user credentials for uploads.

    Raises:
        GatewayInitError: If no usable credentials can be obtained
    """
    scopes = [DRIVE_FILE_SCOPE]
    creds: Optional[Credentials] = None

    if os.path.exists(token_path):
        try:
            creds = Credentials.from_authorized_user_file(token_path, scopes)
        except (ValueError, OSError) as e:
            logger.warning(f"Cached OAuth token {token_path} is unusable, re-authorizing: {e}")

    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
            _save_token(creds, token_path)
            return creds
        except GoogleAuthError as e:
            logger.warning(f"OAuth token refresh failed, re-authorizing: {e}")

    if not os.path.exists(oauth_credentials_path):
        raise GatewayInitError(f"Unable to read OAuth credentials: {oauth_credentials_path} not found")

    try:
        flow = InstalledAppFlow.from_client_secrets_file(oauth_credentials_path, scopes)
        creds = flow.run_local_server(port=0, open_browser=False)
    except (ValueError, OSError, GoogleAuthError) as e:
        raise GatewayInitError(f"Unable to authorize OAuth credentials: {e}") from e

    _save_token(creds, token_path)
    return creds


def _save_token(creds: Credentials, token_path: str) -> None:
    logger.info(f"Saving OAuth token to: {token_path}")
    with open(token_path, "w", encoding="utf-8") as f:
        f.write(creds.to_json())
    os.chmod(token_path, 0o600)


def load_read_credentials(service_credentials_path: Optional[str]):
    """Service account credentials for listing, or None to reuse the write identity"""
    if not service_credentials_path or not os.path.exists(service_credentials_path):
        logger.info("Service Account not configured, using OAuth2 for all operations")
        return None
    try:
        creds = service_account.Credentials.from_service_account_file(
            service_credentials_path, scopes=[DRIVE_READONLY_SCOPE]
        )
    except (ValueError, OSError) as e:
        logger.warning(f"Failed to load Service Account credentials, using OAuth2 for reading: {e}")
        return None
    logger.info("Using Service Account for reading files")
    return creds


def build_drive_gateway(config: DriveConfig) -> GoogleDriveGateway:
    """
    Create the Drive gateway and resolve the target folder.

    Raises:
        GatewayInitError: If Drive cannot be reached or the folder resolved
    """
    write_creds = load_write_credentials(config.oauth_credentials_path, config.token_path)
    try:
        write_service = build("drive", "v3", credentials=write_creds, cache_discovery=False)
    except (HttpError, GoogleAuthError) as e:
        raise GatewayInitError(f"Unable to create upload service: {e}") from e

    read_service = write_service
    read_creds = load_read_credentials(config.service_credentials_path)
    if read_creds is not None:
        try:
            read_service = build("drive", "v3", credentials=read_creds, cache_discovery=False)
        except (HttpError, GoogleAuthError) as e:
            logger.warning(f"Failed to create Service Account service, using OAuth2 for reading: {e}")

    folder_id = config.folder_id
    if folder_id:
        logger.info(f"Using specified folder ID: {folder_id}")
    else:
        try:
            folder_id = GoogleDriveGateway.find_or_create_folder(write_service, config.folder_name)
        except DRIVE_ERRORS as e:
            raise GatewayInitError(f"Unable to create/get folder: {e}") from e

    return GoogleDriveGateway(
        write_service=write_service,
        read_service=read_service,
        folder_id=folder_id,
    )
