"""
Module: upload.drive

Purpose:
    Upload rendered quotation PDFs to Google Drive.
    Files go into a "Quotation" folder that is found by exact name, or
    created on first use.

Key Classes:
    - DriveUploader: Folder lookup/creation and multipart PDF upload
    - UploadError: Non-2xx response from the Drive API

Dependencies:
    - requests: HTTP session

Used By:
    - cli: render --drive-token
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DRIVE_FILES_URL = "https://www.googleapis.com/drive/v3/files"
DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
PDF_MIME_TYPE = "application/pdf"
DEFAULT_FOLDER = "Quotation"
DEFAULT_TIMEOUT = 30


class UploadError(Exception):
    """Drive API request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DriveUploader:
    """
    Google Drive client for quotation PDFs.

    The access token is supplied by the caller (OAuth happens elsewhere);
    it is sent as a bearer token on every request.

    Example:
        >>> uploader = DriveUploader(token)
        >>> folder_id = uploader.find_or_create_folder()
        >>> uploader.upload_pdf(pdf_bytes, "Q-1001.pdf", folder_id)
        '1AbC...'
    """

    def __init__(
        self,
        access_token: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if not access_token:
            raise ValueError("access_token is required")
        self.session = session or requests.Session()
        self.timeout = timeout
        self._headers = {"Authorization": f"Bearer {access_token}"}

    def find_or_create_folder(self, name: str = DEFAULT_FOLDER) -> str:
        """
        Id of the non-trashed folder called `name`, creating it if absent.

        Raises:
            UploadError: Search or creation failed
        """
        query = (
            f"mimeType='{FOLDER_MIME_TYPE}' and name='{_escape_query(name)}' and trashed=false"
        )
        response = self._request(
            "get",
            DRIVE_FILES_URL,
            action="search for folder",
            params={"q": query, "fields": "files(id, name)"},
        )
        files = response.json().get("files") or []
        if files:
            folder_id = files[0]["id"]
            logger.debug(f"Found Drive folder {name!r}: {folder_id}")
            return folder_id

        response = self._request(
            "post",
            DRIVE_FILES_URL,
            action="create folder",
            json={"name": name, "mimeType": FOLDER_MIME_TYPE},
        )
        folder_id = response.json().get("id")
        if not folder_id:
            raise UploadError(f"Could not find or create the {name} folder in Google Drive")
        logger.info(f"Created Drive folder {name!r}: {folder_id}")
        return folder_id

    def upload_pdf(self, data: bytes, filename: str, folder_id: Optional[str] = None) -> str:
        """
        Upload PDF bytes as `filename`, into `folder_id` when given.

        Returns:
            The new Drive file id

        Raises:
            UploadError: Upload failed
        """
        metadata: Dict[str, Any] = {"name": filename, "mimeType": PDF_MIME_TYPE}
        if folder_id:
            metadata["parents"] = [folder_id]

        response = self._request(
            "post",
            DRIVE_UPLOAD_URL,
            action="upload file",
            params={"uploadType": "multipart"},
            files={
                "metadata": ("metadata", json.dumps(metadata), "application/json"),
                "file": (filename, data, PDF_MIME_TYPE),
            },
        )
        file_id = response.json().get("id", "")
        logger.info(f"Uploaded {filename} to Drive ({len(data)} bytes): {file_id}")
        return file_id

    def _request(self, method: str, url: str, *, action: str, **kwargs: Any) -> requests.Response:
        try:
            response = getattr(self.session, method)(
                url, headers=self._headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise UploadError(f"Failed to {action}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise UploadError(
                f"Failed to {action}. Status: {response.status_code}",
                status_code=response.status_code,
            )
        return response


def _escape_query(value: str) -> str:
    """Escape a literal for a Drive files.list query."""
    return value.replace("\\", "\\\\").replace("'", "\\'")
