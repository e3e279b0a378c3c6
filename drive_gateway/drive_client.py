# drive_gateway/drive_client.py
"""Drive v3 client used by the guard, the resolver and the operations.

Every provider failure is converted here into the `drive_gateway.errors` taxonomy, and every
payload is validated into `DriveItem` before it leaves this module.
"""
import io
import logging
from typing import Protocol

import httplib2
from google.auth.exceptions import TransportError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload
from pydantic import BaseModel, Field, ValidationError

from .config import FOLDER_MIME_TYPE
from .errors import DriveError, NetworkError, NotFound, Unauthorized
from .models import DriveItem, UploadMode, UploadPlan

logger = logging.getLogger(__name__)

ITEM_FIELDS = "id, name, mimeType, parents, createdTime, webViewLink, webContentLink"
UPLOAD_FIELDS = "id, name, webViewLink, webContentLink"
PAGE_SIZE = 1000


class DriveClient(Protocol):
    def get_parents(self, folder_id: str) -> list[str]:
        """Return the parent ids of a folder; raises NotFound when the id does not resolve."""

    def list_children(self, parent_folder_id: str, name_filter: str | None = None, mime_type: str | None = None) -> list[DriveItem]:
        """Return the non-trashed children of a folder, ordered by name."""

    def get_file_info(self, file_id: str) -> DriveItem:
        """Return metadata for a file or folder."""

    def list_folders(self, parent_folder_id: str) -> list[DriveItem]:
        """Return the sub-folders of a folder."""

    def create_folder(self, name: str, parent_id: str) -> DriveItem:
        """Create a folder under `parent_id`."""

    def upload_file(self, name: str, content: bytes, content_type: str | None, parent_folder_id: str, plan: UploadPlan) -> DriveItem:
        """Create or update a file according to `plan`."""

    def delete_file(self, file_id: str) -> None:
        """Delete a file by id."""


class _ParentsPayload(BaseModel):
    parents: list[str] = Field(default_factory=list)


class _FileListPayload(BaseModel):
    files: list[DriveItem] = Field(default_factory=list)
    nextPageToken: str | None = None


def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def build_children_query(parent_folder_id: str, name_filter: str | None = None, mime_type: str | None = None) -> str:
    parts = [f"{_quote(parent_folder_id)} in parents", "trashed=false"]
    if name_filter is not None:
        parts.append(f"name = {_quote(name_filter)}")
    if mime_type:
        parts.append(f"mimeType = {_quote(mime_type)}")
    return " and ".join(parts)


def translate_http_error(error: HttpError, context: str) -> DriveError:
    status = int(error.resp.status)
    reason = error._get_reason()
    message = f"Drive API error {status} while attempting to {context}: {reason}"
    if status == 404:
        return NotFound(message, status_code=status)
    if status in (401, 403):
        return Unauthorized(message, status_code=status)
    return NetworkError(message, status_code=status)


class GoogleDriveClient:
    def __init__(self, service):
        self._service = service

    @classmethod
    def from_credentials(cls, credentials: Credentials) -> "GoogleDriveClient":
        logger.debug("Building Google Drive service instance.")
        return cls(build('drive', 'v3', credentials=credentials, cache_discovery=False))

    def _execute(self, request, context: str, props: dict | None = None):
        try:
            return request.execute()
        except HttpError as error:
            logger.warning(f"HttpError while attempting to {context}: {error.resp.status}", extra={"props": {**(props or {}), "status_code": error.resp.status}})
            raise translate_http_error(error, context) from error
        except (httplib2.HttpLib2Error, TransportError, OSError) as error:
            logger.warning(f"Transport error while attempting to {context}: {error}", extra={"props": props or {}})
            raise NetworkError(f"Network error while attempting to {context}: {error}") from error

    @staticmethod
    def _validate(model, payload, context: str):
        try:
            return model.model_validate(payload or {})
        except ValidationError as error:
            raise DriveError(f"Unexpected Drive API response while attempting to {context}: {error}") from error

    def get_parents(self, folder_id: str) -> list[str]:
        payload = self._execute(
            self._service.files().get(fileId=folder_id, fields="parents"),
            context="get folder parents",
            props={"folder_id": folder_id},
        )
        return self._validate(_ParentsPayload, payload, "get folder parents").parents

    def get_file_info(self, file_id: str) -> DriveItem:
        payload = self._execute(
            self._service.files().get(fileId=file_id, fields=ITEM_FIELDS),
            context="get file info",
            props={"file_id": file_id},
        )
        return self._validate(DriveItem, payload, "get file info")

    def list_children(self, parent_folder_id: str, name_filter: str | None = None, mime_type: str | None = None) -> list[DriveItem]:
        query = build_children_query(parent_folder_id, name_filter, mime_type)
        items: list[DriveItem] = []
        page_token: str | None = None
        while True:
            params = {
                "q": query,
                "fields": f"nextPageToken, files({ITEM_FIELDS})",
                "orderBy": "name",
                "pageSize": PAGE_SIZE,
            }
            if page_token:
                params["pageToken"] = page_token
            payload = self._execute(
                self._service.files().list(**params),
                context="list folder children",
                props={"folder_id": parent_folder_id},
            )
            page = self._validate(_FileListPayload, payload, "list folder children")
            items.extend(page.files)
            page_token = page.nextPageToken
            if not page_token:
                break
        logger.debug(f"Listed {len(items)} children of {parent_folder_id}", extra={"props": {"folder_id": parent_folder_id, "item_count": len(items)}})
        return items

    def list_folders(self, parent_folder_id: str) -> list[DriveItem]:
        return self.list_children(parent_folder_id, mime_type=FOLDER_MIME_TYPE)

    def create_folder(self, name: str, parent_id: str) -> DriveItem:
        file_metadata = {'name': name, 'mimeType': FOLDER_MIME_TYPE, 'parents': [parent_id]}
        payload = self._execute(
            self._service.files().create(body=file_metadata, fields='id, name, webViewLink'),
            context="create folder",
            props={"folder_name": name, "parent_id": parent_id},
        )
        return self._validate(DriveItem, payload, "create folder")

    def upload_file(self, name: str, content: bytes, content_type: str | None, parent_folder_id: str, plan: UploadPlan) -> DriveItem:
        media = MediaIoBaseUpload(io.BytesIO(content), mimetype=content_type or 'application/octet-stream', resumable=False)
        if plan.mode is UploadMode.UPDATE:
            # An update keeps the file where it is; parents cannot be set through the body.
            request = self._service.files().update(fileId=plan.target_file_id, body={'name': name}, media_body=media, fields=UPLOAD_FIELDS)
        else:
            request = self._service.files().create(body={'name': name, 'parents': [parent_folder_id]}, media_body=media, fields=UPLOAD_FIELDS)
        payload = self._execute(
            request,
            context="upload file",
            props={"filename": name, "mode": plan.mode.value, "target_file_id": plan.target_file_id},
        )
        return self._validate(DriveItem, payload, "upload file")

    def delete_file(self, file_id: str) -> None:
        self._execute(self._service.files().delete(fileId=file_id), context="delete file", props={"file_id": file_id})
