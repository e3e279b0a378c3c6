# drive_gateway/models.py
"""Typed shapes shared by the Drive client and the decision layer."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .config import FOLDER_MIME_TYPE


class DriveItem(BaseModel):
    """A file or folder as returned by the Drive API, restricted to the fields we request."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Google Drive File ID")
    name: str = Field(..., description="Name of the file or folder")
    mimeType: str | None = Field(None, description="MIME type of the file")
    parents: list[str] = Field(default_factory=list)
    createdTime: str | None = Field(None)
    webViewLink: str | None = Field(None, description="Link to view in browser")
    webContentLink: str | None = Field(None, description="Link to download content")

    @property
    def is_folder(self) -> bool:
        return self.mimeType == FOLDER_MIME_TYPE


class AccessReason(str, Enum):
    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    OUTSIDE_ROOT = "OUTSIDE_ROOT"


class AccessDecision(BaseModel):
    allowed: bool
    reason: AccessReason
    details: str | None = None


class UploadMode(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"


class UploadPlan(BaseModel):
    mode: UploadMode
    target_file_id: str | None = None


class UploadResult(BaseModel):
    id: str
    name: str
    webViewLink: str | None = None
    webContentLink: str | None = None
    mode: UploadMode


class DeleteContentsResult(BaseModel):
    deleted: int = 0
    errors: list[str] = Field(default_factory=list)

    @property
    def message(self) -> str:
        message = f"Deleted {self.deleted} files from folder."
        if self.errors:
            message += f" Errors: {len(self.errors)}"
        return message
