# drive_gateway/schemas.py
from pydantic import BaseModel, Field

from .models import UploadMode


class MessageResponse(BaseModel):
    message: str = Field(..., examples=["Google Drive API - File Upload Service"])

class StatusResponse(BaseModel):
    status: str = Field(..., examples=["Backend is running"])

class AuthUrlResponse(BaseModel):
    authUrl: str = Field(..., examples=["https://accounts.google.com/o/oauth2/v2/auth?response_type=code&client_id=..."])

class AuthCallbackResponse(BaseModel):
    success: bool
    message: str = Field(..., description="Next step for the operator.")
    refreshToken: str | None = Field(None, description="Refresh token to store as GOOGLE_REFRESH_TOKEN.")
    accessToken: str | None = Field(None, description="Whether an access token was received.")

class UploadResponse(BaseModel):
    success: bool = Field(True)
    id: str = Field(..., description="ID of the uploaded file.")
    name: str = Field(..., description="Name of the uploaded file.")
    link: str | None = Field(None, description="Link to view file.")
    mode: UploadMode = Field(..., description="CREATE for a new file, UPDATE when an existing file was overwritten.")
    message: str = Field(default="File uploaded successfully")

class FolderCreateRequest(BaseModel):
    name: str | None = Field(None, description="Folder name", examples=["Reports"])
    parentId: str | None = Field(None, description="Parent folder ID (defaults to default folder)")

class FolderSummary(BaseModel):
    id: str = Field(..., description="ID of the folder.")
    name: str = Field(..., description="Name of the folder.")
    webViewLink: str | None = Field(None)

class FolderCreateResponse(BaseModel):
    success: bool = Field(True)
    folder: FolderSummary

class FolderInfo(FolderSummary):
    createdTime: str | None = Field(None)

class FolderListResponse(BaseModel):
    success: bool = Field(True)
    folders: list[FolderInfo] = Field(..., description="Sub-folders of the requested parent.")

class FolderDeleteRequest(BaseModel):
    folderId: str | None = Field(None, description="Folder ID whose files are deleted")

class FolderDeleteResponse(BaseModel):
    success: bool = Field(True)
    message: str
    deleted: int = Field(0, description="Number of files deleted.")
    errors: list[str] = Field(default_factory=list, description="Per-file delete failures.")
