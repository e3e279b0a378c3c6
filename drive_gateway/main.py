# drive_gateway/main.py
from fastapi import Depends, FastAPI, File, Form, HTTPException, Query, Request as FastAPIRequest, UploadFile
from googleapiclient.errors import HttpError
import logging

from . import config, oauth, operations
from .config import Settings, get_settings
from .drive_client import DriveClient, GoogleDriveClient
from .errors import DriveError, FolderAccessDenied, InvalidFolder, SearchFailed, TokenExchangeError, TokenRefreshError
from .logging_config import setup_logging
from .schemas import (
    AuthCallbackResponse,
    AuthUrlResponse,
    FolderCreateRequest,
    FolderCreateResponse,
    FolderDeleteRequest,
    FolderDeleteResponse,
    FolderInfo,
    FolderListResponse,
    FolderSummary,
    MessageResponse,
    StatusResponse,
    UploadResponse,
)

setup_logging(get_settings().log_level)

logger = logging.getLogger(__name__)

NO_REFRESH_TOKEN_MESSAGE = (
    "No refresh token received. This may happen if the app was already authorized. "
    "Try revoking access at https://myaccount.google.com/permissions and re-authorize."
)

app = FastAPI(
    title="Google Drive API - File Upload Service",
    description="Upload files to Google Drive and manage folders under a configured default folder.",
    version="1.0.0",
)

logger.info("Application starting up...", extra={"props": {"app_title": app.title, "app_version": app.version}})

# --- Middleware for Logging Requests ---
@app.middleware("http")
async def log_requests_middleware(request: FastAPIRequest, call_next):
    client_host = request.client.host if request.client else "unknown"
    relevant_headers = {
        "user-agent": request.headers.get("user-agent"),
        "content-type": request.headers.get("content-type"),
    }
    logger.info("Incoming request", extra={"props": {"method": request.method, "url": str(request.url), "client_host": client_host, "headers": relevant_headers}})

    response = await call_next(request)

    logger.info("Request finished", extra={"props": {"method": request.method, "url": str(request.url), "status_code": response.status_code}})
    return response

# --- Dependencies ---
def require_drive_settings(settings: Settings = Depends(get_settings)) -> Settings:
    missing = settings.missing(*config.DRIVE_ENV_VARS)
    if missing:
        logger.warning("Missing required environment variables.", extra={"props": {"missing": missing}})
        raise HTTPException(status_code=400, detail="Missing required environment variables")
    return settings

def get_drive_client(settings: Settings = Depends(require_drive_settings)) -> DriveClient:
    try:
        credentials = oauth.refresh_credentials(settings)
    except TokenRefreshError as e:
        raise HTTPException(status_code=500, detail=f"Failed to refresh access token: {str(e)}")
    try:
        return GoogleDriveClient.from_credentials(credentials)
    except HttpError as error:
        logger.error(f"HttpError building Drive service: {error.resp.status} - {error._get_reason()}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to build Google Drive service: {error.resp.status} - {error._get_reason()}")

# --- Authentication Endpoints ---
@app.get("/api/drive/auth-url", response_model=AuthUrlResponse, summary="Google OAuth authorization URL", tags=["Authentication"])
async def auth_url(settings: Settings = Depends(get_settings)):
    if settings.missing("GOOGLE_CLIENT_ID"):
        raise HTTPException(status_code=400, detail="Missing GOOGLE_CLIENT_ID")
    return AuthUrlResponse(authUrl=oauth.build_authorization_url(settings))

@app.get("/api/drive/callback", response_model=AuthCallbackResponse, summary="Google OAuth 2.0 Callback", tags=["Authentication"])
def auth_callback(
    code: str | None = Query(None, description="Authorization code from Google OAuth."),
    scope: str | None = Query(None, description="OAuth scope."),
    error: str | None = Query(None, description="OAuth error if any."),
    settings: Settings = Depends(get_settings),
):
    logger.info("Received callback from Google OAuth.", extra={"props": {"has_code": bool(code), "scope": scope, "error": error}})
    if settings.missing("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"):
        raise HTTPException(status_code=400, detail="Missing required environment variables")
    if error:
        raise HTTPException(status_code=400, detail=f"OAuth error: {error}")
    if not code:
        raise HTTPException(status_code=400, detail="Missing authorization code")

    try:
        tokens = oauth.exchange_code(settings, code)
    except TokenExchangeError as e:
        raise HTTPException(status_code=500, detail=f"Failed to exchange authorization code for tokens: {str(e)}")

    if not tokens.refresh_token:
        return AuthCallbackResponse(
            success=False,
            message=NO_REFRESH_TOKEN_MESSAGE,
            accessToken="Access token received" if tokens.access_token else "No access token",
        )
    return AuthCallbackResponse(
        success=True,
        refreshToken=tokens.refresh_token,
        message=f"Refresh Token obtained! Add this to your .env file: GOOGLE_REFRESH_TOKEN={tokens.refresh_token}",
    )

# --- Google Drive API Endpoints ---
@app.post("/api/drive/upload", response_model=UploadResponse, summary="Upload File", tags=["Drive API"],
          responses={400: {"description": "Bad request"}, 403: {"description": "Forbidden - folder access denied"}})
def upload_file(
    file: UploadFile | None = File(None, description="File to upload."),
    folder_id: str | None = Form(None, alias="folderId", description="Google Drive folder ID."),
    overwrite: str | None = Form(None, description="Whether to overwrite existing file with same name ('true'/'false')."),
    settings: Settings = Depends(require_drive_settings),
    client: DriveClient = Depends(get_drive_client),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")
    logger.info(f"Attempting to upload file: {file.filename}", extra={"props": {"filename": file.filename, "content_type": file.content_type, "target_folder_id": folder_id, "overwrite": overwrite}})
    try:
        contents = file.file.read()
        result = operations.process_file_upload(
            client,
            settings,
            file_name=file.filename,
            content=contents,
            content_type=file.content_type,
            folder_id=folder_id,
            overwrite=overwrite == "true",
        )
    except InvalidFolder as e:
        raise HTTPException(status_code=400, detail=f"Invalid folder ID: {str(e)}")
    except FolderAccessDenied as e:
        raise HTTPException(status_code=403, detail=f"Unauthorized folder access: {str(e)}")
    except SearchFailed as e:
        logger.error(f"Search for existing file failed: {str(e)}", exc_info=True, extra={"props": {"filename": file.filename}})
        raise HTTPException(status_code=500, detail=f"Failed to search for existing file: {str(e)}")
    except DriveError as e:
        logger.error(f"Error uploading file '{file.filename}': {str(e)}", exc_info=True, extra={"props": {"filename": file.filename, "status_code": e.status_code}})
        raise HTTPException(status_code=500, detail=f"Failed to upload to Google Drive: {str(e)}")
    finally:
        file.file.close()

    return UploadResponse(id=result.id, name=result.name, link=result.webViewLink, mode=result.mode)

@app.post("/api/drive/create-folder", response_model=FolderCreateResponse, summary="Create New Folder", tags=["Folder API"],
          responses={400: {"description": "Bad request"}, 403: {"description": "Forbidden - folder access denied"}})
def create_folder(
    body: FolderCreateRequest,
    settings: Settings = Depends(require_drive_settings),
    client: DriveClient = Depends(get_drive_client),
):
    logger.info(f"Attempting to create folder: {body.name}", extra={"props": {"target_folder_name": body.name, "parent_id": body.parentId}})
    try:
        folder = operations.create_folder(client, settings, body.name, body.parentId)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidFolder as e:
        raise HTTPException(status_code=400, detail=f"Invalid folder ID: {str(e)}")
    except FolderAccessDenied as e:
        raise HTTPException(status_code=403, detail=f"Unauthorized folder access: {str(e)}")
    except DriveError as e:
        logger.error(f"Error creating folder '{body.name}': {str(e)}", exc_info=True, extra={"props": {"folder_name": body.name, "status_code": e.status_code}})
        raise HTTPException(status_code=500, detail=f"Failed to create folder: {str(e)}")

    return FolderCreateResponse(folder=FolderSummary(id=folder.id, name=folder.name, webViewLink=folder.webViewLink))

@app.get("/api/drive/list-folders", response_model=FolderListResponse, summary="List Folders", tags=["Folder API"])
def list_folders(
    parent_id: str | None = Query(None, alias="parentId", description="Parent folder ID (defaults to default folder)."),
    settings: Settings = Depends(require_drive_settings),
    client: DriveClient = Depends(get_drive_client),
):
    try:
        folders = operations.list_folders(client, settings, parent_id)
    except DriveError as e:
        logger.error(f"Error listing folders under '{parent_id}': {str(e)}", exc_info=True, extra={"props": {"parent_id": parent_id, "status_code": e.status_code}})
        raise HTTPException(status_code=500, detail=f"Failed to list folders: {str(e)}")

    return FolderListResponse(folders=[
        FolderInfo(id=folder.id, name=folder.name, webViewLink=folder.webViewLink, createdTime=folder.createdTime)
        for folder in folders
    ])

@app.delete("/api/drive/delete-folder-contents", response_model=FolderDeleteResponse, summary="Delete Folder Contents", tags=["Folder API"],
            responses={400: {"description": "Bad request"}, 403: {"description": "Forbidden - folder access denied"}})
def delete_folder_contents(
    body: FolderDeleteRequest,
    settings: Settings = Depends(require_drive_settings),
    client: DriveClient = Depends(get_drive_client),
):
    logger.info(f"Attempting to delete contents of folder: {body.folderId}", extra={"props": {"folder_id": body.folderId}})
    try:
        result = operations.delete_folder_contents(client, settings, body.folderId)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FolderAccessDenied as e:
        raise HTTPException(status_code=403, detail=f"Unauthorized folder access: {str(e)}")
    except DriveError as e:
        logger.error(f"Error listing contents of folder '{body.folderId}': {str(e)}", exc_info=True, extra={"props": {"folder_id": body.folderId, "status_code": e.status_code}})
        raise HTTPException(status_code=500, detail=f"Failed to list folder contents: {str(e)}")

    return FolderDeleteResponse(message=result.message, deleted=result.deleted, errors=result.errors)

# --- Basic App Endpoints ---
@app.get("/", response_model=MessageResponse, summary="Root Endpoint", tags=["General"])
async def root():
    return MessageResponse(message="Google Drive API - File Upload Service")

@app.get("/api/status", response_model=StatusResponse, summary="API Status", tags=["General"])
async def get_status_endpoint():
    return StatusResponse(status="Backend is running with Drive integration")
