# drive_gateway/operations.py
"""Use cases behind the HTTP routes: guard, resolve, then a single write per item."""
import logging

from .config import Settings
from .drive_client import DriveClient
from .errors import DriveError, FolderAccessDenied, InvalidFolder
from .models import AccessReason, DeleteContentsResult, DriveItem, UploadResult
from .scope_guard import FolderScopeGuard
from .upload_resolver import UploadResolver

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "untitled"


def _require_folder(guard: FolderScopeGuard, folder_id: str, root_id: str) -> None:
    decision = guard.validate_folder(folder_id, root_id)
    if decision.allowed:
        return
    if decision.reason is AccessReason.NOT_FOUND:
        raise InvalidFolder(folder_id)
    raise FolderAccessDenied(folder_id)


def process_file_upload(
    client: DriveClient,
    settings: Settings,
    file_name: str | None,
    content: bytes,
    content_type: str | None,
    folder_id: str | None,
    overwrite: bool,
) -> UploadResult:
    root_id = settings.default_folder_id
    parent_folder_id = folder_id or root_id
    name = file_name or DEFAULT_FILE_NAME

    _require_folder(FolderScopeGuard(client), parent_folder_id, root_id)

    plan = UploadResolver(client).resolve_upload_plan(name, parent_folder_id, overwrite)
    logger.info(f"Uploading '{name}' as {plan.mode.value}", extra={"props": {"filename": name, "parent_folder_id": parent_folder_id, "mode": plan.mode.value, "target_file_id": plan.target_file_id, "size": len(content)}})

    uploaded = client.upload_file(name, content, content_type, parent_folder_id, plan)
    logger.info(f"File '{uploaded.name}' uploaded successfully with ID '{uploaded.id}'", extra={"props": {"uploaded_file_id": uploaded.id, "mode": plan.mode.value}})
    return UploadResult(
        id=uploaded.id,
        name=uploaded.name,
        webViewLink=uploaded.webViewLink,
        webContentLink=uploaded.webContentLink,
        mode=plan.mode,
    )


def create_folder(client: DriveClient, settings: Settings, name: str | None, parent_id: str | None) -> DriveItem:
    if not name:
        raise ValueError("Folder name is required")
    root_id = settings.default_folder_id
    parent_folder_id = parent_id or root_id

    _require_folder(FolderScopeGuard(client), parent_folder_id, root_id)

    folder = client.create_folder(name, parent_folder_id)
    logger.info(f"Folder '{folder.name}' created successfully with ID '{folder.id}'", extra={"props": {"created_folder_id": folder.id, "parent_id": parent_folder_id}})
    return folder


def resolve_list_parent(settings: Settings, parent_id: str | None) -> str:
    # "null" is forwarded verbatim; callers use it to query parentless items.
    if parent_id == "null":
        return parent_id
    return parent_id or settings.default_folder_id


def list_folders(client: DriveClient, settings: Settings, parent_id: str | None) -> list[DriveItem]:
    parent_folder_id = resolve_list_parent(settings, parent_id)
    folders = client.list_folders(parent_folder_id)
    logger.info(f"Found {len(folders)} folders in {parent_folder_id}", extra={"props": {"folder_id": parent_folder_id, "item_count": len(folders)}})
    return folders


def delete_folder_contents(client: DriveClient, settings: Settings, folder_id: str | None) -> DeleteContentsResult:
    """Delete the files directly inside a folder, leaving sub-folders alone.

    Individual delete failures are collected in the result rather than aborting the batch;
    a failed listing propagates.
    """
    if not folder_id:
        raise ValueError("Folder ID is required")

    if not FolderScopeGuard(client).is_in_scope(folder_id, settings.default_folder_id):
        logger.warning("Refusing to delete contents outside the allowed root.", extra={"props": {"folder_id": folder_id}})
        raise FolderAccessDenied(folder_id)

    files = [item for item in client.list_children(folder_id) if not item.is_folder]

    result = DeleteContentsResult()
    for item in files:
        try:
            client.delete_file(item.id)
        except DriveError as e:
            logger.error(f"Error deleting {item.name}: {str(e)}", extra={"props": {"file_id": item.id, "folder_id": folder_id}})
            result.errors.append(f"Error deleting {item.name}: {str(e)}")
            continue
        result.deleted += 1
        logger.info(f"Deleted file: {item.name} ({item.id})", extra={"props": {"file_id": item.id}})

    logger.info(result.message, extra={"props": {"folder_id": folder_id, "deleted": result.deleted, "error_count": len(result.errors)}})
    return result
