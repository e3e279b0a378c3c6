# drive_gateway/upload_resolver.py
import logging

from .drive_client import DriveClient
from .errors import DriveError, SearchFailed
from .models import UploadMode, UploadPlan

logger = logging.getLogger(__name__)


class UploadResolver:
    """Decides whether an upload creates a new file or replaces a same-named one."""

    def __init__(self, client: DriveClient):
        self._client = client

    def resolve_upload_plan(self, file_name: str, parent_folder_id: str, overwrite_requested: bool) -> UploadPlan:
        if not overwrite_requested:
            return UploadPlan(mode=UploadMode.CREATE)

        logger.info("Searching for existing file.", extra={"props": {"filename": file_name, "parent_folder_id": parent_folder_id}})
        try:
            children = self._client.list_children(parent_folder_id, name_filter=file_name)
        except DriveError as e:
            # Falling back to CREATE here could leave a duplicate behind.
            raise SearchFailed(
                f"Search for existing file '{file_name}' in folder {parent_folder_id} failed: {e}",
                status_code=e.status_code,
            ) from e

        matches = [item for item in children if item.name == file_name]
        if not matches:
            logger.info("No existing file found, will create new.", extra={"props": {"filename": file_name}})
            return UploadPlan(mode=UploadMode.CREATE)

        if len(matches) > 1:
            logger.info("Several files share the name, updating the first.", extra={"props": {"filename": file_name, "match_count": len(matches)}})
        logger.info("Found existing file.", extra={"props": {"filename": file_name, "file_id": matches[0].id}})
        return UploadPlan(mode=UploadMode.UPDATE, target_file_id=matches[0].id)
