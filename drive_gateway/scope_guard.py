# drive_gateway/scope_guard.py
"""Confines folder operations to the subtree under a configured root folder."""
import logging

from .drive_client import DriveClient
from .errors import DriveError
from .models import AccessDecision, AccessReason

logger = logging.getLogger(__name__)

# Drive folder trees are acyclic and shallow; anything deeper is treated as an anomaly.
MAX_ANCESTOR_DEPTH = 64


class FolderScopeGuard:
    def __init__(self, client: DriveClient, max_depth: int = MAX_ANCESTOR_DEPTH):
        self._client = client
        self._max_depth = max_depth

    def is_in_scope(self, folder_id: str, root_id: str) -> bool:
        """Return True when `folder_id` is `root_id` or one of its descendants.

        Parents are fetched fresh on every call and checked in the order Drive returns them;
        the first branch reaching the root wins. Lookup failures deny that branch, so this
        never raises.
        """
        return self._walk(folder_id, root_id, depth=0, path=set())

    def _walk(self, folder_id: str, root_id: str, depth: int, path: set[str]) -> bool:
        # `path` holds only the folders on the current branch; shared ancestors of
        # sibling branches are walked again from each branch.
        if folder_id == root_id:
            return True
        if depth >= self._max_depth:
            logger.warning("Ancestor walk exceeded maximum depth.", extra={"props": {"folder_id": folder_id, "root_id": root_id, "max_depth": self._max_depth}})
            return False
        if folder_id in path:
            logger.warning("Cycle detected in folder parents.", extra={"props": {"folder_id": folder_id, "root_id": root_id}})
            return False

        try:
            parents = self._client.get_parents(folder_id)
        except DriveError as e:
            logger.info(f"Parent lookup failed for {folder_id}, denying branch: {e}", extra={"props": {"folder_id": folder_id, "error_type": type(e).__name__}})
            return False

        path.add(folder_id)
        try:
            return any(self._walk(parent_id, root_id, depth + 1, path) for parent_id in parents)
        finally:
            path.discard(folder_id)

    def validate_folder(self, folder_id: str | None, root_id: str) -> AccessDecision:
        """Check that a folder exists and lies inside the root, without raising."""
        if not folder_id or folder_id == root_id:
            return AccessDecision(allowed=True, reason=AccessReason.OK)

        try:
            folder = self._client.get_file_info(folder_id)
        except DriveError as e:
            logger.info(f"Folder {folder_id} could not be resolved: {e}", extra={"props": {"folder_id": folder_id}})
            return AccessDecision(allowed=False, reason=AccessReason.NOT_FOUND, details=f"Folder {folder_id} not found")

        if not self.is_in_scope(folder_id, root_id):
            logger.warning("Folder outside the allowed root.", extra={"props": {"folder_id": folder_id, "root_id": root_id}})
            return AccessDecision(
                allowed=False,
                reason=AccessReason.OUTSIDE_ROOT,
                details=f"Folder {folder_id} is not under the allowed default folder",
            )

        logger.info("Using validated parent folder.", extra={"props": {"folder_id": folder.id, "folder_name": folder.name}})
        return AccessDecision(allowed=True, reason=AccessReason.OK)
