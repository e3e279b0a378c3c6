"""Shared test doubles for the Drive client."""

from drive_gateway.config import FOLDER_MIME_TYPE
from drive_gateway.errors import NetworkError, NotFound
from drive_gateway.models import DriveItem, UploadMode

ROOT_ID = "R"


class FakeDriveClient:
    """In-memory DriveClient recording every provider call.

    `parents` maps folder id to its parent ids, or to an exception raised on lookup.
    `children` maps folder id to its listing, or to an exception raised on listing.
    Unknown ids raise NotFound.
    """

    def __init__(self, parents=None, children=None, failing_deletes=()):
        self.parents = dict(parents or {})
        self.children = dict(children or {})
        self.failing_deletes = set(failing_deletes)
        self.calls = []
        self.uploads = []
        self.created = []
        self.deleted = []

    def calls_to(self, name):
        return [arg for call, arg in self.calls if call == name]

    def get_parents(self, folder_id):
        self.calls.append(("get_parents", folder_id))
        value = self.parents.get(folder_id)
        if value is None:
            raise NotFound(f"File not found: {folder_id}", status_code=404)
        if isinstance(value, Exception):
            raise value
        return list(value)

    def get_file_info(self, file_id):
        self.calls.append(("get_file_info", file_id))
        value = self.parents.get(file_id)
        if value is None or isinstance(value, Exception):
            raise NotFound(f"File not found: {file_id}", status_code=404)
        return DriveItem(id=file_id, name=f"folder-{file_id}", mimeType=FOLDER_MIME_TYPE, parents=value)

    def list_children(self, parent_folder_id, name_filter=None, mime_type=None):
        self.calls.append(("list_children", parent_folder_id))
        value = self.children.get(parent_folder_id, [])
        if isinstance(value, Exception):
            raise value
        if mime_type:
            value = [item for item in value if item.mimeType == mime_type]
        return list(value)

    def list_folders(self, parent_folder_id):
        return self.list_children(parent_folder_id, mime_type=FOLDER_MIME_TYPE)

    def create_folder(self, name, parent_id):
        self.calls.append(("create_folder", parent_id))
        self.created.append((name, parent_id))
        return DriveItem(
            id=f"new-{name}",
            name=name,
            mimeType=FOLDER_MIME_TYPE,
            parents=[parent_id],
            webViewLink=f"https://drive.google.com/drive/folders/new-{name}",
        )

    def upload_file(self, name, content, content_type, parent_folder_id, plan):
        self.calls.append(("upload_file", parent_folder_id))
        self.uploads.append({"name": name, "content": content, "content_type": content_type, "parent": parent_folder_id, "plan": plan})
        file_id = plan.target_file_id if plan.mode is UploadMode.UPDATE else "uploaded-id"
        return DriveItem(id=file_id, name=name, webViewLink=f"https://drive.google.com/file/d/{file_id}/view")

    def delete_file(self, file_id):
        self.calls.append(("delete_file", file_id))
        if file_id in self.failing_deletes:
            raise NetworkError(f"Drive API error 500 while attempting to delete file: {file_id}", status_code=500)
        self.deleted.append(file_id)


def drive_file(file_id, name, mime_type="text/plain"):
    return DriveItem(id=file_id, name=name, mimeType=mime_type)


def drive_folder(folder_id, name):
    return DriveItem(id=folder_id, name=name, mimeType=FOLDER_MIME_TYPE, createdTime="2024-01-01T00:00:00.000Z")
