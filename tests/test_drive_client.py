"""
Tests for GoogleDriveClient against a mocked Drive v3 resource.

Error mapping uses real HttpError instances so the status handling matches the library.
"""

import json
from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from drive_gateway.config import FOLDER_MIME_TYPE
from drive_gateway.drive_client import GoogleDriveClient, build_children_query
from drive_gateway.errors import DriveError, NetworkError, NotFound, Unauthorized
from drive_gateway.models import UploadMode, UploadPlan


def http_error(status, message="boom"):
    resp = httplib2.Response({"status": status})
    content = json.dumps({"error": {"code": status, "message": message}}).encode()
    return HttpError(resp, content, uri="https://www.googleapis.com/drive/v3/files")


@pytest.fixture
def service():
    return MagicMock()


@pytest.fixture
def files(service):
    return service.files.return_value


class TestBuildChildrenQuery:

    def test_parent_only(self):
        assert build_children_query("F") == "'F' in parents and trashed=false"

    def test_name_and_mime_type(self):
        query = build_children_query("F", name_filter="a.txt", mime_type=FOLDER_MIME_TYPE)
        assert query == (
            "'F' in parents and trashed=false and name = 'a.txt' "
            "and mimeType = 'application/vnd.google-apps.folder'"
        )

    def test_quotes_escaped(self):
        query = build_children_query("F", name_filter="it's.txt")
        assert query.endswith("name = 'it\\'s.txt'")


class TestGetParents:

    def test_returns_parent_ids(self, service, files):
        files.get.return_value.execute.return_value = {"parents": ["P1", "P2"]}
        assert GoogleDriveClient(service).get_parents("C") == ["P1", "P2"]
        files.get.assert_called_once_with(fileId="C", fields="parents")

    def test_missing_parents_field_is_empty(self, service, files):
        files.get.return_value.execute.return_value = {}
        assert GoogleDriveClient(service).get_parents("C") == []

    @pytest.mark.parametrize("status, error_type", [
        (404, NotFound),
        (401, Unauthorized),
        (403, Unauthorized),
        (500, NetworkError),
    ])
    def test_http_errors_mapped(self, service, files, status, error_type):
        files.get.return_value.execute.side_effect = http_error(status)
        with pytest.raises(error_type) as exc_info:
            GoogleDriveClient(service).get_parents("C")
        assert exc_info.value.status_code == status
        assert isinstance(exc_info.value.__cause__, HttpError)

    def test_transport_error_mapped(self, service, files):
        files.get.return_value.execute.side_effect = httplib2.ServerNotFoundError("no route")
        with pytest.raises(NetworkError):
            GoogleDriveClient(service).get_parents("C")

    def test_malformed_payload_rejected(self, service, files):
        files.get.return_value.execute.return_value = {"parents": "not-a-list"}
        with pytest.raises(DriveError):
            GoogleDriveClient(service).get_parents("C")


class TestListChildren:

    def test_follows_page_tokens(self, service, files):
        files.list.return_value.execute.side_effect = [
            {"files": [{"id": "1", "name": "a.txt"}], "nextPageToken": "next"},
            {"files": [{"id": "2", "name": "b.txt"}]},
        ]
        items = GoogleDriveClient(service).list_children("F")

        assert [item.id for item in items] == ["1", "2"]
        first, second = files.list.call_args_list
        assert "pageToken" not in first.kwargs
        assert second.kwargs["pageToken"] == "next"
        assert first.kwargs["q"] == "'F' in parents and trashed=false"
        assert first.kwargs["orderBy"] == "name"

    def test_name_filter_in_query(self, service, files):
        files.list.return_value.execute.return_value = {"files": []}
        GoogleDriveClient(service).list_children("F", name_filter="a.txt")
        assert "name = 'a.txt'" in files.list.call_args.kwargs["q"]

    def test_list_folders_filters_mime_type(self, service, files):
        files.list.return_value.execute.return_value = {"files": [
            {"id": "d", "name": "Docs", "mimeType": FOLDER_MIME_TYPE, "createdTime": "2024-01-01T00:00:00Z"},
        ]}
        folders = GoogleDriveClient(service).list_folders("F")

        assert folders[0].is_folder
        assert f"mimeType = '{FOLDER_MIME_TYPE}'" in files.list.call_args.kwargs["q"]

    def test_error_mapped(self, service, files):
        files.list.return_value.execute.side_effect = http_error(403, "insufficient permissions")
        with pytest.raises(Unauthorized, match="insufficient permissions"):
            GoogleDriveClient(service).list_children("F")


class TestWrites:

    def test_create_folder(self, service, files):
        files.create.return_value.execute.return_value = {"id": "new", "name": "Docs", "webViewLink": "https://drive.google.com/drive/folders/new"}
        folder = GoogleDriveClient(service).create_folder("Docs", "R")

        assert folder.id == "new"
        assert files.create.call_args.kwargs["body"] == {"name": "Docs", "mimeType": FOLDER_MIME_TYPE, "parents": ["R"]}

    def test_upload_create_sets_parent(self, service, files):
        files.create.return_value.execute.return_value = {"id": "f1", "name": "a.txt"}
        plan = UploadPlan(mode=UploadMode.CREATE)
        uploaded = GoogleDriveClient(service).upload_file("a.txt", b"hello", "text/plain", "F", plan)

        assert uploaded.id == "f1"
        assert files.create.call_args.kwargs["body"] == {"name": "a.txt", "parents": ["F"]}
        files.update.assert_not_called()

    def test_upload_update_targets_existing_file(self, service, files):
        files.update.return_value.execute.return_value = {"id": "x", "name": "a.txt"}
        plan = UploadPlan(mode=UploadMode.UPDATE, target_file_id="x")
        GoogleDriveClient(service).upload_file("a.txt", b"hello", None, "F", plan)

        kwargs = files.update.call_args.kwargs
        assert kwargs["fileId"] == "x"
        assert kwargs["body"] == {"name": "a.txt"}
        files.create.assert_not_called()

    def test_delete_file(self, service, files):
        GoogleDriveClient(service).delete_file("x")
        files.delete.assert_called_once_with(fileId="x")

    def test_delete_missing_file(self, service, files):
        files.delete.return_value.execute.side_effect = http_error(404, "File not found: x")
        with pytest.raises(NotFound):
            GoogleDriveClient(service).delete_file("x")
