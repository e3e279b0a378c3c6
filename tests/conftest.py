"""
Pytest configuration and shared fixtures.
Run from project root: python -m pytest tests/ -v
"""

import pytest

from drive_gateway.config import Settings
from tests.helpers import ROOT_ID, FakeDriveClient


@pytest.fixture
def settings():
    return Settings(
        client_id="test-client-id",
        client_secret="test-client-secret",
        refresh_token="test-refresh-token",
        default_folder_id=ROOT_ID,
    )


@pytest.fixture
def fake_client():
    # R is the root, C sits under it, O is a parentless folder elsewhere in the drive.
    return FakeDriveClient(parents={"R": [], "C": ["R"], "O": []})
