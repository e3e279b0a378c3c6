# drive_gateway/errors.py
"""Error taxonomy shared by the Drive client, the guard, the resolver and the routes."""


class GatewayError(Exception):
    """Base class for every error raised by drive_gateway."""


class DriveError(GatewayError):
    """A Drive API call failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFound(DriveError):
    """The referenced file or folder id does not resolve upstream."""


class Unauthorized(DriveError):
    """Drive rejected the credentials or denied access (401/403)."""


class NetworkError(DriveError):
    """Transport failure or an unexpected Drive API status."""


class SearchFailed(DriveError):
    """Looking up an existing same-named file failed, so the upload mode is unknown."""


class TokenError(GatewayError):
    pass


class TokenRefreshError(TokenError):
    pass


class TokenExchangeError(TokenError):
    pass


class InvalidFolder(GatewayError):
    def __init__(self, folder_id: str):
        super().__init__(f"Folder {folder_id} not found")
        self.folder_id = folder_id


class FolderAccessDenied(GatewayError):
    def __init__(self, folder_id: str):
        super().__init__(f"Folder {folder_id} is not under the allowed default folder")
        self.folder_id = folder_id
