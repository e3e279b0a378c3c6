# drive_gateway/config.py
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Values come from the process environment; a local .env file is honoured for development.
load_dotenv()

DEFAULT_REDIRECT_URI = "http://localhost:3000/api/drive/callback"

AUTH_URI = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"

SCOPES = [
    'https://www.googleapis.com/auth/drive.file',
]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

# Variables every Drive operation needs. The OAuth endpoints need fewer, see main.py.
DRIVE_ENV_VARS = (
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REFRESH_TOKEN",
    "GOOGLE_DRIVE_DEFAULT_FOLDER_ID",
)

_ENV_FIELDS = {
    "GOOGLE_CLIENT_ID": "client_id",
    "GOOGLE_CLIENT_SECRET": "client_secret",
    "GOOGLE_REFRESH_TOKEN": "refresh_token",
    "GOOGLE_DRIVE_DEFAULT_FOLDER_ID": "default_folder_id",
}


class Settings(BaseModel):
    """Service configuration, passed explicitly to the guard, resolver and operations."""

    client_id: str | None = Field(None, description="OAuth client id.")
    client_secret: str | None = Field(None, description="OAuth client secret.")
    refresh_token: str | None = Field(None, description="Stored refresh token for the Drive account.")
    default_folder_id: str | None = Field(None, description="Root folder bounding every mutating operation.")
    redirect_uri: str = Field(DEFAULT_REDIRECT_URI, description="OAuth redirect URI registered with Google.")
    log_level: str = Field("INFO")

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        value = value.upper()
        return value if value in LOG_LEVELS else "INFO"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            client_id=env.get("GOOGLE_CLIENT_ID") or None,
            client_secret=env.get("GOOGLE_CLIENT_SECRET") or None,
            refresh_token=env.get("GOOGLE_REFRESH_TOKEN") or None,
            default_folder_id=env.get("GOOGLE_DRIVE_DEFAULT_FOLDER_ID") or None,
            redirect_uri=env.get("GOOGLE_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
            log_level=env.get("LOG_LEVEL", "INFO"),
        )

    def missing(self, *names: str) -> list[str]:
        """Return the environment variable names among `names` that have no value."""
        return [name for name in names if not getattr(self, _ENV_FIELDS[name])]


def get_settings() -> Settings:
    return Settings.from_env()
