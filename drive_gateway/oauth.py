# drive_gateway/oauth.py
"""Token provider: consent URL, authorization-code exchange and refresh-token credentials."""
import logging

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from pydantic import BaseModel, Field

from . import config
from .errors import TokenExchangeError, TokenRefreshError

logger = logging.getLogger(__name__)


class TokenBundle(BaseModel):
    access_token: str | None = Field(None)
    refresh_token: str | None = Field(None)
    scopes: list[str] | None = Field(None)


def _flow(settings: config.Settings) -> Flow:
    # PKCE is left off: the consent URL and the callback are served by separate requests
    # with no session shared between them.
    return Flow.from_client_config(
        client_config={"web": {
            "client_id": settings.client_id,
            "client_secret": settings.client_secret,
            "auth_uri": config.AUTH_URI,
            "token_uri": config.TOKEN_URI,
            "redirect_uris": [settings.redirect_uri],
        }},
        scopes=config.SCOPES,
        redirect_uri=settings.redirect_uri,
        autogenerate_code_verifier=False,
    )


def build_authorization_url(settings: config.Settings) -> str:
    authorization_url, _state = _flow(settings).authorization_url(access_type='offline', prompt='consent')
    logger.info("Generated authorization URL.", extra={"props": {"auth_url_domain": authorization_url.split('/')[2]}})
    return authorization_url


def exchange_code(settings: config.Settings, code: str) -> TokenBundle:
    """Trade an authorization code for tokens.

    The refresh token is only issued on first consent (or with prompt=consent), so it may be missing.
    """
    flow = _flow(settings)
    logger.info("Exchanging authorization code for tokens.", extra={"props": {"code_len": len(code)}})
    try:
        flow.fetch_token(code=code)
    except Exception as e:
        logger.error(f"Token exchange failed: {str(e)}", exc_info=True)
        raise TokenExchangeError(str(e)) from e

    credentials = flow.credentials
    logger.info("Token exchange succeeded.", extra={"props": {"has_refresh_token": bool(credentials.refresh_token), "scopes_granted": credentials.scopes}})
    return TokenBundle(
        access_token=credentials.token,
        refresh_token=credentials.refresh_token,
        scopes=list(credentials.scopes) if credentials.scopes else None,
    )


def refresh_credentials(settings: config.Settings) -> Credentials:
    """Return fresh credentials for the stored refresh token."""
    credentials = Credentials(
        token=None,
        refresh_token=settings.refresh_token,
        token_uri=config.TOKEN_URI,
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        scopes=config.SCOPES,
    )
    try:
        credentials.refresh(GoogleAuthRequest())
    except GoogleAuthError as e:
        logger.error(f"Token refresh failed: {str(e)}", exc_info=True)
        raise TokenRefreshError(str(e)) from e

    if not credentials.token:
        raise TokenRefreshError("No access token in response")
    logger.debug("Access token refreshed.", extra={"props": {"expiry": credentials.expiry}})
    return credentials
