"""
Bearer token authentication for the export API.

The accepted token is ExportSettings.api_key, so it can be set in the
settings YAML file or through BOOKMARK_EXPORT_API_KEY.
"""
import logging
import secrets
from typing import Awaitable, Callable

from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from bookmark_export.config.settings import ExportSettings

logger = logging.getLogger(__name__)

TokenVerifier = Callable[[HTTPAuthorizationCredentials], Awaitable[str]]


def token_matches(token: str, api_key: str) -> bool:
    """Compare a presented token with the configured key in constant time."""
    # Encoded so non-ASCII tokens are rejected instead of raising TypeError.
    return secrets.compare_digest(token.encode("utf-8"), api_key.encode("utf-8"))


def create_token_verifier(settings: ExportSettings) -> TokenVerifier:
    """Build the token check for an app running with the given settings.

    Args:
        settings: Export settings holding the accepted api_key

    Returns:
        Async callable taking HTTP Bearer credentials and returning the token

    Raises:
        HTTPException: 401 from the returned callable if the token is wrong
    """
    api_key = settings.api_key

    async def verify_token(credentials: HTTPAuthorizationCredentials) -> str:
        if not token_matches(credentials.credentials, api_key):
            logger.warning("Rejected request with an invalid API token")
            raise HTTPException(
                status_code=401,
                detail="Invalid API token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return credentials.credentials

    return verify_token
