"""Request dependencies for the JSON API."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from linkdash.identity import resolve_owner_id

bearer_scheme = HTTPBearer(auto_error=False, description="Signed owner token")


def get_owner_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Resolve the caller's owner id from the bearer token.

    Returns None when the token is missing, expired or invalid; the link
    service turns that into an Unauthenticated result.
    """
    if credentials is None:
        return None
    config = request.app.state.config
    return resolve_owner_id(credentials.credentials, config.auth_secret, config.auth_algorithm)
