"""Bearer-token identity resolution.

The link service never authenticates; callers resolve the owner id here once
per request and pass it to the service explicitly.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "HS256"


def issue_token(
    owner_id: str,
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
    ttl_seconds: int = 3600,
) -> str:
    """Mint a signed token whose ``sub`` claim is ``owner_id``."""
    if not owner_id:
        raise ValueError("owner_id is required")
    now = datetime.now(timezone.utc)
    payload = {
        "sub": owner_id,
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def resolve_owner_id(
    token: Optional[str],
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> Optional[str]:
    """Return the verified owner id carried by ``token``, or None."""
    if not token:
        return None
    
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected invalid token: {e}")
        return None
    
    owner_id = payload.get("sub")
    if not isinstance(owner_id, str) or not owner_id:
        return None
    return owner_id
