"""Access logging middleware."""

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from linkdash.common.headers import extract_forwarded_headers


def client_address(request: Request) -> str:
    """First hop of X-Forwarded-For, else the socket peer."""
    forwarded_for = extract_forwarded_headers(dict(request.headers))["forwarded_for"]
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Write one access line per request to the ``linkdash.web`` logger.

    Server errors are logged at WARNING so they surface at the default level
    even when access lines are filtered out.
    """
    
    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("linkdash.web")
    
    async def dispatch(self, request: Request, call_next: Callable):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000
        
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        self.logger.log(
            level,
            f"{client_address(request)} {request.method} {request.url.path} "
            f"{response.status_code} {duration_ms:.1f}ms",
        )
        return response
