"""Forwarded headers middleware."""

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from linkdash.common.headers import build_base_url


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Resolve the public base URL of the request from X-Forwarded-* headers."""
    
    async def dispatch(self, request: Request, call_next: Callable):
        """Store the public base URL in request state."""
        config = request.app.state.config
        request.state.base_url = build_base_url(
            headers=dict(request.headers),
            fallback_base_url=config.base_url,
            request_scheme=request.url.scheme,
            request_host=request.headers.get("host"),
        )
        
        response = await call_next(request)
        return response
