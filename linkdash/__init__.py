"""Core business logic for linkdash."""

from .shortcode import ShortCodeGenerator
from .service import LinkService
from .errors import ErrorKind, LinkResult

__all__ = ["ShortCodeGenerator", "LinkService", "ErrorKind", "LinkResult"]
