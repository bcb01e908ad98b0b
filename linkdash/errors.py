"""Error kinds, service exceptions and the mutation result type."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .database.models import Link


class ErrorKind(Enum):
    """Business-rule failure kinds reported by the link service."""
    
    UNAUTHENTICATED = "Unauthenticated"
    INVALID_INPUT = "InvalidInput"
    CODE_CONFLICT = "CodeConflict"
    CODE_EXHAUSTED = "CodeExhausted"
    NOT_FOUND = "NotFound"
    FORBIDDEN = "Forbidden"
    STORE_FAILURE = "StoreFailure"


class LinkServiceError(Exception):
    """Base class for failures raised inside the link service."""
    
    kind = ErrorKind.STORE_FAILURE
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(LinkServiceError):
    kind = ErrorKind.UNAUTHENTICATED


class InvalidInputError(LinkServiceError):
    kind = ErrorKind.INVALID_INPUT


class CodeConflictError(LinkServiceError):
    kind = ErrorKind.CODE_CONFLICT


class CodeExhaustedError(LinkServiceError):
    kind = ErrorKind.CODE_EXHAUSTED


class LinkNotFoundError(LinkServiceError):
    kind = ErrorKind.NOT_FOUND


class ForbiddenError(LinkServiceError):
    kind = ErrorKind.FORBIDDEN


@dataclass(frozen=True)
class LinkResult:
    """Outcome of a mutating link operation.
    
    Exactly one of ``value`` (when ``ok``) or ``error`` (when not ``ok``) is set.
    """
    
    ok: bool
    value: Optional[Link] = None
    error: Optional[ErrorKind] = None
    message: str = ""
    
    @classmethod
    def success(cls, link: Link) -> "LinkResult":
        return cls(ok=True, value=link)
    
    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "LinkResult":
        return cls(ok=False, error=kind, message=message)
    
    @classmethod
    def from_error(cls, exc: LinkServiceError) -> "LinkResult":
        return cls.failure(exc.kind, exc.message)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire shape exposed to callers."""
        if self.ok:
            return {"ok": True, "value": self.value.to_dict()}
        return {"ok": False, "error": self.error.value, "message": self.message}
