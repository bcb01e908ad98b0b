"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class LinkRequest(BaseModel):
    """Request to create or update a link."""
    
    url: str = Field(..., description="Target URL the short code redirects to")
    code: Optional[str] = Field(None, description="Optional custom short code")
    
    @field_validator('code')
    @classmethod
    def blank_code_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty or whitespace-only code as omitted."""
        if v is None or not v.strip():
            return None
        return v.strip()
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource", "code": None},
                {"url": "https://github.com/user/repo", "code": "myrepo"},
            ]
        }
    }


class LinkResponse(BaseModel):
    """A link as returned to its owner."""
    
    id: int
    code: str
    short_url: str = Field(..., description="The complete short URL")
    target_url: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class LinkEnvelope(BaseModel):
    """Successful mutation result."""
    
    ok: Literal[True] = True
    value: LinkResponse


class FailureResponse(BaseModel):
    """Failed mutation result."""
    
    ok: Literal[False] = False
    error: str = Field(..., description="Failure kind, e.g. CodeConflict")
    message: str = Field(..., description="Human-readable explanation")


class LinkListResponse(BaseModel):
    """The caller's links, newest first."""
    
    items: List[LinkResponse]
    total: int


class ResolveResponse(BaseModel):
    """Public resolution of a short code."""
    
    code: str
    target_url: str


class HealthResponse(BaseModel):
    """Health check response."""
    
    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    timestamp: datetime = Field(..., description="Check timestamp")
