"""Data models for the link store."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class Link:
    """Represents a short link record in the store."""
    
    id: int
    owner_id: str
    target_url: str
    code: str
    created_at: datetime
    updated_at: datetime
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "target_url": self.target_url,
            "code": self.code,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Link":
        """Create from dictionary (or a database row mapping)."""
        def _ts(value):
            return value if isinstance(value, datetime) else datetime.fromisoformat(value)
        
        return cls(
            id=data["id"],
            owner_id=data["owner_id"],
            target_url=data["target_url"],
            code=data["code"],
            created_at=_ts(data["created_at"]),
            updated_at=_ts(data["updated_at"]),
        )
