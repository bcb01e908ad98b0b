"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Link


class StoreError(Exception):
    """Raised when the underlying store fails."""


class DuplicateCodeError(StoreError):
    """Raised when a write would violate the unique constraint on ``code``."""
    
    def __init__(self, code: str):
        super().__init__(f"Short code '{code}' already exists")
        self.code = code


class LinkStoreBase(ABC):
    """Abstract base class for link store operations."""
    
    def __init__(self, db_config: str):
        """Initialize store.
        
        Args:
            db_config: Store connection string
        """
        self.db_config = db_config
    
    @abstractmethod
    async def insert_link(self, owner_id: str, target_url: str, code: str) -> Link:
        """Insert a new link.
        
        The store assigns ``id``, ``created_at`` and ``updated_at``.
        
        Args:
            owner_id: Identity of the creating user
            target_url: URL the code resolves to
            code: Short code, unique across the store
            
        Returns:
            The created link
            
        Raises:
            DuplicateCodeError: If ``code`` is already used
        """
        pass
    
    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[Link]:
        """Get the link with the given code, or None."""
        pass
    
    @abstractmethod
    async def find_by_id(self, link_id: int) -> Optional[Link]:
        """Get the link with the given id, or None."""
        pass
    
    @abstractmethod
    async def find_by_owner(self, owner_id: str) -> List[Link]:
        """List links owned by ``owner_id``, newest first."""
        pass
    
    @abstractmethod
    async def update_link(
        self,
        link_id: int,
        target_url: Optional[str] = None,
        code: Optional[str] = None,
    ) -> Optional[Link]:
        """Update a link in place and refresh ``updated_at``.
        
        Args:
            link_id: Id of the link to update
            target_url: New target URL (unchanged if None)
            code: New short code (unchanged if None)
            
        Returns:
            The updated link, or None if no row matched
            
        Raises:
            DuplicateCodeError: If ``code`` is already used by another link
        """
        pass
    
    @abstractmethod
    async def delete_link(self, link_id: int) -> Optional[Link]:
        """Hard-delete a link.
        
        Returns:
            The deleted link, or None if no row matched
        """
        pass
    
    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass
    
    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is healthy.
        
        Returns:
            True if healthy, False otherwise
        """
        pass
