"""In-process implementation of the link store."""

import asyncio
import dataclasses
import itertools
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .base import DuplicateCodeError, LinkStoreBase
from .models import Link


class InMemoryLinkStore(LinkStoreBase):
    """Dictionary-backed link store.
    
    Keeps a secondary index on ``code`` and enforces its uniqueness the way a
    database unique constraint would. Data lives only as long as the process.
    """
    
    def __init__(
        self,
        db_config: str = "memory://",
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)
        self._links: Dict[int, Link] = {}
        self._by_code: Dict[str, int] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()
    
    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)
    
    async def insert_link(self, owner_id: str, target_url: str, code: str) -> Link:
        async with self._lock:
            if code in self._by_code:
                raise DuplicateCodeError(code)
            
            now = self._now()
            link = Link(
                id=next(self._ids),
                owner_id=owner_id,
                target_url=target_url,
                code=code,
                created_at=now,
                updated_at=now,
            )
            self._links[link.id] = link
            self._by_code[code] = link.id
        
        self.logger.debug(f"Inserted link {link.id}: {code} -> {target_url}")
        return link
    
    async def find_by_code(self, code: str) -> Optional[Link]:
        link_id = self._by_code.get(code)
        return self._links.get(link_id) if link_id is not None else None
    
    async def find_by_id(self, link_id: int) -> Optional[Link]:
        return self._links.get(link_id)
    
    async def find_by_owner(self, owner_id: str) -> List[Link]:
        links = [link for link in self._links.values() if link.owner_id == owner_id]
        links.sort(key=lambda link: (link.created_at, link.id), reverse=True)
        return links
    
    async def update_link(
        self,
        link_id: int,
        target_url: Optional[str] = None,
        code: Optional[str] = None,
    ) -> Optional[Link]:
        async with self._lock:
            current = self._links.get(link_id)
            if current is None:
                return None
            
            changes = {"updated_at": self._now()}
            if target_url is not None:
                changes["target_url"] = target_url
            if code is not None and code != current.code:
                if code in self._by_code:
                    raise DuplicateCodeError(code)
                changes["code"] = code
            
            updated = dataclasses.replace(current, **changes)
            self._links[link_id] = updated
            if updated.code != current.code:
                del self._by_code[current.code]
                self._by_code[updated.code] = link_id
        
        return updated
    
    async def delete_link(self, link_id: int) -> Optional[Link]:
        async with self._lock:
            link = self._links.pop(link_id, None)
            if link is not None:
                del self._by_code[link.code]
        return link
    
    async def count(self) -> int:
        """Number of stored links."""
        return len(self._links)
    
    async def health_check(self) -> bool:
        return True
    
    async def close(self) -> None:
        self.logger.debug("In-memory store closed")
