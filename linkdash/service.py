"""Business logic service for owner-scoped short links."""

import logging
from typing import Dict, Iterable, List, Optional

from .common.validators import is_valid_short_code, is_valid_url
from .database.base import DuplicateCodeError, LinkStoreBase, StoreError
from .database.models import Link
from .errors import (
    CodeConflictError,
    CodeExhaustedError,
    ErrorKind,
    ForbiddenError,
    InvalidInputError,
    LinkNotFoundError,
    LinkResult,
    LinkServiceError,
    UnauthenticatedError,
)
from .shortcode import ShortCodeGenerator


class LinkService:
    """Service layer for link creation, ownership checks and lookups.
    
    Mutating operations (``create``, ``update``, ``delete``) never raise to
    their caller: every outcome is returned as a ``LinkResult``. Read
    operations return plain values and let store failures propagate.
    
    Not-found and forbidden are reported separately: a link is fetched by id
    first and only then compared against the caller, for both update and
    delete. This tells a caller whether an id exists at all.
    """
    
    def __init__(
        self,
        store: LinkStoreBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_code_attempts: int = 10,
        min_code_length: int = 3,
        max_code_length: int = 20,
        reserved_codes: Iterable[str] = (),
    ):
        """Initialize link service.
        
        Args:
            store: Link store instance
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_code_attempts: Total generate-and-check attempts per create
            min_code_length: Minimum length of a user-supplied code
            max_code_length: Maximum length of a user-supplied code
            reserved_codes: User-supplied codes to reject
        """
        if max_code_attempts < 1:
            raise ValueError("max_code_attempts must be at least 1")
        
        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_code_attempts = max_code_attempts
        self.min_code_length = min_code_length
        self.max_code_length = max_code_length
        self.reserved_codes = frozenset(reserved_codes)
    
    # Mutations
    
    async def create(
        self,
        owner_id: str,
        target_url: str,
        desired_code: Optional[str] = None,
    ) -> LinkResult:
        """Create a new short link owned by ``owner_id``.
        
        Args:
            owner_id: Identity of the caller
            target_url: Absolute http(s) URL to shorten
            desired_code: Optional user-chosen code; generated when omitted
            
        Returns:
            LinkResult holding the created link or the failure kind
        """
        return await self._run("create", self._create(owner_id, target_url, desired_code))
    
    async def update(
        self,
        owner_id: str,
        link_id: int,
        target_url: str,
        desired_code: Optional[str] = None,
    ) -> LinkResult:
        """Change the target URL and optionally the code of an owned link.
        
        Args:
            owner_id: Identity of the caller
            link_id: Id of the link to update
            target_url: New absolute http(s) URL
            desired_code: Optional new code; equal to the current code is a no-op
            
        Returns:
            LinkResult holding the updated link or the failure kind
        """
        return await self._run(
            "update", self._update(owner_id, link_id, target_url, desired_code)
        )
    
    async def delete(self, owner_id: str, link_id: int) -> LinkResult:
        """Hard-delete an owned link.
        
        Returns:
            LinkResult holding the deleted link or the failure kind
        """
        return await self._run("delete", self._delete(owner_id, link_id))
    
    # Reads
    
    async def list_by_owner(self, owner_id: str) -> List[Link]:
        """List the caller's links, newest first."""
        if not owner_id:
            return []
        return await self.store.find_by_owner(owner_id)
    
    async def get_by_code(self, code: str) -> Optional[Link]:
        """Resolve a short code for any visitor.
        
        Returns:
            The link, or None if no link uses ``code``
        """
        if not code:
            return None
        link = await self.store.find_by_code(code)
        if link is None:
            self.logger.debug(f"Short code not found: {code}")
        return link
    
    async def health_check(self) -> Dict[str, bool]:
        """Perform health check."""
        store_healthy = await self.store.health_check()
        return {"database": store_healthy, "overall": store_healthy}
    
    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()
    
    # Internals
    
    async def _run(self, operation: str, pending) -> LinkResult:
        """Await a mutation and convert its outcome into a LinkResult."""
        try:
            link = await pending
        except LinkServiceError as e:
            self.logger.info(f"{operation} rejected ({e.kind.value}): {e.message}")
            return LinkResult.from_error(e)
        except StoreError as e:
            self.logger.exception(f"{operation} failed in store")
            return LinkResult.failure(ErrorKind.STORE_FAILURE, f"Store failure: {e}")
        return LinkResult.success(link)
    
    @staticmethod
    def _require_owner(owner_id: str) -> None:
        if not owner_id:
            raise UnauthenticatedError("Authentication required")
    
    @staticmethod
    def _validate_url(target_url: str) -> None:
        is_valid, error = is_valid_url(target_url)
        if not is_valid:
            raise InvalidInputError(f"Invalid URL: {error}")
    
    def _validate_code(self, code: str) -> None:
        is_valid, error = is_valid_short_code(
            code,
            min_length=self.min_code_length,
            max_length=self.max_code_length,
            reserved=self.reserved_codes,
        )
        if not is_valid:
            raise InvalidInputError(f"Invalid short code: {error}")
    
    async def _load_owned(self, owner_id: str, link_id: int) -> Link:
        link = await self.store.find_by_id(link_id)
        if link is None:
            raise LinkNotFoundError(f"Link {link_id} not found")
        if link.owner_id != owner_id:
            raise ForbiddenError(f"Link {link_id} belongs to another user")
        return link
    
    async def _create(
        self,
        owner_id: str,
        target_url: str,
        desired_code: Optional[str],
    ) -> Link:
        self._require_owner(owner_id)
        self._validate_url(target_url)
        
        if desired_code is not None:
            self._validate_code(desired_code)
            link = await self._insert_desired(owner_id, target_url, desired_code)
        else:
            link = await self._insert_generated(owner_id, target_url)
        
        self.logger.info(f"Created link {link.id}: {link.code} -> {link.target_url} (owner {owner_id})")
        return link
    
    async def _insert_desired(self, owner_id: str, target_url: str, code: str) -> Link:
        if await self.store.find_by_code(code) is not None:
            raise CodeConflictError(f"Short code '{code}' is already in use")
        try:
            return await self.store.insert_link(owner_id, target_url, code)
        except DuplicateCodeError:
            # Lost a race with a concurrent insert of the same code
            raise CodeConflictError(f"Short code '{code}' is already in use")
    
    async def _insert_generated(self, owner_id: str, target_url: str) -> Link:
        """Generate-check-insert loop bounded by ``max_code_attempts``."""
        for attempt in range(1, self.max_code_attempts + 1):
            candidate = self.generator.generate_random()
            
            if await self.store.find_by_code(candidate) is not None:
                self.logger.debug(f"Collision on generated code {candidate} (attempt {attempt})")
                continue
            
            try:
                return await self.store.insert_link(owner_id, target_url, candidate)
            except DuplicateCodeError:
                self.logger.warning(f"Generated code {candidate} taken concurrently (attempt {attempt})")
        
        raise CodeExhaustedError(
            f"Unable to generate a unique short code after {self.max_code_attempts} attempts"
        )
    
    async def _update(
        self,
        owner_id: str,
        link_id: int,
        target_url: str,
        desired_code: Optional[str],
    ) -> Link:
        self._require_owner(owner_id)
        link = await self._load_owned(owner_id, link_id)
        self._validate_url(target_url)
        
        new_code = None
        if desired_code is not None and desired_code != link.code:
            self._validate_code(desired_code)
            if await self.store.find_by_code(desired_code) is not None:
                raise CodeConflictError(f"Short code '{desired_code}' is already in use")
            new_code = desired_code
        
        try:
            updated = await self.store.update_link(link_id, target_url=target_url, code=new_code)
        except DuplicateCodeError:
            raise CodeConflictError(f"Short code '{desired_code}' is already in use")
        
        if updated is None:
            raise LinkNotFoundError(f"Link {link_id} no longer exists")
        
        self.logger.info(f"Updated link {link_id}: {updated.code} -> {updated.target_url}")
        return updated
    
    async def _delete(self, owner_id: str, link_id: int) -> Link:
        self._require_owner(owner_id)
        await self._load_owned(owner_id, link_id)
        
        deleted = await self.store.delete_link(link_id)
        if deleted is None:
            raise LinkNotFoundError(f"Link {link_id} no longer exists")
        
        self.logger.info(f"Deleted link {link_id} ({deleted.code})")
        return deleted
