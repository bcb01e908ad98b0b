"""Store layer for short links."""

import logging
from typing import Optional

from .base import DuplicateCodeError, LinkStoreBase, StoreError
from .memory import InMemoryLinkStore
from .models import Link
from .postgres import PostgresLinkStore


def create_store(
    database_url: str,
    pool_max_size: int = 10,
    create_tables: bool = False,
    logger: Optional[logging.Logger] = None,
) -> LinkStoreBase:
    """Build the store implementation selected by the URL scheme."""
    scheme = database_url.split("://", 1)[0].lower()
    
    if scheme == "memory":
        return InMemoryLinkStore(db_config=database_url, logger=logger)
    if scheme in ("postgres", "postgresql"):
        return PostgresLinkStore(
            db_config=database_url,
            pool_max_size=pool_max_size,
            create_tables=create_tables,
            logger=logger,
        )
    raise ValueError(f"Unsupported database URL scheme: {scheme}")


__all__ = [
    "LinkStoreBase",
    "StoreError",
    "DuplicateCodeError",
    "InMemoryLinkStore",
    "PostgresLinkStore",
    "Link",
    "create_store",
]
