"""
Storage module for shortlinks (in-memory implementation).

Responsibilities:
    - Save short links and their target URLs
    - Track creation and last access timestamps
    - Answer batched existence checks for candidate short IDs
    - Drop links that have not been accessed for a number of days

Design:
    - This is an in-memory reference implementation that satisfies the BaseBackend contract.
    - It is intentionally simple to keep unit/integration tests fast and deterministic.
    - For production, replace with a DB-backed implementation (see db_storage.py).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

from ..exceptions import ShortIdAlreadyExistsError
from ..models import ShortLink
from .base import BaseBackend

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Storage(BaseBackend):
    def __init__(self):
        """
        Initialize empty storage dictionary.

        Internal schema:
            self.links = {short_id: ShortLink(...)}
        """
        self.links: Dict[str, ShortLink] = {}

    def __len__(self) -> int:
        return len(self.links)

    async def get_target_url(self, short_id: str) -> Optional[str]:
        link = self.links.get(short_id)
        return link.target_url if link else None

    async def create_short_link(self, short_id: str, target_url: str) -> None:
        """
        Insert a new link.

        Raises:
            ShortIdAlreadyExistsError: If the short ID is taken (no upsert).
        """
        if short_id in self.links:
            raise ShortIdAlreadyExistsError(short_id)
        now = _utcnow()
        self.links[short_id] = ShortLink(
            short_id=short_id,
            target_url=target_url,
            created_at=now,
            last_accessed_at=now,
        )

    async def check_short_ids_exist(self, short_ids: Sequence[str]) -> List[str]:
        return [short_id for short_id in short_ids if short_id in self.links]

    async def update_short_link_last_access_time(
        self, short_id: str, accessed_at: Optional[datetime] = None
    ) -> None:
        link = self.links.get(short_id)
        if link is None:
            return
        if accessed_at is None:
            accessed_at = _utcnow()
        elif accessed_at.tzinfo is None:
            # naive times are taken as UTC
            accessed_at = accessed_at.replace(tzinfo=timezone.utc)
        link.last_accessed_at = accessed_at

    async def clean_unused_links(self, max_age: int) -> None:
        """
        Delete every link last accessed more than `max_age` days ago.

        Raises:
            ValueError: If `max_age` is negative.
        """
        if max_age < 0:
            raise ValueError("max_age must be non-negative")
        cutoff = _utcnow() - timedelta(days=max_age)
        stale = [sid for sid, link in self.links.items() if link.last_accessed_at < cutoff]
        for short_id in stale:
            del self.links[short_id]
        logger.debug("Removed %d unused link(s) older than %d day(s)", len(stale), max_age)

    # ---- Inspection helpers -------------------------------------------------

    def get_short_link(self, short_id: str) -> Optional[ShortLink]:
        """Return the stored record for `short_id`, or None."""
        return self.links.get(short_id)
