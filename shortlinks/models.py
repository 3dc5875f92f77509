from dataclasses import dataclass
from datetime import datetime


@dataclass
class ShortLink:
    """Represent a stored short link.

    Attributes:
        short_id (str):
            Identifier over the Base62 alphabet; immutable once created.
        target_url (str):
            The URL the short ID resolves to. Not validated.
        created_at (datetime):
            Set once when the link is stored.
        last_accessed_at (datetime):
            Refreshed on lookup; drives the cleanup of unused links.
    """
    short_id: str
    target_url: str
    created_at: datetime
    last_accessed_at: datetime
