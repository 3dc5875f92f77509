"""
Random short-ID generation for shortlinks.

Provided helpers:
- generate_random_short_id: one random Base62 string of length L
- generate_unique_short_ids: a batch of distinct random Base62 strings of length L

Notes:
- Characters are drawn independently and uniformly from ALLOWED_CHARS
  (digits, lowercase, uppercase) using the OS CSPRNG.
- Batches are best effort: duplicates within a batch are dropped, and sampling
  stops after `count * 100` draws, so a tiny ID space (e.g. length 1, or 0)
  yields a batch shorter than `count` instead of looping forever.
- Nothing here knows about storage; the manager checks candidates against the backend.
"""

import random
from typing import List

ALLOWED_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Draw limit per requested ID
_MAX_DRAWS_PER_ID = 100

_rng = random.SystemRandom()


def generate_random_short_id(length: int = 4) -> str:
    """Return a random Base62 string of exactly `length` characters."""
    if length < 0:
        raise ValueError("length must be non-negative")
    return "".join(_rng.choice(ALLOWED_CHARS) for _ in range(length))


def generate_unique_short_ids(count: int, length: int) -> List[str]:
    """
    Generate up to `count` distinct random short IDs of the given length.

    Args:
        count (int): Number of distinct IDs wanted.
        length (int): Length of every ID.

    Returns:
        List[str]: Distinct IDs in generation order. May be shorter than `count`
        when the draw limit (`count * 100`) is reached first.

    Example:
        >>> ids = generate_unique_short_ids(5, 3)
        >>> len(ids), len(set(ids)), all(len(i) == 3 for i in ids)
        (5, 5, True)
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    # dict keeps insertion order, unlike set
    ids = {}
    draws = 0
    while len(ids) < count and draws < count * _MAX_DRAWS_PER_ID:
        ids[generate_random_short_id(length)] = None
        draws += 1
    return list(ids)
