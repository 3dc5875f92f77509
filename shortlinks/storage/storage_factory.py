"""
Storage factory – switch backend from config (lazy env version)
===============================================================

This module centralizes selection of the durable backend (in-memory vs DB)
so the rest of the app can stay ignorant of where data lives.

- Reads environment **at call time** to avoid stale values in tests.
- Imports the DB backend **only if** the selected backend is "postgres".

Environment variables
---------------------
- SHORTLINKS_BACKEND:        "memory" (default) or "postgres"
- SHORTLINKS_DB_DSN:         DSN string if backend=="postgres"
- SHORTLINKS_CREATE_TABLES:  "0" to skip the DDL on init
"""

import logging
import os
from typing import Optional

from shortlinks.storage.base import BaseBackend
from shortlinks.storage.storage import Storage

logger = logging.getLogger(__name__)


def get_backend(backend: Optional[str] = None, **kwargs) -> BaseBackend:
    """
    Return a backend instance based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory" (default) or "postgres". If omitted, reads SHORTLINKS_BACKEND.
    kwargs : dict
        Extra args for the backend constructor. For postgres: dsn="...", create_tables=bool.

    Returns
    -------
    BaseBackend

    Raises
    ------
    ValueError
        Unknown backend name, or postgres without a DSN.
    """
    be = (backend or os.getenv("SHORTLINKS_BACKEND", "memory")).strip().lower()
    logger.info("Selected backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "postgres":
        dsn = kwargs.get("dsn") or os.getenv("SHORTLINKS_DB_DSN", "")
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env SHORTLINKS_DB_DSN)")
        create_tables = kwargs.get("create_tables")
        if create_tables is None:
            create_tables = os.getenv("SHORTLINKS_CREATE_TABLES", "1").strip().lower() in {"1", "true", "yes", "on"}
        # Local import to avoid hard dependency when not using postgres
        from shortlinks.storage.db_storage import DBStorage
        return DBStorage(dsn=dsn, create_tables=create_tables)

    raise ValueError(f"Unknown backend: {be!r}")
