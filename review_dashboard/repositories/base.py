"""
Base Repository - Review Dashboard
review_dashboard/repositories/base.py

In-process stores shared by the routers and the sync job. Every store
guards its state with a lock so a sync can run while requests read.
"""

import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Generator


class BaseRepository:
    """Base repository with lock management."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Hold the store lock for a multi-step update."""
        with self._lock:
            yield

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)
