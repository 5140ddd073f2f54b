"""
Leaderboard Repository - Review Dashboard
review_dashboard/repositories/leaderboard_repository.py

LeaderboardEntry records keyed by (slug, score_set_slug).
"""

from typing import Dict, Iterable, List, Optional, Tuple

from review_dashboard.core.exceptions import EntityNotFoundException
from review_dashboard.models.leaderboard import LeaderboardEntry
from review_dashboard.repositories.base import BaseRepository

EntryKey = Tuple[str, str]


class LeaderboardRepository(BaseRepository):
    """Upsert-by-key leaderboard store."""

    def __init__(self) -> None:
        super().__init__()
        self._entries: Dict[EntryKey, LeaderboardEntry] = {}

    def upsert(self, entries: Iterable[LeaderboardEntry]) -> int:
        """Insert or overwrite entries by (slug, score_set_slug). Returns the count written."""
        written = 0
        with self.transaction():
            for entry in entries:
                self._entries[entry.key] = entry
                written += 1
        return written

    def delete_score_set(self, score_set_slug: str) -> int:
        """Remove every entry of a score set. Returns the count removed."""
        with self.transaction():
            keys = [k for k in self._entries if k[1] == score_set_slug]
            for key in keys:
                del self._entries[key]
        return len(keys)

    def replace_score_set(
        self, score_set_slug: str, entries: Iterable[LeaderboardEntry]
    ) -> int:
        """Delete-then-insert a score set's snapshot under one lock."""
        entries = list(entries)
        with self.transaction():
            self.delete_score_set(score_set_slug)
            return self.upsert(entries)

    def list_by_score_set(self, score_set_slug: str) -> List[LeaderboardEntry]:
        with self.transaction():
            return [e for k, e in self._entries.items() if k[1] == score_set_slug]

    def find(self, slug: str, score_set_slug: str) -> Optional[LeaderboardEntry]:
        with self.transaction():
            return self._entries.get((slug, score_set_slug))

    def get(self, slug: str, score_set_slug: str) -> LeaderboardEntry:
        entry = self.find(slug, score_set_slug)
        if entry is None:
            raise EntityNotFoundException("LeaderboardEntry", f"{score_set_slug}/{slug}")
        return entry

    def count(self) -> int:
        with self.transaction():
            return len(self._entries)
