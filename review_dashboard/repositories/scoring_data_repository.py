"""
Scoring Data Repository - Review Dashboard
review_dashboard/repositories/scoring_data_repository.py

Normalized review-score rows, one snapshot per score-set name. Uploading
a score set replaces its previous snapshot.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from review_dashboard.core.exceptions import EntityNotFoundException
from review_dashboard.repositories.base import BaseRepository
from review_dashboard.scoring.normalizer import RawScoringRow


@dataclass(frozen=True)
class ScoringSnapshot:
    score_set_name: str
    rows: tuple[RawScoringRow, ...]
    uploaded_at: datetime


class ScoringDataRepository(BaseRepository):
    """Replace-on-reload store of scoring rows keyed by score-set name."""

    def __init__(self) -> None:
        super().__init__()
        self._snapshots: Dict[str, ScoringSnapshot] = {}

    def replace(self, score_set_name: str, rows: Sequence[RawScoringRow]) -> ScoringSnapshot:
        """Drop any stored rows for the score set and store ``rows``."""
        snapshot = ScoringSnapshot(
            score_set_name=score_set_name,
            rows=tuple(rows),
            uploaded_at=self._now(),
        )
        with self.transaction():
            self._snapshots.pop(score_set_name, None)
            self._snapshots[score_set_name] = snapshot
        return snapshot

    def find(self, score_set_name: str) -> Optional[ScoringSnapshot]:
        with self.transaction():
            return self._snapshots.get(score_set_name)

    def get(self, score_set_name: str) -> ScoringSnapshot:
        snapshot = self.find(score_set_name)
        if snapshot is None:
            raise EntityNotFoundException("ScoreSet", score_set_name)
        return snapshot

    def list_score_sets(self) -> List[str]:
        with self.transaction():
            return sorted(self._snapshots)

    def delete(self, score_set_name: str) -> bool:
        with self.transaction():
            return self._snapshots.pop(score_set_name, None) is not None
