"""
Score Export Loader
review_dashboard/scoring/csv_loader.py

Reads a per-criterion review-score CSV export into plain records and
normalized RawScoringRows.
"""

import io
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd
import structlog

from review_dashboard.scoring.normalizer import RawScoringRow, normalize_rows

logger = structlog.get_logger(__name__)

ExportSource = Union[str, Path, io.IOBase]


def read_export(source: ExportSource) -> List[Dict[str, Any]]:
    """
    Read a CSV export as a list of header -> value records.

    Every column is read as text so the normalizer owns numeric coercion.
    Blank cells are dropped from their record, so alias probing moves on
    to the next header.

    Args:
        source: Path, CSV text wrapped in a file object, or a raw CSV string
                containing at least one newline.
    """
    if isinstance(source, str) and "\n" in source:
        source = io.StringIO(source)

    df = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    df.columns = [str(c).strip() for c in df.columns]

    records = [
        {key: value for key, value in row.items() if value != ""}
        for row in df.to_dict(orient="records")
    ]
    logger.debug("export_read", columns=list(df.columns), records=len(records))
    return records


def load_scoring_rows(source: ExportSource) -> List[RawScoringRow]:
    """Read a CSV export and normalize every record."""
    return normalize_rows(read_export(source))
