"""
CSV Export Loader Tests - Review Dashboard
tests/test_csv_loader.py
"""

import io
from decimal import Decimal

from review_dashboard.scoring.aggregator import compute_aggregates
from review_dashboard.scoring.csv_loader import load_scoring_rows, read_export

EXPORT = """Application ID,Application,Category,Reviewer Email,Scoring Criterion,Score,Max Score,Weighted Score,Weighted Max Score,Score Set
17,Garden,Arts,R1@x.com,Impact,"1,5",2,8,10,Jury Evaluation
17,Garden,Arts,r2@x.com,Impact,1,2,,,Jury Evaluation
"""


def test_read_export_keeps_text_and_drops_blank_cells():
    records = read_export(EXPORT)
    assert len(records) == 2
    assert records[0]["Application ID"] == "17"
    assert records[0]["Score"] == "1,5"
    assert "Weighted Score" not in records[1]


def test_load_scoring_rows_from_file_object():
    rows = load_scoring_rows(io.StringIO(EXPORT))
    assert [r.reviewer_email for r in rows] == ["r1@x.com", "r2@x.com"]
    assert rows[0].application_id == "17"
    assert rows[0].score == Decimal("15")
    assert rows[1].weighted_score == Decimal("0")


def test_loaded_rows_aggregate(tmp_path):
    path = tmp_path / "export.csv"
    path.write_text(EXPORT, encoding="utf-8")
    app = compute_aggregates(load_scoring_rows(path)).apps["17"]
    # r1 weighted 8/10, r2 falls back to plain 1/2
    assert app.final_reviewer_scores == {"r1@x.com": Decimal("4.00"), "r2@x.com": Decimal("2.50")}
