"""
Unit tests for stats and listing export.
"""

import json
import os
import tempfile

import pandas as pd
import pytest

from src.core.aggregation import summarize
from src.utils.reporting import export_reviews, export_summary, reviews_frame, summary_frame
from src.utils.sample_data import sample_reviews


def test_summary_frame_rows():
    summary = summarize(sample_reviews("product", "1"))

    df = summary_frame(summary)

    assert list(df.columns) == ["Stars", "Count", "Percentage"]
    assert df["Stars"].tolist() == [5, 4, 3, 2, 1]
    assert df["Count"].tolist() == [2, 1, 1, 0, 0]
    assert df["Percentage"].sum() == pytest.approx(100.0)


def test_reviews_frame_empty_has_columns():
    df = reviews_frame([])
    assert df.empty
    assert "Helpfulness" in df.columns


def test_export_summary_writes_csv_and_metadata():
    summary = summarize(sample_reviews("vendor", "v1"))

    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = export_summary(summary, "vendor", "v1", output_dir=tmpdir)

        assert output_path == os.path.join(tmpdir, "stats_vendor_v1.csv")
        df = pd.read_csv(output_path)
        assert len(df) == 5

        with open(os.path.join(tmpdir, "stats_vendor_v1_metadata.json")) as f:
            metadata = json.load(f)

        assert metadata["total_reviews"] == 4
        assert metadata["average_rating_display"] == "4.3"
        assert metadata["rating_label"] == "Very Good"
        assert metadata["recommend_percentage"] == pytest.approx(75.0)


def test_export_reviews():
    reviews = sample_reviews("product", "1")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = export_reviews(reviews, os.path.join(tmpdir, "out", "page.csv"))

        df = pd.read_csv(path)
        assert df["Author"].tolist()[0] == "Sarah Johnson"
        assert df["Helpfulness"].tolist() == [12, 7, 1, 15]


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
