"""Unit tests for green_globe_catalog.summarizer."""

from green_globe_catalog.summarizer import summarize_catalog
from tests.fixtures.sample_data import sample_record, sample_records


class TestSummarizeCatalog:
    def test_empty_list(self):
        result = summarize_catalog([])
        assert result["count"] == 0
        assert result["price"] is None
        assert result["rating"]["count_with_data"] == 0
        assert result["review_count"] == 0
        assert result["locations"] == {}

    def test_price_stats(self):
        records = [
            sample_record(id="1", numeric_price=10),
            sample_record(id="2", numeric_price=20),
            sample_record(id="3", numeric_price=60),
        ]
        result = summarize_catalog(records)
        assert result["count"] == 3
        assert result["price"] == {"min": 10.0, "median": 20.0, "mean": 30.0, "max": 60.0}

    def test_rating_stats_skip_unrated(self):
        records = [
            sample_record(id="1", rating=4.0),
            sample_record(id="2", rating=None),
            sample_record(id="3", rating=5.0),
        ]
        result = summarize_catalog(records)
        assert result["rating"]["count_with_data"] == 2
        assert result["rating"]["min"] == 4.0
        assert result["rating"]["max"] == 5.0
        assert result["rating"]["mean"] == 4.5

    def test_review_total(self):
        records = [sample_record(id="1", review_count=10), sample_record(id="2", review_count=5)]
        assert summarize_catalog(records)["review_count"] == 15

    def test_locations_most_common_first(self):
        result = summarize_catalog(sample_records(10))
        assert list(result["locations"]) == ["Denver", "Boulder", "Colorado Springs"]
        assert result["locations"]["Denver"] == 4

    def test_dict_input(self):
        records = [r.model_dump() for r in sample_records(3)]
        assert summarize_catalog(records)["count"] == 3
