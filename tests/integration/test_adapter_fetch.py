"""Integration tests for adapter.fetch_catalog with a mocked Supabase client."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from green_globe_catalog.adapter import CatalogLoadError, fetch_catalog, make_client
from tests.fixtures.sample_data import sample_hotel_row, sample_tour_row


def _make_client(rows: list[dict]) -> MagicMock:
    """Mock client whose select(...) and select(...).order(...) both execute to rows."""
    client = MagicMock()
    response = SimpleNamespace(data=rows)
    select = client.table.return_value.select.return_value
    select.execute.return_value = response
    select.order.return_value.execute.return_value = response
    return client


class TestFetchCatalog:
    def test_returns_records_in_order(self):
        rows = [
            sample_tour_row(id="t1", name="Beyond"),
            sample_tour_row(id="t2", name="Puff Pass Paint", price_range="$49", city="Boulder"),
        ]
        client = _make_client(rows)

        records = fetch_catalog(client, "tour")

        client.table.assert_called_once_with("tours")
        client.table.return_value.select.assert_called_once_with("*")
        assert [r.id for r in records] == ["t1", "t2"]
        assert records[1].numeric_price == 49.0
        assert records[1].location_city == "Boulder"

    def test_order_by(self):
        client = _make_client([sample_hotel_row()])

        records = fetch_catalog(client, "hotel", order_by="rating", ascending=False)

        client.table.assert_called_once_with("hotels")
        client.table.return_value.select.return_value.order.assert_called_once_with("rating", desc=True)
        assert records[0].catalog_type == "hotel"
        assert records[0].numeric_price == 189.0

    def test_dispensaries_table(self):
        client = _make_client([{"id": "d1", "name": "Lightshade", "city": "Denver", "state": "Colorado", "address": "1 Main St"}])
        records = fetch_catalog(client, "dispensary")
        client.table.assert_called_once_with("dispensaries")
        assert records[0].image_url == "/assets/placeholder-dispensary.jpg"

    def test_empty_table(self):
        assert fetch_catalog(_make_client([]), "tour") == []

    def test_none_data(self):
        client = MagicMock()
        client.table.return_value.select.return_value.execute.return_value = SimpleNamespace(data=None)
        assert fetch_catalog(client, "tour") == []

    def test_backend_failure_raises(self):
        client = MagicMock()
        client.table.return_value.select.return_value.execute.side_effect = RuntimeError("connection reset")
        with pytest.raises(CatalogLoadError, match="temporarily unavailable"):
            fetch_catalog(client, "tour")

    def test_unknown_catalog_type(self):
        with pytest.raises(ValueError, match="Unknown catalog type"):
            fetch_catalog(MagicMock(), "spa")

    def test_one_bad_row_does_not_block_others(self):
        rows = [sample_tour_row(id="t1"), {"id": "t2"}, sample_tour_row(id="t3", rating="five")]
        records = fetch_catalog(_make_client(rows), "tour")
        assert [r.id for r in records] == ["t1", "t3"]
        assert records[1].rating is None


class TestMakeClient:
    def test_missing_credentials(self):
        with pytest.raises(CatalogLoadError, match="SUPABASE_URL"):
            make_client("", "key")

    def test_creates_client(self):
        with patch("green_globe_catalog.adapter.create_client", return_value="client") as create:
            assert make_client("https://demo.supabase.co", "anon") == "client"
        create.assert_called_once_with("https://demo.supabase.co", "anon")

    def test_client_setup_failure_raises_load_error(self):
        with patch("green_globe_catalog.adapter.create_client", side_effect=RuntimeError("Invalid URL")):
            with pytest.raises(CatalogLoadError, match="temporarily unavailable"):
                make_client("not-a-url", "key")
