"""Unit tests for green_globe_catalog.config."""

import os

from green_globe_catalog.config import get_settings, load_env_file
from green_globe_catalog.models import DEFAULT_MAX_PRICE, DEFAULT_PAGE_SIZE

_KEYS = ("SUPABASE_URL", "SUPABASE_ANON_KEY", "CATALOG_PAGE_SIZE", "CATALOG_MAX_PRICE")


def _clear(monkeypatch):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)


class TestLoadEnvFile:
    def test_missing_file_is_noop(self, tmp_path, monkeypatch):
        _clear(monkeypatch)
        load_env_file(tmp_path / ".env")
        assert "SUPABASE_URL" not in os.environ

    def test_loads_values(self, tmp_path, monkeypatch):
        _clear(monkeypatch)
        path = tmp_path / ".env"
        path.write_text(
            "# Supabase\n"
            "SUPABASE_URL=https://demo.supabase.co\n"
            'SUPABASE_ANON_KEY="anon-key"\n'
            "\n"
            "not a pair\n"
        )
        load_env_file(path)
        assert os.environ["SUPABASE_URL"] == "https://demo.supabase.co"
        assert os.environ["SUPABASE_ANON_KEY"] == "anon-key"

    def test_does_not_override(self, tmp_path, monkeypatch):
        _clear(monkeypatch)
        monkeypatch.setenv("SUPABASE_URL", "https://already.set")
        path = tmp_path / ".env"
        path.write_text("SUPABASE_URL=https://from.file\n")
        load_env_file(path)
        assert os.environ["SUPABASE_URL"] == "https://already.set"


class TestGetSettings:
    def test_defaults(self, monkeypatch):
        _clear(monkeypatch)
        s = get_settings()
        assert s.supabase_url == ""
        assert s.page_size == DEFAULT_PAGE_SIZE
        assert s.max_price == DEFAULT_MAX_PRICE

    def test_from_env(self, monkeypatch):
        _clear(monkeypatch)
        monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "k")
        monkeypatch.setenv("CATALOG_PAGE_SIZE", "12")
        monkeypatch.setenv("CATALOG_MAX_PRICE", "500")
        s = get_settings()
        assert s.supabase_url == "https://demo.supabase.co"
        assert s.supabase_anon_key == "k"
        assert s.page_size == 12
        assert s.max_price == 500.0

    def test_invalid_numbers_fall_back(self, monkeypatch):
        _clear(monkeypatch)
        monkeypatch.setenv("CATALOG_PAGE_SIZE", "nine")
        monkeypatch.setenv("CATALOG_MAX_PRICE", "-10")
        s = get_settings()
        assert s.page_size == DEFAULT_PAGE_SIZE
        assert s.max_price == DEFAULT_MAX_PRICE

    def test_zero_page_size_falls_back(self, monkeypatch):
        _clear(monkeypatch)
        monkeypatch.setenv("CATALOG_PAGE_SIZE", "0")
        assert get_settings().page_size == DEFAULT_PAGE_SIZE
