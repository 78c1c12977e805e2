"""Unit tests for green_globe_catalog.agegate."""

import pytest

from green_globe_catalog.agegate import BOT_USER_AGENTS, is_bot, requires_age_gate

GOOGLEBOT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
CHROME = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"


class TestIsBot:
    def test_googlebot(self):
        assert is_bot(GOOGLEBOT) is True

    def test_browser(self):
        assert is_bot(CHROME) is False

    @pytest.mark.parametrize("ua", [None, ""])
    def test_missing(self, ua):
        assert is_bot(ua) is False

    def test_every_token_detected(self):
        for token in BOT_USER_AGENTS:
            assert is_bot(f"Mozilla/5.0 ({token.upper()}/1.0)") is True


class TestRequiresAgeGate:
    def test_visitor_sees_gate(self):
        assert requires_age_gate(CHROME) is True

    def test_verified_visitor(self):
        assert requires_age_gate(CHROME, verified=True) is False

    def test_crawler_skips_gate(self):
        assert requires_age_gate(GOOGLEBOT) is False
