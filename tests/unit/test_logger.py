"""Tests for API key redaction in logs."""

import logging

from steam_profile_api.logger import RedactingFilter, redact, redact_api_key


class TestRedaction:
    def test_redact_query_key(self) -> None:
        url = "https://api.steampowered.com/ISteamUser/GetPlayerSummaries/v0002/?key=ABC123&steamids=1"

        assert redact(url) == (
            "https://api.steampowered.com/ISteamUser/GetPlayerSummaries/v0002/?key=***&steamids=1"
        )

    def test_redact_leaves_other_text(self) -> None:
        assert redact("monkey=banana") == "monkey=banana"

    def test_processor(self) -> None:
        event = {"event": "Request", "url": "https://x/?format=json&key=SECRET", "attempt": 2}

        result = redact_api_key(None, "info", event)

        assert result["url"] == "https://x/?format=json&key=***"
        assert result["attempt"] == 2

    def test_stdlib_filter(self) -> None:
        record = logging.LogRecord(
            "httpx", logging.INFO, __file__, 1, 'HTTP Request: GET %s "%s"',
            ("https://x/?key=SECRET&appid=570", "HTTP/1.1 200 OK"), None,
        )

        assert RedactingFilter().filter(record) is True
        assert "SECRET" not in record.getMessage()
        assert "appid=570" in record.getMessage()
