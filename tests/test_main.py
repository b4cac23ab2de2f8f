"""Tests for the main entry point."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import main
from digest.config import AppConfig, ConfigError, ConsolidationConfig
from digest.models import SourceResult
from digest.publisher import NO_NEWS_MESSAGE


def _config(tmp_path) -> AppConfig:
    return AppConfig(
        sources=[],
        consolidation=ConsolidationConfig(max_items=3, similarity_threshold=0.35),
        output_file=str(tmp_path / "latest-news.txt"),
        flag_file=str(tmp_path / "news-notification.flag"),
    )


class TestMain:
    @patch("main.load_config", side_effect=ConfigError("Config file not found"))
    def test_config_error_exits_nonzero(self, mock_load) -> None:
        assert asyncio.run(main.main()) == 1

    @patch("main.collect", new_callable=AsyncMock)
    @patch("main.HTTPClient")
    @patch("main.load_config")
    def test_writes_ranked_digest(self, mock_load, mock_http, mock_collect, tmp_path) -> None:
        mock_load.return_value = _config(tmp_path)
        mock_http.return_value = MagicMock(close=AsyncMock())
        mock_collect.return_value = [
            SourceResult("Bloomberg", ["Federal Reserve signals rate cut in March"]),
            SourceResult("CNBC", ["Fed Chair signals rate cut coming in March"]),
            SourceResult("WSJ", ["Ethereum gains 5% today"]),
        ]

        assert asyncio.run(main.main()) == 0

        digest = (tmp_path / "latest-news.txt").read_text(encoding="utf-8")
        lines = digest.split("\n")
        assert "1. Fed Chair signals rate cut coming in March" in lines
        assert "   (Bloomberg, CNBC)" in lines
        assert "2. Ethereum gains 5% today" in lines
        assert (tmp_path / "news-notification.flag").exists()
        mock_http.return_value.close.assert_awaited_once()

    @patch("main.collect", new_callable=AsyncMock, return_value=[])
    @patch("main.HTTPClient")
    @patch("main.load_config")
    def test_no_headlines_writes_fallback(self, mock_load, mock_http, mock_collect, tmp_path) -> None:
        mock_load.return_value = _config(tmp_path)
        mock_http.return_value = MagicMock(close=AsyncMock())

        assert asyncio.run(main.main()) == 0
        assert (tmp_path / "latest-news.txt").read_text(encoding="utf-8") == NO_NEWS_MESSAGE
