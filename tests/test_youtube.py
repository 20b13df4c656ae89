# =============================================================================
# tests/test_youtube.py - YouTube Channel Lookup Tests
# =============================================================================

from unittest.mock import MagicMock, patch

import httpx
import pytest

from lib.youtube import ChannelLookupError, channel_path, fetch_channel_info, parse_channel_page

ABOUT_PAGE = """
<html>
  <head>
    <title>Nimal Vlogs - YouTube</title>
    <meta property="og:title" content="Nimal Vlogs">
    <meta property="og:description" content="Travel across Sri Lanka &amp; beyond. #DNKYabcdef123">
    <meta property="og:image" content="https://yt3.ggpht.com/nimal.jpg">
  </head>
  <body></body>
</html>
"""


class TestChannelPath:
    @pytest.mark.parametrize("url, expected", [
        ("https://www.youtube.com/@nimalvlogs", "/@nimalvlogs"),
        ("https://youtube.com/@nimalvlogs/", "/@nimalvlogs"),
        ("https://www.youtube.com/@nimalvlogs/about", "/@nimalvlogs"),
        ("https://www.youtube.com/channel/UC1234567890", "/channel/UC1234567890"),
        ("https://m.youtube.com/c/NimalVlogs", "/c/NimalVlogs"),
        ("https://www.youtube.com/user/nimal", "/user/nimal"),
    ])
    def test_valid_urls(self, url, expected):
        assert channel_path(url) == expected

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=abc123",
        "https://www.tiktok.com/@nimal",
        "https://evil.example/@nimal",
        "https://youtube.com.evil.example/@nimal",
        "",
    ])
    def test_invalid_urls(self, url):
        with pytest.raises(ChannelLookupError):
            channel_path(url)


class TestParseChannelPage:
    def test_open_graph_tags(self):
        info = parse_channel_page(ABOUT_PAGE)

        assert info.title == "Nimal Vlogs"
        assert info.description == "Travel across Sri Lanka & beyond. #DNKYabcdef123"
        assert info.thumbnail == "https://yt3.ggpht.com/nimal.jpg"

    def test_falls_back_to_page_title(self):
        info = parse_channel_page("<html><head><title>Nimal Vlogs - YouTube</title></head></html>")

        assert info.title == "Nimal Vlogs"
        assert info.description == ""
        assert info.thumbnail is None


class TestFetchChannelInfo:
    def test_fetches_about_page(self):
        response = MagicMock(text=ABOUT_PAGE)

        with patch("lib.youtube.httpx.get", return_value=response) as get:
            info = fetch_channel_info("https://youtube.com/@nimalvlogs")

        assert get.call_args.args[0] == "https://www.youtube.com/@nimalvlogs/about"
        assert "Chrome" in get.call_args.kwargs["headers"]["User-Agent"]
        assert "#DNKYabcdef123" in info.description

    def test_http_error(self):
        with patch("lib.youtube.httpx.get", side_effect=httpx.ConnectError("down")):
            with pytest.raises(ChannelLookupError):
                fetch_channel_info("https://www.youtube.com/@nimalvlogs")

    def test_error_status(self):
        request = httpx.Request("GET", "https://www.youtube.com/@gone/about")
        response = httpx.Response(404, request=request)

        with patch("lib.youtube.httpx.get", return_value=response):
            with pytest.raises(ChannelLookupError):
                fetch_channel_info("https://www.youtube.com/@gone")
