# =============================================================================
# lib/youtube.py - YouTube Channel Lookup
# =============================================================================
# Reads a channel's public "about" page and pulls the title, thumbnail and
# description from its Open Graph meta tags. Used to confirm that an
# ownership code was added to the channel description.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

YOUTUBE_BASE_URL = "https://www.youtube.com"
CHANNEL_PATH_MARKERS = ("/channel/", "/c/", "/user/", "/@")

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": "text/html,application/xhtml+xml",
    "Cache-Control": "no-cache",
}


class ChannelLookupError(Exception):
    """Raised when a channel URL is invalid or its page can't be read."""


@dataclass(frozen=True)
class ChannelInfo:
    title: str
    description: str
    thumbnail: str | None = None


def channel_path(url: str) -> str:
    """
    Extract the channel path ("/@name", "/channel/UC...") from a channel URL.

    Raises:
        ChannelLookupError: If the URL isn't a YouTube channel URL
    """
    parsed = urlparse(url or "")
    host = (parsed.hostname or "").lower()
    if host != "youtube.com" and not host.endswith(".youtube.com"):
        raise ChannelLookupError(f"Not a YouTube URL: {url!r}")

    path = parsed.path.rstrip("/")
    if not any(marker in path for marker in CHANNEL_PATH_MARKERS):
        raise ChannelLookupError(f"Invalid YouTube channel URL: {url!r}")
    return path.removesuffix("/about")


def parse_channel_page(html: str) -> ChannelInfo:
    """Read channel details from the Open Graph tags of an about page."""
    soup = BeautifulSoup(html, "html.parser")

    def meta(prop: str) -> str | None:
        tag = soup.find("meta", attrs={"property": prop})
        return tag.get("content") if tag else None

    title = meta("og:title")
    if not title and soup.title:
        title = soup.title.get_text().replace(" - YouTube", "")

    return ChannelInfo(
        title=(title or "").strip(),
        description=meta("og:description") or "",
        thumbnail=meta("og:image"),
    )


def fetch_channel_info(url: str, timeout: float = 15) -> ChannelInfo:
    """
    Fetch a channel's about page.

    Raises:
        ChannelLookupError: Invalid URL or the page couldn't be fetched
    """
    about_url = f"{YOUTUBE_BASE_URL}{channel_path(url)}/about"
    try:
        response = httpx.get(about_url, headers=REQUEST_HEADERS, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch YouTube channel {about_url}: {e}")
        raise ChannelLookupError(f"Failed to fetch channel information: {e}")

    return parse_channel_page(response.text)
