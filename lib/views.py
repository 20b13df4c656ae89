# =============================================================================
# lib/views.py - View Count Parsing and Formatting
# =============================================================================
# Converts human shorthand view counts ("10K", "1.5M") to integers and back.
#
# Usage:
#   from lib.views import parse_view_count, format_view_count
#   parse_view_count("1.5M")   # 1500000
#   format_view_count(1000)    # "1K"
#
# Formatting is lossy: format_view_count(1234) == "1.2K", which parses back
# to 1200. That is expected for display values.
# =============================================================================

from __future__ import annotations

import logging
import re
from decimal import Decimal, ROUND_HALF_UP

logger = logging.getLogger(__name__)

VIEW_COUNT_PATTERN = re.compile(r"^(\d+(\.\d+)?)(K|M)?$", re.IGNORECASE)

SUFFIX_MULTIPLIERS = {
    None: 1,
    "K": 1_000,
    "M": 1_000_000,
}


class ViewCountParseError(ValueError):
    """Raised in strict mode when a view count string is malformed."""

    def __init__(self, value: object):
        super().__init__(f"Invalid view count: {value!r}")
        self.value = value


def parse_view_count(value: str | int, strict: bool = False) -> int:
    """
    Parse a view count string into an integer.

    Accepts plain integers ("2500"), decimals ("2500.7", truncated) and
    K/M suffixes in either case ("10k", "1.5M").

    Args:
        value: The view count as typed by a user or stored in the database
        strict: Raise ViewCountParseError on malformed input instead of
            logging a warning and returning 0

    Returns:
        Non-negative integer view count

    Raises:
        ViewCountParseError: If strict and the input is malformed
    """
    if isinstance(value, bool):
        return _reject(value, strict)

    if isinstance(value, int):
        if value < 0:
            return _reject(value, strict)
        return value

    if not isinstance(value, str):
        return _reject(value, strict)

    match = VIEW_COUNT_PATTERN.match(value.strip())
    if not match:
        return _reject(value, strict)

    number = Decimal(match.group(1))
    suffix = match.group(3).upper() if match.group(3) else None

    return int(number * SUFFIX_MULTIPLIERS[suffix])


def _reject(value: object, strict: bool) -> int:
    if strict:
        raise ViewCountParseError(value)
    logger.warning(f"Malformed view count {value!r}, treating as 0")
    return 0


def format_view_count(views: int) -> str:
    """
    Format an integer view count as shorthand.

    Examples:
        999 -> "999", 1000 -> "1K", 1500000 -> "1.5M", 10000 -> "10K"
    """
    if views >= 1_000_000:
        return _with_suffix(views, 1_000_000, "M")
    if views >= 1_000:
        return _with_suffix(views, 1_000, "K")
    return str(views)


def _with_suffix(views: int, unit: int, suffix: str) -> str:
    scaled = (Decimal(views) / Decimal(unit)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    text = str(scaled)
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text}{suffix}"
