# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from urllib.parse import urlparse
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Text Utilities
# =============================================================================

def split_full_name(full_name: str) -> tuple[str, str]:
    """
    Split a display name into (first_name, last_name).

    The first word is the first name and the rest is the last name.
    Single-word names reuse the first name as the last name, since the
    payment gateway requires both.

    Example:
        split_full_name("Nimal de Silva")  # ("Nimal", "de Silva")
        split_full_name("Nimal")           # ("Nimal", "Nimal")
    """
    parts = full_name.split()
    if not parts:
        return "", ""
    first_name = parts[0]
    last_name = " ".join(parts[1:]) or first_name
    return first_name, last_name


def is_http_url(value: str) -> bool:
    """True if value is an absolute http(s) URL with a host."""
    parsed = urlparse(value.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
