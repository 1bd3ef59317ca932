"""
HTML Utilities
==============

Escaping and URL helpers shared by the chunk renderer and the modules.
"""

import re
from typing import Optional

_SAFE_URL_PATTERN = re.compile(r"^(https?://|/|\./|\.\./|data:image/)", re.IGNORECASE)
_RELATIVE_PATH_PATTERN = re.compile(r"^[\w\-./%]+$")
_FORBIDDEN_URL_CHARS = re.compile(r"[\s\"'()<>\\]")


def escape_html(text: str) -> str:
    """Escape HTML special characters."""
    if not text:
        return ""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def strip_markup_chars(text: str) -> str:
    """Remove characters that could open a tag or a CSS block."""
    return re.sub(r"[<>{}]", "", text or "")


def sanitize_url(url: Optional[str]) -> Optional[str]:
    """
    Validate a URL for use in ``src`` attributes and CSS ``url()`` values.

    Allows http(s), root or dot relative paths, bare relative paths and
    ``data:image/`` URIs. Anything carrying quotes, parentheses, whitespace or
    another scheme (``javascript:`` included) is rejected.

    Args:
        url: Candidate URL

    Returns:
        The URL unchanged when safe, otherwise None
    """
    if not url or not isinstance(url, str):
        return None
    url = url.strip()
    if not url or url == "none" or _FORBIDDEN_URL_CHARS.search(url):
        return None
    if _SAFE_URL_PATTERN.match(url):
        return url
    if ":" not in url.split("/", 1)[0] and _RELATIVE_PATH_PATTERN.match(url):
        return url
    return None


def resolve_url(url: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
    """
    Sanitize a URL and make relative paths absolute against ``base_url``.

    The external renderer loads documents from a blank origin, so relative
    asset paths must be absolutized before composition.
    """
    safe = sanitize_url(url)
    if safe is None:
        return None
    if safe.lower().startswith(("http://", "https://", "data:")) or not base_url:
        return safe
    clean_base = base_url.rstrip("/")
    clean_path = safe.lstrip(".") if safe.startswith("./") else safe
    if not clean_path.startswith("/"):
        clean_path = f"/{clean_path}"
    return f"{clean_base}{clean_path}"


def css_url(url: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
    """Build a CSS ``url("...")`` token, or None when the URL is unsafe."""
    resolved = resolve_url(url, base_url)
    if resolved is None:
        return None
    return f'url("{resolved}")'
