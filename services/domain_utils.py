from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import urlsplit, urlunsplit


DEFAULT_PROFILE_PATTERNS = ("linkedin.com/in/", "linkedin.com/pub/")


def strip_query(url: str) -> str:
    """Drop query string and fragment (tracking params like ``?trk=...``)."""
    parts = urlsplit(url.strip())
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def is_profile_link(link: Optional[str], patterns: Iterable[str] = DEFAULT_PROFILE_PATTERNS) -> bool:
    if not link or not isinstance(link, str):
        return False
    lowered = link.lower()
    if not lowered.startswith(("http://", "https://")):
        return False
    # Only the host+path part counts; a profile URL inside a query string is not a profile
    head = strip_query(lowered)
    return any(p in head for p in patterns)


def looks_like_url(text: str) -> bool:
    s = (text or "").strip()
    return s.startswith(("http://", "https://")) and not any(ch.isspace() for ch in s)
