"""Social profile link normalization."""

from typing import Optional
from urllib.parse import urlsplit


def normalize_social_link(link: Optional[str]) -> Optional[str]:
    """
    Canonical form of a profile URL used for duplicate detection.

    ``https://www.LinkedIn.com/in/Jane/`` and ``http://linkedin.com/in/jane``
    both become ``linkedin.com/in/jane``. Returns None for blank input.
    """
    if not link or not link.strip():
        return None

    raw = link.strip()
    if "://" not in raw:
        raw = f"https://{raw}"

    parts = urlsplit(raw)
    host = (parts.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    path = parts.path.lower().rstrip("/")

    normalized = f"{host}{path}"
    return normalized or None
