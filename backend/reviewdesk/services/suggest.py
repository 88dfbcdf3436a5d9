"""
Typeahead lookups against public third-party feeds.

Every lookup degrades to an empty list: an upstream outage must never
break the form that is asking for suggestions.
"""

import logging
from typing import Any, Callable, Optional

import httpx

from reviewdesk.core.config import settings

logger = logging.getLogger("reviewdesk.suggest")

JOB_TITLE_URL = "https://ec.europa.eu/esco/api/search"
UNIVERSITY_URL = "https://universities.hipolabs.com/search"
LOCATION_URL = "https://nominatim.openstreetmap.org/search"

# Nominatim's usage policy asks for an identifying agent
USER_AGENT = "reviewdesk/1.0 (contact: hello@example.com)"


def _fetch_json(
    url: str,
    params: dict[str, Any],
    client: Optional[httpx.Client] = None,
) -> Any:
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    if client is not None:
        response = client.get(url, params=params, headers=headers)
    else:
        response = httpx.get(
            url, params=params, headers=headers, timeout=settings.SUGGEST_TIMEOUT_SECONDS
        )
    response.raise_for_status()
    return response.json()


def _unique(items: list[str], limit: int) -> list[str]:
    seen: list[str] = []
    for item in items:
        if item and item not in seen:
            seen.append(item)
    return seen[:limit]


def _parse_job_titles(data: Any) -> list[str]:
    results = data.get("_embedded", {}).get("results") if isinstance(data, dict) else None
    if results is None and isinstance(data, dict):
        results = data.get("results")
    if not isinstance(results, list):
        return []
    labels = [r.get("preferredLabel") or r.get("title") or r.get("label") for r in results if isinstance(r, dict)]
    return _unique([label for label in labels if isinstance(label, str)], 20)


def _parse_universities(data: Any) -> list[str]:
    if not isinstance(data, list):
        return []
    items = []
    for entry in data:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        country = entry.get("country")
        items.append(f"{entry['name']}, {country}" if country else entry["name"])
    return items[:8]


def _parse_locations(data: Any) -> list[str]:
    if not isinstance(data, list):
        return []
    names = [entry.get("display_name") for entry in data if isinstance(entry, dict)]
    return [name for name in names if name][:6]


def _suggest(
    kind: str,
    url: str,
    params: dict[str, Any],
    parse: Callable[[Any], list[str]],
    client: Optional[httpx.Client],
) -> list[str]:
    try:
        return parse(_fetch_json(url, params, client))
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"{kind} suggestions unavailable: {e}")
        return []


def suggest_job_titles(q: str, client: Optional[httpx.Client] = None) -> list[str]:
    q = (q or "").strip()
    if not q:
        return []
    params = {"text": q, "type": "occupation", "language": "en"}
    return _suggest("Job title", JOB_TITLE_URL, params, _parse_job_titles, client)


def suggest_universities(q: str, client: Optional[httpx.Client] = None) -> list[str]:
    q = (q or "").strip()
    if not q:
        return []
    return _suggest("University", UNIVERSITY_URL, {"name": q}, _parse_universities, client)


def suggest_locations(q: str, client: Optional[httpx.Client] = None) -> list[str]:
    q = (q or "").strip()
    if not q:
        return []
    params = {"q": q, "format": "json", "addressdetails": 1, "limit": 6}
    return _suggest("Location", LOCATION_URL, params, _parse_locations, client)
