"""
OpenStreetMap API Client
Queries the Overpass API for shops and amenities, falling back across mirrors
"""

import os
from typing import Dict, List, Optional, Sequence

import requests

from .error_handling import APIError, try_in_order
from .overpass_query import OverpassQuery
from logging_config import get_logger, log_api_call

logger = get_logger(__name__)

API_NAME = "overpass"
DEFAULT_TIMEOUT_SECONDS = 25
USER_AGENT = "NearbyDeals/1.0"

# Build list of Overpass endpoints (primary + fallbacks)
_default_overpass = os.environ.get("OVERPASS_URL")
_fallback_endpoints = [
    endpoint for endpoint in [
        _default_overpass.strip() if _default_overpass else None,
        "https://overpass-api.de/api/interpreter",
        "https://overpass.kumi.systems/api/interpreter",
        "https://z.overpass-api.de/api/interpreter",
    ] if endpoint
]

# Deduplicate while preserving order
OVERPASS_URLS: List[str] = []
for endpoint in _fallback_endpoints:
    if endpoint not in OVERPASS_URLS:
        OVERPASS_URLS.append(endpoint)

_HTML_MARKERS = ("<html", "<!doctype html")


def _looks_like_html(body: str) -> bool:
    """Overloaded mirrors answer 200 with an HTML error page instead of JSON."""
    lowered = body.lower()
    return any(marker in lowered for marker in _HTML_MARKERS)


def _query_mirror(url: str, ql: str, timeout: float) -> List[Dict]:
    """
    Run one query against one mirror.

    Raises:
        APIError: on transport failure, timeout, bad status or unusable body
    """
    log_api_call(logger, API_NAME, url)
    try:
        resp = requests.post(
            url,
            data={"data": ql},
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
        )
    except requests.exceptions.Timeout:
        raise APIError(f"Request timed out after {timeout} seconds", API_NAME, 408)
    except requests.exceptions.RequestException as e:
        raise APIError(f"Network error: {e}", API_NAME)

    if resp.status_code != 200:
        raise APIError(f"HTTP {resp.status_code}", API_NAME, resp.status_code)

    if _looks_like_html(resp.text):
        raise APIError("HTML error page instead of JSON", API_NAME, resp.status_code)

    try:
        data = resp.json()
    except ValueError:
        raise APIError("Response body is not valid JSON", API_NAME, resp.status_code)

    elements = data.get("elements") if isinstance(data, dict) else None
    if not isinstance(elements, list):
        raise APIError("Response is missing the elements list", API_NAME, resp.status_code)

    remark = data.get("remark")
    if remark:
        logger.warning(f"Overpass remark from {url}: {remark}", extra={"api_name": API_NAME, "mirror": url})

    return elements


def fetch_overpass_elements(query: OverpassQuery, mirrors: Optional[Sequence[str]] = None,
                            timeout: float = DEFAULT_TIMEOUT_SECONDS) -> List[Dict]:
    """
    Fetch raw OSM elements for a query, trying each mirror in order.

    Args:
        query: Query to run
        mirrors: Ordered mirror URLs (defaults to OVERPASS_URLS)
        timeout: Per-mirror timeout in seconds

    Returns:
        The `elements` list from the first mirror that answered properly

    Raises:
        ProvidersExhaustedError: if every mirror failed
    """
    ql = query.to_ql()
    endpoints = list(OVERPASS_URLS if mirrors is None else mirrors)
    elements = try_in_order(endpoints, lambda url: _query_mirror(url, ql, timeout), API_NAME)
    logger.info(
        f"Overpass returned {len(elements)} raw elements",
        extra={"api_name": API_NAME, "result_count": len(elements)},
    )
    return elements
