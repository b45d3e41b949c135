"""
Google Places API Client
Nearby Search request building and execution
"""

from typing import Any, Dict, List, Optional

import requests

from .config import CategoryConfig
from .error_handling import APIError
from .utils import miles_to_meters
from logging_config import get_logger, log_api_call, log_error

logger = get_logger(__name__)

API_NAME = "google_places"
NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"
MAX_RADIUS_METERS = 50000
DEFAULT_TIMEOUT_SECONDS = 10

_ACCEPTED_STATUSES = ("OK", "ZERO_RESULTS")


def build_places_params(category: Optional[str], radius_miles: float, lat: float, lon: float,
                        api_key: str, config: CategoryConfig,
                        search: Optional[str] = None) -> Dict[str, Any]:
    """
    Build Nearby Search query parameters.

    The radius is converted to meters and capped at the API maximum (50 km).
    `search` becomes the `keyword` parameter when it is not blank.
    """
    resolved = config.resolve_category(category)
    params: Dict[str, Any] = {
        "location": f"{lat},{lon}",
        "radius": min(miles_to_meters(radius_miles), MAX_RADIUS_METERS),
        "key": api_key,
        "type": config.google_types.get(resolved, config.default_google_type),
    }

    keyword = (search or "").strip()
    if keyword:
        params["keyword"] = keyword

    return params


def build_photo_url(photo_reference: Optional[str], api_key: Optional[str], max_width: int = 800) -> Optional[str]:
    if not photo_reference or not api_key:
        return None
    return requests.Request(
        "GET",
        PHOTO_URL,
        params={"maxwidth": max_width, "photo_reference": photo_reference, "key": api_key},
    ).prepare().url


def search_nearby(params: Dict[str, Any], timeout: float = DEFAULT_TIMEOUT_SECONDS) -> List[Dict]:
    """
    Run a Nearby Search.

    Returns:
        Raw `results` list (empty for ZERO_RESULTS)

    Raises:
        APIError: on transport failure, unparseable body, or a status other than
            OK / ZERO_RESULTS (upstream status carried on the error)
    """
    log_api_call(logger, API_NAME, NEARBY_SEARCH_URL)
    try:
        resp = requests.get(NEARBY_SEARCH_URL, params=params, timeout=timeout)
    except requests.exceptions.Timeout:
        raise APIError(f"Request timed out after {timeout} seconds", API_NAME, 408)
    except requests.exceptions.RequestException as e:
        raise APIError(f"Network error: {e}", API_NAME)

    try:
        data = resp.json()
    except ValueError:
        raise APIError(f"Unparseable response (HTTP {resp.status_code})", API_NAME, resp.status_code)

    status = data.get("status") if isinstance(data, dict) else None
    if status not in _ACCEPTED_STATUSES:
        log_error(
            logger,
            "api_error",
            f"Google Places error: {status} {data.get('error_message', '') if isinstance(data, dict) else ''}".strip(),
            api_name=API_NAME,
            upstream_status=status,
        )
        raise APIError("Google Places API error", API_NAME, resp.status_code, upstream_status=status)

    return data.get("results") or []
