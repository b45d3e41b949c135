"""
Nearby deals pipeline
Query building -> provider fetch -> normalization -> relevance -> enrichment -> ranking
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from providers import osm_api, places_api
from providers.config import GOOGLE_PROVIDER, CategoryConfig, Settings
from providers.error_handling import ConfigurationError
from providers.overpass_query import build_overpass_query
from logging_config import get_logger, log_performance

from .enrichment import enrich_place
from .models import Place
from .normalizer import normalize_google_results, normalize_osm_elements
from .ranking import MAX_RESULTS, rank_places, serialize_places
from .relevance import select_relevant

logger = get_logger(__name__)


@dataclass(frozen=True)
class DealsRequest:
    lat: float
    lon: float
    radius_miles: Optional[float] = None
    category: Optional[str] = None
    search: Optional[str] = None
    request_id: Optional[str] = None


def _fetch_places(request: DealsRequest, radius_miles: float, settings: Settings,
                  category_config: CategoryConfig) -> List[Place]:
    if settings.provider == GOOGLE_PROVIDER:
        if not settings.google_places_key:
            raise ConfigurationError("GOOGLE_PLACES_KEY is not set on the server")
        params = places_api.build_places_params(
            request.category, radius_miles, request.lat, request.lon,
            settings.google_places_key, category_config, search=request.search,
        )
        results = places_api.search_nearby(params, timeout=settings.google_timeout)
        return normalize_google_results(
            results, request.lat, request.lon, category_config, settings.google_places_key
        )

    query = build_overpass_query(
        request.category, radius_miles, request.lat, request.lon, category_config,
        max_radius_miles=settings.overpass_max_radius_miles,
        timeout_s=int(settings.overpass_timeout),
    )
    elements = osm_api.fetch_overpass_elements(query, timeout=settings.overpass_timeout)
    return normalize_osm_elements(elements, request.lat, request.lon, category_config)


def find_nearby_deals(request: DealsRequest, settings: Settings,
                      category_config: CategoryConfig) -> List[Dict[str, Any]]:
    """
    Run one nearby-deals request end to end.

    Returns:
        JSON-ready list of place dicts, nearest first

    Raises:
        ConfigurationError: provider credential missing
        APIError: provider failed (ProvidersExhaustedError when all mirrors failed)
    """
    start_time = time.time()
    radius_miles = request.radius_miles
    if radius_miles is None or radius_miles <= 0:
        radius_miles = settings.default_radius_miles()

    places = _fetch_places(request, radius_miles, settings, category_config)
    relevant = select_relevant(places)
    enriched = [enrich_place(p) for p in relevant.places]
    ranked = rank_places(enriched, MAX_RESULTS)

    log_performance(
        logger,
        "deals_nearby",
        time.time() - start_time,
        request_id=request.request_id,
        provider=settings.provider,
        category=category_config.resolve_category(request.category),
        result_count=len(ranked),
    )
    if relevant.fallback_used and ranked:
        logger.info(
            f"No deal candidates among {len(places)} places, returning nearest {len(ranked)}",
            extra={"request_id": request.request_id, "provider": settings.provider},
        )

    return serialize_places(ranked)
