"""
Result normalization
Maps raw Overpass elements and Google Places results into Place records
"""

from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlencode

from providers.config import CategoryConfig
from providers.places_api import build_photo_url
from providers.utils import haversine_miles
from logging_config import get_logger

from .models import Place

logger = get_logger(__name__)

PLACEHOLDER_NAME = "Local Business"
MAP_SEARCH_URL = "https://www.google.com/maps/search/"
GOOGLE_PLACE_URL = "https://www.google.com/maps/place/?q=place_id:{place_id}"

_WEBSITE_TAGS = ("website", "contact:website", "url")


def _humanize(label: str) -> str:
    """'fast_food' -> 'Fast Food'"""
    return label.replace("_", " ").replace(";", ", ").strip().title()


def _resolve_element_coordinates(elem: Dict) -> Tuple[Optional[float], Optional[float]]:
    """Nodes carry lat/lon directly; ways carry a `center` from `out center`."""
    lat = elem.get("lat")
    lon = elem.get("lon")
    if lat is not None and lon is not None:
        return float(lat), float(lon)

    center = elem.get("center") or {}
    lat = center.get("lat")
    lon = center.get("lon")
    if lat is not None and lon is not None:
        return float(lat), float(lon)

    return None, None


def format_osm_address(tags: Dict[str, str]) -> str:
    """'12 Main St, Springfield' from addr:* tags, skipping empty parts."""
    street_line = " ".join(
        part for part in (tags.get("addr:housenumber", "").strip(), tags.get("addr:street", "").strip()) if part
    )
    city = tags.get("addr:city", "").strip()
    return ", ".join(part for part in (street_line, city) if part)


def resolve_osm_category(tags: Dict[str, str]) -> str:
    for key in ("shop", "amenity", "cuisine"):
        value = (tags.get(key) or "").strip()
        if value:
            return value
    return "Local"


def map_search_url(query: str) -> str:
    return MAP_SEARCH_URL + "?" + urlencode({"api": "1", "query": query})


def resolve_osm_url(tags: Dict[str, str], name: Optional[str], lat: float, lon: float) -> str:
    """
    Provider website verbatim when tagged, else a map search link built from
    name+city, name+street, or the raw coordinates (in that order).
    """
    for key in _WEBSITE_TAGS:
        website = (tags.get(key) or "").strip()
        if website:
            return website

    city = (tags.get("addr:city") or "").strip()
    street = (tags.get("addr:street") or "").strip()
    if name and city:
        return map_search_url(f"{name} {city}")
    if name and street:
        return map_search_url(f"{name} {street}")
    return map_search_url(f"{lat},{lon}")


def is_osm_deal_candidate(tags: Dict[str, str], config: CategoryConfig) -> bool:
    return tags.get("amenity") in config.deal_amenities or tags.get("shop") in config.deal_shops


def normalize_osm_element(elem: Dict, origin_lat: float, origin_lon: float,
                          config: CategoryConfig) -> Optional[Place]:
    """Normalize one Overpass element; None when it has no usable coordinates."""
    lat, lon = _resolve_element_coordinates(elem)
    if lat is None or lon is None:
        return None

    tags = elem.get("tags") or {}
    name = (tags.get("name") or tags.get("brand") or "").strip() or None
    store_name = name or PLACEHOLDER_NAME
    category = resolve_osm_category(tags)
    address = format_osm_address(tags)
    description = f"{_humanize(category)} near you."
    if address:
        description = f"{_humanize(category)} at {address}."

    return Place(
        id=f"{elem.get('type', 'node')}/{elem.get('id')}",
        store_name=store_name,
        title=store_name,
        description=description,
        distance_miles=haversine_miles(origin_lat, origin_lon, lat, lon),
        category=category,
        address=address,
        latitude=lat,
        longitude=lon,
        url=resolve_osm_url(tags, name, lat, lon),
        is_deal_candidate=is_osm_deal_candidate(tags, config),
    )


def normalize_google_result(result: Dict, origin_lat: float, origin_lon: float,
                            config: CategoryConfig, api_key: Optional[str] = None) -> Optional[Place]:
    """Normalize one Nearby Search result; None when it has no usable coordinates."""
    location = (result.get("geometry") or {}).get("location") or {}
    lat = location.get("lat")
    lon = location.get("lng")
    if lat is None or lon is None:
        return None
    lat, lon = float(lat), float(lon)

    place_id = result.get("place_id")
    types = result.get("types") or []
    store_name = (result.get("name") or "").strip() or PLACEHOLDER_NAME
    vicinity = (result.get("vicinity") or "").strip()
    photos = result.get("photos") or []
    photo_ref = photos[0].get("photo_reference") if photos else None

    return Place(
        id=str(place_id),
        store_name=store_name,
        title=store_name,
        description=vicinity or "Local place near you.",
        distance_miles=haversine_miles(origin_lat, origin_lon, lat, lon),
        category=types[0] if types else "local",
        address=vicinity,
        latitude=lat,
        longitude=lon,
        url=GOOGLE_PLACE_URL.format(place_id=place_id),
        image_url=build_photo_url(photo_ref, api_key),
        rating=result.get("rating") or None,
        user_ratings_total=result.get("user_ratings_total") or None,
        is_deal_candidate=any(t in config.google_deal_types for t in types),
    )


def _unique(places: Iterable[Optional[Place]]) -> List[Place]:
    seen_ids = set()
    out = []
    for place in places:
        if place is None or place.id in seen_ids:
            continue
        seen_ids.add(place.id)
        out.append(place)
    return out


def normalize_osm_elements(elements: List[Dict], origin_lat: float, origin_lon: float,
                           config: CategoryConfig) -> List[Place]:
    places = _unique(normalize_osm_element(e, origin_lat, origin_lon, config) for e in elements)
    dropped = len(elements) - len(places)
    if dropped:
        logger.debug(f"Dropped {dropped} Overpass elements (no coordinates or duplicate id)")
    return places


def normalize_google_results(results: List[Dict], origin_lat: float, origin_lon: float,
                             config: CategoryConfig, api_key: Optional[str] = None) -> List[Place]:
    places = _unique(normalize_google_result(r, origin_lat, origin_lon, config, api_key) for r in results)
    dropped = len(results) - len(places)
    if dropped:
        logger.debug(f"Dropped {dropped} Google Places results (no coordinates or duplicate id)")
    return places
