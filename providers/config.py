"""
Configuration for the Nearby Deals API

Two kinds of configuration live here:
- Settings: per-process values read from the environment (.env supported)
- CategoryConfig: immutable category filters and deal allow-lists, built once
  at startup and passed explicitly to the query builders, normalizer and
  relevance filter
"""

import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional

from logging_config import get_logger

logger = get_logger(__name__)

GENERAL_CATEGORY = "general"
OVERPASS_PROVIDER = "overpass"
GOOGLE_PROVIDER = "google"


@dataclass(frozen=True)
class CategoryConfig:
    """Category-to-tag filters and allow-lists shared by every request."""
    # category -> OSM tag key -> accepted values
    osm_filters: Mapping[str, Mapping[str, FrozenSet[str]]]
    # Tag keys queried (with any value) for the general category
    general_keys: tuple
    # category -> Google Places `type`
    google_types: Mapping[str, str]
    default_google_type: str
    deal_amenities: FrozenSet[str]
    deal_shops: FrozenSet[str]
    google_deal_types: FrozenSet[str]

    def resolve_category(self, token: Optional[str]) -> str:
        """Normalize a free-form category token; unknown values become 'general'."""
        normalized = (token or "").strip().lower()
        if normalized in self.osm_filters:
            return normalized
        return GENERAL_CATEGORY


_FOOD_AMENITIES = ("restaurant", "fast_food", "cafe", "bar", "pub", "ice_cream", "food_court")
_GROCERY_SHOPS = ("supermarket", "convenience", "greengrocer", "bakery", "butcher", "deli")

# Commercial venues only; civic places (school, townhall, police, hospital...) stay out
_DEAL_AMENITIES = _FOOD_AMENITIES + (
    "biergarten", "fuel", "charging_station", "car_wash", "pharmacy",
    "marketplace", "cinema", "nightclub", "car_rental", "bicycle_rental",
)
_DEAL_SHOPS = _GROCERY_SHOPS + (
    "alcohol", "beverages", "coffee", "confectionery", "ice_cream", "wine",
    "department_store", "mall", "general", "variety_store", "kiosk",
    "clothes", "shoes", "boutique", "fashion", "jewelry", "bag",
    "beauty", "cosmetics", "hairdresser", "chemist", "perfumery", "optician",
    "electronics", "mobile_phone", "computer", "hardware", "doityourself",
    "furniture", "garden_centre", "florist", "gift", "books", "toys",
    "sports", "outdoor", "bicycle", "pet", "music", "car_parts", "tyres",
)
_GOOGLE_DEAL_TYPES = (
    "restaurant", "cafe", "bar", "bakery", "meal_takeaway", "meal_delivery",
    "supermarket", "grocery_or_supermarket", "convenience_store", "liquor_store",
    "gas_station", "store", "clothing_store", "shoe_store", "shopping_mall",
    "department_store", "electronics_store", "hardware_store", "home_goods_store",
    "furniture_store", "jewelry_store", "book_store", "pet_store", "florist",
    "pharmacy", "drugstore", "beauty_salon", "hair_care", "movie_theater",
)


def load_category_config() -> CategoryConfig:
    """Build the immutable category configuration."""
    osm_filters = {
        "food": {
            "amenity": frozenset(_FOOD_AMENITIES),
            "shop": frozenset(_GROCERY_SHOPS),
        },
        "gas": {
            "amenity": frozenset(("fuel", "charging_station")),
        },
        "groceries": {
            "shop": frozenset(_GROCERY_SHOPS),
        },
    }
    return CategoryConfig(
        osm_filters=MappingProxyType({
            category: MappingProxyType(filters) for category, filters in osm_filters.items()
        }),
        general_keys=("shop", "amenity"),
        google_types=MappingProxyType({
            "food": "restaurant",
            "groceries": "supermarket",
            "gas": "gas_station",
        }),
        default_google_type="store",
        deal_amenities=frozenset(_DEAL_AMENITIES),
        deal_shops=frozenset(_DEAL_SHOPS),
        google_deal_types=frozenset(_GOOGLE_DEAL_TYPES),
    )


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


@dataclass(frozen=True)
class Settings:
    """Process settings read from the environment."""
    provider: str = OVERPASS_PROVIDER
    google_places_key: Optional[str] = None
    overpass_timeout: float = 25.0
    google_timeout: float = 10.0
    overpass_default_radius_miles: float = 20.0
    google_default_radius_miles: float = 10.0
    overpass_max_radius_miles: float = 50.0
    log_level: str = "INFO"
    log_json: bool = True
    port: int = 3000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        provider = (env.get("DEALS_PROVIDER") or OVERPASS_PROVIDER).strip().lower()
        if provider not in (OVERPASS_PROVIDER, GOOGLE_PROVIDER):
            logger.warning(f"Unknown DEALS_PROVIDER={provider!r}, using {OVERPASS_PROVIDER}")
            provider = OVERPASS_PROVIDER

        return cls(
            provider=provider,
            google_places_key=(env.get("GOOGLE_PLACES_KEY") or "").strip() or None,
            overpass_timeout=_env_float(env, "OVERPASS_TIMEOUT_SECONDS", 25.0),
            google_timeout=_env_float(env, "GOOGLE_PLACES_TIMEOUT_SECONDS", 10.0),
            overpass_max_radius_miles=_env_float(env, "OVERPASS_MAX_RADIUS_MILES", 50.0),
            log_level=env.get("LOG_LEVEL", "INFO"),
            log_json=env.get("LOG_JSON", "true").strip().lower() not in ("0", "false", "no"),
            port=int(_env_float(env, "PORT", 3000)),
        )

    def default_radius_miles(self) -> float:
        if self.provider == GOOGLE_PROVIDER:
            return self.google_default_radius_miles
        return self.overpass_default_radius_miles
