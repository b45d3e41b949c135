"""
Overpass QL query construction
Builds a typed filter tree from (category, radius, origin) and serializes it once
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import CategoryConfig
from .utils import miles_to_meters

ELEMENT_TYPES = ("node", "way")


def _quote(text: str) -> str:
    """Render text as a double-quoted Overpass QL string literal."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


@dataclass(frozen=True)
class TagFilter:
    """Tag key with an optional set of accepted values (empty = any value)."""
    key: str
    values: Tuple[str, ...] = ()

    def to_ql(self) -> str:
        if not self.values:
            return f"[{_quote(self.key)}]"
        if len(self.values) == 1:
            return f"[{_quote(self.key)}={_quote(self.values[0])}]"
        pattern = "^(" + "|".join(re.escape(v) for v in self.values) + ")$"
        return f"[{_quote(self.key)}~{_quote(pattern)}]"


@dataclass(frozen=True)
class AroundFilter:
    radius_m: int
    lat: float
    lon: float

    def to_ql(self) -> str:
        return f"(around:{self.radius_m},{self.lat:.6f},{self.lon:.6f})"


@dataclass(frozen=True)
class OverpassQuery:
    """Union of tag filters around a point, one statement per element type."""
    tag_filters: Tuple[TagFilter, ...]
    around: AroundFilter
    element_types: Tuple[str, ...] = ELEMENT_TYPES
    timeout_s: int = 25

    def to_ql(self) -> str:
        statements = [
            f"  {element}{tag_filter.to_ql()}{self.around.to_ql()};"
            for tag_filter in self.tag_filters
            for element in self.element_types
        ]
        return "\n".join([
            f"[out:json][timeout:{self.timeout_s}];",
            "(",
            *statements,
            ");",
            "out center tags;",
        ])


def build_overpass_query(category: Optional[str], radius_miles: float, lat: float, lon: float,
                         config: CategoryConfig, max_radius_miles: Optional[float] = None,
                         timeout_s: int = 25) -> OverpassQuery:
    """
    Translate a category token, radius and origin into an Overpass query.

    Args:
        category: Free-form category token (food, gas, groceries, anything else = general)
        radius_miles: Search radius in miles
        lat, lon: Query origin
        config: Category configuration
        max_radius_miles: Optional cap applied before conversion to meters
        timeout_s: Server-side Overpass timeout

    Returns:
        OverpassQuery ready for `to_ql()`
    """
    if max_radius_miles is not None:
        radius_miles = min(radius_miles, max_radius_miles)

    resolved = config.resolve_category(category)
    filters = config.osm_filters.get(resolved)
    if filters:
        tag_filters = tuple(
            TagFilter(key, tuple(sorted(values))) for key, values in filters.items()
        )
    else:
        tag_filters = tuple(TagFilter(key) for key in config.general_keys)

    return OverpassQuery(
        tag_filters=tag_filters,
        around=AroundFilter(miles_to_meters(radius_miles), lat, lon),
        timeout_s=int(timeout_s),
    )
