"""
Ranking and pagination
"""

from typing import Any, Dict, Iterable, List

from .models import Place

MAX_RESULTS = 50


def rank_places(places: Iterable[Place], limit: int = MAX_RESULTS) -> List[Place]:
    """Nearest first; ties broken by id so equal inputs give equal output."""
    return sorted(places, key=lambda p: (p.distance_miles, p.id))[:max(limit, 0)]


def serialize_places(places: Iterable[Place]) -> List[Dict[str, Any]]:
    return [p.to_dict() for p in places]
