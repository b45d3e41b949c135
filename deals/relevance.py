"""
Relevance filtering
Keeps deal candidates; falls back to the nearest places when none qualify
"""

from dataclasses import dataclass
from typing import List

from .models import Place
from .ranking import rank_places

MAX_CANDIDATES = 50
MAX_FALLBACK = 20


@dataclass(frozen=True)
class RelevanceResult:
    places: List[Place]
    fallback_used: bool


def select_relevant(places: List[Place], max_candidates: int = MAX_CANDIDATES,
                    max_fallback: int = MAX_FALLBACK) -> RelevanceResult:
    """
    Nearest deal candidates (at most `max_candidates`). When no place is a
    candidate, the nearest `max_fallback` places of any kind are returned so
    the response is never empty while place data exists.
    """
    candidates = [p for p in places if p.is_deal_candidate]
    if candidates:
        return RelevanceResult(rank_places(candidates, max_candidates), fallback_used=False)
    return RelevanceResult(rank_places(places, max_fallback), fallback_used=True)
