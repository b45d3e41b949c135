"""
Deals Package
Normalization, relevance filtering, enrichment and ranking of nearby places
"""

from .pipeline import DealsRequest, find_nearby_deals

__all__ = ['DealsRequest', 'find_nearby_deals']
