"""
Providers Package
API clients and query builders for external place-data providers
"""

from . import osm_api
from . import places_api

__all__ = ['osm_api', 'places_api']
