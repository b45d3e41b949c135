"""
Shared utilities for the place-data providers
Distance calculations and unit conversions
"""

import math

EARTH_RADIUS_MILES = 3958.8
METERS_PER_MILE = 1609.34


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate distance between two points in miles using the Haversine formula.

    Args:
        lat1, lon1: First point coordinates
        lat2, lon2: Second point coordinates

    Returns:
        Distance in miles
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = math.sin(delta_phi/2)**2 + math.cos(phi1) * \
        math.cos(phi2) * math.sin(delta_lambda/2)**2
    # Rounding can push `a` just outside [0, 1] near antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))

    return EARTH_RADIUS_MILES * c


def miles_to_meters(miles: float) -> int:
    """Convert miles to whole meters, rounded to the nearest integer."""
    return int(round(miles * METERS_PER_MILE))


def validate_coordinates(lat: float, lon: float) -> bool:
    """
    Validate that coordinates are within valid ranges.

    Args:
        lat, lon: Coordinates to validate

    Returns:
        True if coordinates are valid
    """
    if math.isnan(lat) or math.isnan(lon):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180
