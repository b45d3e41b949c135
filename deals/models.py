"""
Canonical Place record returned by the /deals/nearby endpoint
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

DEAL_SOURCE_BRAND = "brand"
DEAL_SOURCE_CATEGORY = "category"
DEAL_SOURCE_PLACE = "place"


@dataclass(frozen=True)
class Place:
    """One normalized point of interest."""
    id: str
    store_name: str
    title: str
    description: str
    distance_miles: float
    category: str
    address: str
    latitude: float
    longitude: float
    url: Optional[str] = None
    expiry_date: Optional[str] = None
    promo_code: Optional[str] = None
    original_price: Optional[float] = None
    discounted_price: Optional[float] = None
    image_url: Optional[str] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    deal_title: Optional[str] = None
    deal_subtitle: Optional[str] = None
    deal_url: Optional[str] = None
    deal_source: Optional[str] = None
    # Internal only, never serialized
    is_deal_candidate: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape sent to clients (camelCase, internal fields stripped)."""
        return {
            "id": self.id,
            "storeName": self.store_name,
            "title": self.title,
            "description": self.description,
            "distanceMiles": self.distance_miles,
            "category": self.category,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "url": self.url,
            "expiryDate": self.expiry_date,
            "promoCode": self.promo_code,
            "originalPrice": self.original_price,
            "discountedPrice": self.discounted_price,
            "imageUrl": self.image_url,
            "rating": self.rating,
            "userRatingsTotal": self.user_ratings_total,
            "dealTitle": self.deal_title,
            "dealSubtitle": self.deal_subtitle,
            "dealUrl": self.deal_url,
            "dealSource": self.deal_source,
        }
