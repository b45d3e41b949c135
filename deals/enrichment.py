"""
Deal enrichment
Attaches promotional title/subtitle/link to places via an ordered rule table.

Rules are evaluated top to bottom and the first match wins: brand rules match
against the store name, category rules against the category label. A place
with no matching rule but a resolved url gets a generic "place" deal.
"""

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from .models import DEAL_SOURCE_BRAND, DEAL_SOURCE_CATEGORY, DEAL_SOURCE_PLACE, Place


@dataclass(frozen=True)
class DealRule:
    field: str  # Place attribute matched against: "store_name" or "category"
    keywords: Tuple[str, ...]
    title: str
    subtitle: str
    url: str
    source: str

    def matches(self, place: Place) -> bool:
        value = (getattr(place, self.field) or "").lower()
        return any(keyword in value for keyword in self.keywords)


def _brand(keywords, title, subtitle, url) -> DealRule:
    return DealRule("store_name", tuple(keywords), title, subtitle, url, DEAL_SOURCE_BRAND)


def _category(keywords, title, subtitle, url) -> DealRule:
    return DealRule("category", tuple(keywords), title, subtitle, url, DEAL_SOURCE_CATEGORY)


DEAL_RULES: Tuple[DealRule, ...] = (
    # Brands
    _brand(("mcdonald",), "McDonald's app deals",
           "Daily offers and free fries with app purchases",
           "https://www.mcdonalds.com/us/en-us/deals.html"),
    _brand(("starbucks",), "Starbucks Rewards offers",
           "Earn Stars and unlock weekly member deals",
           "https://www.starbucks.com/rewards"),
    _brand(("subway",), "Subway deals",
           "Footlong offers and app-only coupons",
           "https://www.subway.com/en-us/deals"),
    _brand(("burger king",), "Burger King coupons",
           "Royal Perks offers in the BK app",
           "https://www.bk.com/offers"),
    _brand(("dunkin",), "Dunkin' Rewards offers",
           "Bonus points and weekly drink deals",
           "https://www.dunkindonuts.com/en/dunkinrewards"),
    _brand(("walmart",), "Walmart rollbacks",
           "Rollbacks and clearance on everyday items",
           "https://www.walmart.com/shop/deals"),
    _brand(("target",), "Target Circle deals",
           "Weekly Circle offers in store and online",
           "https://www.target.com/circle"),
    _brand(("cvs",), "CVS weekly ad",
           "ExtraCare coupons and weekly savings",
           "https://www.cvs.com/weeklyad"),
    _brand(("walgreens",), "Walgreens weekly deals",
           "Digital coupons and myWalgreens rewards",
           "https://www.walgreens.com/offers/offers.jsp"),
    _brand(("shell",), "Shell Fuel Rewards",
           "Save cents per gallon with Fuel Rewards",
           "https://www.fuelrewards.com"),
    # Category groups
    _category(("restaurant", "cafe", "bar", "food", "pub", "ice_cream"), "Local dining deals",
              "Check today's specials and happy hours nearby",
              "https://www.groupon.com/local/restaurants"),
    _category(("grocery", "supermarket", "convenience", "greengrocer", "bakery", "butcher", "deli"),
              "Grocery savings",
              "Weekly circulars and digital coupons",
              "https://www.coupons.com/grocery-coupons"),
    _category(("clothing", "clothes", "retail", "mall", "department_store", "shoe", "boutique"),
              "Shopping deals",
              "Seasonal sales and in-store promotions",
              "https://www.retailmenot.com"),
    _category(("fuel", "gas_station", "charging"), "Fuel savings",
              "Compare nearby gas and charging prices",
              "https://www.gasbuddy.com"),
    _category(("pharmacy", "chemist", "drugstore", "beauty", "cosmetics", "hair"), "Health & beauty deals",
              "Pharmacy and beauty offers near you",
              "https://www.retailmenot.com/coupons/beauty"),
)

PLACE_DEAL_SUBTITLE = "See current offers on the store's site"


def resolve_rule(rules: Sequence[DealRule], place: Place) -> Optional[DealRule]:
    """First rule matching the place, or None."""
    for rule in rules:
        if rule.matches(place):
            return rule
    return None


def enrich_place(place: Place, rules: Sequence[DealRule] = DEAL_RULES) -> Place:
    """Return a copy of `place` with deal fields attached (unchanged when nothing applies)."""
    rule = resolve_rule(rules, place)
    if rule is not None:
        return replace(
            place,
            deal_title=rule.title,
            deal_subtitle=rule.subtitle,
            deal_url=rule.url,
            deal_source=rule.source,
        )
    if place.url:
        return replace(
            place,
            deal_title=f"Deals at {place.store_name}",
            deal_subtitle=PLACE_DEAL_SUBTITLE,
            deal_url=place.url,
            deal_source=DEAL_SOURCE_PLACE,
        )
    return place
