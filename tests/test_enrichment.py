from dataclasses import replace

from deals.enrichment import DEAL_RULES, DealRule, enrich_place, resolve_rule
from deals.models import Place


def _place(name, category="Local", url=None):
    return Place(
        id=name, store_name=name, title=name, description="", distance_miles=1.0,
        category=category, address="", latitude=42.0, longitude=-72.0, url=url,
    )


def test_brand_match():
    enriched = enrich_place(_place("McDonald's Elm St", category="fast_food"))
    assert enriched.deal_source == "brand"
    assert "McDonald" in enriched.deal_title
    assert enriched.deal_url.startswith("https://")


def test_brand_match_is_case_insensitive():
    assert enrich_place(_place("WALGREENS #1234")).deal_source == "brand"


def test_category_match():
    enriched = enrich_place(_place("Ye Olde Cafe", category="cafe"))
    assert enriched.deal_source == "category"
    assert enriched.deal_title == "Local dining deals"


def test_brand_wins_over_category():
    assert enrich_place(_place("Starbucks", category="cafe")).deal_source == "brand"


def test_place_fallback_uses_url():
    enriched = enrich_place(_place("City Hall", category="townhall", url="https://city.example"))
    assert enriched.deal_source == "place"
    assert enriched.deal_url == "https://city.example"
    assert enriched.deal_subtitle


def test_no_match_no_url_leaves_fields_null():
    place = _place("City Hall", category="townhall")
    enriched = enrich_place(place)
    assert enriched == place
    assert enriched.deal_title is None and enriched.deal_source is None


def test_enrichment_returns_new_record():
    place = _place("Ye Olde Cafe", category="cafe")
    enriched = enrich_place(place)
    assert enriched is not place
    assert place.deal_source is None


def test_enrichment_is_deterministic():
    place = _place("Target Plaza", category="department_store")
    assert enrich_place(place) == enrich_place(replace(place))


def test_custom_rule_table():
    rules = (DealRule("category", ("bookstore", "books"), "Books", "Read more", "https://books.example", "category"),)
    assert resolve_rule(rules, _place("Paper Tiger", category="books")).title == "Books"
    assert resolve_rule(rules, _place("Paper Tiger", category="cafe")) is None


def test_rule_table_order():
    sources = [rule.source for rule in DEAL_RULES]
    assert sources == sorted(sources, key=lambda s: s != "brand")
