from providers.config import load_category_config
from providers.overpass_query import AroundFilter, OverpassQuery, TagFilter, build_overpass_query

CONFIG = load_category_config()


def _ql(category, radius=10):
    return build_overpass_query(category, radius, 42.1, -72.6, CONFIG).to_ql()


def test_food_includes_restaurant():
    ql = _ql("food")
    assert "restaurant" in ql
    assert "supermarket" in ql
    assert '["amenity"~' in ql and '["shop"~' in ql


def test_gas_includes_fuel():
    ql = _ql("gas")
    assert "fuel" in ql
    assert "charging_station" in ql
    assert '"shop"' not in ql


def test_groceries_only_shops():
    ql = _ql("groceries")
    assert '["shop"~' in ql
    assert '"amenity"' not in ql
    assert "restaurant" not in ql


def test_category_is_case_insensitive():
    assert _ql("  FOOD ") == _ql("food")


def test_unknown_category_uses_unfiltered_default():
    ql = _ql("electronics")
    assert ql == _ql(None)
    assert 'node["shop"](around:' in ql
    assert 'node["amenity"](around:' in ql
    assert "restaurant" not in ql


def test_user_text_never_reaches_query():
    ql = _ql('food"];out;(node["x')
    assert ql == _ql("general")


def test_radius_converted_to_meters():
    assert "(around:16093,42.100000,-72.600000)" in _ql("food", radius=10)


def test_radius_capped_before_conversion():
    query = build_overpass_query("gas", 500, 42.1, -72.6, CONFIG, max_radius_miles=50)
    assert query.around.radius_m == 80467


def test_queries_nodes_and_ways_with_center_output():
    ql = _ql("gas")
    assert 'node["amenity"~"^(charging_station|fuel)$"]' in ql
    assert 'way["amenity"~"^(charging_station|fuel)$"]' in ql
    assert ql.startswith("[out:json][timeout:25];")
    assert ql.rstrip().endswith("out center tags;")


def test_tag_filter_escaping():
    assert TagFilter("name", ('Joe\'s "Diner"',)).to_ql() == '["name"="Joe\'s \\"Diner\\""]'
    assert TagFilter("amenity").to_ql() == '["amenity"]'


def test_serialization_is_deterministic():
    query = OverpassQuery((TagFilter("shop", ("b", "a")),), AroundFilter(100, 1.0, 2.0))
    assert query.to_ql() == query.to_ql()
    assert _ql("food") == _ql("food")
