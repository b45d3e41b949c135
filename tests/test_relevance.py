from deals.models import Place
from deals.ranking import rank_places, serialize_places
from deals.relevance import select_relevant


def _place(pid, distance, candidate):
    return Place(
        id=pid, store_name=pid, title=pid, description="", distance_miles=distance,
        category="cafe" if candidate else "school", address="", latitude=42.0, longitude=-72.0,
        is_deal_candidate=candidate,
    )


def test_no_candidates_returns_nearest_twenty():
    places = [_place(f"p{i}", 30 - i, False) for i in range(30)]
    result = select_relevant(places)
    assert result.fallback_used
    assert len(result.places) == 20
    distances = [p.distance_miles for p in result.places]
    assert distances == sorted(distances)
    assert distances[0] == 1


def test_no_candidates_short_list():
    places = [_place("a", 2.0, False), _place("b", 1.0, False)]
    result = select_relevant(places)
    assert [p.id for p in result.places] == ["b", "a"]


def test_candidates_only_sorted_and_capped():
    places = [_place(f"c{i}", float(i % 7) + i / 100, True) for i in range(60)]
    places += [_place("school", 0.01, False)]
    result = select_relevant(places)
    assert not result.fallback_used
    assert len(result.places) == 50
    assert all(p.is_deal_candidate for p in result.places)
    distances = [p.distance_miles for p in result.places]
    assert distances == sorted(distances)


def test_empty_input():
    result = select_relevant([])
    assert result.places == []


def test_rank_ties_broken_by_id():
    places = [_place("b", 1.0, True), _place("a", 1.0, True), _place("c", 0.5, True)]
    assert [p.id for p in rank_places(places)] == ["c", "a", "b"]
    assert len(rank_places(places, limit=2)) == 2


def test_serialize_strips_internal_fields():
    [data] = serialize_places([_place("a", 1.0, True)])
    assert "isDealCandidate" not in data
    assert "is_deal_candidate" not in data
    assert data["distanceMiles"] == 1.0
    assert data["storeName"] == "a"
    assert data["dealSource"] is None
