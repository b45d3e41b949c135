import json
import unittest
from unittest.mock import Mock, patch

import pytest
import requests

from providers import osm_api
from providers.config import load_category_config
from providers.error_handling import ProvidersExhaustedError
from providers.overpass_query import build_overpass_query

MIRRORS = ["https://mirror-a/api", "https://mirror-b/api", "https://mirror-c/api"]
QUERY = build_overpass_query("food", 5, 42.1, -72.6, load_category_config())


def _response(status_code=200, payload=None, text=None):
    resp = Mock()
    resp.status_code = status_code
    resp.text = text if text is not None else json.dumps(payload)
    if payload is not None:
        resp.json.return_value = payload
    else:
        resp.json.side_effect = ValueError("not json")
    return resp


class TestMirrorFallback(unittest.TestCase):
    def test_first_two_fail_third_succeeds(self):
        payload = {"elements": [{"type": "node", "id": 1, "lat": 42.1, "lon": -72.6}]}
        responses = {
            MIRRORS[0]: requests.exceptions.ConnectionError("refused"),
            MIRRORS[1]: _response(200, text="<!DOCTYPE html><html><body>Dispatcher busy</body></html>"),
            MIRRORS[2]: _response(200, payload),
        }

        def _post(url, **kwargs):
            outcome = responses[url]
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        with patch.object(osm_api.requests, "post", side_effect=_post) as post:
            elements = osm_api.fetch_overpass_elements(QUERY, mirrors=MIRRORS, timeout=25)

        self.assertEqual(elements, payload["elements"])
        self.assertEqual([c.args[0] for c in post.call_args_list], MIRRORS)
        self.assertEqual(post.call_args.kwargs["data"], {"data": QUERY.to_ql()})
        self.assertEqual(post.call_args.kwargs["timeout"], 25)

    def test_stops_at_first_success(self):
        payload = {"elements": []}
        with patch.object(osm_api.requests, "post", return_value=_response(200, payload)) as post:
            self.assertEqual(osm_api.fetch_overpass_elements(QUERY, mirrors=MIRRORS), [])
        self.assertEqual(post.call_count, 1)

    def test_all_mirrors_fail(self):
        failures = [
            requests.exceptions.Timeout("slow"),
            _response(429, {"elements": []}),
            _response(200, text="rate limited, try later"),
        ]
        with patch.object(osm_api.requests, "post", side_effect=failures):
            with self.assertRaises(ProvidersExhaustedError) as ctx:
                osm_api.fetch_overpass_elements(QUERY, mirrors=MIRRORS)
        self.assertEqual([url for url, _ in ctx.exception.failures], MIRRORS)

    def test_missing_elements_list_is_a_failure(self):
        with patch.object(osm_api.requests, "post", return_value=_response(200, {"version": 0.6})):
            with self.assertRaises(ProvidersExhaustedError):
                osm_api.fetch_overpass_elements(QUERY, mirrors=MIRRORS[:1])


def test_no_mirrors_is_exhausted():
    with pytest.raises(ProvidersExhaustedError):
        osm_api.fetch_overpass_elements(QUERY, mirrors=[])


def test_default_mirror_list_is_deduplicated():
    assert len(osm_api.OVERPASS_URLS) == len(set(osm_api.OVERPASS_URLS))
    assert "https://overpass-api.de/api/interpreter" in osm_api.OVERPASS_URLS


def test_html_detection():
    assert osm_api._looks_like_html("<HTML><body>error</body></HTML>")
    assert not osm_api._looks_like_html('{"elements": []}')
