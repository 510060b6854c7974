import pytest
import requests

import geocoding
from geocoding import geocode_city, short_city_name
from models import Coordinate


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


@pytest.fixture(autouse=True)
def no_cache_no_sleep(monkeypatch):
    monkeypatch.setattr(geocoding.time, "sleep", lambda seconds: None)
    geocode_city.clear()
    yield
    geocode_city.clear()


def test_short_city_name():
    assert short_city_name("Paris, Île-de-France, France") == "Paris"
    assert short_city_name("Lyon") == "Lyon"
    assert short_city_name(None) == ""


def test_geocode_city(monkeypatch):
    calls = []

    def fake_get(url, params=None, headers=None, timeout=None):
        calls.append({"url": url, "params": params, "headers": headers})
        return FakeResponse(200, [{"lat": "45.7578", "lon": "4.8320", "display_name": "Lyon, Métropole de Lyon, France"}])

    monkeypatch.setattr(geocoding.requests, "get", fake_get)

    place = geocode_city("Lyon")

    assert place.name == "Lyon"
    assert place.display_name == "Lyon, Métropole de Lyon, France"
    assert place.coordinate == Coordinate(4.8320, 45.7578)
    assert calls[0]["url"].endswith("/search")
    assert calls[0]["params"] == {"q": "Lyon", "format": "json", "limit": 1}
    assert "User-Agent" in calls[0]["headers"]


def test_geocode_city_not_found(monkeypatch):
    monkeypatch.setattr(geocoding.requests, "get", lambda *args, **kwargs: FakeResponse(200, []))

    assert geocode_city("Nowhereville") is None


def test_geocode_city_http_error(monkeypatch):
    monkeypatch.setattr(geocoding.requests, "get", lambda *args, **kwargs: FakeResponse(503, None))

    assert geocode_city("Grenoble") is None


def test_geocode_city_network_error(monkeypatch):
    def fake_get(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(geocoding.requests, "get", fake_get)

    assert geocode_city("Annecy") is None


def test_geocode_city_bad_payload(monkeypatch):
    monkeypatch.setattr(geocoding.requests, "get", lambda *args, **kwargs: FakeResponse(200, [{"lat": "x"}]))

    assert geocode_city("Chamonix") is None
