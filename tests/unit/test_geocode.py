from __future__ import annotations

import pytest

from locenrich.common.errors import LookupFailedError
from locenrich.common.http import HttpClient
from locenrich.common.models import GeocodeCandidate
from locenrich.lookups.geocode import NominatimReverseGeocoder, parse_reverse_payload


class FakeResponse:
    def __init__(self, status_code: int, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


GOOGLEPLEX = {
    "name": "Googleplex",
    "display_name": "Googleplex, 1600, Amphitheatre Parkway, Mountain View, Santa Clara County, California, 94043, United States",
    "address": {
        "house_number": "1600",
        "road": "Amphitheatre Parkway",
        "city": "Mountain View",
        "county": "Santa Clara County",
        "state": "California",
        "country": "United States",
        "country_code": "us",
    },
}


def test_parse_reverse_payload_maps_first_candidate():
    assert parse_reverse_payload(GOOGLEPLEX) == [
        GeocodeCandidate(name="Googleplex", city="Mountain View", region="California", country="United States")
    ]


def test_parse_reverse_payload_falls_back_to_street_address_and_town():
    payload = {"name": "", "address": {"house_number": "3", "road": "Rue de la Mare", "town": "St Helier", "country": "Jersey"}}
    candidate = parse_reverse_payload(payload)[0]

    assert candidate.name == "3 Rue de la Mare"
    assert candidate.city == "St Helier"
    assert candidate.region is None


def test_parse_reverse_payload_unable_to_geocode_is_empty():
    assert parse_reverse_payload({"error": "Unable to geocode"}) == []
    assert parse_reverse_payload({"address": {}}) == []


def test_parse_reverse_payload_rejects_non_object():
    with pytest.raises(LookupFailedError):
        parse_reverse_payload(["unexpected"])


def test_reverse_geocode_sends_nominatim_params(monkeypatch):
    client = HttpClient()
    seen = {}

    def fake_request(**kwargs):
        seen.update(kwargs)
        return FakeResponse(200, GOOGLEPLEX)

    monkeypatch.setattr(client.session, "request", fake_request)
    geocoder = NominatimReverseGeocoder("https://geo.example.test/reverse", language="en", http_client=client)

    candidates = geocoder.reverse_geocode(37.4220001, -122.0840001)

    assert candidates[0].city == "Mountain View"
    assert seen["url"] == "https://geo.example.test/reverse"
    assert seen["params"] == {
        "format": "jsonv2",
        "lat": 37.422,
        "lon": -122.084,
        "addressdetails": 1,
        "accept-language": "en",
    }
