from __future__ import annotations

import pytest

from locenrich.common.http import HttpClient, HttpRequestError, TimeoutConfig
from locenrich.lookups.elevation import OpenTopoDataElevationService, parse_elevation_payload


class FakeResponse:
    def __init__(self, status_code: int, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


def test_lookup_builds_opentopodata_request(monkeypatch):
    client = HttpClient()
    seen = {}

    def fake_request(**kwargs):
        seen.update(kwargs)
        return FakeResponse(200, {"results": [{"elevation": 12.3, "location": {"lat": 37.422, "lng": -122.084}}], "status": "OK"})

    monkeypatch.setattr(client.session, "request", fake_request)
    service = OpenTopoDataElevationService("https://api.example.test/", "srtm90m", http_client=client)

    assert service.lookup_elevation(37.422, -122.084) == 12.3
    assert seen["url"] == "https://api.example.test/v1/srtm90m"
    assert seen["params"] == {"locations": "37.422,-122.084"}


def test_lookup_propagates_transport_failures_to_caller(monkeypatch):
    client = HttpClient()
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(500, {}))
    service = OpenTopoDataElevationService(http_client=client)

    with pytest.raises(HttpRequestError):
        service.lookup_elevation(1.0, 2.0)


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {},
        {"results": []},
        {"results": [None]},
        {"results": [{}]},
        {"results": [{"elevation": None}]},
        {"results": [{"elevation": "high"}]},
        {"results": [{"elevation": True}]},
        {"results": [{"elevation": float("inf")}]},
    ],
)
def test_parse_elevation_payload_returns_none_for_unusable_bodies(payload):
    assert parse_elevation_payload(payload) is None


def test_parse_elevation_payload_accepts_integers():
    assert parse_elevation_payload({"results": [{"elevation": 7}]}) == 7.0


def test_from_config_applies_timeout():
    service = OpenTopoDataElevationService.from_config(
        {"endpoint": "https://api.opentopodata.org", "dataset": "test-dataset", "timeout_seconds": 3}
    )
    assert service.url() == "https://api.opentopodata.org/v1/test-dataset"
    assert service.timeout == TimeoutConfig(connect=3.0, read=3.0)
