"""Reverse-geocoding adapter for Nominatim-style services."""

from __future__ import annotations

from typing import Any, Protocol

from locenrich.common.errors import LookupFailedError
from locenrich.common.http import HttpClient, TimeoutConfig
from locenrich.common.models import GeocodeCandidate

DEFAULT_ENDPOINT = "https://nominatim.openstreetmap.org/reverse"
CITY_KEYS = ("city", "town", "village", "hamlet", "municipality")
REGION_KEYS = ("state", "region", "province", "state_district", "county")


class ReverseGeocoder(Protocol):
    def reverse_geocode(self, latitude: float, longitude: float) -> list[GeocodeCandidate]:
        """Return candidate places, best first. An empty list means nothing was found."""


def _lookup_first(address: dict, candidates: tuple[str, ...]) -> str | None:
    for key in candidates:
        value = address.get(key)
        if value not in (None, ""):
            return str(value)
    return None


def _place_name(payload: dict, address: dict) -> str | None:
    name = payload.get("name")
    if name not in (None, ""):
        return str(name)
    road = address.get("road")
    if road in (None, ""):
        return None
    house_number = address.get("house_number")
    if house_number in (None, ""):
        return str(road)
    return f"{house_number} {road}"


def parse_reverse_payload(payload: Any) -> list[GeocodeCandidate]:
    if not isinstance(payload, dict):
        raise LookupFailedError(f"Unexpected reverse geocoder payload: {type(payload).__name__}")
    # Nominatim answers an unresolvable point with {"error": "Unable to geocode"}.
    if payload.get("error"):
        return []
    address = payload.get("address")
    if not isinstance(address, dict):
        address = {}
    candidate = GeocodeCandidate(
        name=_place_name(payload, address),
        city=_lookup_first(address, CITY_KEYS),
        region=_lookup_first(address, REGION_KEYS),
        country=_lookup_first(address, ("country",)),
    )
    if not candidate.parts():
        return []
    return [candidate]


class NominatimReverseGeocoder:
    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        *,
        language: str | None = None,
        timeout: TimeoutConfig | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.language = language
        self.timeout = timeout
        self.http_client = http_client or HttpClient()

    @classmethod
    def from_config(cls, geocoding_config: dict, http_client: HttpClient | None = None) -> "NominatimReverseGeocoder":
        return cls(
            geocoding_config["endpoint"],
            language=geocoding_config.get("language"),
            timeout=TimeoutConfig.from_seconds(geocoding_config["timeout_seconds"]),
            http_client=http_client,
        )

    def params(self, latitude: float, longitude: float) -> dict[str, Any]:
        params: dict[str, Any] = {
            "format": "jsonv2",
            "lat": round(float(latitude), 6),
            "lon": round(float(longitude), 6),
            "addressdetails": 1,
        }
        if self.language:
            params["accept-language"] = self.language
        return params

    def reverse_geocode(self, latitude: float, longitude: float) -> list[GeocodeCandidate]:
        payload = self.http_client.get_json(
            self.endpoint,
            params=self.params(latitude, longitude),
            timeout=self.timeout,
        )
        return parse_reverse_payload(payload)
