"""Elevation lookup adapter for OpenTopoData-style services."""

from __future__ import annotations

from typing import Any, Protocol

from locenrich.common.http import HttpClient, TimeoutConfig
from locenrich.common.models import finite_number

DEFAULT_ENDPOINT = "https://api.opentopodata.org"
DEFAULT_DATASET = "test-dataset"


class ElevationService(Protocol):
    def lookup_elevation(self, latitude: float, longitude: float) -> float | None:
        """Return metres above sea level, ``None`` when the service has no usable value."""


def parse_elevation_payload(payload: Any) -> float | None:
    if not isinstance(payload, dict):
        return None
    results = payload.get("results")
    if not isinstance(results, list) or not results:
        return None
    first = results[0]
    if not isinstance(first, dict):
        return None
    return finite_number(first.get("elevation"))


class OpenTopoDataElevationService:
    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        dataset: str = DEFAULT_DATASET,
        *,
        timeout: TimeoutConfig | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.dataset = dataset
        self.timeout = timeout
        self.http_client = http_client or HttpClient()

    @classmethod
    def from_config(cls, elevation_config: dict, http_client: HttpClient | None = None) -> "OpenTopoDataElevationService":
        return cls(
            elevation_config["endpoint"],
            elevation_config["dataset"],
            timeout=TimeoutConfig.from_seconds(elevation_config["timeout_seconds"]),
            http_client=http_client,
        )

    def url(self) -> str:
        return f"{self.endpoint}/v1/{self.dataset}"

    def lookup_elevation(self, latitude: float, longitude: float) -> float | None:
        payload = self.http_client.get_json(
            self.url(),
            params={"locations": f"{latitude},{longitude}"},
            timeout=self.timeout,
        )
        return parse_elevation_payload(payload)
