"""HTTP client with timeouts and typed failures for JSON lookups."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Any

import requests

from locenrich.common.constants import USER_AGENT
from locenrich.common.errors import LookupFailedError


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 5.0
    read: float = 10.0

    @classmethod
    def from_seconds(cls, seconds: float) -> "TimeoutConfig":
        return cls(connect=min(float(seconds), cls.connect), read=float(seconds))


class HttpRequestError(LookupFailedError):
    error_code = "HTTP_ERROR"


class HttpTimeoutError(HttpRequestError):
    error_code = "HTTP_TIMEOUT"


class HttpClient:
    def __init__(self, *, timeout: TimeoutConfig | None = None) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        out = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if headers:
            out.update(headers)
        return out

    def _raise_for_status(self, response: requests.Response, url: str) -> None:
        status = response.status_code
        if status >= 400:
            raise HttpRequestError(f"HTTP status {status} from {url}")

    def request_json(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> Any:
        req_timeout = timeout or self.timeout
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                headers=self._headers(headers),
                timeout=(req_timeout.connect, req_timeout.read),
            )
        except requests.Timeout as exc:
            raise HttpTimeoutError(f"Timed out calling {url}") from exc
        except requests.RequestException as exc:
            raise HttpRequestError(f"Transport failure calling {url}: {exc}") from exc

        self._raise_for_status(response, url)

        try:
            return response.json()
        except ValueError as exc:
            raise HttpRequestError(f"Invalid JSON payload from {url}") from exc

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> Any:
        return self.request_json("GET", url, params=params, headers=headers, timeout=timeout)
