"""Data models used across the pipeline."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Generic, Iterable, Mapping, TypeVar

from locenrich.common.errors import InvalidInputError, LookupFailedError

T = TypeVar("T")


def _safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def finite_number(value: Any) -> float | None:
    """Return ``value`` as a float only if it is already a finite real number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _require_coordinate(value: Any, field: str, bound: float) -> float:
    if value is None:
        raise InvalidInputError(f"{field} is required")
    parsed = _safe_float(value)
    if parsed is None:
        raise InvalidInputError(f"{field} must be numeric, got {value!r}")
    if not -bound <= parsed <= bound:
        raise InvalidInputError(f"{field} out of range [-{bound:g}, {bound:g}]: {parsed}")
    return parsed


@dataclass(frozen=True)
class RawPositionSample:
    latitude: float
    longitude: float
    altitude: float | None = None
    accuracy: float | None = None

    def __post_init__(self) -> None:
        for field, bound in (("latitude", 90.0), ("longitude", 180.0)):
            value = getattr(self, field)
            if isinstance(value, str):
                raise InvalidInputError(f"{field} must be numeric, got {value!r}")
            object.__setattr__(self, field, _require_coordinate(value, field, bound))
        object.__setattr__(self, "altitude", _safe_float(self.altitude))
        object.__setattr__(self, "accuracy", _safe_float(self.accuracy))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "RawPositionSample":
        """Build a sample from a loosely-typed row (track files, CLI args).

        Latitude and longitude are mandatory; numeric strings are accepted.
        Altitude and accuracy degrade to ``None`` when blank or unusable.
        """
        if not isinstance(mapping, Mapping):
            raise InvalidInputError(f"Position sample must be a mapping, got {type(mapping).__name__}")
        return cls(
            latitude=_require_coordinate(mapping.get("latitude"), "latitude", 90.0),
            longitude=_require_coordinate(mapping.get("longitude"), "longitude", 180.0),
            altitude=mapping.get("altitude"),
            accuracy=mapping.get("accuracy"),
        )


@dataclass(frozen=True)
class GeocodeCandidate:
    name: str | None = None
    city: str | None = None
    region: str | None = None
    country: str | None = None

    def parts(self) -> list[str]:
        values = (self.name, self.city, self.region, self.country)
        return [str(value).strip() for value in values if value not in (None, "") and str(value).strip()]


def coerce_candidates(result: Any) -> list[GeocodeCandidate]:
    if isinstance(result, (Mapping, str, bytes)) or not isinstance(result, Iterable):
        raise LookupFailedError(f"Malformed geocoder result: {type(result).__name__}")
    candidates = []
    for item in result:
        if isinstance(item, GeocodeCandidate):
            candidates.append(item)
        elif isinstance(item, Mapping):
            candidates.append(
                GeocodeCandidate(
                    name=item.get("name"),
                    city=item.get("city"),
                    region=item.get("region"),
                    country=item.get("country"),
                )
            )
        else:
            raise LookupFailedError(f"Malformed geocoder candidate: {type(item).__name__}")
    return candidates


@dataclass(frozen=True)
class EnrichOptions:
    resolve_address: bool


FOREGROUND = EnrichOptions(resolve_address=True)
BACKGROUND = EnrichOptions(resolve_address=False)


@dataclass(frozen=True)
class LookupOutcome(Generic[T]):
    """Result-or-error of one best-effort external call."""

    value: T | None = None
    error: BaseException | None = None
    attempted: bool = True

    @property
    def ok(self) -> bool:
        return self.attempted and self.error is None

    @classmethod
    def skipped(cls) -> "LookupOutcome[T]":
        return cls(attempted=False)


@dataclass(frozen=True)
class EnrichedLocationRecord:
    latitude: float
    longitude: float
    elevation: float | None
    accuracy: float | None
    address: str | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
