"""Deterministic fallback merge of lookup outcomes into an enriched record."""

from __future__ import annotations

from typing import Sequence

from locenrich.common.constants import ADDRESS_NOT_ATTEMPTED, ADDRESS_NOT_FOUND
from locenrich.common.models import (
    EnrichedLocationRecord,
    EnrichOptions,
    GeocodeCandidate,
    LookupOutcome,
    RawPositionSample,
)


def resolve_elevation(sample: RawPositionSample, outcome: LookupOutcome[float]) -> float | None:
    if outcome.ok and outcome.value is not None:
        return outcome.value
    return sample.altitude


def compose_address(candidates: Sequence[GeocodeCandidate]) -> str:
    if not candidates:
        return ADDRESS_NOT_FOUND
    parts = candidates[0].parts()
    if not parts:
        return ADDRESS_NOT_FOUND
    return ", ".join(parts)


def resolve_address(outcome: LookupOutcome[list[GeocodeCandidate]], options: EnrichOptions) -> str | None:
    if not options.resolve_address:
        return ADDRESS_NOT_ATTEMPTED
    if not outcome.ok:
        return None
    return compose_address(outcome.value or [])


def merge_record(
    sample: RawPositionSample,
    elevation: LookupOutcome[float],
    address: LookupOutcome[list[GeocodeCandidate]],
    options: EnrichOptions,
) -> EnrichedLocationRecord:
    return EnrichedLocationRecord(
        latitude=sample.latitude,
        longitude=sample.longitude,
        elevation=resolve_elevation(sample, elevation),
        accuracy=sample.accuracy,
        address=resolve_address(address, options),
    )
