"""Location enrichment: elevation and address lookups fanned out, then merged."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Mapping

from locenrich.common.errors import InvalidInputError
from locenrich.common.logging import get_logger, log_event, log_warning
from locenrich.common.models import (
    FOREGROUND,
    EnrichedLocationRecord,
    EnrichOptions,
    GeocodeCandidate,
    LookupOutcome,
    RawPositionSample,
    coerce_candidates,
    finite_number,
)
from locenrich.common.time_utils import elapsed_ms
from locenrich.lookups.elevation import ElevationService
from locenrich.lookups.geocode import ReverseGeocoder
from locenrich.pipeline.merge import merge_record


@dataclass(frozen=True)
class EnrichmentRun:
    record: EnrichedLocationRecord
    elevation: LookupOutcome[float]
    address: LookupOutcome[list[GeocodeCandidate]]

    @property
    def degraded(self) -> bool:
        failed = [outcome for outcome in (self.elevation, self.address) if outcome.attempted and not outcome.ok]
        return bool(failed)


def _context(options: EnrichOptions) -> str:
    return "foreground" if options.resolve_address else "background"


def _coerce_sample(sample: RawPositionSample | Mapping[str, Any]) -> RawPositionSample:
    if isinstance(sample, RawPositionSample):
        return sample
    if isinstance(sample, Mapping):
        return RawPositionSample.from_mapping(sample)
    raise InvalidInputError(f"Expected a position sample, got {type(sample).__name__}")


class LocationEnrichmentPipeline:
    def __init__(
        self,
        elevation_service: ElevationService,
        geocoder: ReverseGeocoder,
        *,
        logger: logging.Logger | None = None,
        run_id: str | None = None,
    ) -> None:
        self.elevation_service = elevation_service
        self.geocoder = geocoder
        self.logger = logger or get_logger()
        self.run_id = run_id

    def _lookup_elevation(self, sample: RawPositionSample, context: str) -> LookupOutcome[float]:
        started = time.monotonic()
        try:
            value = finite_number(self.elevation_service.lookup_elevation(sample.latitude, sample.longitude))
        except Exception as exc:
            log_warning(
                self.logger,
                f"elevation lookup failed, using device altitude: {exc}",
                run_id=self.run_id,
                context=context,
                source="elevation",
                event="ELEVATION_LOOKUP_FAILED",
                status="error",
                duration_ms=elapsed_ms(started),
                error_code=getattr(exc, "error_code", "UNEXPECTED_ERROR"),
            )
            return LookupOutcome(error=exc)
        if value is None:
            log_warning(
                self.logger,
                "elevation service returned no usable value, using device altitude",
                run_id=self.run_id,
                context=context,
                source="elevation",
                event="ELEVATION_EMPTY",
                status="empty",
                duration_ms=elapsed_ms(started),
            )
        return LookupOutcome(value=value)

    def _lookup_address(self, sample: RawPositionSample, context: str) -> LookupOutcome[list[GeocodeCandidate]]:
        started = time.monotonic()
        try:
            candidates = coerce_candidates(self.geocoder.reverse_geocode(sample.latitude, sample.longitude))
        except Exception as exc:
            log_warning(
                self.logger,
                f"reverse geocode failed: {exc}",
                run_id=self.run_id,
                context=context,
                source="geocode",
                event="GEOCODE_LOOKUP_FAILED",
                status="error",
                duration_ms=elapsed_ms(started),
                error_code=getattr(exc, "error_code", "UNEXPECTED_ERROR"),
            )
            return LookupOutcome(error=exc)
        return LookupOutcome(value=candidates)

    def run(self, sample: RawPositionSample | Mapping[str, Any], options: EnrichOptions = FOREGROUND) -> EnrichmentRun:
        sample = _coerce_sample(sample)
        context = _context(options)
        started = time.monotonic()

        if options.resolve_address:
            with ThreadPoolExecutor(max_workers=2, thread_name_prefix="locenrich") as pool:
                elevation_future = pool.submit(self._lookup_elevation, sample, context)
                address_future = pool.submit(self._lookup_address, sample, context)
                elevation = elevation_future.result()
                address = address_future.result()
        else:
            elevation = self._lookup_elevation(sample, context)
            address = LookupOutcome.skipped()

        result = EnrichmentRun(
            record=merge_record(sample, elevation, address, options),
            elevation=elevation,
            address=address,
        )
        log_event(
            self.logger,
            "enrichment complete",
            run_id=self.run_id,
            context=context,
            event="ENRICH_DONE",
            status="degraded" if result.degraded else "ok",
            duration_ms=elapsed_ms(started),
        )
        return result

    def enrich(self, sample: RawPositionSample | Mapping[str, Any], options: EnrichOptions = FOREGROUND) -> EnrichedLocationRecord:
        """Return the enriched record for ``sample``.

        Lookup failures never propagate: elevation falls back to the device
        altitude and a failed address lookup leaves the address empty. Only a
        structurally invalid sample raises (``InvalidInputError``).
        """
        return self.run(sample, options).record
