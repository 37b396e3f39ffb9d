"""Foreground and background trigger paths with their latest-record slots."""

from __future__ import annotations

import logging
from typing import Iterable

from locenrich.common.errors import PositionSourceError
from locenrich.common.logging import get_logger, log_event
from locenrich.common.models import BACKGROUND, FOREGROUND, EnrichedLocationRecord, RawPositionSample
from locenrich.pipeline.enrich import EnrichmentRun, LocationEnrichmentPipeline
from locenrich.sources.replay import PositionSource


class LocationTracker:
    def __init__(
        self,
        source: PositionSource,
        pipeline: LocationEnrichmentPipeline,
        *,
        logger: logging.Logger | None = None,
        run_id: str | None = None,
    ) -> None:
        self.source = source
        self.pipeline = pipeline
        self.logger = logger or get_logger()
        self.run_id = run_id
        self.foreground: EnrichedLocationRecord | None = None
        self.background: EnrichedLocationRecord | None = None
        self.is_loading = False
        self.degraded_updates = 0

    def _note(self, run: EnrichmentRun) -> EnrichedLocationRecord:
        if run.degraded:
            self.degraded_updates += 1
        return run.record

    def refresh(self) -> EnrichedLocationRecord:
        """On-demand update: read the current position and enrich it with an address."""
        self.is_loading = True
        try:
            try:
                sample = self.source.get_current_position()
            except PositionSourceError as exc:
                log_event(
                    self.logger,
                    f"position source failed: {exc}",
                    run_id=self.run_id,
                    context="foreground",
                    source="position",
                    event="POSITION_FAILED",
                    status="error",
                    error_code=exc.error_code,
                )
                raise
            self.foreground = self._note(self.pipeline.run(sample, FOREGROUND))
            return self.foreground
        finally:
            self.is_loading = False

    def handle_background_batch(self, samples: Iterable[RawPositionSample]) -> EnrichedLocationRecord | None:
        batch = list(samples)
        if not batch:
            return None
        self.background = self._note(self.pipeline.run(batch[0], BACKGROUND))
        return self.background

    def run_background(
        self,
        interval_s: float,
        min_distance_m: float,
        *,
        max_updates: int | None = None,
    ) -> Iterable[EnrichedLocationRecord]:
        updates = 0
        if max_updates is None or max_updates > 0:
            for sample in self.source.subscribe(interval_s, min_distance_m):
                record = self.handle_background_batch([sample])
                updates += 1
                if record is not None:
                    yield record
                if max_updates is not None and updates >= max_updates:
                    break
        log_event(
            self.logger,
            f"background updates stopped after {updates}",
            run_id=self.run_id,
            context="background",
            event="BACKGROUND_STOPPED",
            status="ok",
        )

    def snapshot(self) -> dict:
        return {
            "foreground": self.foreground.to_dict() if self.foreground else None,
            "background": self.background.to_dict() if self.background else None,
        }
