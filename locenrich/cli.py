"""CLI entrypoint for the location enrichment pipeline."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from locenrich.common.config_loader import EnrichmentConfig, load_config
from locenrich.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from locenrich.common.errors import InvalidInputError, PipelineError
from locenrich.common.http import HttpClient
from locenrich.common.ids import generate_run_id
from locenrich.common.logging import build_logger, log_event
from locenrich.common.models import EnrichedLocationRecord, RawPositionSample
from locenrich.lookups.elevation import OpenTopoDataElevationService
from locenrich.lookups.geocode import NominatimReverseGeocoder
from locenrich.pipeline.enrich import LocationEnrichmentPipeline
from locenrich.pipeline.tracker import LocationTracker
from locenrich.reports import format_record, write_latest_snapshot
from locenrich.sources.replay import ReplayPositionSource

COMMANDS = ("refresh", "watch")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lon", type=float, default=None)
    parser.add_argument("--altitude", type=float, default=None)
    parser.add_argument("--accuracy", type=float, default=None)
    parser.add_argument("--track", default=None)
    parser.add_argument("--interval", type=float, default=None)
    parser.add_argument("--min-distance", type=float, default=None)
    parser.add_argument("--max-updates", type=int, default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--json", action="store_true")
    return parser.parse_args(argv)


def build_source(args: argparse.Namespace) -> ReplayPositionSource:
    if args.track:
        return ReplayPositionSource.from_file(Path(args.track))
    if args.lat is None or args.lon is None:
        raise InvalidInputError("Provide --track or both --lat and --lon")
    sample = RawPositionSample(
        latitude=args.lat,
        longitude=args.lon,
        altitude=args.altitude,
        accuracy=args.accuracy,
    )
    return ReplayPositionSource([sample])


def build_pipeline(
    cfg: EnrichmentConfig,
    elevation_http: HttpClient,
    geocode_http: HttpClient,
    logger: logging.Logger,
    run_id: str,
) -> LocationEnrichmentPipeline:
    return LocationEnrichmentPipeline(
        OpenTopoDataElevationService.from_config(cfg.elevation, http_client=elevation_http),
        NominatimReverseGeocoder.from_config(cfg.geocoding, http_client=geocode_http),
        logger=logger,
        run_id=run_id,
    )


def emit(record: EnrichedLocationRecord, as_json: bool) -> None:
    if as_json:
        print(json.dumps(record.to_dict(), ensure_ascii=False, sort_keys=True))
    else:
        print(format_record(record))
        print()


def execute_command(args: argparse.Namespace, tracker: LocationTracker, cfg: EnrichmentConfig) -> None:
    if args.command == "refresh":
        emit(tracker.refresh(), args.json)
    elif args.command == "watch":
        if not args.track:
            raise InvalidInputError("watch requires --track")
        interval = args.interval if args.interval is not None else cfg.background["interval_seconds"]
        min_distance = args.min_distance if args.min_distance is not None else cfg.background["min_distance_m"]
        for record in tracker.run_background(interval, min_distance, max_updates=args.max_updates):
            emit(record, args.json)
    else:
        raise ValueError(f"Unknown command: {args.command}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    data_dir = Path(args.data_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    log_event(logger, "command start", run_id=run_id, event="COMMAND_START", status="ok", source=args.command)

    try:
        cfg = load_config(Path(args.config_dir), overlay_config_dir=overlay_config_dir)
        source = build_source(args)
        # Lookups run on separate threads; each adapter gets its own session.
        with HttpClient() as elevation_http, HttpClient() as geocode_http:
            pipeline = build_pipeline(cfg, elevation_http, geocode_http, logger, run_id)
            tracker = LocationTracker(source, pipeline, logger=logger, run_id=run_id)
            execute_command(args, tracker, cfg)
    except PipelineError as exc:
        log_event(
            logger,
            f"{args.command} failed: {exc}",
            run_id=run_id,
            source=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    except Exception as exc:
        log_event(
            logger,
            f"unexpected failure in {args.command}: {exc}",
            run_id=run_id,
            source=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL

    write_latest_snapshot(data_dir, run_id, tracker.snapshot())
    log_event(logger, "command end", run_id=run_id, event="COMMAND_END", status="ok", source=args.command)
    if tracker.degraded_updates:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
