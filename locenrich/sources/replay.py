"""Position sources: the provider interface and a recorded-track replay."""

from __future__ import annotations

import csv
import time
from pathlib import Path
from typing import Callable, Iterator, Protocol, Sequence

from locenrich.common.errors import InvalidInputError, PositionSourceError
from locenrich.common.fs import read_csv_rows, read_json
from locenrich.common.geometry import geodesic_distance_m
from locenrich.common.models import RawPositionSample


class PositionSource(Protocol):
    def get_current_position(self) -> RawPositionSample: ...

    def subscribe(self, interval_s: float, min_distance_m: float) -> Iterator[RawPositionSample]: ...


def load_track(path: Path) -> list[RawPositionSample]:
    if not path.exists():
        raise PositionSourceError(f"Track file not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in (".json", ".csv"):
        raise InvalidInputError(f"Unsupported track format: {suffix or path.name}")
    try:
        rows = read_json(path) if suffix == ".json" else read_csv_rows(path)
    except (ValueError, csv.Error) as exc:
        raise InvalidInputError(f"Unreadable track file {path.name}: {exc}") from exc
    if not isinstance(rows, list):
        raise InvalidInputError(f"Track file must hold a list of samples: {path}")

    samples = []
    for idx, row in enumerate(rows):
        try:
            samples.append(RawPositionSample.from_mapping(row))
        except InvalidInputError as exc:
            raise InvalidInputError(f"{path.name} row {idx}: {exc}") from exc
    return samples


class ReplayPositionSource:
    """Replays a recorded track as if it were a live provider.

    ``get_current_position`` walks the track one sample per call and keeps
    returning the final sample once exhausted. ``subscribe`` applies the
    provider-side update filter: at most one sample per ``interval_s`` and
    only after moving at least ``min_distance_m`` from the last emitted one.
    """

    def __init__(self, samples: Sequence[RawPositionSample], *, sleep: Callable[[float], None] = time.sleep) -> None:
        self.samples = list(samples)
        self.sleep = sleep
        self.cursor = 0

    @classmethod
    def from_file(cls, path: Path, **kwargs) -> "ReplayPositionSource":
        return cls(load_track(path), **kwargs)

    def get_current_position(self) -> RawPositionSample:
        if not self.samples:
            raise PositionSourceError("No position available: track is empty")
        sample = self.samples[min(self.cursor, len(self.samples) - 1)]
        self.cursor += 1
        return sample

    def subscribe(self, interval_s: float, min_distance_m: float) -> Iterator[RawPositionSample]:
        last: RawPositionSample | None = None
        for sample in self.samples:
            if last is not None:
                moved = geodesic_distance_m(last.latitude, last.longitude, sample.latitude, sample.longitude)
                if moved < min_distance_m:
                    continue
                if interval_s > 0:
                    self.sleep(interval_s)
            last = sample
            yield sample
