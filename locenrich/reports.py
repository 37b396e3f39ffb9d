"""Display formatting and the latest-records snapshot."""

from __future__ import annotations

from pathlib import Path

from locenrich.common.constants import DISPLAY_PENDING
from locenrich.common.fs import write_json
from locenrich.common.models import EnrichedLocationRecord
from locenrich.common.time_utils import utc_timestamp_iso


def _metres(value: float | None) -> str:
    if value is None:
        return DISPLAY_PENDING
    return f"{value:.2f} meters"


def format_record(record: EnrichedLocationRecord) -> str:
    lines = [
        f"Address: {record.address or DISPLAY_PENDING}",
        f"Latitude: {record.latitude:.6f}",
        f"Longitude: {record.longitude:.6f}",
        f"Elevation: {_metres(record.elevation)}",
        f"Accuracy: {_metres(record.accuracy)}",
    ]
    return "\n".join(lines)


def write_latest_snapshot(data_dir: Path, run_id: str, slots: dict) -> Path:
    path = data_dir / "state" / "latest.json"
    write_json(
        path,
        {
            "run_id": run_id,
            "written_at": utc_timestamp_iso(),
            "foreground": slots.get("foreground"),
            "background": slots.get("background"),
        },
    )
    return path
