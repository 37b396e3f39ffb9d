from pathlib import Path

import pytest

from locenrich.common.errors import InvalidInputError, PositionSourceError
from locenrich.common.models import RawPositionSample
from locenrich.sources.replay import ReplayPositionSource, load_track

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


def test_load_track_json_and_csv():
    json_samples = load_track(FIXTURES / "track.json")
    csv_samples = load_track(FIXTURES / "track.csv")

    assert len(json_samples) == 4
    assert json_samples[3].altitude is None
    assert csv_samples[1] == RawPositionSample(49.2144, -2.1301, altitude=None, accuracy=12.0)


def test_load_track_reports_bad_row(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text('[{"latitude": 1, "longitude": 2}, {"latitude": 100, "longitude": 2}]', encoding="utf-8")

    with pytest.raises(InvalidInputError, match="row 1"):
        load_track(path)


def test_load_track_rejects_unknown_format_and_missing_file(tmp_path: Path):
    path = tmp_path / "track.gpx"
    path.write_text("<gpx/>", encoding="utf-8")
    with pytest.raises(InvalidInputError):
        load_track(path)
    with pytest.raises(PositionSourceError):
        load_track(tmp_path / "missing.json")


def test_get_current_position_walks_track_and_repeats_last():
    samples = [RawPositionSample(1, 1), RawPositionSample(2, 2)]
    source = ReplayPositionSource(samples)

    assert [source.get_current_position() for _ in range(3)] == [samples[0], samples[1], samples[1]]


def test_get_current_position_empty_track_fails():
    with pytest.raises(PositionSourceError):
        ReplayPositionSource([]).get_current_position()


def test_subscribe_filters_by_distance_and_throttles():
    sleeps = []
    source = ReplayPositionSource(load_track(FIXTURES / "track.json"), sleep=sleeps.append)

    emitted = list(source.subscribe(20, 10))

    assert [sample.latitude for sample in emitted] == [37.422, 37.4225, 37.4235]
    assert sleeps == [20, 20]


def test_subscribe_without_interval_does_not_sleep():
    sleeps = []
    source = ReplayPositionSource(load_track(FIXTURES / "track.json"), sleep=sleeps.append)

    assert len(list(source.subscribe(0, 0))) == 4
    assert sleeps == []


@pytest.mark.parametrize(
    "name,content",
    [
        ("broken.json", b"{not json"),
        ("latin1.json", '[{"latitude": 1, "longitude": 2, "name": "Saint-\xc9tienne"}]'.encode("latin-1")),
        ("latin1.csv", "latitude,longitude,place\n1,2,S\xe3o Paulo\n".encode("latin-1")),
    ],
)
def test_load_track_unreadable_files_are_invalid_input(tmp_path: Path, name: str, content: bytes):
    path = tmp_path / name
    path.write_bytes(content)

    with pytest.raises(InvalidInputError, match="Unreadable track file"):
        load_track(path)
