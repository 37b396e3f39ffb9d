from pathlib import Path

import pytest

from locenrich.common.config_loader import load_config
from locenrich.common.errors import ConfigError

BASE_YAML = """elevation:
  endpoint: "https://api.opentopodata.org"
  dataset: test-dataset
  timeout_seconds: 10
geocoding:
  endpoint: "https://nominatim.openstreetmap.org/reverse"
  timeout_seconds: 10
  language: en
background:
  interval_seconds: 20
  min_distance_m: 10
"""


def _write_base(tmp_path: Path, text: str = BASE_YAML) -> Path:
    base = tmp_path / "base"
    base.mkdir()
    (base / "enrichment.yml").write_text(text, encoding="utf-8")
    return base


def test_load_config_from_repo_config_dir():
    cfg = load_config(Path("config"))
    assert cfg.elevation["dataset"] == "test-dataset"
    assert cfg.background == {"interval_seconds": 20, "min_distance_m": 10}


def test_load_config_applies_overlay_values(tmp_path: Path):
    base = _write_base(tmp_path)
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "enrichment.yml").write_text(
        """elevation:
  dataset: srtm90m
background:
  min_distance_m: 50
""",
        encoding="utf-8",
    )

    cfg = load_config(base, overlay_config_dir=overlay)

    assert cfg.elevation["dataset"] == "srtm90m"
    assert cfg.elevation["endpoint"] == "https://api.opentopodata.org"
    assert cfg.background["min_distance_m"] == 50


def test_load_config_ignores_empty_overlay_file(tmp_path: Path):
    base = _write_base(tmp_path)
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "enrichment.yml").write_text("", encoding="utf-8")

    cfg = load_config(base, overlay_config_dir=overlay)
    assert cfg.geocoding["language"] == "en"


def test_load_config_rejects_non_mapping_overlay(tmp_path: Path):
    base = _write_base(tmp_path)
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "enrichment.yml").write_text("- not\n- a\n- mapping\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(base, overlay_config_dir=overlay)


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "old,new",
    [
        ("  dataset: test-dataset\n", ""),
        ("  timeout_seconds: 10\ngeocoding", "  timeout_seconds: 0\ngeocoding"),
        ('"https://api.opentopodata.org"', '"ftp://api.opentopodata.org"'),
        ("  min_distance_m: 10\n", "  min_distance_m: -1\n"),
        ("  language: en\n", "  language: en\n  retries: 3\n"),
    ],
)
def test_load_config_rejects_invalid_values(tmp_path: Path, old: str, new: str):
    assert old in BASE_YAML
    base = _write_base(tmp_path, BASE_YAML.replace(old, new))

    with pytest.raises(ConfigError):
        load_config(base)


def test_load_config_allow_unknown(tmp_path: Path):
    base = _write_base(tmp_path, BASE_YAML + "extra: {}\n")
    with pytest.raises(ConfigError):
        load_config(base)
    assert load_config(base, allow_unknown=True).elevation["timeout_seconds"] == 10
