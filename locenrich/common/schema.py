"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from locenrich.common.errors import ConfigError

SECTION_KEYS = {
    "elevation": {"endpoint", "dataset", "timeout_seconds"},
    "geocoding": {"endpoint", "timeout_seconds", "language"},
    "background": {"interval_seconds", "min_distance_m"},
}


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping, got {type(obj).__name__}")
    return obj


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(value: object, ctx: str, *, allow_zero: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{ctx} must be a number, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        raise ConfigError(f"{ctx} must be {'non-negative' if allow_zero else 'positive'}, got {value!r}")


def _assert_url(value: object, ctx: str) -> None:
    if not isinstance(value, str) or not value.startswith(("http://", "https://")):
        raise ConfigError(f"{ctx} must be an http(s) URL, got {value!r}")


def validate_enrichment_config(cfg: object, *, allow_unknown: bool = False) -> dict:
    cfg = _assert_mapping(cfg, "enrichment config")
    _assert_required_keys(cfg, set(SECTION_KEYS), "enrichment config")
    _assert_no_unknown_keys(cfg, set(SECTION_KEYS), "enrichment config", allow_unknown)

    for section, keys in SECTION_KEYS.items():
        body = _assert_mapping(cfg[section], section)
        _assert_required_keys(body, keys, section)
        _assert_no_unknown_keys(body, keys, section, allow_unknown)

    _assert_url(cfg["elevation"]["endpoint"], "elevation.endpoint")
    if not isinstance(cfg["elevation"]["dataset"], str) or not cfg["elevation"]["dataset"].strip():
        raise ConfigError("elevation.dataset must be a non-empty string")
    _assert_positive_number(cfg["elevation"]["timeout_seconds"], "elevation.timeout_seconds")

    _assert_url(cfg["geocoding"]["endpoint"], "geocoding.endpoint")
    _assert_positive_number(cfg["geocoding"]["timeout_seconds"], "geocoding.timeout_seconds")

    _assert_positive_number(cfg["background"]["interval_seconds"], "background.interval_seconds", allow_zero=True)
    _assert_positive_number(cfg["background"]["min_distance_m"], "background.min_distance_m", allow_zero=True)

    return cfg
