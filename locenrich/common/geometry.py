"""Geometry helpers."""

from __future__ import annotations

from pyproj import Geod

WGS84 = Geod(ellps="WGS84")


def geodesic_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    _fwd, _back, distance = WGS84.inv(lon1, lat1, lon2, lat2)
    return float(distance)
