# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Caller-side frame and time conversions.

The field synthesis itself only sees ITRS Cartesian positions and decimal
years; these helpers convert geodetic inputs and calendar dates on the way
in, and rotate the result into the local North-East-Down frame on the way
out. WGS84 ellipsoid throughout.
"""
import math
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class _Wgs84:
    """WGS84 ellipsoid parameters."""
    R_EQUATORIAL: float = 6_378_137.0       # m — semi-major axis
    E_SQUARED: float = 0.00669437999014     # first eccentricity squared


Wgs84: _Wgs84 = _Wgs84()


def geodetic_to_itrs(
    lat_deg: float,
    lon_deg: float,
    alt_m: float,
) -> tuple[float, float, float]:
    """
    Convert geodetic coordinates to an ITRS Cartesian position.

    Args:
        lat_deg: Geodetic latitude in degrees [-90, 90].
        lon_deg: Geodetic longitude in degrees.
        alt_m: Height above the WGS84 ellipsoid in meters.

    Returns:
        (x, y, z) in meters, ITRS frame.
    """
    a = Wgs84.R_EQUATORIAL
    e2 = Wgs84.E_SQUARED

    lat_rad = math.radians(lat_deg)
    lon_rad = math.radians(lon_deg)

    sin_lat = math.sin(lat_rad)
    cos_lat = math.cos(lat_rad)
    sin_lon = math.sin(lon_rad)
    cos_lon = math.cos(lon_rad)

    n = a / math.sqrt(1.0 - e2 * sin_lat**2)

    x = (n + alt_m) * cos_lat * cos_lon
    y = (n + alt_m) * cos_lat * sin_lon
    z = (n * (1.0 - e2) + alt_m) * sin_lat

    return x, y, z


def itrs_to_ned(
    vector_itrs: tuple[float, float, float],
    lat_deg: float,
    lon_deg: float,
) -> tuple[float, float, float]:
    """
    Rotate an ITRS vector into the local North-East-Down frame.

    Uses geodetic latitude, so "down" is the ellipsoid normal.

    Returns:
        (north, east, down) in the units of vector_itrs.
    """
    vx, vy, vz = vector_itrs
    lat_rad = math.radians(lat_deg)
    lon_rad = math.radians(lon_deg)
    sin_lat = math.sin(lat_rad)
    cos_lat = math.cos(lat_rad)
    sin_lon = math.sin(lon_rad)
    cos_lon = math.cos(lon_rad)

    north = -sin_lat * cos_lon * vx - sin_lat * sin_lon * vy + cos_lat * vz
    east = -sin_lon * vx + cos_lon * vy
    down = -cos_lat * cos_lon * vx - cos_lat * sin_lon * vy - sin_lat * vz
    return north, east, down


def decimal_year(date: datetime) -> float:
    """Decimal year of a date, using that year's actual length.

    Naive datetimes are treated as UTC; aware ones are converted to UTC first.
    """
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    else:
        date = date.astimezone(timezone.utc)
    year_start = datetime(date.year, 1, 1, tzinfo=timezone.utc)
    year_end = datetime(date.year + 1, 1, 1, tzinfo=timezone.utc)
    year_length = (year_end - year_start).total_seconds()
    return date.year + (date - year_start).total_seconds() / year_length
