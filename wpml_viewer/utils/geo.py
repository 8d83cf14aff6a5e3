"""
Geographic utilities

Local tangent-plane projection, distances and turn angles.
"""

import math
from typing import Sequence, Tuple

# Mean Earth radius
EARTH_RADIUS_M = 6371000.0

Vector2 = Tuple[float, float]


def to_local(ref_lat: float, ref_lon: float,
             lat: float, lon: float) -> Vector2:
    """
    Convert GPS coordinates to local planar offsets (east, north)

    Uses equirectangular approximation, accurate for distances of a few
    tens of km around the reference point.

    Args:
        ref_lat, ref_lon: Reference/origin point in degrees
        lat, lon: Position to convert in degrees

    Returns:
        Tuple of (dx, dy) in meters, dx towards east, dy towards north
    """
    ref_lat_rad = math.radians(ref_lat)

    dx = math.radians(lon - ref_lon) * math.cos(ref_lat_rad) * EARTH_RADIUS_M
    dy = math.radians(lat - ref_lat) * EARTH_RADIUS_M

    return dx, dy


def from_local(ref_lat: float, ref_lon: float,
               dx: float, dy: float) -> Tuple[float, float]:
    """
    Convert local planar offsets back to GPS

    Args:
        ref_lat, ref_lon: Reference/origin point in degrees
        dx, dy: East and north offsets in meters

    Returns:
        Tuple of (lat, lon) in degrees
    """
    ref_lat_rad = math.radians(ref_lat)

    # Inverse of to_local
    d_lat = math.degrees(dy / EARTH_RADIUS_M)
    d_lon = math.degrees(dx / (EARTH_RADIUS_M * math.cos(ref_lat_rad)))

    return ref_lat + d_lat, ref_lon + d_lon


def normalize(v: Sequence[float]) -> Vector2:
    """Scale a 2D vector to unit length (zero vector stays zero)"""
    magnitude = math.hypot(v[0], v[1])
    if magnitude == 0:
        return 0.0, 0.0
    return v[0] / magnitude, v[1] / magnitude


def angle_between(u: Sequence[float], v: Sequence[float]) -> float:
    """
    Angle between two unit vectors in radians

    The dot product is clamped to [-1, 1] so rounding drift never
    leaves the acos domain.
    """
    dot = u[0] * v[0] + u[1] * v[1]
    dot = min(1.0, max(-1.0, dot))
    return math.acos(dot)


def turn_angle_deg(prev: Tuple[float, float],
                   at: Tuple[float, float],
                   nxt: Tuple[float, float]) -> float:
    """
    Turn angle at a waypoint

    Args:
        prev: (lat, lon) of the previous waypoint
        at: (lat, lon) of the waypoint where the turn happens
        nxt: (lat, lon) of the next waypoint

    Returns:
        Angle in degrees between incoming and outgoing direction,
        0 = straight through, 180 = full reversal
    """
    v_in = to_local(at[0], at[1], prev[0], prev[1])
    v_out = to_local(at[0], at[1], nxt[0], nxt[1])

    # v_in points back towards prev, reverse it to get the travel direction
    u_in = normalize((-v_in[0], -v_in[1]))
    u_out = normalize(v_out)

    return math.degrees(angle_between(u_in, u_out))


def haversine_distance(lat1: float, lon1: float,
                       lat2: float, lon2: float) -> float:
    """
    Calculate great-circle distance between two points

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees

    Returns:
        Distance in meters
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (math.sin(d_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(d_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def bearing(lat1: float, lon1: float,
            lat2: float, lon2: float) -> float:
    """
    Calculate initial bearing from point 1 to point 2

    Returns:
        Bearing in degrees (0-360, 0=North)
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    d_lon = math.radians(lon2 - lon1)

    x = math.sin(d_lon) * math.cos(lat2_rad)
    y = (math.cos(lat1_rad) * math.sin(lat2_rad) -
         math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(d_lon))

    bearing_deg = math.degrees(math.atan2(x, y))

    # Normalize to 0-360
    return (bearing_deg + 360) % 360
