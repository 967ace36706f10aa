"""
gps/geodesy.py

WGS84 geodetic helpers used to express satellite fixes in a local frame.

The local frame is centred on the point ``(lat, lon, 0)`` of the first fix,
with its z-axis along the ellipsoid normal at that point.
"""

from __future__ import annotations

import math

import numpy as np

from sensor_bridge.transform import Transform

# WGS84 ellipsoid parameters
WGS84_A = 6378137.0  # Semi-major axis (m)
WGS84_F = 1.0 / 298.257223563  # Flattening
WGS84_B = WGS84_A * (1.0 - WGS84_F)  # Semi-minor axis (m)
WGS84_E2 = (WGS84_A ** 2 - WGS84_B ** 2) / WGS84_A ** 2  # First eccentricity squared


def lat_long_alt_to_ecef(latitude: float, longitude: float, altitude: float) -> np.ndarray:
    """Convert geodetic coordinates to Earth-Centred Earth-Fixed coordinates.

    Args:
        latitude: Latitude in degrees (positive north).
        longitude: Longitude in degrees (positive east).
        altitude: Height above the WGS84 ellipsoid in metres.

    Returns:
        ``[x, y, z]`` in metres.
    """
    sin_phi = math.sin(math.radians(latitude))
    cos_phi = math.cos(math.radians(latitude))
    sin_lambda = math.sin(math.radians(longitude))
    cos_lambda = math.cos(math.radians(longitude))
    # Radius of curvature in the prime vertical
    N = WGS84_A / math.sqrt(1.0 - WGS84_E2 * sin_phi * sin_phi)
    x = (N + altitude) * cos_phi * cos_lambda
    y = (N + altitude) * cos_phi * sin_lambda
    z = (WGS84_B ** 2 / WGS84_A ** 2 * N + altitude) * sin_phi
    return np.array([x, y, z], dtype=float)


def compute_local_frame_from_lat_long(latitude: float, longitude: float) -> Transform:
    """Return the ECEF → local frame transform anchored at ``(latitude, longitude)``.

    The rotation is ``Ry(latitude - 90°) · Rz(-longitude)`` and the origin
    is the ellipsoid point below the fix.
    """
    rotation = _rotation_y(math.radians(latitude - 90.0)) @ _rotation_z(math.radians(-longitude))
    translation = lat_long_alt_to_ecef(latitude, longitude, 0.0)
    return Transform.from_rotation_matrix(rotation, rotation @ -translation)


def _rotation_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]], dtype=float)


def _rotation_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]], dtype=float)
