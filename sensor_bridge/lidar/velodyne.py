"""
lidar/velodyne.py

Normalisation of Velodyne point clouds.

Time convention
---------------
The Velodyne ROS driver stamps the message with the acquisition time of the
**first** point and stores a per-point ``time`` field holding the offset from
that stamp in seconds (``float32``).

The output cloud is re-based on the last point: ``time = time(p) -
time(last)`` and the anchor time is ``stamp + time(last)``.
"""

from __future__ import annotations

import numpy as np

from sensor_bridge.lidar.common import (
    NormalizedPointCloud,
    build_normalized,
    empty_normalized,
    finite_points,
    require_fields,
)

# Structured dtype for a Velodyne point (velodyne_pointcloud XYZIRT layout)
VELODYNE_POINT_DTYPE = np.dtype(
    [
        ("x", np.float32),
        ("y", np.float32),
        ("z", np.float32),
        ("intensity", np.float32),
        ("ring", np.uint16),
        ("time", np.float32),
    ]
)


def normalize_velodyne(points: np.ndarray, stamp: float) -> NormalizedPointCloud:
    """Convert a Velodyne cloud to a timed cloud relative to its last point.

    Args:
        points: Structured array with at least ``x, y, z, time`` fields.
        stamp: Message timestamp (first point) in seconds.

    Raises:
        ValueError: If the cloud is empty or lacks required fields.
    """
    require_fields(points, ("x", "y", "z", "time"), "Velodyne")
    valid = finite_points(points)
    if len(valid) == 0:
        return empty_normalized(stamp + float(points["time"][-1]))

    offsets = valid["time"].astype(np.float64)
    rel_time_last = offsets[-1]
    return build_normalized(valid, offsets - rel_time_last, stamp + rel_time_last)
