"""
lidar/robosense.py

Normalisation of RoboSense point clouds.

Time convention
---------------
The RoboSense ROS driver stores an **absolute** per-point ``timestamp`` in
seconds (``float64``) and stamps the message with the time of the **last**
point, so the message stamp already is the anchor time.

The output cloud gets ``time = timestamp(p) - timestamp(last)``.  When the
raw last point is dropped as non-finite, the anchor moves back to the last
point that survived.
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

ROBOSENSE_POINT_DTYPE = np.dtype(
    [
        ("x", np.float32),
        ("y", np.float32),
        ("z", np.float32),
        ("intensity", np.float32),
        ("ring", np.uint16),
        ("timestamp", np.float64),
    ]
)


def normalize_robosense(points: np.ndarray, stamp: float) -> NormalizedPointCloud:
    """Convert a RoboSense cloud to a timed cloud relative to its last point.

    Args:
        points: Structured array with at least ``x, y, z, timestamp`` fields.
        stamp: Message timestamp (last point) in seconds.

    Raises:
        ValueError: If the cloud is empty or lacks required fields.
    """
    require_fields(points, ("x", "y", "z", "timestamp"), "RoboSense")
    valid = finite_points(points)
    if len(valid) == 0:
        return empty_normalized(stamp)

    timestamps = valid["timestamp"].astype(np.float64)
    last_valid = timestamps[-1]
    last_raw = float(points["timestamp"][-1])
    return build_normalized(valid, timestamps - last_valid, stamp + (last_valid - last_raw))
