"""
lidar/ouster.py

Normalisation of Ouster point clouds.

Time convention
---------------
The Ouster ROS driver stores a per-point ``t`` field holding the offset from
the message stamp in **nanoseconds** (``uint32``).  The message stamp is the
start of the sweep, so the last point of the cloud was measured at
``stamp + t(last) * 1e-9``.

The output cloud is re-based on that last point: every point gets
``time = 1e-9 * (t(p) - t(last))`` and the cloud's anchor time is
``stamp + 1e-9 * t(last)``.
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

OUSTER_POINT_DTYPE = np.dtype(
    [
        ("x", np.float32),
        ("y", np.float32),
        ("z", np.float32),
        ("intensity", np.float32),
        ("t", np.uint32),
        ("reflectivity", np.uint16),
        ("ring", np.uint16),
        ("ambient", np.uint16),
        ("range", np.uint32),
    ]
)

# Scale of the ``t`` field (ns → s).
OUSTER_TIME_SCALE = 1e-9


def normalize_ouster(points: np.ndarray, stamp: float) -> NormalizedPointCloud:
    """Convert an Ouster cloud to a timed cloud relative to its last point.

    Args:
        points: Structured array with at least ``x, y, z, t`` fields.
        stamp: Message timestamp in seconds.

    Raises:
        ValueError: If the cloud is empty or lacks required fields.
    """
    require_fields(points, ("x", "y", "z", "t"), "Ouster")
    valid = finite_points(points)
    if len(valid) == 0:
        return empty_normalized(stamp + OUSTER_TIME_SCALE * float(points["t"][-1]))

    # Work in float64 so that uint32 differences cannot wrap.
    offsets = valid["t"].astype(np.float64) * OUSTER_TIME_SCALE
    rel_time_last = offsets[-1]
    return build_normalized(valid, offsets - rel_time_last, stamp + rel_time_last)
