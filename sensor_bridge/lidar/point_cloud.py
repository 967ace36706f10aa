"""
lidar/point_cloud.py

Vendor dispatch for 3-D point clouds.

Each supported vendor encodes per-point time differently (see the vendor
modules).  :func:`normalize_point_cloud` picks the normaliser from an
explicit :class:`PointCloudVendor` tag and returns a cloud whose times are
relative to its last point.

=========  ==========================  ===========================
 Vendor    Native time field           Anchor time
=========  ==========================  ===========================
 OUSTER    ``t``, ns from stamp        stamp + t(last) · 1e-9
 VELODYNE  ``time``, s from stamp      stamp + time(last)
 ROBOSENSE ``timestamp``, absolute s   stamp
 GENERIC   none                        stamp
=========  ==========================  ===========================
"""

from __future__ import annotations

import enum
import logging
from typing import Union

import numpy as np

from sensor_bridge.lidar.common import (
    NormalizedPointCloud,
    build_normalized,
    empty_normalized,
    finite_points,
    require_fields,
)
from sensor_bridge.lidar.ouster import normalize_ouster
from sensor_bridge.lidar.robosense import normalize_robosense
from sensor_bridge.lidar.velodyne import normalize_velodyne

logger = logging.getLogger(__name__)


class PointCloudVendor(enum.Enum):
    OUSTER = "ouster"
    VELODYNE = "velodyne"
    ROBOSENSE = "robosense"
    GENERIC = "generic"

    @classmethod
    def from_tag(cls, tag: Union[str, "PointCloudVendor", None]) -> "PointCloudVendor":
        """Map a configuration tag to a vendor; unknown tags fall back to ``GENERIC``."""
        if isinstance(tag, cls):
            return tag
        if tag is None:
            return cls.GENERIC
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            logger.debug("Unknown point cloud vendor %r, treating it as generic.", tag)
            return cls.GENERIC


def normalize_generic(points: np.ndarray, stamp: float) -> NormalizedPointCloud:
    """Normalise a cloud without per-point time.

    Every point is assigned time 0, i.e. the whole cloud is treated as
    measured at *stamp*.
    """
    require_fields(points, ("x", "y", "z"), "Generic")
    valid = finite_points(points)
    if len(valid) == 0:
        return empty_normalized(stamp)
    return build_normalized(valid, np.zeros(len(valid), dtype=np.float64), stamp)


_NORMALIZERS = {
    PointCloudVendor.OUSTER: normalize_ouster,
    PointCloudVendor.VELODYNE: normalize_velodyne,
    PointCloudVendor.ROBOSENSE: normalize_robosense,
    PointCloudVendor.GENERIC: normalize_generic,
}


def normalize_point_cloud(
    points: np.ndarray,
    stamp: float,
    vendor: Union[str, PointCloudVendor] = PointCloudVendor.GENERIC,
) -> NormalizedPointCloud:
    """Convert a raw vendor cloud into a timed cloud plus its anchor time.

    Args:
        points: Vendor structured array.
        stamp: Message timestamp in seconds.
        vendor: Vendor tag selecting the time convention.

    Returns:
        :class:`NormalizedPointCloud`.  It is empty when every point had a
        non-finite coordinate.

    Raises:
        ValueError: If *points* is empty or lacks the vendor's fields.
    """
    return _NORMALIZERS[PointCloudVendor.from_tag(vendor)](points, stamp)
