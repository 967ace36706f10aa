"""
lidar/common.py

Pieces shared by the vendor point-cloud normalisers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from sensor_bridge.sensor_data import TIMED_POINT_DTYPE, make_timed_point_cloud

logger = logging.getLogger(__name__)

# Layout of clouds that carry no per-point time.
GENERIC_POINT_DTYPE = np.dtype(
    [("x", np.float32), ("y", np.float32), ("z", np.float32), ("intensity", np.float32)]
)


@dataclass
class NormalizedPointCloud:
    """Result of normalising one vendor cloud.

    Attributes:
        time: Absolute time of the last point (the anchor time).
        points: ``TIMED_POINT_DTYPE`` array, times relative to the last point.
        intensities: float32 array, one value per point.
    """

    time: float
    points: np.ndarray
    intensities: np.ndarray

    def __len__(self) -> int:
        return len(self.points)


def require_fields(points: np.ndarray, names: Sequence[str], vendor: str) -> None:
    """Raise ``ValueError`` unless *points* is non-empty and has every field in *names*."""
    if points.dtype.names is None:
        raise ValueError(f"{vendor} point cloud must be a structured array.")
    missing = [name for name in names if name not in points.dtype.names]
    if missing:
        raise ValueError(f"{vendor} point cloud is missing fields {missing}.")
    if len(points) == 0:
        raise ValueError(f"{vendor} point cloud is empty.")


def finite_points(points: np.ndarray) -> np.ndarray:
    """Drop every point with a NaN or infinite coordinate."""
    mask = np.isfinite(points["x"]) & np.isfinite(points["y"]) & np.isfinite(points["z"])
    if not mask.all():
        logger.debug("Dropped %d non-finite points.", int((~mask).sum()))
    return points[mask]


def intensities_of(points: np.ndarray) -> np.ndarray:
    if "intensity" in points.dtype.names:
        return np.asarray(points["intensity"], dtype=np.float32)
    return np.zeros(len(points), dtype=np.float32)


def build_normalized(points: np.ndarray, relative_time: np.ndarray, anchor_time: float) -> NormalizedPointCloud:
    """Pack filtered vendor points and their relative times."""
    xyz = np.column_stack([points["x"], points["y"], points["z"]]) if len(points) else np.empty((0, 3))
    return NormalizedPointCloud(
        time=float(anchor_time),
        points=make_timed_point_cloud(xyz, relative_time),
        intensities=intensities_of(points),
    )


def empty_normalized(anchor_time: float) -> NormalizedPointCloud:
    return NormalizedPointCloud(
        time=float(anchor_time),
        points=np.empty(0, dtype=TIMED_POINT_DTYPE),
        intensities=np.empty(0, dtype=np.float32),
    )
