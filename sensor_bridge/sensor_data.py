"""
sensor_data.py

Outbound data types handed to the trajectory-estimation engine, and the
interface that engine has to provide.

Every accepted measurement produces exactly one
:meth:`TrajectoryBuilder.add_sensor_data` call.  All geometry is expressed in
the tracking frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Union

import numpy as np

from sensor_bridge.transform import Transform

# Canonical per-point layout: coordinates in float32, time in seconds relative
# to the last point of the cloud (always <= 0, exactly 0 for the last point).
TIMED_POINT_DTYPE = np.dtype(
    [("x", np.float32), ("y", np.float32), ("z", np.float32), ("time", np.float64)]
)


def make_timed_point_cloud(xyz: np.ndarray, time: np.ndarray) -> np.ndarray:
    """Pack ``(N, 3)`` coordinates and ``(N,)`` relative times into a cloud."""
    xyz = np.asarray(xyz)
    out = np.empty(xyz.shape[0], dtype=TIMED_POINT_DTYPE)
    out["x"] = xyz[:, 0]
    out["y"] = xyz[:, 1]
    out["z"] = xyz[:, 2]
    out["time"] = time
    return out


def timed_point_cloud_xyz(cloud: np.ndarray) -> np.ndarray:
    """Return an ``(N, 3)`` float32 array of ``[x, y, z]`` coordinates."""
    return np.column_stack([cloud["x"], cloud["y"], cloud["z"]])


@dataclass
class OdometryData:
    time: float
    pose: Transform


@dataclass
class FixedFramePoseData:
    """Pose in the local fixed frame; ``pose`` is ``None`` when there was no fix."""

    time: float
    pose: Optional[Transform]


@dataclass
class ImuData:
    time: float
    linear_acceleration: np.ndarray
    angular_velocity: np.ndarray


@dataclass
class TimedPointCloudData:
    """A range measurement in the tracking frame.

    Attributes:
        time: Absolute time of the last point.
        origin: Sensor origin in the tracking frame (float32).
        ranges: ``TIMED_POINT_DTYPE`` array in the tracking frame.
        intensities: Optional per-point intensities, same length as *ranges*.
    """

    time: float
    origin: np.ndarray
    ranges: np.ndarray
    intensities: Optional[np.ndarray] = None


@dataclass
class LandmarkObservation:
    id: str
    landmark_to_tracking_transform: Transform
    translation_weight: float
    rotation_weight: float


@dataclass
class LandmarkData:
    time: float
    landmark_observations: List[LandmarkObservation] = field(default_factory=list)


SensorData = Union[OdometryData, FixedFramePoseData, ImuData, TimedPointCloudData, LandmarkData]


class TrajectoryBuilder(Protocol):
    """The estimator side of the bridge.  Return values are ignored."""

    def add_sensor_data(self, sensor_id: str, data: SensorData) -> None:
        ...
