"""
messages.py

Inbound sample types accepted by :class:`~sensor_bridge.SensorBridge`.

These mirror the semantic content of the usual ROS sensor messages
(``nav_msgs/Odometry``, ``sensor_msgs/NavSatFix``, ``sensor_msgs/Imu``,
``sensor_msgs/LaserScan``, ``sensor_msgs/MultiEchoLaserScan``,
``sensor_msgs/PointCloud2`` and the landmark list) without depending on a
ROS installation.  Decoding the wire encoding into these types is the job of
the caller.

Conventions:
  * ``stamp`` is an absolute time in seconds.
  * Quaternions are ``[w, x, y, z]``.
  * Point clouds are numpy structured arrays using one of the vendor dtypes
    from :mod:`sensor_bridge.lidar`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

from sensor_bridge.transform import Transform


# ---------------------------------------------------------------------------
# Common
# ---------------------------------------------------------------------------


@dataclass
class Header:
    """Message header.

    Attributes:
        stamp: Acquisition time in seconds.
        frame_id: Coordinate frame the payload is expressed in.
    """

    stamp: float
    frame_id: str = ""


@dataclass
class Pose:
    """Position and orientation.

    Attributes:
        position: ``[x, y, z]`` in metres.
        orientation: Unit quaternion ``[w, x, y, z]``.
    """

    position: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    orientation: List[float] = field(default_factory=lambda: [1.0, 0.0, 0.0, 0.0])

    @property
    def transform(self) -> Transform:
        """The pose as a rigid :class:`~sensor_bridge.transform.Transform`."""
        return Transform.from_quaternion(self.orientation, self.position)


# ---------------------------------------------------------------------------
# Odometry / GNSS / landmarks
# ---------------------------------------------------------------------------


@dataclass
class Odometry:
    """Odometry sample; *pose* is the pose of *child_frame_id*."""

    header: Header
    child_frame_id: str
    pose: Pose = field(default_factory=Pose)


class NavSatStatus:
    """Fix status values as defined by ``sensor_msgs/NavSatStatus``."""

    STATUS_NO_FIX = -1
    STATUS_FIX = 0
    STATUS_SBAS_FIX = 1
    STATUS_GBAS_FIX = 2


@dataclass
class NavSatFix:
    """Satellite navigation fix.

    Attributes:
        header: Time and frame of the fix.
        status: One of the :class:`NavSatStatus` values.
        latitude: Latitude in decimal degrees (negative = South).
        longitude: Longitude in decimal degrees (negative = West).
        altitude: Altitude above the WGS84 ellipsoid in metres.
    """

    header: Header
    status: int
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0


@dataclass
class LandmarkEntry:
    """One landmark observation inside a :class:`LandmarkList`."""

    id: str
    tracking_from_landmark_transform: Pose
    translation_weight: float
    rotation_weight: float


@dataclass
class LandmarkList:
    header: Header
    landmarks: List[LandmarkEntry] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Inertial
# ---------------------------------------------------------------------------


@dataclass
class Imu:
    """Inertial sample.

    A covariance whose first element is ``-1`` means the device does not
    provide that channel.
    """

    header: Header
    linear_acceleration: List[float]
    angular_velocity: List[float]
    linear_acceleration_covariance: List[float] = field(default_factory=lambda: [0.0] * 9)
    angular_velocity_covariance: List[float] = field(default_factory=lambda: [0.0] * 9)


# ---------------------------------------------------------------------------
# Range sensors
# ---------------------------------------------------------------------------


@dataclass
class LaserScan:
    """Single-echo planar scan.

    Beam *i* is measured at angle ``angle_min + i * angle_increment`` and
    time ``header.stamp + i * time_increment``.
    """

    header: Header
    angle_min: float
    angle_max: float
    angle_increment: float
    time_increment: float
    range_min: float
    range_max: float
    ranges: List[float] = field(default_factory=list)
    intensities: List[float] = field(default_factory=list)


@dataclass
class MultiEchoLaserScan:
    """Planar scan with a list of echoes per beam."""

    header: Header
    angle_min: float
    angle_max: float
    angle_increment: float
    time_increment: float
    range_min: float
    range_max: float
    ranges: List[List[float]] = field(default_factory=list)
    intensities: List[List[float]] = field(default_factory=list)


@dataclass
class PointCloud2:
    """3-D point cloud in a vendor point layout."""

    header: Header
    points: np.ndarray
