"""
imu/imu.py

Conversion of inertial samples into the tracking frame.

Two physical preconditions are enforced and are fatal when violated:

* The device must provide both linear acceleration and angular velocity.
  ``sensor_msgs/Imu`` marks a missing channel by setting element 0 of that
  channel's covariance to ``-1``.
* The IMU frame must coincide with the tracking frame (translation norm below
  :data:`IMU_COLOCATION_TOLERANCE`).  Linear acceleration measured away from
  the tracking origin cannot be moved there by a rotation alone.

Both vectors are then rotated, never translated, into the tracking frame.
"""

from __future__ import annotations

import numpy as np

from sensor_bridge.messages import Imu
from sensor_bridge.sensor_data import ImuData
from sensor_bridge.transform import Transform

# Covariance[0] value meaning "channel not provided".
COVARIANCE_NOT_PROVIDED = -1.0

# Maximum distance (m) between the IMU and tracking frame origins.
IMU_COLOCATION_TOLERANCE = 1e-5


class ImuPreconditionError(RuntimeError):
    """An inertial sample violates a precondition the estimator depends on.

    Not a recoverable condition: processing of IMU data must stop.
    """


def check_imu_channels(msg: Imu) -> None:
    """Raise :class:`ImuPreconditionError` if a required channel is declared absent."""
    if msg.linear_acceleration_covariance[0] == COVARIANCE_NOT_PROVIDED:
        raise ImuPreconditionError(
            "Your IMU data claims to not contain linear acceleration measurements by "
            f"setting linear_acceleration_covariance[0] to {msg.linear_acceleration_covariance[0]:g}. "
            "Linear acceleration is required."
        )
    if msg.angular_velocity_covariance[0] == COVARIANCE_NOT_PROVIDED:
        raise ImuPreconditionError(
            "Your IMU data claims to not contain angular velocity measurements by "
            f"setting angular_velocity_covariance[0] to {msg.angular_velocity_covariance[0]:g}. "
            "Angular velocity is required."
        )


def imu_to_imu_data(msg: Imu, sensor_to_tracking: Transform) -> ImuData:
    """Rotate an inertial sample into the tracking frame.

    Raises:
        ImuPreconditionError: If the IMU is not colocated with the tracking
            frame.
    """
    offset = float(np.linalg.norm(sensor_to_tracking.translation))
    if not offset < IMU_COLOCATION_TOLERANCE:
        raise ImuPreconditionError(
            f"The IMU frame must be colocated with the tracking frame, but it is {offset:.6g} m "
            f"away (tolerance {IMU_COLOCATION_TOLERANCE:g} m). Transforming linear acceleration "
            "into the tracking frame would otherwise be imprecise."
        )
    return ImuData(
        time=msg.header.stamp,
        linear_acceleration=sensor_to_tracking.rotate(msg.linear_acceleration),
        angular_velocity=sensor_to_tracking.rotate(msg.angular_velocity),
    )
