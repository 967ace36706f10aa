"""
sensor_bridge.imu

Inertial sample conversion and its fatal preconditions.
"""

from sensor_bridge.imu.imu import (
    COVARIANCE_NOT_PROVIDED,
    IMU_COLOCATION_TOLERANCE,
    ImuPreconditionError,
    check_imu_channels,
    imu_to_imu_data,
)

__all__ = [
    "COVARIANCE_NOT_PROVIDED",
    "IMU_COLOCATION_TOLERANCE",
    "ImuPreconditionError",
    "check_imu_channels",
    "imu_to_imu_data",
]
