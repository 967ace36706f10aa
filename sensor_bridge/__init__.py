"""
sensor_bridge: Normalisation and synchronisation of raw sensor samples into
a time-ordered, tracking-frame data stream for trajectory estimation.
"""

from sensor_bridge.config import BridgeOptions
from sensor_bridge.sensor_bridge import SensorBridge
from sensor_bridge.tf_bridge import TfBridge
from sensor_bridge.transform import Transform
from sensor_bridge.transform_buffer import StampedTransform, TransformBuffer, TransformLookupError
from sensor_bridge.imu.imu import ImuPreconditionError
from sensor_bridge import gps
from sensor_bridge import imu
from sensor_bridge import lidar

__all__ = [
    "BridgeOptions",
    "SensorBridge",
    "TfBridge",
    "Transform",
    "StampedTransform",
    "TransformBuffer",
    "TransformLookupError",
    "ImuPreconditionError",
    "gps",
    "imu",
    "lidar",
]
