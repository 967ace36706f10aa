"""
sensor_bridge.lidar

Range-sensor normalisation: vendor point clouds (Ouster, Velodyne,
RoboSense, generic) and planar laser scans.
"""

from sensor_bridge.lidar.common import GENERIC_POINT_DTYPE, NormalizedPointCloud
from sensor_bridge.lidar.laser_scan import laser_scan_to_point_cloud
from sensor_bridge.lidar.ouster import OUSTER_POINT_DTYPE, normalize_ouster
from sensor_bridge.lidar.point_cloud import PointCloudVendor, normalize_generic, normalize_point_cloud
from sensor_bridge.lidar.robosense import ROBOSENSE_POINT_DTYPE, normalize_robosense
from sensor_bridge.lidar.velodyne import VELODYNE_POINT_DTYPE, normalize_velodyne

__all__ = [
    "GENERIC_POINT_DTYPE",
    "NormalizedPointCloud",
    "laser_scan_to_point_cloud",
    "OUSTER_POINT_DTYPE",
    "normalize_ouster",
    "PointCloudVendor",
    "normalize_generic",
    "normalize_point_cloud",
    "ROBOSENSE_POINT_DTYPE",
    "normalize_robosense",
    "VELODYNE_POINT_DTYPE",
    "normalize_velodyne",
]
