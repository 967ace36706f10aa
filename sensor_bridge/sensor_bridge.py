"""
sensor_bridge.py

The :class:`SensorBridge` turns raw sensor samples into tracking-frame data
for the trajectory-estimation engine.

Each ``handle_*`` method takes one inbound message, normalises its time and
geometry, looks up the sensor → tracking transform at the measurement time,
and hands at most one item per measurement to
:meth:`TrajectoryBuilder.add_sensor_data`.  A failed transform lookup drops
the measurement; it is never retried.  Planar scans are additionally split
into ``num_subdivisions_per_laser_scan`` slices, each looked up and
delivered on its own.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np

from sensor_bridge.config import BridgeOptions
from sensor_bridge.frame_id import check_no_leading_slash
from sensor_bridge.gps.navsat import FixedFrameAnchor, nav_sat_fix_to_fixed_frame_pose
from sensor_bridge.imu.imu import check_imu_channels, imu_to_imu_data
from sensor_bridge.landmark import landmark_list_to_landmark_data
from sensor_bridge.lidar.common import NormalizedPointCloud
from sensor_bridge.lidar.laser_scan import laser_scan_to_point_cloud
from sensor_bridge.lidar.point_cloud import PointCloudVendor, normalize_point_cloud
from sensor_bridge.messages import (
    Imu,
    LandmarkList,
    LaserScan,
    MultiEchoLaserScan,
    NavSatFix,
    Odometry,
    PointCloud2,
)
from sensor_bridge.sensor_data import (
    ImuData,
    OdometryData,
    TimedPointCloudData,
    TrajectoryBuilder,
    make_timed_point_cloud,
    timed_point_cloud_xyz,
)
from sensor_bridge.subdivision import ScanSubdivider
from sensor_bridge.tf_bridge import TfBridge
from sensor_bridge.transform_buffer import TransformProvider

logger = logging.getLogger(__name__)


class SensorBridge:
    """Routes sensor samples to a :class:`TrajectoryBuilder`.

    Args:
        options: Construction-time options.
        transform_provider: Source of sensor → tracking transforms.
        trajectory_builder: Consumer of the normalised data.

    Example::

        options = BridgeOptions.from_yaml("bridge.yaml")
        bridge = SensorBridge(options, options.make_transform_buffer(), builder)
        bridge.handle_laser_scan_message("scan", scan_msg)
    """

    def __init__(
        self,
        options: BridgeOptions,
        transform_provider: TransformProvider,
        trajectory_builder: TrajectoryBuilder,
    ) -> None:
        self._options = options
        self._tf_bridge = TfBridge(
            options.tracking_frame, options.lookup_transform_timeout_sec, transform_provider
        )
        self._subdivider = ScanSubdivider(options.num_subdivisions_per_laser_scan)
        self._fixed_frame_anchor = FixedFrameAnchor()
        self._trajectory_builder = trajectory_builder

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def options(self) -> BridgeOptions:
        return self._options

    @property
    def tf_bridge(self) -> TfBridge:
        return self._tf_bridge

    @property
    def subdivider(self) -> ScanSubdivider:
        return self._subdivider

    @property
    def fixed_frame_anchor(self) -> FixedFrameAnchor:
        return self._fixed_frame_anchor

    # ------------------------------------------------------------------
    # Odometry
    # ------------------------------------------------------------------

    def to_odometry_data(self, msg: Odometry) -> Optional[OdometryData]:
        """Express the odometry pose for the tracking frame, or ``None`` on a lookup miss."""
        time = msg.header.stamp
        sensor_to_tracking = self._tf_bridge.lookup_to_tracking(time, check_no_leading_slash(msg.child_frame_id))
        if sensor_to_tracking is None:
            return None
        return OdometryData(time=time, pose=msg.pose.transform @ sensor_to_tracking.inverse())

    def handle_odometry_message(self, sensor_id: str, msg: Odometry) -> None:
        odometry_data = self.to_odometry_data(msg)
        if odometry_data is not None:
            self._trajectory_builder.add_sensor_data(sensor_id, odometry_data)

    # ------------------------------------------------------------------
    # Satellite fixes and landmarks
    # ------------------------------------------------------------------

    def handle_nav_sat_fix_message(self, sensor_id: str, msg: NavSatFix) -> None:
        """Forward a fix as a local-frame pose; the first valid fix fixes the local frame."""
        self._trajectory_builder.add_sensor_data(
            sensor_id, nav_sat_fix_to_fixed_frame_pose(msg, self._fixed_frame_anchor)
        )

    def handle_landmark_message(self, sensor_id: str, msg: LandmarkList) -> None:
        self._trajectory_builder.add_sensor_data(sensor_id, landmark_list_to_landmark_data(msg))

    # ------------------------------------------------------------------
    # Inertial
    # ------------------------------------------------------------------

    def to_imu_data(self, msg: Imu) -> Optional[ImuData]:
        """Rotate an IMU sample into the tracking frame.

        Returns ``None`` on a lookup miss.

        Raises:
            ImuPreconditionError: If a required channel is missing or the IMU
                is not colocated with the tracking frame.
        """
        check_imu_channels(msg)
        time = msg.header.stamp
        sensor_to_tracking = self._tf_bridge.lookup_to_tracking(time, check_no_leading_slash(msg.header.frame_id))
        if sensor_to_tracking is None:
            return None
        return imu_to_imu_data(msg, sensor_to_tracking)

    def handle_imu_message(self, sensor_id: str, msg: Imu) -> None:
        imu_data = self.to_imu_data(msg)
        if imu_data is not None:
            self._trajectory_builder.add_sensor_data(sensor_id, imu_data)

    # ------------------------------------------------------------------
    # Range sensors
    # ------------------------------------------------------------------

    def handle_laser_scan_message(self, sensor_id: str, msg: LaserScan) -> None:
        self._handle_laser_scan(sensor_id, msg.header.frame_id, laser_scan_to_point_cloud(msg))

    def handle_multi_echo_laser_scan_message(self, sensor_id: str, msg: MultiEchoLaserScan) -> None:
        self._handle_laser_scan(sensor_id, msg.header.frame_id, laser_scan_to_point_cloud(msg))

    def handle_point_cloud2_message(
        self,
        sensor_id: str,
        msg: PointCloud2,
        sensor_type: Union[str, PointCloudVendor, None] = None,
    ) -> None:
        """Normalise a 3-D cloud and deliver it whole, stamped with its last point's time.

        Args:
            sensor_id: Channel of the cloud.
            msg: The cloud in a vendor point layout.
            sensor_type: Vendor tag; defaults to the vendor configured for
                *sensor_id* in :attr:`BridgeOptions.point_cloud_vendors`.
        """
        if len(msg.points) == 0:
            logger.debug("Dropping empty point cloud from sensor %s.", sensor_id)
            return
        vendor = self._options.vendor_for(sensor_id) if sensor_type is None else PointCloudVendor.from_tag(sensor_type)
        cloud = normalize_point_cloud(msg.points, msg.header.stamp, vendor)
        if len(cloud) == 0:
            logger.debug("Point cloud from sensor %s has no finite points.", sensor_id)
            return
        self._handle_rangefinder(sensor_id, cloud.time, msg.header.frame_id, cloud.points, cloud.intensities)

    def _handle_laser_scan(self, sensor_id: str, frame_id: str, cloud: NormalizedPointCloud) -> None:
        for subdivision in self._subdivider.subdivide(sensor_id, cloud.time, cloud.points, cloud.intensities):
            self._handle_rangefinder(
                sensor_id, subdivision.time, frame_id, subdivision.points, subdivision.intensities
            )

    def _handle_rangefinder(
        self,
        sensor_id: str,
        time: float,
        frame_id: str,
        points: np.ndarray,
        intensities: Optional[np.ndarray] = None,
    ) -> None:
        sensor_to_tracking = self._tf_bridge.lookup_to_tracking(time, check_no_leading_slash(frame_id))
        if sensor_to_tracking is None:
            return
        transformed = sensor_to_tracking.apply_to_points(timed_point_cloud_xyz(points), dtype=np.float32)
        self._trajectory_builder.add_sensor_data(
            sensor_id,
            TimedPointCloudData(
                time=time,
                origin=sensor_to_tracking.translation.astype(np.float32),
                ranges=make_timed_point_cloud(transformed, points["time"]),
                intensities=intensities,
            ),
        )
