"""Tests for the vendor dispatch of 3-D point clouds."""

import numpy as np
import pytest

from sensor_bridge.lidar.common import GENERIC_POINT_DTYPE
from sensor_bridge.lidar.ouster import OUSTER_POINT_DTYPE
from sensor_bridge.lidar.point_cloud import PointCloudVendor, normalize_point_cloud
from sensor_bridge.lidar.robosense import ROBOSENSE_POINT_DTYPE
from sensor_bridge.lidar.velodyne import VELODYNE_POINT_DTYPE


def _random_cloud(dtype: np.dtype, n: int = 50, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    cloud = np.zeros(n, dtype=dtype)
    for name in ("x", "y", "z"):
        cloud[name] = rng.uniform(-10.0, 10.0, n)
    if "t" in dtype.names:
        cloud["t"] = np.sort(rng.integers(0, 100_000_000, n))
    if "time" in dtype.names:
        cloud["time"] = np.sort(rng.uniform(0.0, 0.1, n))
    if "timestamp" in dtype.names:
        cloud["timestamp"] = 500.0 + np.sort(rng.uniform(0.0, 0.1, n))
    return cloud


_CASES = [
    (PointCloudVendor.OUSTER, OUSTER_POINT_DTYPE),
    (PointCloudVendor.VELODYNE, VELODYNE_POINT_DTYPE),
    (PointCloudVendor.ROBOSENSE, ROBOSENSE_POINT_DTYPE),
    (PointCloudVendor.GENERIC, GENERIC_POINT_DTYPE),
]


class TestPointCloudVendor:
    def test_from_tag_known(self):
        assert PointCloudVendor.from_tag("velodyne") is PointCloudVendor.VELODYNE
        assert PointCloudVendor.from_tag(" RoboSense ") is PointCloudVendor.ROBOSENSE

    def test_from_tag_enum_passthrough(self):
        assert PointCloudVendor.from_tag(PointCloudVendor.OUSTER) is PointCloudVendor.OUSTER

    def test_from_tag_unknown_is_generic(self):
        assert PointCloudVendor.from_tag("livox") is PointCloudVendor.GENERIC
        assert PointCloudVendor.from_tag(None) is PointCloudVendor.GENERIC


class TestNormalizePointCloud:
    @pytest.mark.parametrize("vendor,dtype", _CASES)
    def test_last_time_zero_and_none_positive(self, vendor, dtype):
        cloud = _random_cloud(dtype)
        cloud["x"][::7] = np.nan
        result = normalize_point_cloud(cloud, 500.1, vendor)
        assert len(result) > 0
        assert result.points["time"][-1] == 0.0
        assert (result.points["time"] <= 0.0).all()

    def test_dispatch_by_string_tag(self):
        cloud = _random_cloud(VELODYNE_POINT_DTYPE)
        result = normalize_point_cloud(cloud, 10.0, "velodyne")
        assert result.time == pytest.approx(10.0 + float(cloud["time"][-1]))

    def test_generic_assigns_zero_time(self):
        cloud = _random_cloud(GENERIC_POINT_DTYPE, n=20)
        result = normalize_point_cloud(cloud, 42.0, PointCloudVendor.GENERIC)
        assert result.time == 42.0
        np.testing.assert_array_equal(result.points["time"], np.zeros(20))

    def test_unknown_tag_on_timed_cloud_discards_time(self):
        cloud = _random_cloud(VELODYNE_POINT_DTYPE, n=5)
        result = normalize_point_cloud(cloud, 42.0, "acme")
        assert result.time == 42.0
        np.testing.assert_array_equal(result.points["time"], np.zeros(5))

    def test_generic_without_intensity_field(self):
        cloud = np.zeros(3, dtype=[("x", "f4"), ("y", "f4"), ("z", "f4")])
        result = normalize_point_cloud(cloud, 1.0)
        np.testing.assert_array_equal(result.intensities, np.zeros(3))

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            normalize_point_cloud(np.zeros(0, dtype=GENERIC_POINT_DTYPE), 0.0)
