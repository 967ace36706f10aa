"""Tests for Ouster point cloud normalisation."""

import numpy as np
import pytest

from sensor_bridge.lidar.ouster import OUSTER_POINT_DTYPE, OUSTER_TIME_SCALE, normalize_ouster
from sensor_bridge.sensor_data import TIMED_POINT_DTYPE


def _cloud(offsets_ns) -> np.ndarray:
    n = len(offsets_ns)
    cloud = np.zeros(n, dtype=OUSTER_POINT_DTYPE)
    cloud["x"] = np.arange(n, dtype=np.float32)
    cloud["y"] = 1.0
    cloud["intensity"] = np.arange(n, dtype=np.float32) * 10.0
    cloud["t"] = offsets_ns
    return cloud


class TestNormalizeOuster:
    def setup_method(self):
        self.offsets = [0, 25_000_000, 50_000_000, 100_000_000]
        self.cloud = _cloud(self.offsets)

    def test_output_dtype(self):
        result = normalize_ouster(self.cloud, 100.0)
        assert result.points.dtype == TIMED_POINT_DTYPE
        assert len(result) == 4

    def test_anchor_time_is_last_point(self):
        result = normalize_ouster(self.cloud, 100.0)
        assert result.time == pytest.approx(100.1)

    def test_relative_times(self):
        result = normalize_ouster(self.cloud, 100.0)
        np.testing.assert_allclose(result.points["time"], [-0.1, -0.075, -0.05, 0.0], atol=1e-12)
        assert result.points["time"][-1] == 0.0

    def test_ns_scale(self):
        assert OUSTER_TIME_SCALE == pytest.approx(1e-9)

    def test_intensities_carried(self):
        result = normalize_ouster(self.cloud, 0.0)
        np.testing.assert_allclose(result.intensities, [0.0, 10.0, 20.0, 30.0])

    def test_non_finite_points_filtered(self):
        self.cloud["x"][1] = np.nan
        self.cloud["z"][2] = np.inf
        result = normalize_ouster(self.cloud, 0.0)
        assert len(result) == 2
        np.testing.assert_allclose(result.points["x"], [0.0, 3.0])

    def test_last_point_dropped_moves_reference(self):
        self.cloud["y"][-1] = np.nan
        result = normalize_ouster(self.cloud, 100.0)
        assert result.time == pytest.approx(100.05)
        assert result.points["time"][-1] == 0.0
        np.testing.assert_allclose(result.points["time"][0], -0.05, atol=1e-12)

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="empty"):
            normalize_ouster(np.zeros(0, dtype=OUSTER_POINT_DTYPE), 0.0)

    def test_missing_time_field_raises(self):
        cloud = np.zeros(3, dtype=[("x", "f4"), ("y", "f4"), ("z", "f4")])
        with pytest.raises(ValueError, match="missing"):
            normalize_ouster(cloud, 0.0)
