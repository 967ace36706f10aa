"""Tests for satellite fix conversion and the fixed-frame anchor."""

import logging
import threading

import numpy as np

from sensor_bridge.gps.navsat import FixedFrameAnchor, nav_sat_fix_to_fixed_frame_pose
from sensor_bridge.messages import Header, NavSatFix, NavSatStatus


def _fix(lat: float, lon: float, alt: float = 0.0, status: int = NavSatStatus.STATUS_FIX, stamp: float = 1.0):
    return NavSatFix(header=Header(stamp=stamp, frame_id="gps"), status=status, latitude=lat, longitude=lon, altitude=alt)


class TestFixedFrameAnchor:
    def test_unset_initially(self):
        anchor = FixedFrameAnchor()
        assert not anchor.is_set
        assert anchor.ecef_to_local is None

    def test_first_call_wins(self):
        anchor = FixedFrameAnchor()
        first = anchor.get_or_set(22.3, 114.2)
        second = anchor.get_or_set(-33.9, 151.2)
        assert first is second
        assert anchor.is_set

    def test_logs_once(self, caplog):
        anchor = FixedFrameAnchor()
        with caplog.at_level(logging.INFO, logger="sensor_bridge.gps.navsat"):
            anchor.get_or_set(1.0, 2.0)
            anchor.get_or_set(3.0, 4.0)
        messages = [r.getMessage() for r in caplog.records if "ecef_to_local_frame" in r.getMessage()]
        assert len(messages) == 1
        assert "lat = 1.0" in messages[0]

    def test_concurrent_callers_agree(self):
        anchor = FixedFrameAnchor()
        results = []

        def worker(lat):
            results.append(anchor.get_or_set(lat, 10.0))

        threads = [threading.Thread(target=worker, args=(float(i),)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert all(r is results[0] for r in results)


class TestNavSatFixToFixedFramePose:
    def test_no_fix_has_no_pose(self):
        anchor = FixedFrameAnchor()
        data = nav_sat_fix_to_fixed_frame_pose(_fix(10.0, 20.0, status=NavSatStatus.STATUS_NO_FIX, stamp=7.5), anchor)
        assert data.time == 7.5
        assert data.pose is None
        assert not anchor.is_set

    def test_first_fix_is_local_origin(self):
        anchor = FixedFrameAnchor()
        data = nav_sat_fix_to_fixed_frame_pose(_fix(22.3, 114.2, alt=12.0), anchor)
        np.testing.assert_allclose(data.pose.translation, [0.0, 0.0, 12.0], atol=1e-6)
        np.testing.assert_allclose(data.pose.rotation, np.eye(3))

    def test_later_fix_uses_first_anchor(self):
        anchor = FixedFrameAnchor()
        nav_sat_fix_to_fixed_frame_pose(_fix(0.0, 0.0), anchor)
        frozen = anchor.ecef_to_local
        data = nav_sat_fix_to_fixed_frame_pose(_fix(0.0, 0.001), anchor)
        assert anchor.ecef_to_local is frozen
        # Moving east along the equator shows up as +y in the local frame.
        assert data.pose.translation[1] > 100.0
        assert abs(data.pose.translation[0]) < 1e-3

    def test_augmented_fixes_are_valid(self):
        anchor = FixedFrameAnchor()
        data = nav_sat_fix_to_fixed_frame_pose(_fix(5.0, 5.0, status=NavSatStatus.STATUS_GBAS_FIX), anchor)
        assert data.pose is not None
