"""
gps/navsat.py

Conversion of satellite fixes into poses in a local fixed frame.

The first valid fix of a session defines the local frame
(:class:`FixedFrameAnchor`); later fixes are expressed in that same frame
even when they are far away from it.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from sensor_bridge.gps.geodesy import compute_local_frame_from_lat_long, lat_long_alt_to_ecef
from sensor_bridge.messages import NavSatFix, NavSatStatus
from sensor_bridge.sensor_data import FixedFramePoseData
from sensor_bridge.transform import Transform

logger = logging.getLogger(__name__)


class FixedFrameAnchor:
    """The ECEF → local transform, set once from the first valid fix.

    ``is_set`` is ``False`` until :meth:`get_or_set` is first called; the
    stored transform never changes afterwards.
    """

    def __init__(self) -> None:
        self._ecef_to_local: Optional[Transform] = None
        self._lock = threading.Lock()

    @property
    def is_set(self) -> bool:
        return self._ecef_to_local is not None

    @property
    def ecef_to_local(self) -> Optional[Transform]:
        return self._ecef_to_local

    def get_or_set(self, latitude: float, longitude: float) -> Transform:
        """Return the anchor, computing it from *latitude*/*longitude* if unset."""
        with self._lock:
            if self._ecef_to_local is None:
                self._ecef_to_local = compute_local_frame_from_lat_long(latitude, longitude)
                logger.info(
                    "Using NavSatFix. Setting ecef_to_local_frame with lat = %.9f, long = %.9f.",
                    latitude,
                    longitude,
                )
            return self._ecef_to_local


def nav_sat_fix_to_fixed_frame_pose(msg: NavSatFix, anchor: FixedFrameAnchor) -> FixedFramePoseData:
    """Convert one fix, establishing *anchor* on the first valid fix.

    A ``STATUS_NO_FIX`` message yields data without a pose but with the
    message time, so the gap stays visible on the timeline.
    """
    time = msg.header.stamp
    if msg.status == NavSatStatus.STATUS_NO_FIX:
        return FixedFramePoseData(time=time, pose=None)

    ecef_to_local = anchor.get_or_set(msg.latitude, msg.longitude)
    position = ecef_to_local.apply_to_point(lat_long_alt_to_ecef(msg.latitude, msg.longitude, msg.altitude))
    return FixedFramePoseData(time=time, pose=Transform.from_translation(position))
