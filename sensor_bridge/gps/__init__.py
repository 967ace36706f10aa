"""
sensor_bridge.gps

Satellite-fix handling: WGS84 geodesy and the local fixed-frame anchor.
"""

from sensor_bridge.gps.geodesy import (
    compute_local_frame_from_lat_long,
    lat_long_alt_to_ecef,
)
from sensor_bridge.gps.navsat import FixedFrameAnchor, nav_sat_fix_to_fixed_frame_pose

__all__ = [
    "compute_local_frame_from_lat_long",
    "lat_long_alt_to_ecef",
    "FixedFrameAnchor",
    "nav_sat_fix_to_fixed_frame_pose",
]
