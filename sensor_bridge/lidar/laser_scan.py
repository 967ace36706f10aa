"""
lidar/laser_scan.py

Conversion of planar laser scans (single- and multi-echo) into a timed point
cloud.

Beam *i* lies at angle ``angle_min + i * angle_increment`` in the sensor's
XY plane and was measured at ``stamp + i * time_increment``.  Only the first
echo of a multi-echo beam is used.  Ranges outside ``[range_min,
range_max]`` are discarded.  The returned cloud is re-based on its last
point, and its time is the absolute time of that point.
"""

from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np

from sensor_bridge.lidar.common import NormalizedPointCloud
from sensor_bridge.messages import LaserScan, MultiEchoLaserScan
from sensor_bridge.sensor_data import make_timed_point_cloud


def laser_scan_to_point_cloud(msg: Union[LaserScan, MultiEchoLaserScan]) -> NormalizedPointCloud:
    """Convert a :class:`LaserScan` or :class:`MultiEchoLaserScan`.

    Raises:
        ValueError: If the range/angle parameters are inconsistent, or the
            message carries intensities whose length does not match the
            ranges.
    """
    _check_scan_parameters(msg)
    if len(msg.intensities) > 0 and len(msg.intensities) != len(msg.ranges):
        raise ValueError(
            f"Scan has {len(msg.intensities)} intensities for {len(msg.ranges)} ranges."
        )

    xyz: List[List[float]] = []
    times: List[float] = []
    intensities: List[float] = []
    for i, echoes in enumerate(msg.ranges):
        first_echo = _first_echo(echoes)
        if first_echo is None:
            continue
        if not msg.range_min <= first_echo <= msg.range_max:
            continue
        angle = msg.angle_min + i * msg.angle_increment
        xyz.append([first_echo * np.cos(angle), first_echo * np.sin(angle), 0.0])
        times.append(i * msg.time_increment)
        if len(msg.intensities) > 0:
            echo_intensity = _first_echo(msg.intensities[i])
            if echo_intensity is None:
                raise ValueError(f"Beam {i} has a range echo but no intensity echo.")
            intensities.append(echo_intensity)
        else:
            intensities.append(0.0)

    stamp = msg.header.stamp
    if not xyz:
        return NormalizedPointCloud(
            time=stamp,
            points=make_timed_point_cloud(np.empty((0, 3)), np.empty(0)),
            intensities=np.empty(0, dtype=np.float32),
        )

    relative = np.asarray(times, dtype=np.float64)
    duration = relative[-1]
    return NormalizedPointCloud(
        time=stamp + duration,
        points=make_timed_point_cloud(np.asarray(xyz, dtype=np.float32), relative - duration),
        intensities=np.asarray(intensities, dtype=np.float32),
    )


def _check_scan_parameters(msg: Union[LaserScan, MultiEchoLaserScan]) -> None:
    if msg.range_min < 0.0:
        raise ValueError(f"range_min must be non-negative, got {msg.range_min}.")
    if msg.range_max < msg.range_min:
        raise ValueError(f"range_max ({msg.range_max}) must not be below range_min ({msg.range_min}).")
    if msg.angle_increment > 0.0:
        if not msg.angle_max > msg.angle_min:
            raise ValueError("angle_max must exceed angle_min for a positive angle_increment.")
    elif not msg.angle_min > msg.angle_max:
        raise ValueError("angle_min must exceed angle_max for a non-positive angle_increment.")


def _first_echo(echoes: Union[float, Sequence[float]]):
    """Return the first echo of a beam, or ``None`` when the beam has none."""
    if isinstance(echoes, (int, float, np.floating)):
        return float(echoes)
    if len(echoes) == 0:
        return None
    return float(echoes[0])
