"""
subdivision.py

Splitting of one planar scan into time-ordered sub-clouds.

A rotating 2-D scanner sweeps for tens of milliseconds, so one scan is
delivered as several smaller measurements.  Each subdivision is re-based on
its own last point and stamped with the absolute time of that point, the
END of the slice.  A downstream time-ordered merge of several sensors can
then never receive a slice that precedes data it has already handed on.

Per sensor id the subdivider remembers the time of the last subdivision it
emitted; a slice whose end time is not strictly later is dropped.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class Subdivision:
    """One accepted slice of a scan.

    Attributes:
        time: Absolute time of the slice's last point.
        points: ``TIMED_POINT_DTYPE`` array re-based so the last time is 0.
        intensities: Matching slice of the scan intensities, if any.
    """

    time: float
    points: np.ndarray
    intensities: Optional[np.ndarray] = None


class ScanSubdivider:
    """Splits scans into ``num_subdivisions`` slices with per-sensor monotonic times.

    Safe to call concurrently for different sensor ids; calls for one sensor
    id are serialised.

    Args:
        num_subdivisions: Number of slices per scan (>= 1).
    """

    def __init__(self, num_subdivisions: int) -> None:
        if num_subdivisions < 1:
            raise ValueError(f"num_subdivisions must be at least 1, got {num_subdivisions}")
        self._num_subdivisions = int(num_subdivisions)
        self._previous_subdivision_time: Dict[str, float] = {}
        self._sensor_locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def num_subdivisions(self) -> int:
        return self._num_subdivisions

    def previous_subdivision_time(self, sensor_id: str) -> Optional[float]:
        """Time of the last slice emitted for *sensor_id*, ``None`` before the first."""
        return self._previous_subdivision_time.get(sensor_id)

    def subdivide(
        self,
        sensor_id: str,
        time: float,
        points: np.ndarray,
        intensities: Optional[np.ndarray] = None,
    ) -> List[Subdivision]:
        """Split one scan and return the slices that passed the time check.

        Args:
            sensor_id: Channel the scan belongs to.
            time: Absolute time that the point times are relative to.
            points: Time-ordered ``TIMED_POINT_DTYPE`` array whose last time
                is <= 0.
            intensities: Optional per-point intensities.

        Raises:
            ValueError: If the last point has a positive time.
        """
        n_points = len(points)
        if n_points == 0:
            return []
        if points["time"][-1] > 0:
            raise ValueError(
                f"Scan from sensor {sensor_id} ends at relative time {points['time'][-1]}; "
                "point times must be relative to the last point."
            )

        accepted: List[Subdivision] = []
        with self._lock_for(sensor_id):
            for i in range(self._num_subdivisions):
                start = n_points * i // self._num_subdivisions
                end = n_points * (i + 1) // self._num_subdivisions
                if start == end:
                    continue
                time_to_subdivision_end = float(points["time"][end - 1])
                subdivision_time = time + time_to_subdivision_end
                previous = self._previous_subdivision_time.get(sensor_id)
                if previous is not None and previous >= subdivision_time:
                    logger.warning(
                        "Ignored subdivision of a scan from sensor %s because previous "
                        "subdivision time %.9f is not before current subdivision time %.9f.",
                        sensor_id,
                        previous,
                        subdivision_time,
                    )
                    continue
                self._previous_subdivision_time[sensor_id] = subdivision_time

                subdivision = points[start:end].copy()
                subdivision["time"] -= time_to_subdivision_end
                accepted.append(
                    Subdivision(
                        time=subdivision_time,
                        points=subdivision,
                        intensities=None if intensities is None else np.asarray(intensities)[start:end].copy(),
                    )
                )
        return accepted

    def _lock_for(self, sensor_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._sensor_locks.get(sensor_id)
            if lock is None:
                lock = self._sensor_locks[sensor_id] = threading.Lock()
            return lock
