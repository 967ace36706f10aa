"""
transform_buffer.py

Time-indexed store of rigid transforms between named frames.

This is an in-process stand-in for a tf2 buffer.  The bridge only relies on
the :class:`TransformProvider` protocol, so any object with the same two
methods (for example an adapter around a real tf2 buffer) can be used
instead.

Each ``(target_frame, source_frame)`` pair holds either a single static
transform or a time-ordered list of :class:`StampedTransform` samples.
Lookups between two samples interpolate the translation linearly and the
rotation spherically.  A lookup newer than the latest sample waits on a
condition variable, up to the requested timeout, for newer data to arrive.
"""

from __future__ import annotations

import bisect
import math
import threading
import time as _time
from dataclasses import dataclass, field
from typing import Dict, List, Protocol, Tuple

import numpy as np

from sensor_bridge.transform import Transform, quaternion_slerp


class TransformLookupError(LookupError):
    """Raised when a transform is unknown or not available at the requested time."""


class TransformProvider(Protocol):
    """Collaborator contract consumed by :class:`~sensor_bridge.tf_bridge.TfBridge`."""

    def lookup_transform(
        self, target_frame: str, source_frame: str, time: float, timeout: float = 0.0
    ) -> Transform:
        """Return the transform mapping *source_frame* coordinates into *target_frame*."""
        ...

    def latest_common_time(self, target_frame: str, source_frame: str) -> float:
        """Return the newest time at which the transform is known."""
        ...


# ---------------------------------------------------------------------------
# StampedTransform
# ---------------------------------------------------------------------------


@dataclass
class StampedTransform:
    """Transform source → target valid at *timestamp*.

    Attributes:
        timestamp: Time in seconds.
        translation: ``[x, y, z]`` in metres.
        rotation: Unit quaternion ``[w, x, y, z]``.
    """

    timestamp: float
    translation: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    rotation: List[float] = field(default_factory=lambda: [1.0, 0.0, 0.0, 0.0])

    @property
    def transform(self) -> Transform:
        return Transform.from_quaternion(self.rotation, self.translation)

    def to_dict(self) -> dict:
        return {
            "timestamp": float(self.timestamp),
            "translation": [float(v) for v in self.translation],
            "rotation": {
                "quaternion": [float(v) for v in self.rotation],
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StampedTransform":
        rotation_data = data.get("rotation", {})
        return cls(
            timestamp=float(data.get("timestamp", 0.0)),
            translation=[float(v) for v in data.get("translation", [0.0, 0.0, 0.0])],
            rotation=[float(v) for v in rotation_data.get("quaternion", [1.0, 0.0, 0.0, 0.0])],
        )


# ---------------------------------------------------------------------------
# TransformBuffer
# ---------------------------------------------------------------------------


class TransformBuffer:
    """Thread-safe, time-indexed transform store.

    Args:
        cache_time: Seconds of dynamic history kept per frame pair, measured
            back from the newest sample (default ``10.0``).

    Example::

        buffer = TransformBuffer()
        buffer.set_static_transform("base_link", "laser", StampedTransform(0.0, [0.2, 0.0, 0.1]))
        T = buffer.lookup_transform("base_link", "laser", time=12.5)
    """

    def __init__(self, cache_time: float = 10.0) -> None:
        if cache_time <= 0:
            raise ValueError(f"cache_time must be positive, got {cache_time}")
        self._cache_time = float(cache_time)
        self._static: Dict[Tuple[str, str], Transform] = {}
        self._dynamic: Dict[Tuple[str, str], List[StampedTransform]] = {}
        self._condition = threading.Condition()

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def set_static_transform(self, target_frame: str, source_frame: str, stamped: StampedTransform) -> None:
        """Register a transform that is valid at all times."""
        with self._condition:
            self._static[(target_frame, source_frame)] = stamped.transform
            self._condition.notify_all()

    def set_transform(self, target_frame: str, source_frame: str, stamped: StampedTransform) -> None:
        """Add a time-stamped sample for the pair, keeping samples time-ordered."""
        with self._condition:
            samples = self._dynamic.setdefault((target_frame, source_frame), [])
            timestamps = [s.timestamp for s in samples]
            samples.insert(bisect.bisect_right(timestamps, stamped.timestamp), stamped)
            horizon = samples[-1].timestamp - self._cache_time
            while len(samples) > 2 and samples[1].timestamp < horizon:
                samples.pop(0)
            self._condition.notify_all()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def cache_time(self) -> float:
        return self._cache_time

    def latest_common_time(self, target_frame: str, source_frame: str) -> float:
        """Return the newest time the pair is known at.

        Static and identity pairs are known at all times (``inf``).

        Raises:
            TransformLookupError: If nothing is known about the pair.
        """
        with self._condition:
            return self._latest_time(target_frame, source_frame)

    def lookup_transform(
        self, target_frame: str, source_frame: str, time: float, timeout: float = 0.0
    ) -> Transform:
        """Return the source → target transform at *time*.

        Blocks up to *timeout* seconds when *time* is newer than every stored
        sample.

        Raises:
            TransformLookupError: If the pair is unknown or *time* lies outside
                the stored interval once the timeout has elapsed.
        """
        deadline = _time.monotonic() + max(timeout, 0.0)
        with self._condition:
            while True:
                try:
                    latest = self._latest_time(target_frame, source_frame)
                except TransformLookupError:
                    latest = -math.inf
                if latest >= time:
                    break
                remaining = deadline - _time.monotonic()
                if remaining <= 0:
                    break
                self._condition.wait(remaining)
            return self._lookup_locked(target_frame, source_frame, time)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_static_transforms(
        cls, target_frame: str, transforms: Dict[str, StampedTransform], cache_time: float = 10.0
    ) -> "TransformBuffer":
        """Build a buffer holding fixed extrinsics ``frame → target_frame``."""
        buffer = cls(cache_time=cache_time)
        for source_frame, stamped in transforms.items():
            buffer.set_static_transform(target_frame, source_frame, stamped)
        return buffer

    # ------------------------------------------------------------------
    # Private helpers (callers hold the condition)
    # ------------------------------------------------------------------

    def _latest_time(self, target_frame: str, source_frame: str) -> float:
        if target_frame == source_frame:
            return math.inf
        for key in ((target_frame, source_frame), (source_frame, target_frame)):
            if key in self._static:
                return math.inf
            if self._dynamic.get(key):
                return self._dynamic[key][-1].timestamp
        raise TransformLookupError(
            f"No transform between '{source_frame}' and '{target_frame}' is known."
        )

    def _lookup_locked(self, target_frame: str, source_frame: str, time: float) -> Transform:
        if target_frame == source_frame:
            return Transform.identity()
        if (target_frame, source_frame) in self._static:
            return self._static[(target_frame, source_frame)]
        if (source_frame, target_frame) in self._static:
            return self._static[(source_frame, target_frame)].inverse()
        if self._dynamic.get((target_frame, source_frame)):
            return _interpolate(self._dynamic[(target_frame, source_frame)], time, source_frame, target_frame)
        if self._dynamic.get((source_frame, target_frame)):
            return _interpolate(self._dynamic[(source_frame, target_frame)], time, target_frame, source_frame).inverse()
        raise TransformLookupError(
            f"No transform between '{source_frame}' and '{target_frame}' is known."
        )


def _interpolate(samples: List[StampedTransform], time: float, source_frame: str, target_frame: str) -> Transform:
    """Interpolate a time-ordered sample list at *time*."""
    first, last = samples[0].timestamp, samples[-1].timestamp
    if time < first or time > last:
        raise TransformLookupError(
            f"Lookup of '{source_frame}' -> '{target_frame}' at {time:.6f} is outside "
            f"the buffered interval [{first:.6f}, {last:.6f}]."
        )
    timestamps = [s.timestamp for s in samples]
    index = bisect.bisect_left(timestamps, time)
    if timestamps[index] == time:
        return samples[index].transform
    before, after = samples[index - 1], samples[index]
    fraction = (time - before.timestamp) / (after.timestamp - before.timestamp)
    translation = (1.0 - fraction) * np.asarray(before.translation, dtype=float) + fraction * np.asarray(
        after.translation, dtype=float
    )
    rotation = quaternion_slerp(before.rotation, after.rotation, fraction)
    return Transform.from_quaternion(rotation, translation)
