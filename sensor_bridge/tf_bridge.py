"""
tf_bridge.py

Lookup of sensor → tracking-frame transforms at measurement time.
"""

from __future__ import annotations

import logging
from typing import Optional

from sensor_bridge.transform import Transform
from sensor_bridge.transform_buffer import TransformLookupError, TransformProvider

logger = logging.getLogger(__name__)


class TfBridge:
    """Looks up transforms into the tracking frame with a bounded timeout.

    Args:
        tracking_frame: Name of the frame every measurement is expressed in.
        lookup_transform_timeout_sec: Upper bound on how long a lookup may
            block waiting for transform data.
        provider: The transform source.
    """

    def __init__(
        self,
        tracking_frame: str,
        lookup_transform_timeout_sec: float,
        provider: TransformProvider,
    ) -> None:
        if lookup_transform_timeout_sec < 0:
            raise ValueError(
                f"lookup_transform_timeout_sec must be non-negative, got {lookup_transform_timeout_sec}"
            )
        self._tracking_frame = tracking_frame
        self._timeout = float(lookup_transform_timeout_sec)
        self._provider = provider

    @property
    def tracking_frame(self) -> str:
        return self._tracking_frame

    def lookup_to_tracking(self, time: float, frame_id: str) -> Optional[Transform]:
        """Return the *frame_id* → tracking transform at *time*, or ``None``.

        When the provider already holds data at or after *time* the lookup
        does not wait; otherwise it waits up to the configured timeout.  A
        miss is logged and reported as ``None``; it is never retried.
        """
        timeout = self._timeout
        try:
            if self._provider.latest_common_time(self._tracking_frame, frame_id) >= time:
                timeout = 0.0
        except TransformLookupError:
            # Unknown pair so far; it may still show up within the timeout.
            pass
        try:
            return self._provider.lookup_transform(self._tracking_frame, frame_id, time, timeout)
        except TransformLookupError as exc:
            logger.warning("%s", exc)
        return None
