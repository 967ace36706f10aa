"""
frame_id.py

Canonicalisation of coordinate-frame identifiers.

tf2 frame ids must not start with ``/``; older drivers still publish ids
such as ``/laser``.  The bridge strips that single leading separator before
every transform lookup.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

_SEPARATOR = "/"


def check_no_leading_slash(frame_id: str) -> str:
    """Return *frame_id* with exactly one leading ``/`` removed.

    An id that is only ``/`` is returned unchanged and reported as an error,
    since stripping it would leave an empty, invalid id.
    """
    if not frame_id.startswith(_SEPARATOR):
        return frame_id
    if len(frame_id) == 1:
        logger.error(
            "The frame_id %r should not start with a /. See 1.7 in "
            "http://wiki.ros.org/tf2/Migration.",
            frame_id,
        )
        return frame_id
    logger.debug("Stripping leading / from frame_id %r.", frame_id)
    return frame_id[1:]
