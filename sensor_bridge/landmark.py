"""
landmark.py

Conversion of landmark lists.  Landmark poses already are tracking-frame
poses, so no transform lookup happens here.
"""

from __future__ import annotations

from sensor_bridge.messages import LandmarkList
from sensor_bridge.sensor_data import LandmarkData, LandmarkObservation


def landmark_list_to_landmark_data(msg: LandmarkList) -> LandmarkData:
    return LandmarkData(
        time=msg.header.stamp,
        landmark_observations=[
            LandmarkObservation(
                id=entry.id,
                landmark_to_tracking_transform=entry.tracking_from_landmark_transform.transform,
                translation_weight=float(entry.translation_weight),
                rotation_weight=float(entry.rotation_weight),
            )
            for entry in msg.landmarks
        ],
    )
