"""Tests for landmark list conversion."""

import numpy as np

from sensor_bridge.landmark import landmark_list_to_landmark_data
from sensor_bridge.messages import Header, LandmarkEntry, LandmarkList, Pose


class TestLandmarkListToLandmarkData:
    def test_entries_copied_in_order(self):
        msg = LandmarkList(
            header=Header(stamp=4.0, frame_id="base_link"),
            landmarks=[
                LandmarkEntry("tag_1", Pose(position=[1.0, 2.0, 3.0]), 10.0, 5.0),
                LandmarkEntry("tag_2", Pose(orientation=[0.0, 0.0, 0.0, 1.0]), 1, 2),
            ],
        )
        data = landmark_list_to_landmark_data(msg)
        assert data.time == 4.0
        assert [o.id for o in data.landmark_observations] == ["tag_1", "tag_2"]

        first, second = data.landmark_observations
        np.testing.assert_allclose(first.landmark_to_tracking_transform.translation, [1.0, 2.0, 3.0])
        assert first.translation_weight == 10.0
        assert first.rotation_weight == 5.0
        np.testing.assert_allclose(second.landmark_to_tracking_transform.rotation, np.diag([-1.0, -1.0, 1.0]), atol=1e-12)
        assert isinstance(second.translation_weight, float)

    def test_empty_list(self):
        data = landmark_list_to_landmark_data(LandmarkList(header=Header(stamp=1.0)))
        assert data.time == 1.0
        assert data.landmark_observations == []
