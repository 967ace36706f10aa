"""Tests for the transform module."""

import math

import numpy as np
import pytest

from sensor_bridge.transform import (
    Transform,
    quaternion_slerp,
    quaternion_to_rotation_matrix,
)


def _quat_z(angle: float) -> list:
    return [math.cos(angle / 2), 0.0, 0.0, math.sin(angle / 2)]


# ---------------------------------------------------------------------------
# Transform construction
# ---------------------------------------------------------------------------


class TestTransformConstruction:
    def test_identity_default(self):
        T = Transform()
        np.testing.assert_allclose(T.matrix, np.eye(4), atol=1e-10)

    def test_identity_classmethod(self):
        T = Transform.identity()
        np.testing.assert_allclose(T.matrix, np.eye(4), atol=1e-10)

    def test_from_translation(self):
        T = Transform.from_translation([1.0, 2.0, 3.0])
        np.testing.assert_allclose(T.translation, [1.0, 2.0, 3.0], atol=1e-10)
        np.testing.assert_allclose(T.rotation, np.eye(3), atol=1e-10)

    def test_from_quaternion_90_z(self):
        T = Transform.from_quaternion(_quat_z(math.pi / 2))
        x_rotated = T.rotation @ np.array([1.0, 0.0, 0.0])
        np.testing.assert_allclose(x_rotated, [0.0, 1.0, 0.0], atol=1e-10)

    def test_wrong_shape_raises(self):
        with pytest.raises(ValueError, match="4×4"):
            Transform(np.eye(3))

    def test_from_quaternion_normalises(self):
        T = Transform.from_quaternion([2.0, 0.0, 0.0, 0.0])
        np.testing.assert_allclose(T.rotation, np.eye(3), atol=1e-10)


# ---------------------------------------------------------------------------
# Applying transforms
# ---------------------------------------------------------------------------


class TestTransformApply:
    def test_apply_to_point_rotation_and_translation(self):
        T = Transform.from_quaternion(_quat_z(math.pi / 2), [1.0, 0.0, 0.0])
        result = T.apply_to_point([1.0, 0.0, 0.0])
        np.testing.assert_allclose(result, [1.0, 1.0, 0.0], atol=1e-10)

    def test_rotate_ignores_translation(self):
        T = Transform.from_quaternion(_quat_z(math.pi / 2), [5.0, 5.0, 5.0])
        np.testing.assert_allclose(T.rotate([1.0, 0.0, 0.0]), [0.0, 1.0, 0.0], atol=1e-10)

    def test_apply_to_points_batch(self):
        T = Transform.from_translation([10.0, 0.0, 0.0])
        pts = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])
        result = T.apply_to_points(pts)
        assert result.shape == (2, 3)
        np.testing.assert_allclose(result[1], [11.0, 1.0, 1.0], atol=1e-10)

    def test_apply_to_points_float32(self):
        T = Transform.from_translation([1.0, 2.0, 3.0])
        result = T.apply_to_points(np.zeros((4, 3)), dtype=np.float32)
        assert result.dtype == np.float32
        np.testing.assert_allclose(result[0], [1.0, 2.0, 3.0], atol=1e-6)

    def test_apply_to_point_wrong_size_raises(self):
        with pytest.raises(ValueError):
            Transform.identity().apply_to_point([1.0, 2.0])

    def test_apply_to_points_wrong_shape_raises(self):
        with pytest.raises(ValueError):
            Transform.identity().apply_to_points(np.zeros((3, 4)))


# ---------------------------------------------------------------------------
# Composition and inverse
# ---------------------------------------------------------------------------


class TestTransformComposition:
    def test_compose_with_inverse_is_identity(self):
        T = Transform.from_quaternion(_quat_z(0.3), [1.0, 2.0, 3.0])
        np.testing.assert_allclose((T @ T.inverse()).matrix, np.eye(4), atol=1e-10)

    def test_inverse_matches_matrix_inverse(self):
        T = Transform.from_quaternion([0.9, 0.1, -0.3, 0.2], [0.5, -1.0, 2.0])
        np.testing.assert_allclose(T.inverse().matrix, np.linalg.inv(T.matrix), atol=1e-10)

    def test_matmul_non_transform_returns_notimplemented(self):
        assert Transform.identity().__matmul__(np.eye(4)) is NotImplemented

    def test_equality(self):
        assert Transform.from_translation([1.0, 2.0, 3.0]) == Transform.from_translation([1.0, 2.0, 3.0])
        assert Transform.from_translation([1.0, 2.0, 3.0]) != Transform.from_translation([4.0, 5.0, 6.0])


# ---------------------------------------------------------------------------
# Quaternion helpers
# ---------------------------------------------------------------------------


class TestQuaternionHelpers:
    def test_zero_quaternion_raises(self):
        with pytest.raises(ValueError):
            quaternion_to_rotation_matrix([0.0, 0.0, 0.0, 0.0])

    def test_quaternion_to_rotation_matrix_180_x(self):
        R = quaternion_to_rotation_matrix([0.0, 1.0, 0.0, 0.0])
        np.testing.assert_allclose(R, np.diag([1.0, -1.0, -1.0]), atol=1e-10)

    def test_slerp_halfway(self):
        q = quaternion_slerp(_quat_z(0.0), _quat_z(math.pi / 2), 0.5)
        np.testing.assert_allclose(q, _quat_z(math.pi / 4), atol=1e-10)

    def test_slerp_endpoints(self):
        q0, q1 = _quat_z(0.2), _quat_z(1.2)
        np.testing.assert_allclose(quaternion_slerp(q0, q1, 0.0), q0, atol=1e-10)
        np.testing.assert_allclose(quaternion_slerp(q0, q1, 1.0), q1, atol=1e-10)

    def test_slerp_takes_shorter_arc(self):
        # -q1 is the same rotation as q1
        q0, q1 = _quat_z(0.0), _quat_z(math.pi / 2)
        q = quaternion_slerp(q0, [-v for v in q1], 0.5)
        np.testing.assert_allclose(q, _quat_z(math.pi / 4), atol=1e-10)

    def test_slerp_result_has_non_negative_w(self):
        q = quaternion_slerp([-1.0, 0.0, 0.0, 0.0], _quat_z(0.2), 0.5)
        assert q[0] >= 0.0
        np.testing.assert_allclose(np.linalg.norm(q), 1.0, atol=1e-12)
