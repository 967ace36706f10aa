"""
transform.py

Rigid-body transform wrapping a 4×4 homogeneous matrix, with the operations
the bridge needs to move poses, vectors and point clouds into the tracking
frame.

Quaternions are stored in ``[w, x, y, z]`` order throughout the package.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation, Slerp


class Transform:
    """Wraps a 4×4 homogeneous rigid transformation matrix.

    Supports composition (``@``), inversion and application to points,
    vectors and whole point clouds.

    Args:
        matrix: A 4×4 array-like.  Defaults to the identity transform.
    """

    def __init__(self, matrix: np.ndarray | None = None) -> None:
        if matrix is None:
            self._matrix = np.eye(4, dtype=float)
        else:
            self._matrix = np.asarray(matrix, dtype=float)
            if self._matrix.shape != (4, 4):
                raise ValueError(f"Transform matrix must be 4×4, got {self._matrix.shape}.")

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def identity(cls) -> "Transform":
        """Return the identity transform."""
        return cls(np.eye(4, dtype=float))

    @classmethod
    def from_translation(cls, translation: Sequence[float]) -> "Transform":
        """Build a pure-translation transform."""
        T = np.eye(4, dtype=float)
        T[:3, 3] = translation
        return cls(T)

    @classmethod
    def from_rotation_matrix(cls, rotation: np.ndarray, translation: Sequence[float] | None = None) -> "Transform":
        """Build a transform from a 3×3 rotation matrix and optional translation."""
        T = np.eye(4, dtype=float)
        T[:3, :3] = rotation
        if translation is not None:
            T[:3, 3] = translation
        return cls(T)

    @classmethod
    def from_quaternion(cls, quaternion: Sequence[float], translation: Sequence[float] | None = None) -> "Transform":
        """Build a transform from a quaternion [w, x, y, z] and optional translation."""
        R = quaternion_to_rotation_matrix(quaternion)
        return cls.from_rotation_matrix(R, translation)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def matrix(self) -> np.ndarray:
        """The underlying 4×4 numpy array."""
        return self._matrix

    @property
    def rotation(self) -> np.ndarray:
        """The 3×3 rotation sub-matrix."""
        return self._matrix[:3, :3]

    @property
    def translation(self) -> np.ndarray:
        """The 3-element translation vector."""
        return self._matrix[:3, 3]

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def inverse(self) -> "Transform":
        """Return the inverse of this rigid transform.

        Uses the closed form ``[Rᵀ, -Rᵀt]`` rather than a general matrix
        inverse.
        """
        R_t = self.rotation.T
        return Transform.from_rotation_matrix(R_t, -R_t @ self.translation)

    def __matmul__(self, other: "Transform") -> "Transform":
        """Compose two transforms: ``self @ other``."""
        if isinstance(other, Transform):
            return Transform(self._matrix @ other._matrix)
        return NotImplemented

    # ------------------------------------------------------------------
    # Applying to points and vectors
    # ------------------------------------------------------------------

    def apply_to_point(self, point: Sequence[float]) -> np.ndarray:
        """Transform a single 3-D point (rotation and translation).

        Returns:
            A (3,) float64 array with the transformed coordinates.
        """
        p = np.asarray(point, dtype=float)
        if p.shape != (3,):
            raise ValueError(f"Point must have length 3, got {p.shape}.")
        return self.rotation @ p + self.translation

    def rotate(self, vector: Sequence[float]) -> np.ndarray:
        """Rotate a free vector, ignoring the translation part."""
        v = np.asarray(vector, dtype=float)
        if v.shape != (3,):
            raise ValueError(f"Vector must have length 3, got {v.shape}.")
        return self.rotation @ v

    def apply_to_points(self, points: np.ndarray, dtype: np.dtype = np.float64) -> np.ndarray:
        """Transform an ``(N, 3)`` array of points.

        Args:
            points: Shape ``(N, 3)``.
            dtype: Precision of the arithmetic and of the result.  Point
                clouds are transformed in float32.

        Returns:
            Shape ``(N, 3)`` array of transformed points.
        """
        pts = np.asarray(points, dtype=dtype)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise ValueError(f"Points array must have shape (N, 3), got {pts.shape}.")
        R = self.rotation.astype(dtype)
        t = self.translation.astype(dtype)
        return pts @ R.T + t

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return np.allclose(self._matrix, other._matrix)

    def __repr__(self) -> str:
        return f"Transform(\n{self._matrix}\n)"


# ---------------------------------------------------------------------------
# Quaternion helpers
# ---------------------------------------------------------------------------


def quaternion_to_rotation_matrix(q: Sequence[float]) -> np.ndarray:
    """Convert a quaternion [w, x, y, z] to a 3×3 rotation matrix.

    The quaternion is normalised first.
    """
    w, x, y, z = (float(v) for v in q)
    norm = np.sqrt(w * w + x * x + y * y + z * z)
    if norm < 1e-10:
        raise ValueError("Quaternion has near-zero norm; cannot normalise.")
    w, x, y, z = w / norm, x / norm, y / norm, z / norm

    return np.array([
        [1 - 2 * (y * y + z * z),     2 * (x * y - w * z),     2 * (x * z + w * y)],
        [    2 * (x * y + w * z), 1 - 2 * (x * x + z * z),     2 * (y * z - w * x)],
        [    2 * (x * z - w * y),     2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ], dtype=float)


def quaternion_slerp(q0: Sequence[float], q1: Sequence[float], fraction: float) -> np.ndarray:
    """Spherical linear interpolation between two [w, x, y, z] quaternions.

    Follows the shorter arc and returns a unit quaternion with ``w >= 0``.
    """
    w0, x0, y0, z0 = (float(v) for v in q0)
    w1, x1, y1, z1 = (float(v) for v in q1)
    # scipy orders quaternions [x, y, z, w]
    key_rotations = Rotation.from_quat([[x0, y0, z0, w0], [x1, y1, z1, w1]])
    x, y, z, w = Slerp([0.0, 1.0], key_rotations)([fraction]).as_quat()[0]
    q = np.array([w, x, y, z], dtype=float)
    return -q if q[0] < 0.0 else q
