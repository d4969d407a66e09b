"""Rigid 3-D pose algebra with axis-angle rotations and a quaternion mirror.

Positions are interpolated linearly. Rotations are only ever changed through
explicit calls (`set_rotation`, `change_rotation`, `pose_fraction`); pose
interpolation and pose difference are strictly translational.
"""

import math
from typing import Optional, Tuple

from lipwalker.utils.array_utils import ArrayType, R, np, wxyz_to_xyzw
from lipwalker.utils.math_utils import wrap_to_pi

# Below this vector norm a quaternion is treated as the identity rotation.
IDENTITY_EPS = 1e-12


class Quaternion:
    """Scalar-first quaternion (w, x, y, z)."""

    def __init__(self, w: float = 1.0, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self.w = float(w)
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    @classmethod
    def from_axis_angle(
        cls, ux: float, uy: float, uz: float, angle: float
    ) -> "Quaternion":
        """Builds (cos(angle/2), axis * sin(angle/2)) from the axis exactly as given.

        The axis is not normalized, so a non-unit axis yields a non-unit quaternion.
        """
        sin_half = math.sin(angle / 2)
        return cls(math.cos(angle / 2), ux * sin_half, uy * sin_half, uz * sin_half)

    @classmethod
    def from_product(cls, q1: "Quaternion", q2: "Quaternion") -> "Quaternion":
        """Hamilton product q1 * q2, i.e. rotation q2 expressed in the frame of q1.

        Args:
            q1 (Quaternion): The current orientation.
            q2 (Quaternion): The incremental rotation, defined in the q1 frame.

        Returns:
            Quaternion: The composed quaternion.
        """
        v1 = np.array([q1.x, q1.y, q1.z])
        v2 = np.array([q2.x, q2.y, q2.z])
        w = q1.w * q2.w - float(np.dot(v1, v2))
        vec = q1.w * v2 + q2.w * v1 + np.cross(v1, v2)
        return cls(w, *vec)

    def to_axis_angle(
        self, previous_axis: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    ) -> Tuple[float, float, float, float]:
        """Converts to a canonical unit axis and an angle wrapped to (-pi, pi].

        Args:
            previous_axis (Tuple[float, float, float]): Axis returned unchanged when
                the quaternion is the identity, since its axis is undefined.

        Returns:
            Tuple[float, float, float, float]: (ux, uy, uz, angle).
        """
        vec = np.array([self.x, self.y, self.z])
        vec_norm = float(np.linalg.norm(vec))
        if vec_norm < IDENTITY_EPS:
            return (*previous_axis, 0.0)

        angle = wrap_to_pi(2 * math.atan2(vec_norm, self.w))
        axis = vec / vec_norm
        return float(axis[0]), float(axis[1]), float(axis[2]), angle

    def as_array(self) -> ArrayType:
        return np.array([self.w, self.x, self.y, self.z], dtype=np.float64)

    def __repr__(self) -> str:
        return f"Quaternion(w={self.w}, x={self.x}, y={self.y}, z={self.z})"


class Pose:
    """A rigid transform: position (x, y, z) plus an axis-angle rotation.

    The rotation axis is stored as supplied by the caller. The quaternion mirror
    is recomputed on every rotation change and never re-normalized.
    """

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        """Creates a pose at (x, y, z) with a zero rotation about an undefined axis.

        Args:
            x (float): Position along x.
            y (float): Position along y.
            z (float): Position along z.
        """
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self._axis = (0.0, 0.0, 0.0)
        self._angle = 0.0
        self._quaternion = Quaternion()

    @classmethod
    def difference(cls, initial_pose: "Pose", final_pose: "Pose") -> "Pose":
        """Creates the translation from `initial_pose` to `final_pose`.

        Only the position is differenced. The result carries a zero rotation;
        use `change_rotation` when a rotational delta is needed.
        """
        x1, y1, z1 = initial_pose.get_position()
        x2, y2, z2 = final_pose.get_position()
        return cls(x2 - x1, y2 - y1, z2 - z1)

    @classmethod
    def interpolated(
        cls, initial_pose: "Pose", final_pose: "Pose", factor: float
    ) -> "Pose":
        """Creates an intermediate pose, 0 for initial, 1 for final, other for halfways."""
        pose = cls()
        pose.pose_interpolation(initial_pose, final_pose, factor)
        return pose

    def pose_interpolation(
        self, initial_pose: "Pose", final_pose: "Pose", factor: float
    ) -> None:
        """Overwrites this position with initial + factor * (final - initial).

        The factor is not clamped, so values outside [0, 1] extrapolate. The
        rotation of this pose is left untouched.

        Args:
            initial_pose (Pose): Pose returned for factor 0.
            final_pose (Pose): Pose returned for factor 1.
            factor (float): Interpolation ratio.
        """
        x1, y1, z1 = initial_pose.get_position()
        x2, y2, z2 = final_pose.get_position()
        self.x = x1 + (x2 - x1) * factor
        self.y = y1 + (y2 - y1) * factor
        self.z = z1 + (z2 - z1) * factor

    def pose_fraction(self, factor: float) -> "Pose":
        """Returns a pose with position and rotation angle scaled by `factor`.

        The axis is kept, so this expresses a fraction of this transform rather
        than an interpolation between two orientations.
        """
        fraction = Pose(self.x * factor, self.y * factor, self.z * factor)
        fraction.set_rotation(*self._axis, self._angle * factor)
        return fraction

    def get_position(self) -> Tuple[float, float, float]:
        return self.x, self.y, self.z

    def set_position(self, x: float, y: float, z: float) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def change_position(self, dx: float, dy: float, dz: float) -> None:
        """Adds an offset to the current position."""
        self.x += dx
        self.y += dy
        self.z += dz

    @property
    def axis(self) -> Tuple[float, float, float]:
        return self._axis

    @property
    def angle(self) -> float:
        return self._angle

    @property
    def quaternion(self) -> ArrayType:
        """The quaternion mirror of the rotation, scalar first."""
        return self._quaternion.as_array()

    def get_rotation(self) -> Tuple[float, float, float, float]:
        return (*self._axis, self._angle)

    def set_rotation(
        self, axis_i: float, axis_j: float, axis_k: float, angle: float
    ) -> None:
        """Overwrites the rotation and recomputes the quaternion mirror.

        Args:
            axis_i (float): Rotation axis x component, used as given.
            axis_j (float): Rotation axis y component, used as given.
            axis_k (float): Rotation axis z component, used as given.
            angle (float): Rotation angle in radians.
        """
        self._axis = (float(axis_i), float(axis_j), float(axis_k))
        self._angle = float(angle)
        self._quaternion = Quaternion.from_axis_angle(axis_i, axis_j, axis_k, angle)

    def change_rotation(self, u2x: float, u2y: float, u2z: float, angle2: float) -> None:
        """Composes an incremental rotation defined in this pose's local frame.

        The new orientation is q_current * q_delta, converted back to a unit axis
        and an angle in (-pi, pi]. A zero incremental angle is a no-op, and an
        identity result keeps the previous axis with a zero angle.

        Args:
            u2x (float): Incremental rotation axis x component, local frame.
            u2y (float): Incremental rotation axis y component, local frame.
            u2z (float): Incremental rotation axis z component, local frame.
            angle2 (float): Incremental rotation angle in radians.
        """
        if angle2 == 0:
            return

        delta = Quaternion.from_axis_angle(u2x, u2y, u2z, angle2)
        product = Quaternion.from_product(self._quaternion, delta)
        self.set_rotation(*product.to_axis_angle(previous_axis=self._axis))

    def change_pose(self, variation: "Pose") -> None:
        """Offsets the position and composes the rotation of `variation`."""
        self.change_position(*variation.get_position())
        self.change_rotation(*variation.get_rotation())

    def as_rotation(self) -> R:
        """The rotation as a scipy `Rotation`; identity for a zero angle."""
        if self._angle == 0:
            return R.identity()
        return R.from_quat(wxyz_to_xyzw(self.quaternion))

    def copy(self, position: Optional[Tuple[float, float, float]] = None) -> "Pose":
        """Returns an independent copy, optionally moved to `position`."""
        pose = Pose(*(position if position is not None else self.get_position()))
        pose.set_rotation(*self._axis, self._angle)
        return pose

    def __repr__(self) -> str:
        ux, uy, uz = self._axis
        return (
            f"Pose(x={self.x}, y={self.y}, z={self.z}, "
            f"axis=({ux}, {uy}, {uz}), angle={self._angle})"
        )
