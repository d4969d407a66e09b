import math

import numpy as np
import pytest
from scipy.spatial.transform import Rotation as R

from lipwalker.kinematics.pose import Pose, Quaternion


def test_pose_from_position_has_zero_rotation():
    pose = Pose(1.0, 2.0, 3.0)
    assert pose.get_position() == (1.0, 2.0, 3.0)
    assert pose.angle == 0.0
    np.testing.assert_array_equal(pose.quaternion, [1.0, 0.0, 0.0, 0.0])


def test_difference_is_translational():
    initial = Pose(1.0, 1.0, 1.0)
    final = Pose(3.0, 0.0, -1.0)
    final.set_rotation(0, 0, 1, 0.7)

    delta = Pose.difference(initial, final)

    assert delta.get_position() == (2.0, -1.0, -2.0)
    assert delta.angle == 0.0


@pytest.mark.parametrize("factor", [-1.0, 0.0, 0.3, 1.0, 2.5])
def test_interpolation_between_equal_poses_is_fixed_point(factor):
    pose = Pose(0.4, -1.2, 3.3)
    assert Pose.interpolated(pose, pose, factor).get_position() == pose.get_position()


def test_interpolation_endpoints_are_exact():
    initial = Pose(0.1, 0.2, 0.3)
    final = Pose(-4.0, 5.5, 1.0)
    assert Pose.interpolated(initial, final, 0.0).get_position() == (0.1, 0.2, 0.3)
    assert Pose.interpolated(initial, final, 1.0).get_position() == pytest.approx(
        (-4.0, 5.5, 1.0)
    )


def test_interpolation_extrapolates_and_keeps_rotation():
    pose = Pose()
    pose.set_rotation(1, 0, 0, 0.5)
    pose.pose_interpolation(Pose(0, 0, 0), Pose(1, 2, 0), 2.0)

    assert pose.get_position() == (2.0, 4.0, 0.0)
    assert pose.get_rotation() == (1.0, 0.0, 0.0, 0.5)


def test_pose_fraction_scales_position_and_angle():
    pose = Pose(2.0, -4.0, 6.0)
    pose.set_rotation(0, 1, 0, 1.0)

    fraction = pose.pose_fraction(0.25)

    assert fraction.get_position() == (0.5, -1.0, 1.5)
    assert fraction.get_rotation() == (0.0, 1.0, 0.0, 0.25)


def test_set_rotation_keeps_axis_as_given():
    pose = Pose()
    pose.set_rotation(0, 0, 2, math.pi)

    assert pose.axis == (0.0, 0.0, 2.0)
    np.testing.assert_allclose(pose.quaternion, [0.0, 0.0, 0.0, 2.0], atol=1e-12)


def test_change_position_offsets():
    pose = Pose(1, 1, 1)
    pose.change_position(0.5, -1, 2)
    assert pose.get_position() == (1.5, 0.0, 3.0)


def test_change_rotation_accumulates_about_same_axis():
    pose = Pose()
    pose.set_rotation(0, 0, 1, math.pi / 2)
    pose.change_rotation(0, 0, 1, math.pi / 2)

    np.testing.assert_allclose(
        pose.as_rotation().as_matrix(),
        R.from_rotvec([0, 0, math.pi]).as_matrix(),
        atol=1e-9,
    )
    assert abs(pose.angle) == pytest.approx(math.pi)
    assert -math.pi < pose.angle <= math.pi


def test_change_rotation_wraps_angle():
    pose = Pose()
    pose.set_rotation(0, 0, 1, math.pi)
    pose.change_rotation(0, 0, 1, math.pi / 2)

    ux, uy, uz, angle = pose.get_rotation()
    assert (ux, uy, uz) == pytest.approx((0.0, 0.0, 1.0))
    assert angle == pytest.approx(-math.pi / 2)


def test_change_rotation_is_in_local_frame():
    pose = Pose()
    pose.set_rotation(0, 0, 1, math.pi / 2)
    pose.change_rotation(1, 0, 0, math.pi / 2)

    expected = R.from_rotvec([0, 0, math.pi / 2]) * R.from_rotvec([math.pi / 2, 0, 0])
    np.testing.assert_allclose(
        pose.as_rotation().as_matrix(), expected.as_matrix(), atol=1e-9
    )
    assert -math.pi < pose.angle <= math.pi


def test_change_rotation_with_zero_angle_is_noop():
    pose = Pose()
    pose.set_rotation(0, 0, 2, 0.5)
    pose.change_rotation(1, 0, 0, 0.0)

    assert pose.get_rotation() == (0.0, 0.0, 2.0, 0.5)


def test_change_rotation_to_identity_keeps_previous_axis():
    pose = Pose()
    pose.set_rotation(0, 1, 0, 0.5)
    pose.change_rotation(0, 1, 0, -0.5)

    ux, uy, uz, angle = pose.get_rotation()
    assert (ux, uy, uz) == (0.0, 1.0, 0.0)
    assert angle == 0.0


def test_change_pose_composes_translation_and_rotation():
    pose = Pose(1, 0, 0)
    variation = Pose(0, 2, 0)
    variation.set_rotation(0, 0, 1, 0.3)

    pose.change_pose(variation)

    assert pose.get_position() == (1.0, 2.0, 0.0)
    assert pose.angle == pytest.approx(0.3)
    assert pose.axis == pytest.approx((0.0, 0.0, 1.0))


def test_copy_is_independent():
    pose = Pose(1, 2, 3)
    pose.set_rotation(1, 0, 0, 0.2)
    clone = pose.copy()
    clone.change_position(1, 1, 1)
    clone.set_rotation(0, 1, 0, 0.4)

    assert pose.get_position() == (1.0, 2.0, 3.0)
    assert pose.get_rotation() == (1.0, 0.0, 0.0, 0.2)


def test_quaternion_axis_angle_conversion():
    q = Quaternion.from_axis_angle(0, 1, 0, 1.2)
    ux, uy, uz, angle = q.to_axis_angle()
    assert (ux, uy, uz) == pytest.approx((0.0, 1.0, 0.0))
    assert angle == pytest.approx(1.2)


def test_quaternion_identity_returns_previous_axis():
    assert Quaternion().to_axis_angle((0.0, 0.0, 1.0)) == (0.0, 0.0, 1.0, 0.0)


def test_quaternion_product_matches_scipy():
    q1 = Quaternion.from_axis_angle(1, 0, 0, 0.4)
    q2 = Quaternion.from_axis_angle(0, 0, 1, -1.1)
    product = Quaternion.from_product(q1, q2)

    expected = R.from_rotvec([0.4, 0, 0]) * R.from_rotvec([0, 0, -1.1])
    xyzw = expected.as_quat()
    wxyz = np.array([xyzw[3], *xyzw[:3]])
    if wxyz[0] * product.w < 0:
        wxyz = -wxyz
    np.testing.assert_allclose(product.as_array(), wxyz, atol=1e-12)
