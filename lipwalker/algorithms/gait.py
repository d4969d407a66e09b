"""Footstep bookkeeping shared by gait generators.

A gait owns both foot poses, the current support phase and one waypoint
trajectory per foot. Half steps swing the non-support foot forward by the
configured step length and hand the support over to it.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Tuple

from lipwalker.algorithms.lipm_config import LipmConfig
from lipwalker.errors import GaitPhaseError
from lipwalker.kinematics.pose import Pose
from lipwalker.reference.trajectory import SpaceTrajectory


class SupportPhase(Enum):
    RIGHT_SUPPORT = "right_support"
    LEFT_SUPPORT = "left_support"


class Gait(ABC):
    """Abstract class for gaits driven by a right/left support state machine."""

    def __init__(
        self,
        initial_right_foot: Pose,
        initial_left_foot: Pose,
        step_config: LipmConfig.StepConfig,
        trajectory_config: LipmConfig.TrajectoryConfig,
    ):
        """Initializes the feet, the support phase and the foot trajectories.

        The foremost foot along x starts as the support foot; on a tie the right
        foot supports.

        Args:
            initial_right_foot (Pose): Initial right foot pose.
            initial_left_foot (Pose): Initial left foot pose.
            step_config (LipmConfig.StepConfig): Step length, swing height and timing.
            trajectory_config (LipmConfig.TrajectoryConfig): Default timing of the foot trajectories.
        """
        self.right_foot = initial_right_foot.copy()
        self.left_foot = initial_left_foot.copy()
        self.step_length = step_config.step_length
        self.step_height = step_config.step_height
        self.swing_time = step_config.swing_time

        if self.left_foot.x > self.right_foot.x:
            self.support_phase = SupportPhase.LEFT_SUPPORT
        else:
            self.support_phase = SupportPhase.RIGHT_SUPPORT

        self.right_foot_trajectory = SpaceTrajectory(
            self.right_foot,
            trajectory_config.default_velocity,
            trajectory_config.min_segment_time,
        )
        self.left_foot_trajectory = SpaceTrajectory(
            self.left_foot,
            trajectory_config.default_velocity,
            trajectory_config.min_segment_time,
        )

    @property
    def support_foot(self) -> Pose:
        if self.support_phase == SupportPhase.RIGHT_SUPPORT:
            return self.right_foot
        return self.left_foot

    @property
    def swing_foot(self) -> Pose:
        if self.support_phase == SupportPhase.RIGHT_SUPPORT:
            return self.left_foot
        return self.right_foot

    def half_step_forward_rs(self) -> Pose:
        """Swings the right foot forward and makes it the support foot.

        Returns:
            Pose: The landed right foot pose.

        Raises:
            GaitPhaseError: If the robot is not in left support.
        """
        return self._half_step(SupportPhase.LEFT_SUPPORT, SupportPhase.RIGHT_SUPPORT)

    def half_step_forward_ls(self) -> Pose:
        """Swings the left foot forward and makes it the support foot.

        Returns:
            Pose: The landed left foot pose.

        Raises:
            GaitPhaseError: If the robot is not in right support.
        """
        return self._half_step(SupportPhase.RIGHT_SUPPORT, SupportPhase.LEFT_SUPPORT)

    def _half_step(self, expected: SupportPhase, target: SupportPhase) -> Pose:
        if self.support_phase != expected:
            raise GaitPhaseError(
                f"Cannot step into {target.value} from {self.support_phase.value}."
            )

        support = self.support_foot.copy()
        swing = self.swing_foot
        if target == SupportPhase.RIGHT_SUPPORT:
            swing_trajectory = self.right_foot_trajectory
            support_trajectory = self.left_foot_trajectory
        else:
            swing_trajectory = self.left_foot_trajectory
            support_trajectory = self.right_foot_trajectory

        dx, dy, dz = self._forward_offset(swing)
        apex = swing.copy()
        apex.change_position(dx / 2, dy / 2, dz / 2 + self.step_height)
        swing.change_position(dx, dy, dz)

        swing_trajectory.add_timed_waypoint(self.swing_time / 2, apex)
        swing_trajectory.add_timed_waypoint(self.swing_time / 2, swing)
        support_trajectory.add_timed_waypoint(self.swing_time, support)

        self.support_phase = target
        self._on_support_change(support, swing)
        return swing.copy()

    def _forward_offset(self, foot: Pose) -> Tuple[float, float, float]:
        """One step length along the foot's own x axis, in world coordinates."""
        offset = foot.as_rotation().apply([self.step_length, 0.0, 0.0])
        return float(offset[0]), float(offset[1]), float(offset[2])

    @abstractmethod
    def _on_support_change(self, old_support: Pose, new_support: Pose) -> None:
        """Re-anchors state expressed relative to the support foot."""
