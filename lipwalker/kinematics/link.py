"""Single links driven by one degree of freedom, and a minimal robot model.

Joint behaviour is a closed set of kinds dispatched in `Link.change_pose`;
chain-level forward or inverse kinematics is not provided here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from lipwalker.kinematics.pose import Pose


class JointKind(Enum):
    REVOLUTE = "revolute"
    PRISMATIC = "prismatic"
    FIXED = "fixed"


class Link:
    """A rigid link whose end pose moves with one joint variable."""

    def __init__(
        self,
        end: Pose | None = None,
        kind: JointKind = JointKind.FIXED,
        axis: Tuple[float, float, float] = (0.0, 0.0, 1.0),
    ):
        """Initializes the link.

        Args:
            end (Pose | None): The end side of the link, usually the joint with the next link.
                Defaults to the origin.
            kind (JointKind): How the joint variable moves the end pose.
            axis (Tuple[float, float, float]): Rotation axis for revolute joints,
                translation direction for prismatic joints.
        """
        self.end = end.copy() if end is not None else Pose(0, 0, 0)
        self.cog = Pose(0, 0, 0)
        self.kind = kind
        self.axis = axis
        self.rest_position = self.end.get_position()

    def change_pose(self, dof: float) -> Pose:
        """Moves the end pose to joint value `dof` and returns it.

        Args:
            dof (float): Angle in radians for revolute joints, distance for prismatic.

        Returns:
            Pose: The updated end pose.
        """
        if self.kind == JointKind.REVOLUTE:
            self.end.set_rotation(*self.axis, dof)
        elif self.kind == JointKind.PRISMATIC:
            x0, y0, z0 = self.rest_position
            ax, ay, az = self.axis
            self.end.set_position(x0 + ax * dof, y0 + ay * dof, z0 + az * dof)
        elif self.kind != JointKind.FIXED:
            raise ValueError(f"Unsupported joint kind: {self.kind}")

        return self.end

    def get_cog(self) -> Pose:
        return self.cog.copy()

    def set_cog(self, value: Pose) -> None:
        self.cog = value.copy()


@dataclass
class RobotModel:
    """A robot base pose and its ordered links."""

    robot_base: Pose = field(default_factory=Pose)
    links: List[Link] = field(default_factory=list)

    def add_link(self, new_link: Link) -> None:
        self.links.append(new_link)
