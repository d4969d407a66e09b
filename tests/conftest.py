import gin
import pytest

from lipwalker.kinematics.pose import Pose
from lipwalker.reference.trajectory import SpaceTrajectory


@pytest.fixture(autouse=True)
def clear_gin_config():
    yield
    gin.clear_config()


@pytest.fixture
def l_shaped_trajectory():
    """Waypoints (0,0,0)@0, (1,0,0)@2, (1,1,0)@4."""
    trajectory = SpaceTrajectory(Pose(0, 0, 0))
    trajectory.add_timed_waypoint(2.0, Pose(1, 0, 0))
    trajectory.add_timed_waypoint(2.0, Pose(1, 1, 0))
    return trajectory
