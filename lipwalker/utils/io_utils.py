"""Input/output utilities for exporting trajectories.

Writes one comma-separated record per waypoint in the order
x, y, z, axis_i, axis_j, axis_k, angle, without a header row.
"""

from typing import Iterable, TextIO

from lipwalker.reference.trajectory import SpaceTrajectory


def trajectory_records(trajectory: SpaceTrajectory) -> Iterable[str]:
    """Yields the CSV record of every waypoint, without line terminators.

    Args:
        trajectory (SpaceTrajectory): The trajectory to export.

    Returns:
        Iterable[str]: One record per waypoint, angles in radians.
    """
    for pose, _ in trajectory:
        x, y, z = pose.get_position()
        axis_i, axis_j, axis_k, angle = pose.get_rotation()
        yield ",".join(str(v) for v in (x, y, z, axis_i, axis_j, axis_k, angle))


def save_trajectory_csv(trajectory: SpaceTrajectory, destination: str | TextIO) -> int:
    """Writes the trajectory waypoints to a file path or an open text stream.

    Args:
        trajectory (SpaceTrajectory): The trajectory to export.
        destination (str | TextIO): Path of the file to write, or any object with
            a `write` method.

    Returns:
        int: The number of records written.
    """
    if isinstance(destination, str):
        with open(destination, "w") as file:
            return save_trajectory_csv(trajectory, file)

    count = 0
    for record in trajectory_records(trajectory):
        destination.write(record + "\n")
        count += 1
    return count
