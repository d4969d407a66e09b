"""Time-stamped waypoint trajectories with cached piecewise-linear sampling.

Sampling keeps the bracketing waypoint pair of the last query so sequential
queries cost O(1); a query outside that bracket falls back to a binary search
over the cumulative times. The cache is plain mutable state on the trajectory,
so a trajectory must only be sampled from one context at a time. `seek` gives a
read-only path that returns a bracket snapshot without touching the cache.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from lipwalker.errors import IndexOutOfRangeError, InvalidQueryError
from lipwalker.kinematics.pose import Pose
from lipwalker.utils.math_utils import binary_search

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bracket:
    """The pair of waypoints immediately before and after a queried time."""

    last_wp: int
    next_wp: int
    last_time: float
    next_time: float

    def contains(self, t: float) -> bool:
        return self.last_time <= t <= self.next_time


class SpaceTrajectory:
    """An ordered sequence of timed poses, starting at cumulative time 0."""

    def __init__(
        self,
        initial_waypoint: Pose | None = None,
        default_velocity: float = 0.2,
        min_segment_time: float = 1.0,
    ):
        """Initializes the trajectory with its origin waypoint.

        Args:
            initial_waypoint (Pose | None): The waypoint at time 0. Defaults to the origin (0, 0, 0).
            default_velocity (float): Tip velocity used to time `add_waypoint` segments.
            min_segment_time (float): Floor for the inferred segment duration.
        """
        self.waypoints: List[Pose] = []
        self.time_deltas: List[float] = []
        self.time_totals: List[float] = []
        self.min_segment_time = min_segment_time
        self.initial_default_velocity = default_velocity
        self.reset()
        self.set_initial_waypoint(
            initial_waypoint if initial_waypoint is not None else Pose(0, 0, 0)
        )

    def reset(self, default_velocity: Optional[float] = None) -> None:
        """Restores the default velocity and clears the playback cache.

        Args:
            default_velocity (Optional[float]): New tip velocity. Defaults to the
                velocity the trajectory was created with.
        """
        if default_velocity is None:
            default_velocity = self.initial_default_velocity
        self.default_velocity = default_velocity
        self.last_wp = 0
        self.next_wp = 0
        self.last_wp_time = 0.0
        self.next_wp_time = 0.0
        # Transform from waypoint last_wp to next_wp.
        self.to_next_wp = Pose(0, 0, 0)

    def set_initial_waypoint(self, initial_waypoint: Pose) -> None:
        """(Re)defines waypoint 0 at time 0 without shifting the later waypoints."""
        if len(self.waypoints) == 0:
            self.waypoints.append(initial_waypoint.copy())
            self.time_deltas.append(0.0)
            self.time_totals.append(0.0)
        else:
            self.waypoints[0] = initial_waypoint.copy()
            self.time_deltas[0] = 0.0
            self.time_totals[0] = 0.0

        # The cached delta may start at the redefined waypoint.
        if self.last_wp == 0 and self.next_wp > 0:
            self.to_next_wp = Pose.difference(
                self.waypoints[0], self.waypoints[self.next_wp]
            )

    def add_timed_waypoint(self, dt: float, waypoint: Pose) -> None:
        """Appends `waypoint` reached `dt` after the previous one.

        Args:
            dt (float): Delta time from the last waypoint. Zero is accepted with a warning.
            waypoint (Pose): The pose to add as waypoint.
        """
        if dt == 0:
            logger.warning(
                "Degenerate waypoint: adding waypoint %d with 0 delta time.",
                len(self.waypoints),
            )
        self.waypoints.append(waypoint.copy())
        self.time_deltas.append(dt)
        self.time_totals.append(self.time_totals[-1] + dt)

    def add_waypoint(self, waypoint: Pose) -> float:
        """Appends a waypoint timed from its distance at the default velocity.

        Args:
            waypoint (Pose): The pose to add as waypoint.

        Returns:
            float: The delta time used, never below `min_segment_time`.
        """
        last = self.get_last_waypoint()
        dx = waypoint.x - last.x
        dy = waypoint.y - last.y
        dz = waypoint.z - last.z
        dt = math.sqrt(dx * dx + dy * dy + dz * dz) / self.default_velocity
        # TODO: limit rotation velocity with a default rotation speed and take the
        # larger of the rotation and translation times.
        dt = max(dt, self.min_segment_time)

        self.add_timed_waypoint(dt, waypoint)
        return dt

    def move(self, dx: float, dy: float, dz: float) -> float:
        """Adds a waypoint shifted by (dx, dy, dz) from the last one.

        Returns:
            float: The estimated time at default velocity.
        """
        target = self.get_last_waypoint()
        target.change_position(dx, dy, dz)
        return self.add_waypoint(target)

    def size(self) -> int:
        return len(self.waypoints)

    def __len__(self) -> int:
        return len(self.waypoints)

    @property
    def duration(self) -> float:
        return self.time_totals[-1]

    @property
    def times(self) -> List[float]:
        return list(self.time_totals)

    def seek(self, sample_time: float) -> Bracket:
        """Finds the bracket for `sample_time` by binary search, without caching it.

        Args:
            sample_time (float): The time to bracket.

        Returns:
            Bracket: Indices and times of the waypoints around `sample_time`.

        Raises:
            InvalidQueryError: If the time is beyond the last waypoint, or at or
                before the origin so no segment ends there.
        """
        next_wp = binary_search(self.time_totals, sample_time)
        if next_wp == len(self.time_totals):
            logger.error("No waypoints defined for time %s.", sample_time)
            raise InvalidQueryError(sample_time, InvalidQueryError.BEYOND_END)
        if next_wp < 1:
            logger.error(
                "Check if time %s is positive and waypoints are defined.", sample_time
            )
            raise InvalidQueryError(sample_time, InvalidQueryError.BEFORE_ORIGIN)

        last_wp = next_wp - 1
        return Bracket(
            last_wp, next_wp, self.time_totals[last_wp], self.time_totals[next_wp]
        )

    @property
    def bracket(self) -> Bracket:
        """Snapshot of the cached bracket."""
        return Bracket(self.last_wp, self.next_wp, self.last_wp_time, self.next_wp_time)

    def _update_pointers(self, sample_time: float) -> bool:
        """Refreshes the cached bracket if `sample_time` is outside it.

        Returns:
            bool: True if a search was needed.
        """
        if self.next_wp > self.last_wp and self.bracket.contains(sample_time):
            return False

        bracket = self.seek(sample_time)
        self.last_wp = bracket.last_wp
        self.next_wp = bracket.next_wp
        self.last_wp_time = bracket.last_time
        self.next_wp_time = bracket.next_time
        self.to_next_wp = Pose.difference(
            self.waypoints[self.last_wp], self.waypoints[self.next_wp]
        )
        return True

    def next_waypoint_rate(self, at_time: float) -> float:
        """Fraction of the cached segment elapsed at `at_time`."""
        return (at_time - self.last_wp_time) / (self.next_wp_time - self.last_wp_time)

    def get_sample(self, sample_time: float) -> Pose:
        """Returns the pose at `sample_time`, interpolated between the bracketing waypoints.

        Only the position is interpolated; the sample keeps the rotation of the
        waypoint the segment starts from.

        The cached bracket is closed at both ends. A query at the origin time 0
        therefore returns waypoint 0 once a query in (0, t1] has cached the
        first segment, but raises `InvalidQueryError` on a fresh cache, where
        the search finds no segment ending at 0.

        Args:
            sample_time (float): The time to sample.

        Returns:
            Pose: The sampled pose.

        Raises:
            InvalidQueryError: If no segment brackets `sample_time`.
        """
        self._update_pointers(sample_time)

        last = self.waypoints[self.last_wp]
        if sample_time == self.next_wp_time:
            return last.copy(position=self.waypoints[self.next_wp].get_position())

        # The sample is the last waypoint shifted by a fraction of the segment.
        shift = self.to_next_wp.pose_fraction(self.next_waypoint_rate(sample_time))
        sample_pose = last.copy()
        sample_pose.change_position(*shift.get_position())
        return sample_pose

    def get_sample_velocity(self, sample_time: float) -> Pose:
        """Returns the translational velocity of the segment containing `sample_time`.

        Segments are linear, so the velocity is constant within a bracket. The
        rotation is zero.

        Raises:
            InvalidQueryError: If no segment brackets `sample_time`.
        """
        self._update_pointers(sample_time)

        duration = self.next_wp_time - self.last_wp_time
        dx, dy, dz = self.to_next_wp.get_position()
        return Pose(dx / duration, dy / duration, dz / duration)

    def get_waypoint(self, index: int) -> Tuple[Pose, float]:
        """Returns a copy of waypoint `index` and its cumulative time.

        Raises:
            IndexOutOfRangeError: If `index` is negative or not below `size()`.
        """
        if not 0 <= index < len(self.waypoints):
            raise IndexOutOfRangeError(index, len(self.waypoints))
        return self.waypoints[index].copy(), self.time_totals[index]

    def get_last_waypoint(self) -> Pose:
        return self.waypoints[-1].copy()

    def __iter__(self):
        for pose, time_total in zip(self.waypoints, self.time_totals):
            yield pose.copy(), time_total
