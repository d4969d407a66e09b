"""Linear inverted pendulum (LIPM) gait generation.

The center of mass is a point mass on a massless rod pivoting over the ZMP.
Horizontal channels follow x'' = (g / h) * (x - zmp), where h is the height of
the mass above the ZMP, integrated with semi-implicit Euler at a fixed step
supplied by the caller. The vertical channel holds its velocity, or keeps the
mass `mass_height` above the ZMP through the kp/kv gains.

All pendulum coordinates are world-aligned offsets from the current support
foot. A half step re-anchors them to the new support foot.
"""

import logging
import math
from typing import Dict, List, MutableSequence, Optional, Sequence, Tuple

from lipwalker.algorithms.gait import Gait
from lipwalker.algorithms.lipm_config import LipmConfig
from lipwalker.kinematics.pose import Pose
from lipwalker.reference.trajectory import SpaceTrajectory
from lipwalker.sim.kinematic_state import KinematicState
from lipwalker.utils.array_utils import ArrayType, np
from lipwalker.utils.math_utils import natural_frequency

logger = logging.getLogger(__name__)


def angular_response_step(
    theta_prev2: float, theta_prev1: float, omega: float, dt: float
) -> float:
    """Next tilt sample of the small-angle pendulum oscillator theta'' = -omega^2 * theta.

    Central differences give theta[n+1] = (2 - omega^2 dt^2) theta[n] - theta[n-1],
    which stays bounded while omega * dt < 2.

    Args:
        theta_prev2 (float): Tilt at step n - 1.
        theta_prev1 (float): Tilt at step n.
        omega (float): Natural frequency sqrt(g / radius).
        dt (float): Time step.

    Returns:
        float: Tilt at step n + 1.
    """
    k1, k2 = angular_response_coefficients(omega, dt)
    return k1 * theta_prev1 + k2 * theta_prev2


def angular_response_coefficients(omega: float, dt: float) -> Tuple[float, float]:
    return 2.0 - (omega * dt) ** 2, -1.0


class LipmGait(Gait):
    """LIPM gait generator producing center of mass trajectories from ZMP references.

    The engine owns the pendulum state (one KinematicState per axis), the
    buffers recording every integrated sample and the footstep state machine
    inherited from Gait.
    """

    def __init__(
        self,
        initial_right_foot: Pose,
        initial_left_foot: Pose,
        new_mass: float,
        config: Optional[LipmConfig] = None,
    ):
        """Initializes the pendulum above the middle of the initial support polygon.

        Args:
            initial_right_foot (Pose): Initial right foot pose.
            initial_left_foot (Pose): Initial left foot pose.
            new_mass (float): Mass of the pendulum.
            config (Optional[LipmConfig]): Gait configuration. Defaults to LipmConfig().
        """
        self.config = config if config is not None else LipmConfig()
        super().__init__(
            initial_right_foot,
            initial_left_foot,
            self.config.step,
            self.config.trajectory,
        )
        self.lip_mass = new_mass
        self.gravity = self.config.pendulum.gravity
        self.kp = self.config.pendulum.kp
        self.kv = self.config.pendulum.kv
        self.mass_height = self.config.pendulum.mass_height
        # Angular response coefficients of the last lipm_angular_response call.
        self.k1 = 0.0
        self.k2 = 0.0

        support = self.support_foot
        mid_x = (self.right_foot.x + self.left_foot.x) / 2
        mid_y = (self.right_foot.y + self.left_foot.y) / 2
        self.mx = KinematicState(mid_x - support.x)
        self.my = KinematicState(mid_y - support.y)
        self.mz = KinematicState(self.mass_height)

        self.trax: List[float] = []
        self.tray: List[float] = []
        self.traz: List[float] = []
        self.trat: List[float] = []
        self.support_origins: List[Tuple[float, float, float]] = []
        self.sim_time = 0.0

    def clear_trajectory(self) -> None:
        """Drops the recorded samples and restarts the simulated clock."""
        self.trax.clear()
        self.tray.clear()
        self.traz.clear()
        self.trat.clear()
        self.support_origins.clear()
        self.sim_time = 0.0

    @property
    def omega(self) -> float:
        """Natural frequency of the pendulum at its current height."""
        return natural_frequency(self.gravity, self.mz.position)

    def lipm_initial_state(
        self, mx0: KinematicState, my0: KinematicState, mz0: KinematicState
    ) -> None:
        """Sets the pendulum state explicitly and clears the recorded trajectory."""
        self.mx = mx0.copy()
        self.my = my0.copy()
        self.mz = mz0.copy()
        self.clear_trajectory()

    def lipm_initial_state_from_zmp(
        self,
        xwp: Sequence[float],
        ywp: Sequence[float],
        zwp: Sequence[float],
        dt: float,
    ) -> None:
        """Infers the initial pendulum state from a uniformly sampled ZMP reference.

        The mass starts above the first ZMP sample, `mass_height` over zwp[0].
        Its horizontal velocity is solved forward through the same integrator
        used by `change_mass_position`, so that the mass ends over the last ZMP
        sample once the whole reference has been integrated. The model is linear
        in the initial velocity, so two integrations per channel fix it exactly.

        Args:
            xwp (Sequence[float]): ZMP x samples, relative to the support foot.
            ywp (Sequence[float]): ZMP y samples, relative to the support foot.
            zwp (Sequence[float]): ZMP z samples, relative to the support foot.
            dt (float): Time step between samples.

        Raises:
            ValueError: If the sequences are empty or of different lengths, or
                the mass would not stay above the ZMP.
        """
        self._check_waypoints(xwp, ywp, zwp)

        mz = KinematicState(float(zwp[0]) + self.mass_height)
        if len(zwp) > 1:
            mz.velocity = (float(zwp[1]) - float(zwp[0])) / dt

        # The vertical channel does not depend on x and y, so the pendulum
        # stiffness of every step is known up front.
        vertical = mz.copy()
        omega_sq = []
        for zzmp in zwp:
            height = self._pendulum_height(vertical.position, float(zzmp))
            omega_sq.append(self.gravity / height)
            self._vertical_step(vertical, float(zzmp) + self.mass_height, dt)

        self.mx = self._match_final_zmp(xwp, omega_sq, dt)
        self.my = self._match_final_zmp(ywp, omega_sq, dt)
        self.mz = mz
        self.clear_trajectory()

    def _match_final_zmp(
        self, zmps: Sequence[float], omega_sq: Sequence[float], dt: float
    ) -> KinematicState:
        position = float(zmps[0])

        def final_position(velocity: float) -> float:
            state = KinematicState(position, velocity)
            for zmp, stiffness in zip(zmps, omega_sq):
                self._horizontal_step(state, float(zmp), stiffness, dt)
            return state.position

        free = final_position(0.0)
        sensitivity = final_position(1.0) - free
        return KinematicState(position, (float(zmps[-1]) - free) / sensitivity, 0.0)

    def get_swing_y_initial_speed(self, initial_y: float, swing_time: float) -> float:
        """Lateral velocity that brings the mass back to `initial_y` after `swing_time`.

        With a fixed ZMP at the support foot, y(t) = y0 cosh(wt) + v0/w sinh(wt);
        requiring y(T) = y0 gives v0 = -w * y0 * tanh(w * T / 2).
        """
        omega = self.omega
        return -omega * initial_y * math.tanh(omega * swing_time / 2)

    def change_mass_position(
        self, dt: float, xzmp: float, yzmp: float, zzmp: Optional[float] = None
    ) -> None:
        """Advances the pendulum one step under a ZMP reference and records the sample.

        Each horizontal channel gets acceleration (g / h) * (position - zmp), h
        being the height of the mass above the ZMP, then velocity and position
        are integrated in that order. Without `zzmp` the ZMP lies at the support
        foot height and the vertical velocity is kept; with it the height is
        driven by kp * (zzmp + mass_height - z) - kv * vz.

        Args:
            dt (float): Integration step.
            xzmp (float): ZMP x, relative to the support foot.
            yzmp (float): ZMP y, relative to the support foot.
            zzmp (Optional[float]): ZMP z, relative to the support foot.

        Raises:
            ValueError: If the mass is not above the ZMP.
        """
        if zzmp is None:
            omega_sq = self.gravity / self._pendulum_height(self.mz.position, 0.0)
            zref = None
        else:
            omega_sq = self.gravity / self._pendulum_height(self.mz.position, zzmp)
            zref = zzmp + self.mass_height

        self._horizontal_step(self.mx, xzmp, omega_sq, dt)
        self._horizontal_step(self.my, yzmp, omega_sq, dt)
        self._vertical_step(self.mz, zref, dt)

        self.sim_time += dt
        self.trax.append(self.mx.position)
        self.tray.append(self.my.position)
        self.traz.append(self.mz.position)
        self.trat.append(self.sim_time)
        self.support_origins.append(self.support_foot.get_position())

    def lip_zmp_trajectory(
        self,
        xwp: Sequence[float],
        ywp: Sequence[float],
        zwp: Sequence[float],
        dt: float,
    ) -> float:
        """Integrates the pendulum over a whole ZMP reference, one step per sample.

        Args:
            xwp (Sequence[float]): ZMP x samples, relative to the support foot.
            ywp (Sequence[float]): ZMP y samples, relative to the support foot.
            zwp (Sequence[float]): ZMP z samples, relative to the support foot.
            dt (float): Time step between samples.

        Returns:
            float: The simulated time covered by this call.

        Raises:
            ValueError: If the sequences are empty or of different lengths, or
                the mass is not above the ZMP.
        """
        self._check_waypoints(xwp, ywp, zwp)

        start_time = self.sim_time
        for xzmp, yzmp, zzmp in zip(xwp, ywp, zwp):
            self.change_mass_position(dt, float(xzmp), float(yzmp), float(zzmp))

        elapsed = self.sim_time - start_time
        logger.debug(
            "Integrated %d LIPM samples over %.3f s, mass at (%.4f, %.4f, %.4f).",
            len(xwp),
            elapsed,
            self.mx.position,
            self.my.position,
            self.mz.position,
        )
        return elapsed

    def lip_zmp_trajectory_with_init(
        self,
        xwp: Sequence[float],
        ywp: Sequence[float],
        zwp: Sequence[float],
        dt: float,
    ) -> float:
        """Infers the initial state from the reference, then integrates it."""
        self.lipm_initial_state_from_zmp(xwp, ywp, zwp, dt)
        return self.lip_zmp_trajectory(xwp, ywp, zwp, dt)

    def lipm_angular_response(
        self, tiltwp: MutableSequence[float] | ArrayType, dt: float, radius: float
    ) -> MutableSequence[float] | ArrayType:
        """Angular response of the pendulum, filled into a caller-owned buffer.

        The first two entries of `tiltwp` seed the response; every following
        entry is overwritten with the next tilt from `angular_response_step`,
        using the small-angle model theta'' = -(g / radius) * theta.

        Args:
            tiltwp (MutableSequence[float] | ArrayType): Buffer holding two seed
                angles followed by the slots to fill.
            dt (float): Time step for the trajectory.
            radius (float): Pendulum length, distance to the mass.

        Returns:
            MutableSequence[float] | ArrayType: The same buffer, filled.

        Raises:
            ValueError: If fewer than two seed angles are given.
        """
        if len(tiltwp) < 2:
            raise ValueError("Angular response needs two initial tilt angles.")

        omega = natural_frequency(self.gravity, radius)
        self.k1, self.k2 = angular_response_coefficients(omega, dt)
        for n in range(2, len(tiltwp)):
            tiltwp[n] = angular_response_step(tiltwp[n - 2], tiltwp[n - 1], omega, dt)
        return tiltwp

    def support_force(self) -> Tuple[float, float, float]:
        """Force the support exerts on the pendulum mass in its current state."""
        return (
            self.lip_mass * self.mx.acceleration,
            self.lip_mass * self.my.acceleration,
            self.lip_mass * (self.gravity + self.mz.acceleration),
        )

    def trajectory_buffers(self) -> Dict[str, ArrayType]:
        """The recorded samples as arrays, relative to their support foot."""
        return dict(
            time=np.array(self.trat, dtype=np.float64),
            x=np.array(self.trax, dtype=np.float64),
            y=np.array(self.tray, dtype=np.float64),
            z=np.array(self.traz, dtype=np.float64),
            support=np.array(self.support_origins, dtype=np.float64).reshape(-1, 3),
        )

    def convert_lip_trajectory(self, robot_origin: Pose) -> SpaceTrajectory:
        """Re-expresses the recorded mass trajectory in the robot base frame.

        Each sample is moved from its support foot to world coordinates, then
        into the frame of `robot_origin`. The first sample becomes the origin
        waypoint at time 0.

        Args:
            robot_origin (Pose): The robot base pose in world coordinates.

        Returns:
            SpaceTrajectory: Mass poses in the base frame, timed as integrated.

        Raises:
            ValueError: If no sample has been integrated yet.
        """
        if len(self.trat) == 0:
            raise ValueError("No LIPM trajectory has been integrated yet.")

        buffers = self.trajectory_buffers()
        world = (
            np.stack([buffers["x"], buffers["y"], buffers["z"]], axis=-1)
            + buffers["support"]
        )
        local = robot_origin.as_rotation().inv().apply(
            world - np.array(robot_origin.get_position())
        )
        local = np.atleast_2d(local)

        trajectory = SpaceTrajectory(
            Pose(*local[0]),
            self.config.trajectory.default_velocity,
            self.config.trajectory.min_segment_time,
        )
        for i in range(1, len(local)):
            trajectory.add_timed_waypoint(
                float(buffers["time"][i] - buffers["time"][i - 1]), Pose(*local[i])
            )
        return trajectory

    @staticmethod
    def _horizontal_step(
        state: KinematicState, zmp: float, omega_sq: float, dt: float
    ) -> None:
        state.acceleration = omega_sq * (state.position - zmp)
        state.velocity += state.acceleration * dt
        state.position += state.velocity * dt

    def _vertical_step(
        self, state: KinematicState, zref: Optional[float], dt: float
    ) -> None:
        if zref is None:
            state.acceleration = 0.0
        else:
            state.acceleration = (
                self.kp * (zref - state.position) - self.kv * state.velocity
            )
        state.velocity += state.acceleration * dt
        state.position += state.velocity * dt

    @staticmethod
    def _pendulum_height(mass_z: float, zmp_z: float) -> float:
        height = mass_z - zmp_z
        if height <= 0.0:
            raise ValueError(
                f"Pendulum mass at z={mass_z} is not above the ZMP at z={zmp_z}."
            )
        return height

    def _on_support_change(self, old_support: Pose, new_support: Pose) -> None:
        self.mx.position += old_support.x - new_support.x
        self.my.position += old_support.y - new_support.y
        self.mz.position += old_support.z - new_support.z

    @staticmethod
    def _check_waypoints(
        xwp: Sequence[float], ywp: Sequence[float], zwp: Sequence[float]
    ) -> None:
        if len(xwp) == 0:
            raise ValueError("ZMP waypoint sequences are empty.")
        if not len(xwp) == len(ywp) == len(zwp):
            raise ValueError(
                f"ZMP waypoint sequences differ in length: "
                f"{len(xwp)}, {len(ywp)}, {len(zwp)}."
            )
