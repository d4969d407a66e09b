"""Plan a straight LIPM walk and export the base-frame center of mass trajectory.

The walk alternates half steps. During each half step the ZMP reference sits
on the support foot, so the mass swings over it; the resulting trajectory is
written as CSV records to a file or stdout.
"""

import argparse
import logging
import sys
from typing import List, Tuple

from tqdm import tqdm

from lipwalker.algorithms.gait import SupportPhase
from lipwalker.algorithms.lipm_config import get_gait_config
from lipwalker.algorithms.lipm_walk import LipmGait
from lipwalker.kinematics.pose import Pose
from lipwalker.utils.io_utils import save_trajectory_csv


def build_zmp_reference(
    num_samples: int,
) -> Tuple[List[float], List[float], List[float]]:
    """ZMP pinned to the support foot for one half step."""
    return [0.0] * num_samples, [0.0] * num_samples, [0.0] * num_samples


def plan_walk(gait: LipmGait, num_half_steps: int, control_dt: float) -> float:
    """Alternates half steps, integrating the pendulum over each swing.

    Args:
        gait (LipmGait): The gait engine, positioned at its initial stance.
        num_half_steps (int): Number of half steps to take.
        control_dt (float): Integration step.

    Returns:
        float: Total simulated time.
    """
    num_samples = max(1, round(gait.swing_time / control_dt))
    total_time = 0.0
    for _ in tqdm(range(num_half_steps), desc="Planning half steps"):
        xwp, ywp, zwp = build_zmp_reference(num_samples)
        total_time += gait.lip_zmp_trajectory(xwp, ywp, zwp, control_dt)
        if gait.support_phase == SupportPhase.RIGHT_SUPPORT:
            gait.half_step_forward_ls()
        else:
            gait.half_step_forward_rs()
    return total_time


def main(args: List[str] | None = None):
    parser = argparse.ArgumentParser(description="Plan a LIPM walk.")
    parser.add_argument(
        "--config",
        type=str,
        default="default",
        help="The name of the gin config under lipwalker/configs.",
    )
    parser.add_argument(
        "--steps", type=int, default=4, help="The number of half steps to take."
    )
    parser.add_argument(
        "--dt", type=float, default=0.01, help="The integration time step."
    )
    parser.add_argument(
        "--mass", type=float, default=3.0, help="The mass of the robot in kg."
    )
    parser.add_argument(
        "--foot-y",
        type=float,
        default=0.05,
        help="Lateral distance from the robot origin to each foot.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="",
        help="CSV file to write. Defaults to stdout.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output.")
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
        format="[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    config = get_gait_config(parsed.config)
    gait = LipmGait(
        Pose(0.0, -parsed.foot_y, 0.0),
        Pose(0.0, parsed.foot_y, 0.0),
        parsed.mass,
        config,
    )
    # Start the pendulum over the support foot with the lateral speed that
    # brings it back after one swing.
    gait.my.velocity = gait.get_swing_y_initial_speed(gait.my.position, gait.swing_time)

    total_time = plan_walk(gait, parsed.steps, parsed.dt)
    trajectory = gait.convert_lip_trajectory(Pose(0.0, 0.0, 0.0))

    if parsed.output:
        count = save_trajectory_csv(trajectory, parsed.output)
        print(f"Wrote {count} waypoints ({total_time:.2f} s) to {parsed.output}")
    else:
        save_trajectory_csv(trajectory, sys.stdout)


if __name__ == "__main__":
    main()
