"""Configuration classes for LIPM gait generation.

This module defines configuration dataclasses for the inverted pendulum
constants, the footstep pattern and the default trajectory timing, and a
loader that binds them from a gin file.
"""

import os
from dataclasses import dataclass

import gin


@gin.configurable
@dataclass
class LipmConfig:
    """Configuration class for the LIPM gait engine."""

    @gin.configurable
    @dataclass
    class PendulumConfig:
        gravity: float = 9.81
        mass_height: float = 0.8  # height of the mass above the ZMP
        kp: float = 100.0  # vertical mass position gain
        kv: float = 20.0  # vertical mass velocity gain

    @gin.configurable
    @dataclass
    class StepConfig:
        step_length: float = 0.1
        step_height: float = 0.03
        swing_time: float = 0.6  # seconds per half step

    @gin.configurable
    @dataclass
    class TrajectoryConfig:
        default_velocity: float = 0.2  # m/s
        min_segment_time: float = 1.0  # seconds

    def __init__(self):
        """Initialize all configuration sections with their default values."""
        self.pendulum = self.PendulumConfig()
        self.step = self.StepConfig()
        self.trajectory = self.TrajectoryConfig()


def get_gait_config(name: str = "default") -> LipmConfig:
    """Retrieves and parses the gait configuration with the given name.

    Args:
        name (str): Name of a gin file under `lipwalker/configs`, without extension.

    Returns:
        LipmConfig: An instance of LipmConfig initialized with the parsed configuration.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
    """
    gin_file_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)), "configs", name + ".gin"
    )
    if not os.path.exists(gin_file_path):
        raise FileNotFoundError(f"File {gin_file_path} not found.")

    gin.parse_config_file(gin_file_path)
    return LipmConfig()
