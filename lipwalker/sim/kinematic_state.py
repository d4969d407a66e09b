"""One-axis kinematic state exchanged with the gait engine."""

from dataclasses import astuple, dataclass
from typing import Tuple


@dataclass
class KinematicState:
    """Position, velocity and acceleration along a single axis."""

    position: float = 0.0
    velocity: float = 0.0
    acceleration: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return astuple(self)

    def copy(self) -> "KinematicState":
        return KinematicState(self.position, self.velocity, self.acceleration)
