"""Array type aliases and rotation helpers shared across the package."""

from typing import Union

import numpy as np
import numpy.typing as npt
from scipy.spatial.transform import Rotation as R

ArrayType = Union[npt.NDArray[np.float64], np.ndarray]

__all__ = ["ArrayType", "R", "np", "wxyz_to_xyzw"]


def wxyz_to_xyzw(quat: ArrayType) -> ArrayType:
    """Reorders a scalar-first quaternion to the scalar-last layout scipy expects."""
    return np.concatenate([quat[..., 1:], quat[..., :1]], axis=-1)
