"""Mathematical utilities for searching, angle handling and pendulum constants.

Provides the lower-bound search used by trajectory seeking, angle wrapping for
axis-angle canonicalization, and the natural frequency helpers shared by the
inverted pendulum integrators.
"""

import math
from typing import Sequence

from lipwalker.utils.array_utils import ArrayType


def binary_search(arr: ArrayType | Sequence[float], t: float) -> int:
    """Performs a binary search on a sorted array for the first element not less than a target.

    Args:
        arr (ArrayType | Sequence[float]): A non-decreasing array of numbers.
        t (float): The target value to search for.

    Returns:
        int: The index of the first element greater than or equal to `t`, or
        `len(arr)` if every element is smaller.
    """
    low, high = 0, len(arr)
    while low < high:
        mid = (low + high) // 2
        if arr[mid] < t:
            low = mid + 1
        else:
            high = mid
    return low


def wrap_to_pi(angle: float) -> float:
    """Wraps an angle in radians to the half-open interval (-pi, pi].

    Args:
        angle (float): The angle to wrap.

    Returns:
        float: The equivalent angle in (-pi, pi].
    """
    wrapped = math.fmod(angle, 2 * math.pi)
    if wrapped > math.pi:
        wrapped -= 2 * math.pi
    elif wrapped <= -math.pi:
        wrapped += 2 * math.pi
    return wrapped


def natural_frequency(gravity: float, radius: float) -> float:
    """Natural frequency sqrt(g / r) of a pendulum of length `radius`."""
    return math.sqrt(gravity / radius)
