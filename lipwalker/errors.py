"""Exception types raised by trajectory sampling and gait generation."""


class TrajectoryError(Exception):
    """Base class for failures while querying a trajectory."""


class InvalidQueryError(TrajectoryError, ValueError):
    """Raised when a sample time cannot be bracketed by two waypoints.

    Attributes:
        query_time: The time that was requested.
        reason: "beyond_end" when the time exceeds the trajectory duration,
            "before_origin" when it falls at or before the first waypoint.
    """

    BEYOND_END = "beyond_end"
    BEFORE_ORIGIN = "before_origin"

    def __init__(self, query_time: float, reason: str):
        self.query_time = query_time
        self.reason = reason
        if reason == self.BEYOND_END:
            message = f"No waypoints defined for time {query_time}."
        else:
            message = (
                f"No segment ends at time {query_time}. "
                "Check if time is positive and waypoints are defined."
            )
        super().__init__(message)


class IndexOutOfRangeError(TrajectoryError, IndexError):
    """Raised when a waypoint index is outside the stored sequence."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Waypoint index {index} out of range [0, {size}).")


class GaitPhaseError(RuntimeError):
    """Raised when a half step is requested from the wrong support phase."""
