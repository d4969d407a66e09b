"""Reference trajectories for LipWalker.

This package provides the time-indexed waypoint trajectory used to replay
poses, including cached sequential sampling and random seeking.
"""
