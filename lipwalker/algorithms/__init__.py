"""Gait generation algorithms for LipWalker.

This package contains:
- The abstract gait with footstep bookkeeping per support phase
- Linear inverted pendulum (LIPM) center of mass integration
- Configuration dataclasses for the pendulum, footsteps and trajectories
"""
