"""LipWalker: pose algebra and LIPM gait generation for bipedal robots.

This package provides tools and utilities for:
- Rigid pose composition, difference and interpolation
- Time-indexed waypoint trajectories with cached playback
- Linear inverted pendulum (LIPM) center of mass integration
- Footstep advancement and reference-frame conversion
"""
