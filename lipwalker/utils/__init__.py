"""Utility modules for the LipWalker framework.

This package contains helper functions for:
- Array aliases and rotation conversions
- Binary search, angle wrapping and pendulum constants
- Trajectory export
"""
