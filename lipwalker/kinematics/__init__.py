"""Rigid pose algebra and single-link kinematics.

This package contains:
- Quaternion and axis-angle conversions
- The Pose value type with composition, difference and interpolation
- Links with a closed set of joint kinds and a minimal robot model
"""
