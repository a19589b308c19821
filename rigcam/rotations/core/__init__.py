"""
This module contains the fundamental mathematical operations for rotation calculations.  All functions here are pure
numerical routines on numpy arrays that the camera models build on.
"""

from rigcam.rotations.core.conversions import (angle_axis_to_rotmat, angle_axis_to_quaternion,
                                               rotmat_to_angle_axis, rotmat_to_quaternion,
                                               quaternion_to_rotmat, quaternion_to_angle_axis)

from rigcam.rotations.core.elementals import rot_x, rot_y, rot_z, skew

__all__ = ['angle_axis_to_rotmat', 'angle_axis_to_quaternion',
           'rotmat_to_angle_axis', 'rotmat_to_quaternion',
           'quaternion_to_rotmat', 'quaternion_to_angle_axis',
           'rot_x', 'rot_y', 'rot_z', 'skew']
