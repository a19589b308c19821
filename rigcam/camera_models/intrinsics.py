"""
This module defines the layout of the intrinsic parameter block owned by each :class:`.Camera`.

The block is a contiguous array of :data:`INTRINSICS_SIZE` doubles indexed by :class:`IntrinsicsIndex`.  Keeping the
layout in its own module lets the projection kernels address the block without depending on the :class:`.Camera`
class.
"""

from enum import IntEnum


INTRINSICS_SIZE: int = 7
"""
The number of parameters in the intrinsic parameter block of a camera.
"""


class IntrinsicsIndex(IntEnum):
    """
    The index of each parameter inside of the intrinsic parameter block.
    """

    FOCAL_LENGTH = 0
    ASPECT_RATIO = 1
    SKEW = 2
    PRINCIPAL_POINT_X = 3
    PRINCIPAL_POINT_Y = 4
    RADIAL_DISTORTION_1 = 5
    RADIAL_DISTORTION_2 = 6
