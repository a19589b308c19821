# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


r"""
This module provides the :class:`SharedExtrinsics` parameter block which stores the pose of a rig frame.

A :class:`SharedExtrinsics` is a flat array of 6 doubles laid out according to :class:`ExtrinsicsIndex`:

=============== ===== ==================================================================================================
Index           Size  Contents
=============== ===== ==================================================================================================
``POSITION``    3     The position of the rig (shared frame origin) expressed in the world frame
``ORIENTATION`` 3     The angle-axis vector of the rotation from the world frame to the shared frame
=============== ===== ==================================================================================================

The block is only storage.  A nonlinear optimizer reads and perturbs it directly through
:attr:`~SharedExtrinsics.mutable_extrinsics`, while :class:`.Camera` instances bound to it interpret it.  Several
cameras may hold the same instance, in which case they form a rigid rig: moving the block moves all of them.  Two
instances are never interchangeable even when they hold the same numbers, so equality is identity.
"""

from enum import IntEnum

import numpy as np

from rigcam._typing import DOUBLE_ARRAY, NONEARRAY


EXTRINSICS_SIZE: int = 6
"""
The number of parameters in a :class:`SharedExtrinsics` block.
"""


class ExtrinsicsIndex(IntEnum):
    """
    The starting index of each parameter inside of a :class:`SharedExtrinsics` block.
    """

    POSITION = 0
    """
    The first of the 3 elements of the position of the shared frame in the world frame
    """

    ORIENTATION = 3
    """
    The first of the 3 elements of the angle-axis rotation from the world frame to the shared frame
    """


class SharedExtrinsics:
    """
    A fixed-size parameter block holding a rigid pose (position + angle-axis orientation) that may be referenced by one
    or many cameras.

    The default instance is at the world origin with the identity orientation:

        >>> from rigcam.camera_models import SharedExtrinsics
        >>> SharedExtrinsics()
        SharedExtrinsics(array([0., 0., 0., 0., 0., 0.]))
    """

    def __init__(self, parameters: NONEARRAY = None):
        """
        :param parameters: Optional initial values for the block as a length 6 array like.  If ``None`` the block is
                           initialized to zeros.
        :raises ValueError: If parameters does not contain exactly 6 values
        """

        self._parameters: DOUBLE_ARRAY = np.zeros(EXTRINSICS_SIZE, dtype=np.float64)

        if parameters is not None:
            parameters = np.asarray(parameters, dtype=np.float64).ravel()
            if parameters.size != EXTRINSICS_SIZE:
                raise ValueError(f'The extrinsic parameters must contain {EXTRINSICS_SIZE} values')
            self._parameters[:] = parameters

    def __repr__(self) -> str:
        return 'SharedExtrinsics({0!r})'.format(self._parameters)

    @property
    def extrinsics(self) -> DOUBLE_ARRAY:
        """
        A read-only view of the parameter block.
        """

        view = self._parameters.view()
        view.flags.writeable = False
        return view

    @property
    def mutable_extrinsics(self) -> DOUBLE_ARRAY:
        """
        The contiguous parameter block itself.

        Writes made to this array are not validated and are visible to every camera referencing this instance.
        """

        return self._parameters
