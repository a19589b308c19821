r"""
This module provides the two coefficient radial distortion model used by :class:`.Camera`.

Distortion is applied to normalized (unitless image plane) coordinates :math:`\mathbf{x}_I` as

.. math::
    r^2 = \mathbf{x}_I^T\mathbf{x}_I \\
    \mathbf{x}_I' = (1 + k_1 r^2 + k_2 r^4)\mathbf{x}_I

where :math:`k_1` and :math:`k_2` are the radial distortion coefficients.  There is no closed form inverse so
:func:`radial_undistort_point` removes the distortion iteratively.

Both functions accept a single point as a shape (2,) array or multiple points as the columns of a shape (2, n) array.
"""

import numpy as np

from rigcam._typing import ARRAY_LIKE, DOUBLE_ARRAY


__all__ = ['radial_distort_point', 'radial_undistort_point']


def radial_distort_point(undistorted_point: ARRAY_LIKE, radial_distortion_1: float,
                         radial_distortion_2: float) -> DOUBLE_ARRAY:
    """
    Applies radial distortion to normalized image plane points.

    :param undistorted_point: The undistorted normalized point(s) as a shape (2,) or (2, n) array
    :param radial_distortion_1: the second order radial distortion coefficient
    :param radial_distortion_2: the fourth order radial distortion coefficient
    :return: The distorted point(s) with the same shape as the input
    """

    undistorted_point = np.asarray(undistorted_point, dtype=np.float64)

    radius2 = (undistorted_point * undistorted_point).sum(axis=0)

    return undistorted_point * (1 + radius2 * (radial_distortion_1 + radial_distortion_2 * radius2))


def radial_undistort_point(distorted_point: ARRAY_LIKE, radial_distortion_1: float, radial_distortion_2: float,
                           max_iterations: int = 100, tolerance: float = 1e-10) -> DOUBLE_ARRAY:
    r"""
    Removes radial distortion from normalized image plane points.

    This is done with a fixed point iteration starting from the distorted location

    .. math::
        \mathbf{x}_{In} = \frac{\mathbf{x}_I'}{1 + k_1 r_p^2 + k_2 r_p^4}

    where :math:`r_p` is the radius of the previous iteration's estimate.  The iteration stops once no component of any
    point changes by more than ``tolerance`` or after ``max_iterations`` iterations.  The result is therefore an
    approximation whose accuracy depends on ``tolerance`` and on the strength of the distortion.  When both
    coefficients are zero the input is returned unchanged.

    :param distorted_point: The distorted normalized point(s) as a shape (2,) or (2, n) array
    :param radial_distortion_1: the second order radial distortion coefficient
    :param radial_distortion_2: the fourth order radial distortion coefficient
    :param max_iterations: the maximum number of fixed point iterations to perform
    :param tolerance: the convergence tolerance on the change in the estimate between iterations
    :return: The undistorted point(s) with the same shape as the input
    """

    distorted_point = np.array(distorted_point, dtype=np.float64)

    if radial_distortion_1 == 0 and radial_distortion_2 == 0:
        return distorted_point

    undistorted_point = distorted_point.copy()

    for _ in range(max_iterations):

        previous = undistorted_point

        radius2 = (previous * previous).sum(axis=0)

        undistorted_point = distorted_point / (1 + radius2 * (radial_distortion_1 + radial_distortion_2 * radius2))

        if np.all(np.abs(undistorted_point - previous) < tolerance):
            break

    return undistorted_point
