# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


r"""
This module provides the routines for moving between the calibration matrix, the intrinsic parameters, and the
:math:`3\times 4` projection matrix of a pinhole camera.

The calibration matrix is

.. math::
    \mathbf{K} = \left[\begin{array}{ccc} f & s & p_x \\
    0 & fa & p_y \\
    0 & 0 & 1 \end{array}\right]

where :math:`f` is the focal length, :math:`s` is the skew, :math:`a` is the aspect ratio, and :math:`p_x, p_y` is
the principal point.  The projection matrix is

.. math::
    \mathbf{P} = \mathbf{K}\left[\begin{array}{cc}\mathbf{R} & -\mathbf{R}\mathbf{c}\end{array}\right]

where :math:`\mathbf{R}` is the rotation from the world frame to the camera frame and :math:`\mathbf{c}` is the
position of the camera in the world frame.
"""

from typing import Tuple

import numpy as np
from scipy.linalg import pinv, rq

from rigcam._typing import ARRAY_LIKE, DOUBLE_ARRAY


__all__ = ['intrinsics_to_calibration_matrix', 'calibration_matrix_to_intrinsics',
           'compose_projection_matrix', 'decompose_projection_matrix']


ZERO_DIAGONAL_EPSILONS: float = 16.0
"""
The number of machine epsilons (relative to the largest element of the calibration matrix) below which a diagonal term
of a decomposed calibration matrix is treated as exactly zero.
"""


def intrinsics_to_calibration_matrix(focal_length: float, skew: float, aspect_ratio: float,
                                     principal_point_x: float, principal_point_y: float) -> DOUBLE_ARRAY:
    """
    Builds the upper triangular calibration matrix from the intrinsic parameters.

    :param focal_length: the focal length in pixels
    :param skew: the skew term
    :param aspect_ratio: the ratio of the y focal length to the x focal length
    :param principal_point_x: the x component of the principal point in pixels
    :param principal_point_y: the y component of the principal point in pixels
    :return: the 3x3 calibration matrix
    """

    return np.array([[focal_length, skew, principal_point_x],
                     [0., focal_length * aspect_ratio, principal_point_y],
                     [0., 0., 1.]])


def calibration_matrix_to_intrinsics(calibration_matrix: ARRAY_LIKE) -> Tuple[float, float, float, float, float]:
    """
    Extracts the intrinsic parameters from a calibration matrix.

    The matrix is first scaled so that its bottom right element is 1.  The focal length must not be zero since the
    aspect ratio is computed by dividing by it.

    :param calibration_matrix: the 3x3 upper triangular calibration matrix
    :return: a tuple of the focal length, skew, aspect ratio, principal point x, and principal point y
    :raises ValueError: if the matrix is not 3x3
    """

    calibration_matrix = np.asarray(calibration_matrix, dtype=np.float64)

    if calibration_matrix.shape != (3, 3):
        raise ValueError('The calibration matrix must be 3x3')

    calibration_matrix = calibration_matrix / calibration_matrix[2, 2]

    focal_length = float(calibration_matrix[0, 0])

    return (focal_length,
            float(calibration_matrix[0, 1]),
            float(calibration_matrix[1, 1] / focal_length),
            float(calibration_matrix[0, 2]),
            float(calibration_matrix[1, 2]))


def compose_projection_matrix(calibration_matrix: ARRAY_LIKE, rotation_matrix: ARRAY_LIKE,
                              position: ARRAY_LIKE) -> DOUBLE_ARRAY:
    """
    Composes the 3x4 projection matrix ``K [R | -R c]``.

    :param calibration_matrix: the 3x3 calibration matrix
    :param rotation_matrix: the 3x3 rotation from the world frame to the camera frame
    :param position: the length 3 position of the camera in the world frame
    :return: the 3x4 projection matrix
    """

    rotation_matrix = np.asarray(rotation_matrix, dtype=np.float64)
    position = np.asarray(position, dtype=np.float64).ravel()

    return np.asarray(calibration_matrix, dtype=np.float64) @ np.hstack([rotation_matrix,
                                                                         -(rotation_matrix @ position)[:, None]])


def decompose_projection_matrix(projection_matrix: ARRAY_LIKE) -> Tuple[DOUBLE_ARRAY, DOUBLE_ARRAY, DOUBLE_ARRAY]:
    r"""
    Decomposes a 3x4 projection matrix into the calibration matrix, the rotation matrix, and the camera position.

    The left 3x3 block of the projection matrix is factored with an RQ decomposition into an upper triangular
    calibration matrix and an orthonormal matrix.  The signs are then fixed so that the diagonal of the calibration
    matrix is non-negative and the rotation matrix has a determinant of +1 (a projection matrix is only defined up to
    scale, including its sign), and the calibration matrix is scaled so that its last element is 1.  Diagonal terms
    within :data:`ZERO_DIAGONAL_EPSILONS` machine epsilons of zero (relative to the largest element) are set to exactly
    zero.

    When a diagonal term is zero the left block is singular and the factorization is not unique.  The last row of the
    rotation (the viewing axis) is still recovered, the rows above the zero term may differ from the true rotation,
    and the result is always a proper rotation.  The position is then one of the points that the projection matrix
    maps to zero.

    The position is computed as

    .. math::
        \mathbf{c} = -\mathbf{M}^{+}\mathbf{p}_4

    where :math:`\mathbf{M}` is the left 3x3 block, :math:`^{+}` is the pseudo inverse, and :math:`\mathbf{p}_4` is the
    last column.  For a valid camera this is the usual :math:`-\mathbf{M}^{-1}\mathbf{p}_4`; the pseudo inverse keeps
    the result finite when the calibration is degenerate (for instance a zero focal length).

    :param projection_matrix: the 3x4 projection matrix
    :return: a tuple of the 3x3 calibration matrix, the 3x3 world to camera rotation matrix, and the length 3 position
    :raises ValueError: if the projection matrix is not 3x4
    """

    projection_matrix = np.asarray(projection_matrix, dtype=np.float64)

    if projection_matrix.shape != (3, 4):
        raise ValueError('The projection matrix must be 3x4')

    left_block = projection_matrix[:, :3]

    calibration_matrix, rotation_matrix = rq(left_block)

    # a zero focal term comes back from the factorization as rounding residue
    diagonal = np.arange(3)
    zero_tolerance = ZERO_DIAGONAL_EPSILONS * np.finfo(np.float64).eps * np.abs(calibration_matrix).max()
    residue = np.abs(calibration_matrix[diagonal, diagonal]) <= zero_tolerance
    calibration_matrix[diagonal[residue], diagonal[residue]] = 0.0

    # flip the signs so the diagonal of the calibration matrix is non-negative.  The flips are their own inverse so
    # K @ R is unchanged.
    signs = np.where(np.diag(calibration_matrix) < 0, -1.0, 1.0)
    calibration_matrix = calibration_matrix * signs
    rotation_matrix = signs[:, None] * rotation_matrix

    if np.linalg.det(rotation_matrix) < 0:
        zero_diagonal = np.flatnonzero(np.diag(calibration_matrix) == 0)

        if zero_diagonal.size:
            # a zero on the diagonal leaves the sign of the matching row of R free
            flip = np.ones(3)
            flip[zero_diagonal[0]] = -1.0
            calibration_matrix = calibration_matrix * flip
            rotation_matrix = flip[:, None] * rotation_matrix

        else:
            # the projection matrix was given with the opposite sign
            rotation_matrix = -rotation_matrix

    if calibration_matrix[2, 2] != 0:
        calibration_matrix = calibration_matrix / calibration_matrix[2, 2]

    # singular values at the rounding level count as zero
    rank_tolerance = ZERO_DIAGONAL_EPSILONS * np.finfo(np.float64).eps
    position = -pinv(left_block, atol=0, rtol=rank_tolerance) @ projection_matrix[:, 3]

    return calibration_matrix, rotation_matrix, position
