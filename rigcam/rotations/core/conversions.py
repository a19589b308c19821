# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.

"""
Core conversion routines for rotation representations

This module contains the routines for converting between angle-axis vectors, rotation matrices, and rotation
quaternions.  All routines operate on a single rotation given as a numpy array (or array like object).
"""


import numpy as np

from rigcam._typing import ARRAY_LIKE, DOUBLE_ARRAY

from rigcam.rotations.core._helpers import (_check_matrix_array_and_shape, _check_quaternion_array_and_shape,
                                            _check_vector_array_and_shape)
from rigcam.rotations.core.elementals import skew


__all__ = ['angle_axis_to_rotmat', 'angle_axis_to_quaternion',
           'rotmat_to_angle_axis', 'rotmat_to_quaternion',
           'quaternion_to_rotmat', 'quaternion_to_angle_axis']


def angle_axis_to_rotmat(angle_axis: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    This function converts an angle-axis vector into a rotation matrix using Rodrigues' formula.

    .. math::
        \theta=\left\|\mathbf{v}\right\| \\
        \hat{\mathbf{x}} = \frac{\mathbf{v}}{\theta}\\
        \mathbf{T} = \text{cos}(\theta)\mathbf{I}_{3\times 3}+\text{sin}(\theta)\left[\hat{\mathbf{x}}\times\right]+
        (1-\text{cos}(\theta))\hat{\mathbf{x}}\hat{\mathbf{x}}^T

    where :math:`\mathbf{v}` is the angle-axis vector, :math:`\theta` is the rotation angle, :math:`\hat{\mathbf{x}}`
    is the rotation axis, and :math:`\left[\bullet\times\right]` is the skew symmetric cross product matrix (see
    :func:`.skew`).

    A zero vector returns the identity matrix.

    :param angle_axis: The length 3 angle-axis vector to convert
    :return: The 3x3 rotation matrix
    """

    angle_axis = _check_vector_array_and_shape(angle_axis)

    theta = np.linalg.norm(angle_axis)

    if theta == 0:
        return np.eye(3)

    unit = angle_axis / theta

    ctheta = np.cos(theta)

    return ctheta * np.eye(3) + np.sin(theta) * skew(unit) + (1 - ctheta) * np.outer(unit, unit)


def angle_axis_to_quaternion(angle_axis: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    This function converts an angle-axis vector into a rotation quaternion with the scalar component last.

    .. math::
        \mathbf{q} = \left[\begin{array}{c} \text{sin}(\frac{\theta}{2})\hat{\mathbf{x}} \\
        \text{cos}(\frac{\theta}{2})\end{array}\right]

    :param angle_axis: The length 3 angle-axis vector to convert
    :return: The length 4 rotation quaternion
    """

    angle_axis = _check_vector_array_and_shape(angle_axis)

    theta = np.linalg.norm(angle_axis)

    if theta == 0:
        return np.array([0., 0., 0., 1.])

    return np.hstack([np.sin(theta / 2) * angle_axis / theta, np.cos(theta / 2)])


def quaternion_to_rotmat(quaternion: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    This function converts a rotation quaternion (scalar last) into its equivalent rotation matrix.

    .. math::
        \mathbf{T} = (q_s^2-\mathbf{q}_v^T\mathbf{q}_v)\mathbf{I}_{3\times 3}+2\mathbf{q}_v\mathbf{q}_v^T+2q_s
        \left[\mathbf{q}_v\times\right]

    The quaternion is normalized before the conversion.

    :param quaternion: The length 4 rotation quaternion to convert
    :return: The 3x3 rotation matrix
    """

    quaternion = _check_quaternion_array_and_shape(quaternion)
    quaternion /= np.linalg.norm(quaternion)

    q_vector = quaternion[:3]
    q_scalar = quaternion[3]

    return ((q_scalar ** 2 - q_vector @ q_vector) * np.eye(3) + 2 * np.outer(q_vector, q_vector) +
            2 * q_scalar * skew(q_vector))


def quaternion_to_angle_axis(quaternion: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    This function converts a rotation quaternion (scalar last) into an angle-axis vector.

    The rotation angle is computed as :math:`\theta=2\text{atan2}(\|\mathbf{q}_v\|, q_s)` after flipping the quaternion
    so that the scalar component is non-negative, so the returned angle is always in :math:`[0, \pi]`.  Using atan2
    instead of acos keeps full precision for small angles.

    :param quaternion: The length 4 rotation quaternion to convert
    :return: The length 3 angle-axis vector
    """

    quaternion = _check_quaternion_array_and_shape(quaternion)

    if quaternion[3] < 0:
        quaternion = -quaternion

    q_vector = quaternion[:3]
    sin_half_theta = np.linalg.norm(q_vector)

    if sin_half_theta == 0:
        return np.zeros(3)

    theta = 2 * np.arctan2(sin_half_theta, quaternion[3])

    return theta * q_vector / sin_half_theta


def rotmat_to_quaternion(rotation_matrix: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    This function converts a rotation matrix into a rotation quaternion (scalar last, scalar non-negative).

    The conversion pivots on the largest of the trace and the diagonal elements of the matrix (Shepperd's method) so
    that it stays well conditioned for every rotation angle, including rotations near :math:`\pi`.

    :param rotation_matrix: The 3x3 rotation matrix to convert
    :return: The length 4 rotation quaternion
    """

    t = _check_matrix_array_and_shape(rotation_matrix)

    trace = np.trace(t)

    pivot = int(np.argmax([trace, t[0, 0], t[1, 1], t[2, 2]]))

    if pivot == 0:
        s = 2 * np.sqrt(1 + trace)
        quaternion = np.array([(t[2, 1] - t[1, 2]) / s, (t[0, 2] - t[2, 0]) / s, (t[1, 0] - t[0, 1]) / s, s / 4])

    elif pivot == 1:
        s = 2 * np.sqrt(1 + t[0, 0] - t[1, 1] - t[2, 2])
        quaternion = np.array([s / 4, (t[0, 1] + t[1, 0]) / s, (t[0, 2] + t[2, 0]) / s, (t[2, 1] - t[1, 2]) / s])

    elif pivot == 2:
        s = 2 * np.sqrt(1 + t[1, 1] - t[0, 0] - t[2, 2])
        quaternion = np.array([(t[0, 1] + t[1, 0]) / s, s / 4, (t[1, 2] + t[2, 1]) / s, (t[0, 2] - t[2, 0]) / s])

    else:
        s = 2 * np.sqrt(1 + t[2, 2] - t[0, 0] - t[1, 1])
        quaternion = np.array([(t[0, 2] + t[2, 0]) / s, (t[1, 2] + t[2, 1]) / s, s / 4, (t[1, 0] - t[0, 1]) / s])

    # make the representation unique
    if quaternion[3] < 0:
        quaternion = -quaternion

    return quaternion / np.linalg.norm(quaternion)


def rotmat_to_angle_axis(rotation_matrix: ARRAY_LIKE) -> DOUBLE_ARRAY:
    """
    Converts a rotation matrix to an angle-axis vector.

    This calls :func:`rotmat_to_quaternion` followed by :func:`quaternion_to_angle_axis`.

    :param rotation_matrix: The 3x3 rotation matrix to convert
    :returns: The length 3 angle-axis vector
    """

    return quaternion_to_angle_axis(rotmat_to_quaternion(rotation_matrix))
