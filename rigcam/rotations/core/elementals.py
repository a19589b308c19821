import numpy as np

from rigcam._typing import ARRAY_LIKE, DOUBLE_ARRAY
from rigcam.rotations.core._helpers import _check_vector_array_and_shape


__all__ = ["rot_x", "rot_y", "rot_z", "skew"]


def rot_x(theta: float) -> DOUBLE_ARRAY:
    r"""
    This function returns the right handed rotation matrix about the x axis by angle theta (radians).

    .. math::
        \mathbf{R}_x(\theta)=\left[\begin{array}{ccc} 1 & 0 & 0 \\
        0 & \text{cos}(\theta) & -\text{sin}(\theta) \\
        0 & \text{sin}(\theta) & \text{cos}(\theta) \end{array}\right]

    :param theta: The angle to rotate by in radians
    :return: The 3x3 rotation matrix
    """

    ctheta, stheta = np.cos(theta), np.sin(theta)

    return np.array([[1., 0., 0.],
                     [0., ctheta, -stheta],
                     [0., stheta, ctheta]])


def rot_y(theta: float) -> DOUBLE_ARRAY:
    r"""
    This function returns the right handed rotation matrix about the y axis by angle theta (radians).

    .. math::
        \mathbf{R}_y(\theta)=\left[\begin{array}{ccc} \text{cos}(\theta) & 0 & \text{sin}(\theta) \\
        0 & 1 & 0 \\
        -\text{sin}(\theta) & 0 & \text{cos}(\theta) \end{array}\right]

    :param theta: The angle to rotate by in radians
    :return: The 3x3 rotation matrix
    """

    ctheta, stheta = np.cos(theta), np.sin(theta)

    return np.array([[ctheta, 0., stheta],
                     [0., 1., 0.],
                     [-stheta, 0., ctheta]])


def rot_z(theta: float) -> DOUBLE_ARRAY:
    r"""
    This function returns the right handed rotation matrix about the z axis by angle theta (radians).

    .. math::
        \mathbf{R}_z(\theta)=\left[\begin{array}{ccc} \text{cos}(\theta) & -\text{sin}(\theta) & 0 \\
        \text{sin}(\theta) & \text{cos}(\theta) & 0 \\
        0 & 0 & 1 \end{array}\right]

    :param theta: The angle to rotate by in radians
    :return: The 3x3 rotation matrix
    """

    ctheta, stheta = np.cos(theta), np.sin(theta)

    return np.array([[ctheta, -stheta, 0.],
                     [stheta, ctheta, 0.],
                     [0., 0., 1.]])


def skew(vector: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    This function returns the skew symmetric cross product matrix for vector.

    The skew symmetric cross product matrix is defined such that:

    .. math::
        \mathbf{a}\times\mathbf{b}=\left[\mathbf{a}\times\right]\mathbf{b} \\
        \left[\mathbf{a}\times\right] = \left[\begin{array}{ccc} 0 & -a_3 & a_2 \\
        a_3 & 0 & -a_1 \\
        -a_2 & a_1 & 0 \end{array}\right]

    :param vector: The length 3 vector to compute a skew symmetric matrix for
    :return: The 3x3 skew symmetric cross product matrix
    """

    vector = _check_vector_array_and_shape(vector)

    return np.array([[0., -vector[2], vector[1]],
                     [vector[2], 0., -vector[0]],
                     [-vector[1], vector[0], 0.]])
