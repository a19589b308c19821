r"""
This module provides the projection kernel that maps homogeneous world points into an image using raw parameter blocks.

The kernel works directly on the flat extrinsic and intrinsic arrays (see :class:`.ExtrinsicsIndex` and
:class:`.IntrinsicsIndex`) instead of on a :class:`.Camera`, so an optimizer can evaluate reprojection residuals with
perturbed copies of the blocks.  :meth:`.Camera.project_point` is a thin wrapper around it.

The projection of the homogeneous point :math:`\mathbf{X}=[\mathbf{x}^T, w]^T` is

.. math::
    \mathbf{p} = \mathbf{T}_L^S\mathbf{T}_S^W(\mathbf{x} - w\mathbf{c}) \\
    \mathbf{x}_I = \left[\begin{array}{c} p_x/p_z \\ p_y/p_z\end{array}\right] \\
    \mathbf{x}_I' = (1 + k_1 r^2 + k_2 r^4)\mathbf{x}_I \\
    \mathbf{x}_P = \left[\begin{array}{c} f x_I' + s y_I' + p_x \\ f a y_I' + p_y\end{array}\right]

where :math:`\mathbf{T}_S^W` is the world to shared rotation stored in the extrinsics, :math:`\mathbf{T}_L^S` is the
fixed shared to local rotation, and :math:`\mathbf{c}` is the stored position.  The depth returned with the pixel is
:math:`p_z/w`.
"""

from typing import Tuple

import numpy as np

from rigcam._typing import ARRAY_LIKE, DOUBLE_ARRAY, F_SCALAR_OR_ARRAY, NONEARRAY
from rigcam.camera_models.intrinsics import IntrinsicsIndex
from rigcam.camera_models.radial_distortion import radial_distort_point
from rigcam.camera_models.shared_extrinsics import ExtrinsicsIndex
from rigcam.rotations import angle_axis_to_rotmat


__all__ = ['project_point_to_image']


def project_point_to_image(extrinsics: ARRAY_LIKE, intrinsics: ARRAY_LIKE, point: ARRAY_LIKE,
                           shared_to_local_rotation: NONEARRAY = None) -> Tuple[F_SCALAR_OR_ARRAY, DOUBLE_ARRAY]:
    """
    Projects homogeneous world point(s) into the image described by the raw parameter blocks.

    The depth lets the caller discriminate valid projections: it is positive for points in front of the camera, zero or
    negative for points behind it, and infinite for points at infinity (``w == 0``).  No exception is raised for any
    numeric input; degenerate cases produce ``inf`` or ``nan`` values instead.

    :param extrinsics: the length 6 extrinsic parameter block
    :param intrinsics: the length 7 intrinsic parameter block
    :param point: the homogeneous point as a shape (4,) array or the points as the columns of a shape (4, n) array
    :param shared_to_local_rotation: the 3x3 rotation from the shared frame to the camera frame.  ``None`` is the
                                     identity.
    :return: a tuple of the depth (float for a single point, shape (n,) array otherwise) and the pixel location(s) as a
             shape (2,) or (2, n) array
    """

    extrinsics = np.asarray(extrinsics, dtype=np.float64)
    intrinsics = np.asarray(intrinsics, dtype=np.float64)
    point = np.asarray(point, dtype=np.float64)

    position = extrinsics[ExtrinsicsIndex.POSITION:ExtrinsicsIndex.POSITION + 3]
    rotation = angle_axis_to_rotmat(extrinsics[ExtrinsicsIndex.ORIENTATION:ExtrinsicsIndex.ORIENTATION + 3])

    if shared_to_local_rotation is not None:
        rotation = np.asarray(shared_to_local_rotation, dtype=np.float64) @ rotation

    if point.ndim == 1:
        adjusted_point = point[:3] - point[3] * position
    else:
        adjusted_point = point[:3] - point[3] * position.reshape(3, 1)

    rotated_point = rotation @ adjusted_point

    focal_length = intrinsics[IntrinsicsIndex.FOCAL_LENGTH]
    skew = intrinsics[IntrinsicsIndex.SKEW]

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):

        normalized_point = rotated_point[:2] / rotated_point[2]

        distorted_point = radial_distort_point(normalized_point,
                                               intrinsics[IntrinsicsIndex.RADIAL_DISTORTION_1],
                                               intrinsics[IntrinsicsIndex.RADIAL_DISTORTION_2])

        pixel = np.array([focal_length * distorted_point[0] + skew * distorted_point[1] +
                          intrinsics[IntrinsicsIndex.PRINCIPAL_POINT_X],
                          focal_length * intrinsics[IntrinsicsIndex.ASPECT_RATIO] * distorted_point[1] +
                          intrinsics[IntrinsicsIndex.PRINCIPAL_POINT_Y]])

        depth = rotated_point[2] / point[3]

    if point.ndim == 1:
        return float(depth), pixel

    return depth, pixel
