# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


r"""
This module provides the :class:`Camera` class, a pinhole camera with 2 coefficient radial distortion whose pose is
defined relative to a (possibly shared) rig frame.

Theory
______

The intrinsics of the camera are modeled with the calibration matrix

.. math::
    \mathbf{K} = \left[\begin{array}{ccc} f & s & p_x \\
    0 & fa & p_y \\
    0 & 0 & 1 \end{array}\right]

where :math:`f` is the focal length, :math:`s` is the skew, :math:`a` is the aspect ratio and :math:`p_x, p_y` is the
principal point, all in units of pixels.  A homogeneous world point :math:`\mathbf{X}=[\mathbf{x}^T, w]^T` is mapped to
the pixel :math:`\mathbf{x}_P` by

.. math::
    \mathbf{p} = \mathbf{T}_L^W(\mathbf{x} - w\mathbf{c}) \\
    \mathbf{x}_I = \left[\begin{array}{c} p_x/p_z \\ p_y/p_z\end{array}\right] \\
    \mathbf{x}_I' = (1 + k_1 r^2 + k_2 r^4)\mathbf{x}_I \\
    \mathbf{x}_P = \mathbf{K}\left[\begin{array}{c}\mathbf{x}_I' \\ 1\end{array}\right]

where :math:`\mathbf{c}` is the camera position, :math:`k_1, k_2` are the radial distortion coefficients, and
:math:`r = \|\mathbf{x}_I\|`.

Frames
______

The pose is not stored per camera.  Each camera references a :class:`.SharedExtrinsics` block holding the position and
the world to *shared* rotation :math:`\mathbf{T}_S^W` of a rig, and owns a fixed shared to *local* rotation
:math:`\mathbf{T}_L^S` (the identity for a camera that is not part of a rig).  The world to local rotation used for
projection is always

.. math::
    \mathbf{T}_L^W = \mathbf{T}_L^S\mathbf{T}_S^W

so the orientation setters store :math:`(\mathbf{T}_L^S)^{-1}\mathbf{T}_L^W` in the shared block and the getters
re-apply :math:`\mathbf{T}_L^S`.  Always go through :meth:`~Camera.set_orientation_from_rotation_matrix`,
:meth:`~Camera.set_orientation_from_angle_axis`, :meth:`~Camera.get_orientation_as_rotation_matrix`, and
:meth:`~Camera.get_orientation_as_angle_axis` to work with the orientation; the raw blocks are meant for optimizers.

Use
___

    >>> import numpy as np
    >>> from rigcam.camera_models import Camera, SharedExtrinsics
    >>> rig = SharedExtrinsics()
    >>> left, right = Camera(rig), Camera(rig)
    >>> right.shared_to_local_rotation = np.array([[0., 0., -1.], [0., 1., 0.], [1., 0., 0.]])
    >>> left.focal_length = 800
    >>> left.set_principal_point(320, 240)
    >>> left.project_point([0.1, 0.2, 4., 1.])
    (4.0, array([340., 280.]))
    >>> rig.mutable_extrinsics[:3] = [1., 2., 3.]
    >>> right.position
    array([1., 2., 3.])
"""

import copy

import warnings

from dataclasses import dataclass

from typing import Any, Tuple

import numpy as np

from rigcam._typing import ARRAY_LIKE, DOUBLE_ARRAY, F_SCALAR_OR_ARRAY
from rigcam.camera_models.intrinsics import INTRINSICS_SIZE, IntrinsicsIndex
from rigcam.camera_models.project_point_to_image import project_point_to_image
from rigcam.camera_models.projection_matrix_utils import (calibration_matrix_to_intrinsics, compose_projection_matrix,
                                                          decompose_projection_matrix,
                                                          intrinsics_to_calibration_matrix)
from rigcam.camera_models.radial_distortion import radial_undistort_point
from rigcam.camera_models.shared_extrinsics import ExtrinsicsIndex, SharedExtrinsics
from rigcam.rotations import angle_axis_to_rotmat, rotmat_to_angle_axis
from rigcam.utilities.mixin_classes import UserOptionConfigured
from rigcam.utilities.options import UserOptions


_POSITION = slice(ExtrinsicsIndex.POSITION, ExtrinsicsIndex.POSITION + 3)
_ORIENTATION = slice(ExtrinsicsIndex.ORIENTATION, ExtrinsicsIndex.ORIENTATION + 3)

# the default of Camera(shared_extrinsics=...) which gives the camera its own block
_OWN_EXTRINSICS: Any = object()


@dataclass(eq=False)
class CameraOptions(UserOptions):
    """
    Dataclass for configuring a :class:`Camera`.
    """

    undistortion_iterations: int = 100
    """
    The maximum number of fixed point iterations used to remove radial distortion in
    :meth:`~Camera.pixel_to_unit_depth_ray`.
    """

    undistortion_tolerance: float = 1e-10
    """
    The change in the normalized undistorted location below which the undistortion iteration is considered converged.
    """


class Camera(UserOptionConfigured[CameraOptions], CameraOptions):
    """
    A pinhole camera with radial distortion bound to a :class:`.SharedExtrinsics` pose.

    The camera exclusively owns its intrinsic parameter block (:attr:`mutable_intrinsics`, laid out according to
    :class:`.IntrinsicsIndex`), its :attr:`shared_to_local_rotation`, and its image size.  The extrinsic block belongs
    to the referenced :class:`.SharedExtrinsics` which may be shared with other cameras of the same rig.

    Cameras compare equal only to themselves.
    """

    def __init__(self, shared_extrinsics: SharedExtrinsics = _OWN_EXTRINSICS, options: CameraOptions | None = None):
        """
        :param shared_extrinsics: The rig pose to bind this camera to.  When omitted the camera gets its own new
                                  :class:`.SharedExtrinsics` and is not part of any rig.
        :param options: The options to configure the camera with.  If ``None`` the defaults of :class:`CameraOptions`
                        are used.
        :raises ValueError: if shared_extrinsics is given as ``None``
        :raises TypeError: if shared_extrinsics is not a :class:`.SharedExtrinsics`
        """

        super().__init__(CameraOptions, options=options)

        self._intrinsics: DOUBLE_ARRAY = np.zeros(INTRINSICS_SIZE, dtype=np.float64)

        self._shared_extrinsics: SharedExtrinsics = SharedExtrinsics()
        if shared_extrinsics is not _OWN_EXTRINSICS:
            self.shared_extrinsics = shared_extrinsics

        self._shared_to_local_rotation: DOUBLE_ARRAY = np.eye(3)

        # width then height
        self._image_size = np.zeros(2, dtype=np.int32)

        self.focal_length = 1.0
        self.aspect_ratio = 1.0
        self.skew = 0.0
        self.set_principal_point(0.0, 0.0)
        self.set_radial_distortion(0.0, 0.0)

    def __repr__(self) -> str:

        template = "Camera(focal_length={f}, aspect_ratio={a}, skew={s}, principal_point=({px}, {py}),\n" \
                   "       radial_distortion=({k1}, {k2}), position={pos!r},\n" \
                   "       orientation={ori!r}, image_size=({w}, {h}))"

        return template.format(f=self.focal_length, a=self.aspect_ratio, s=self.skew,
                               px=self.principal_point_x, py=self.principal_point_y,
                               k1=self.radial_distortion_1, k2=self.radial_distortion_2,
                               pos=self.position, ori=self.get_orientation_as_angle_axis(),
                               w=self.image_width, h=self.image_height)

    # ------------------------------------------------------------------------------------------------------------------
    # raw parameter blocks
    # ------------------------------------------------------------------------------------------------------------------

    @property
    def intrinsics(self) -> DOUBLE_ARRAY:
        """
        A read-only view of the intrinsic parameter block.
        """

        view = self._intrinsics.view()
        view.flags.writeable = False
        return view

    @property
    def mutable_intrinsics(self) -> DOUBLE_ARRAY:
        """
        The contiguous intrinsic parameter block of length :data:`.INTRINSICS_SIZE`, indexed by
        :class:`.IntrinsicsIndex`.

        Writes through this array bypass all setters.
        """

        return self._intrinsics

    @property
    def extrinsics(self) -> SharedExtrinsics:
        """
        The :class:`.SharedExtrinsics` this camera reads its pose from.
        """

        return self._shared_extrinsics

    @property
    def mutable_extrinsics(self) -> SharedExtrinsics:
        """
        The :class:`.SharedExtrinsics` this camera writes its pose to.

        This is the same object as :attr:`extrinsics`; changes made to it move every camera bound to it.
        """

        return self._shared_extrinsics

    @property
    def shared_extrinsics(self) -> SharedExtrinsics:
        """
        The rig pose this camera is bound to.

        Setting this re-binds the camera to another rig without touching its intrinsics or its
        :attr:`shared_to_local_rotation`.
        """

        return self._shared_extrinsics

    @shared_extrinsics.setter
    def shared_extrinsics(self, val: SharedExtrinsics):

        if val is None:
            raise ValueError('A camera must be bound to a SharedExtrinsics instance')

        if not isinstance(val, SharedExtrinsics):
            raise TypeError('shared_extrinsics must be a SharedExtrinsics instance, not {}'.format(type(val).__name__))

        self._shared_extrinsics = val

    @property
    def shared_to_local_rotation(self) -> DOUBLE_ARRAY:
        """
        The fixed 3x3 rotation from the shared (rig) frame to the frame of this camera.

        This is the identity for a camera that is not part of a rig.  The returned array is read-only; set the property
        to change it.
        """

        view = self._shared_to_local_rotation.view()
        view.flags.writeable = False
        return view

    @shared_to_local_rotation.setter
    def shared_to_local_rotation(self, val: ARRAY_LIKE):

        val = np.array(val, dtype=np.float64)

        if val.shape != (3, 3):
            raise ValueError('The shared to local rotation must be a 3x3 matrix')

        self._shared_to_local_rotation = val

    # ------------------------------------------------------------------------------------------------------------------
    # matrix composition/decomposition
    # ------------------------------------------------------------------------------------------------------------------

    def initialize_from_projection_matrix(self, image_width: int, image_height: int,
                                          projection_matrix: ARRAY_LIKE) -> bool:
        """
        Initializes the intrinsic and extrinsic parameters by decomposing a 3x4 projection matrix.

        The image size is stored, the decomposed position and orientation are written to the shared extrinsics (the
        orientation through the same frame composition as :meth:`set_orientation_from_rotation_matrix`), and then the
        focal length, skew, aspect ratio, and principal point are set from the decomposed calibration matrix.

        The projection matrix holds no information about radial distortion, so the distortion coefficients are left
        as they are.

        .. warning::
            If either diagonal focal term of the decomposed calibration matrix is zero this returns ``False`` without
            touching the intrinsics, but the image size and the extrinsics *have already been written* and are not
            rolled back.

        :param image_width: the width of the image in pixels
        :param image_height: the height of the image in pixels
        :param projection_matrix: the 3x4 projection matrix
        :return: ``True`` if the intrinsics were set, ``False`` if the calibration was degenerate
        :raises ValueError: if the image width or height is not positive
        """

        if image_width <= 0 or image_height <= 0:
            raise ValueError('The image width and height must be positive, got ({}, {})'.format(image_width,
                                                                                                 image_height))

        self.set_image_size(image_width, image_height)

        calibration_matrix, world_to_local_rotation, position = decompose_projection_matrix(projection_matrix)

        self.set_orientation_from_rotation_matrix(world_to_local_rotation)
        self.position = position

        if calibration_matrix[0, 0] == 0 or calibration_matrix[1, 1] == 0:
            warnings.warn('Cannot set focal lengths to zero!')
            return False

        (self.focal_length, self.skew, self.aspect_ratio,
         principal_point_x, principal_point_y) = calibration_matrix_to_intrinsics(calibration_matrix)

        self.set_principal_point(principal_point_x, principal_point_y)

        return True

    def get_projection_matrix(self) -> DOUBLE_ARRAY:
        """
        Returns the 3x4 projection matrix of the camera.

        The projection matrix is linear and so does not include the radial distortion.

        :return: the 3x4 projection matrix
        """

        return compose_projection_matrix(self.get_calibration_matrix(),
                                         self.get_orientation_as_rotation_matrix(),
                                         self.position)

    def get_calibration_matrix(self) -> DOUBLE_ARRAY:
        """
        Returns the 3x3 calibration matrix built from the current intrinsics (see the module documentation).

        :return: the 3x3 calibration matrix
        """

        return intrinsics_to_calibration_matrix(self.focal_length, self.skew, self.aspect_ratio,
                                                self.principal_point_x, self.principal_point_y)

    # ------------------------------------------------------------------------------------------------------------------
    # projection
    # ------------------------------------------------------------------------------------------------------------------

    def project_point(self, point: ARRAY_LIKE) -> Tuple[F_SCALAR_OR_ARRAY, DOUBLE_ARRAY]:
        """
        Projects a homogeneous world point into the image, applying the radial distortion.

        The depth of the point along the viewing axis is returned with the pixel so that points behind the camera
        (depth of zero or less) and points at infinity (infinite depth) can be identified by the caller.

        :param point: the homogeneous point as a shape (4,) array, or the points as the columns of a shape (4, n) array
        :return: a tuple of the depth(s) and the pixel location(s) as a shape (2,) or (2, n) array
        """

        return project_point_to_image(self._shared_extrinsics.extrinsics, self._intrinsics, point,
                                      self._shared_to_local_rotation)

    def pixel_to_unit_depth_ray(self, pixel: ARRAY_LIKE) -> DOUBLE_ARRAY:
        """
        Converts a pixel location to the world frame direction of the ray through it.

        The calibration is undone in closed form, the radial distortion is removed iteratively (see
        :func:`.radial_undistort_point` and :class:`CameraOptions`), and the resulting normalized direction is rotated
        into the world frame.

        The ray is scaled to a depth of 1 (not a length of 1) so that it is consistent with :meth:`project_point`.  That
        is, if ``depth, pixel = camera.project_point(point)`` and ``ray = camera.pixel_to_unit_depth_ray(pixel)`` then
        ``point[:3] / point[3] == camera.position + ray * depth``.

        :param pixel: the pixel location as a shape (2,) array or the locations as the columns of a shape (2, n) array
        :return: the ray direction(s) in the world frame as a shape (3,) or (3, n) array
        """

        pixel = np.asarray(pixel, dtype=np.float64)

        # a zero focal length gives non-finite rays rather than floating point warnings
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):

            # undo the calibration
            focal_length_y = self.focal_length * self.aspect_ratio
            y_normalized = (pixel[1] - self.principal_point_y) / focal_length_y
            x_normalized = (pixel[0] - self.principal_point_x - y_normalized * self.skew) / self.focal_length

            # undo the radial distortion
            undistorted_point = radial_undistort_point(np.array([x_normalized, y_normalized]),
                                                       self.radial_distortion_1, self.radial_distortion_2,
                                                       max_iterations=self.undistortion_iterations,
                                                       tolerance=self.undistortion_tolerance)

            if pixel.ndim == 1:
                direction = np.hstack([undistorted_point, 1.0])
            else:
                direction = np.vstack([undistorted_point, np.ones((1, pixel.shape[1]))])

            # rotate into the world frame
            return self.get_orientation_as_rotation_matrix().T @ direction

    # ------------------------------------------------------------------------------------------------------------------
    # pose
    # ------------------------------------------------------------------------------------------------------------------

    @property
    def position(self) -> DOUBLE_ARRAY:
        """
        The position of the camera (the shared frame origin) in the world frame as a length 3 array.

        The returned array is a copy; set the property to move the rig.
        """

        return self._shared_extrinsics.extrinsics[_POSITION].copy()

    @position.setter
    def position(self, val: ARRAY_LIKE):

        self._shared_extrinsics.mutable_extrinsics[_POSITION] = np.asarray(val, dtype=np.float64).ravel()

    def get_position(self) -> DOUBLE_ARRAY:
        """
        Returns the position of the camera in the world frame (see :attr:`position`).
        """

        return self.position

    def set_position(self, position: ARRAY_LIKE):
        """
        Sets the position of the camera in the world frame (see :attr:`position`).
        """

        self.position = position

    def set_orientation_from_rotation_matrix(self, world_to_local_rotation: ARRAY_LIKE):
        """
        Sets the orientation of the camera from the rotation matrix from the world frame to this camera's frame.

        The shared to local rotation is removed before the result is stored in the shared extrinsics, so every other
        camera bound to the same :class:`.SharedExtrinsics` is rotated as well.

        :param world_to_local_rotation: the 3x3 rotation matrix from the world frame to the camera frame
        """

        world_to_shared_rotation = np.linalg.inv(self._shared_to_local_rotation) @ np.asarray(world_to_local_rotation,
                                                                                            dtype=np.float64)

        self._shared_extrinsics.mutable_extrinsics[_ORIENTATION] = rotmat_to_angle_axis(world_to_shared_rotation)

    def set_orientation_from_angle_axis(self, world_to_local_angle_axis: ARRAY_LIKE):
        """
        Sets the orientation of the camera from the angle-axis vector of the rotation from the world frame to this
        camera's frame.

        :param world_to_local_angle_axis: the length 3 angle-axis vector from the world frame to the camera frame
        """

        self.set_orientation_from_rotation_matrix(angle_axis_to_rotmat(world_to_local_angle_axis))

    def get_orientation_as_rotation_matrix(self) -> DOUBLE_ARRAY:
        """
        Returns the rotation matrix from the world frame to this camera's frame.

        :return: the 3x3 rotation matrix composed from the shared orientation and the shared to local rotation
        """

        world_to_shared_rotation = angle_axis_to_rotmat(self._shared_extrinsics.extrinsics[_ORIENTATION])

        return self._shared_to_local_rotation @ world_to_shared_rotation

    def get_orientation_as_angle_axis(self) -> DOUBLE_ARRAY:
        """
        Returns the angle-axis vector of the rotation from the world frame to this camera's frame.

        :return: the length 3 angle-axis vector
        """

        return rotmat_to_angle_axis(self.get_orientation_as_rotation_matrix())

    # ------------------------------------------------------------------------------------------------------------------
    # intrinsics
    # ------------------------------------------------------------------------------------------------------------------

    @property
    def focal_length(self) -> float:
        """
        The focal length in units of pixels.
        """

        return float(self._intrinsics[IntrinsicsIndex.FOCAL_LENGTH])

    @focal_length.setter
    def focal_length(self, val: float):
        self._intrinsics[IntrinsicsIndex.FOCAL_LENGTH] = val

    @property
    def aspect_ratio(self) -> float:
        """
        The ratio of the focal length along the y axis to the focal length along the x axis.
        """

        return float(self._intrinsics[IntrinsicsIndex.ASPECT_RATIO])

    @aspect_ratio.setter
    def aspect_ratio(self, val: float):
        self._intrinsics[IntrinsicsIndex.ASPECT_RATIO] = val

    @property
    def skew(self) -> float:
        """
        The skew term of the calibration matrix.
        """

        return float(self._intrinsics[IntrinsicsIndex.SKEW])

    @skew.setter
    def skew(self, val: float):
        self._intrinsics[IntrinsicsIndex.SKEW] = val

    @property
    def principal_point_x(self) -> float:
        """
        The x component of the principal point in units of pixels.
        """

        return float(self._intrinsics[IntrinsicsIndex.PRINCIPAL_POINT_X])

    @principal_point_x.setter
    def principal_point_x(self, val: float):
        self._intrinsics[IntrinsicsIndex.PRINCIPAL_POINT_X] = val

    @property
    def principal_point_y(self) -> float:
        """
        The y component of the principal point in units of pixels.
        """

        return float(self._intrinsics[IntrinsicsIndex.PRINCIPAL_POINT_Y])

    @principal_point_y.setter
    def principal_point_y(self, val: float):
        self._intrinsics[IntrinsicsIndex.PRINCIPAL_POINT_Y] = val

    def set_principal_point(self, principal_point_x: float, principal_point_y: float):
        """
        Sets both components of the principal point.

        :param principal_point_x: the x component of the principal point in pixels
        :param principal_point_y: the y component of the principal point in pixels
        """

        self.principal_point_x = principal_point_x
        self.principal_point_y = principal_point_y

    @property
    def radial_distortion_1(self) -> float:
        """
        The second order radial distortion coefficient :math:`k_1`.
        """

        return float(self._intrinsics[IntrinsicsIndex.RADIAL_DISTORTION_1])

    @radial_distortion_1.setter
    def radial_distortion_1(self, val: float):
        self._intrinsics[IntrinsicsIndex.RADIAL_DISTORTION_1] = val

    @property
    def radial_distortion_2(self) -> float:
        """
        The fourth order radial distortion coefficient :math:`k_2`.
        """

        return float(self._intrinsics[IntrinsicsIndex.RADIAL_DISTORTION_2])

    @radial_distortion_2.setter
    def radial_distortion_2(self, val: float):
        self._intrinsics[IntrinsicsIndex.RADIAL_DISTORTION_2] = val

    def set_radial_distortion(self, radial_distortion_1: float, radial_distortion_2: float):
        """
        Sets both radial distortion coefficients.

        :param radial_distortion_1: the second order coefficient
        :param radial_distortion_2: the fourth order coefficient
        """

        self.radial_distortion_1 = radial_distortion_1
        self.radial_distortion_2 = radial_distortion_2

    # ------------------------------------------------------------------------------------------------------------------
    # image size
    # ------------------------------------------------------------------------------------------------------------------

    def set_image_size(self, image_width: int, image_height: int):
        """
        Sets the size of the image in pixels.

        :param image_width: the number of columns in the image
        :param image_height: the number of rows in the image
        """

        self._image_size[:] = [image_width, image_height]

    @property
    def image_width(self) -> int:
        """
        The number of columns in the image (0 until set).
        """

        return int(self._image_size[0])

    @property
    def image_height(self) -> int:
        """
        The number of rows in the image (0 until set).
        """

        return int(self._image_size[1])

    def copy(self, share_extrinsics: bool = True) -> 'Camera':
        """
        Returns a copy of this camera.

        The intrinsics, shared to local rotation, image size, and options are always copied.  By default the copy stays
        bound to the same :class:`.SharedExtrinsics` (it joins the rig of this camera); with ``share_extrinsics=False``
        it gets its own copy of the extrinsic block.

        :param share_extrinsics: whether the copy should reference the same :class:`.SharedExtrinsics`
        :return: the new camera
        """

        out = copy.copy(self)

        out._intrinsics = self._intrinsics.copy()
        out._shared_to_local_rotation = self._shared_to_local_rotation.copy()
        out._image_size = self._image_size.copy()
        out._original_options = copy.deepcopy(self._original_options)

        if not share_extrinsics:
            out._shared_extrinsics = SharedExtrinsics(self._shared_extrinsics.extrinsics)

        return out
