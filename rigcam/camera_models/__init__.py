"""
This package provides the camera model used for structure from motion and bundle adjustment in rigcam.

The :mod:`.camera` module provides the :class:`.Camera` class, a pinhole camera with 2 coefficient radial distortion,
and the :mod:`.shared_extrinsics` module provides the :class:`.SharedExtrinsics` pose block which one or many cameras
can be bound to.  Cameras bound to the same :class:`.SharedExtrinsics` form a rigid rig: each keeps its own intrinsics
and a fixed rotation from the shared frame to its own frame, while moving the shared pose moves all of them.

The remaining modules hold the math the camera is built on (:mod:`.projection_matrix_utils`,
:mod:`.radial_distortion`, and the raw parameter block kernel in :mod:`.project_point_to_image`) and the persistence
helpers (:mod:`.serialization` for a compact binary form and :mod:`.xml_io` for an :mod:`lxml` element form).

While all of the classes and functions in this package are defined in the sub-modules discussed above, they are imported
into the package to make access easier; therefore, you can do::

    >>> from rigcam.camera_models import Camera, SharedExtrinsics, dumps, loads
"""

from rigcam.camera_models.shared_extrinsics import SharedExtrinsics, ExtrinsicsIndex, EXTRINSICS_SIZE
from rigcam.camera_models.intrinsics import IntrinsicsIndex, INTRINSICS_SIZE
from rigcam.camera_models.camera import Camera, CameraOptions
from rigcam.camera_models.projection_matrix_utils import (intrinsics_to_calibration_matrix,
                                                          calibration_matrix_to_intrinsics,
                                                          compose_projection_matrix, decompose_projection_matrix)
from rigcam.camera_models.radial_distortion import radial_distort_point, radial_undistort_point
from rigcam.camera_models.project_point_to_image import project_point_to_image
from rigcam.camera_models.serialization import (SerializationError, BinaryOutputArchive, BinaryInputArchive,
                                                encode_shared_extrinsics, decode_shared_extrinsics,
                                                encode_camera, decode_camera, dumps, loads)
from rigcam.camera_models.xml_io import cameras_to_elem, cameras_from_elem

__all__ = ['SharedExtrinsics', 'ExtrinsicsIndex', 'EXTRINSICS_SIZE', 'IntrinsicsIndex', 'INTRINSICS_SIZE',
           'Camera', 'CameraOptions',
           'intrinsics_to_calibration_matrix', 'calibration_matrix_to_intrinsics',
           'compose_projection_matrix', 'decompose_projection_matrix',
           'radial_distort_point', 'radial_undistort_point', 'project_point_to_image',
           'SerializationError', 'BinaryOutputArchive', 'BinaryInputArchive',
           'encode_shared_extrinsics', 'decode_shared_extrinsics', 'encode_camera', 'decode_camera', 'dumps', 'loads',
           'cameras_to_elem', 'cameras_from_elem']
